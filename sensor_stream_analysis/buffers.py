"""
Fixed-Capacity Containers

Capacity is fixed at construction and checked there; nothing here
resizes.
"""

from typing import Generic, Iterator, List, Optional, Sequence, TypeVar

import numpy as np

from .core.base import BaseValidator
from .core.exceptions import CapacityExceeded

T = TypeVar('T')


class FixedBuffer(Generic[T]):
    """
    Append-only slot array with an explicit fill count.

    Used for the logger's record buffer, which is cleared wholesale after
    every flush.
    """

    def __init__(self, capacity: int, name: str = 'buffer'):
        BaseValidator.validate_int_at_least(capacity, 1, f"{name} capacity")
        self.capacity = capacity
        self._slots: List[Optional[T]] = [None] * capacity
        self.count = 0

    def append(self, item: T) -> None:
        if self.count >= self.capacity:
            raise CapacityExceeded(f"buffer full ({self.capacity} items)")
        self._slots[self.count] = item
        self.count += 1

    @property
    def is_full(self) -> bool:
        return self.count >= self.capacity

    def clear(self) -> None:
        for i in range(self.count):
            self._slots[i] = None
        self.count = 0

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[T]:
        for i in range(self.count):
            yield self._slots[i]

    def __getitem__(self, index):
        return self.items()[index]

    def items(self) -> List[T]:
        return self._slots[:self.count]


class SampleArray(FixedBuffer):
    """
    Retained readings for end-of-session analysis.

    Keeps a parallel float64 array of values so window queries do not
    rebuild arrays from the readings each time.
    """

    def __init__(self, capacity: int):
        super().__init__(capacity, name='sample array')
        self._values = np.zeros(capacity, dtype=np.float64)

    def append(self, item) -> None:
        super().append(item)
        self._values[self.count - 1] = item.value

    def clear(self) -> None:
        super().clear()
        self._values[:] = 0.0

    def values(self) -> np.ndarray:
        """View of the retained values, oldest first."""
        return self._values[:self.count]

    def last(self, n: int) -> Sequence:
        """The most recent n readings (all of them if fewer are retained)."""
        start = max(0, self.count - n)
        return self._slots[start:self.count]

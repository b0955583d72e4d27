"""
Moving Average Filter

Fixed-capacity circular buffer producing a windowed mean in O(1) per
update.
"""

import numpy as np

from .core.base import BaseValidator


class MovingAverage:
    """
    Windowed mean over the most recent ``capacity`` values.

    Invariant: running_sum == sum(slots[:filled]). Once the window is full
    each new value overwrites the slot at write_index.
    """

    def __init__(self, capacity: int):
        BaseValidator.validate_int_at_least(capacity, 1, 'moving average capacity')
        self.capacity = capacity
        self.slots = np.zeros(capacity, dtype=np.float64)
        self.write_index = 0
        self.filled = 0
        self.running_sum = 0.0

    def update(self, value: float) -> float:
        """Insert a value and return the new windowed mean."""
        value = float(value)
        if self.filled >= self.capacity:
            self.running_sum -= self.slots[self.write_index]
        else:
            self.filled += 1

        self.slots[self.write_index] = value
        self.running_sum += value
        self.write_index = (self.write_index + 1) % self.capacity

        return self.running_sum / self.filled

    def current_average(self) -> float:
        """Windowed mean without mutating state; 0.0 for an empty window."""
        if self.filled == 0:
            return 0.0
        return self.running_sum / self.filled

    def window(self) -> np.ndarray:
        """Window contents, oldest first."""
        if self.filled < self.capacity:
            return self.slots[:self.filled].copy()
        return np.roll(self.slots, -self.write_index)

    def reset(self) -> None:
        self.slots[:] = 0.0
        self.write_index = 0
        self.filled = 0
        self.running_sum = 0.0

    def __len__(self) -> int:
        return self.filled

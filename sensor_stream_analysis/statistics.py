"""
Running Statistics Module

O(1) accumulation of count, sum, sum of squares, min and max over an
unbounded stream. Derived values are computed when a snapshot is taken,
never cached.
"""

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class StatisticsSnapshot:
    """
    Point-in-time view of a StatisticsAccumulator.

    With count == 0 the derived fields are zeros meaning "not yet
    meaningful"; callers check ``count`` before trusting them.
    """
    count: int
    sum: float
    sum_sq: float
    min: float
    max: float
    mean: float
    variance: float
    stddev: float

    @property
    def is_empty(self) -> bool:
        return self.count == 0


class StatisticsAccumulator:
    """
    Population statistics for a stream of floats.

    Invariant: with no samples, sum == sum_sq == 0, min == +inf, max == -inf.
    """

    def __init__(self):
        self.reset()

    def reset(self) -> None:
        self.count = 0
        self.sum = 0.0
        self.sum_sq = 0.0
        self.min = math.inf
        self.max = -math.inf

    def update(self, value: float) -> None:
        value = float(value)
        self.count += 1
        self.sum += value
        self.sum_sq += value * value
        if value < self.min:
            self.min = value
        if value > self.max:
            self.max = value

    def snapshot(self) -> StatisticsSnapshot:
        if self.count == 0:
            return StatisticsSnapshot(
                count=0, sum=0.0, sum_sq=0.0, min=math.inf, max=-math.inf,
                mean=0.0, variance=0.0, stddev=0.0,
            )

        mean = self.sum / self.count
        # sum_sq/n - mean^2 can dip below zero through cancellation
        variance = max(self.sum_sq / self.count - mean * mean, 0.0)
        return StatisticsSnapshot(
            count=self.count,
            sum=self.sum,
            sum_sq=self.sum_sq,
            min=self.min,
            max=self.max,
            mean=mean,
            variance=variance,
            stddev=math.sqrt(variance),
        )

    def __len__(self) -> int:
        return self.count

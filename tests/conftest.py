from __future__ import annotations

from datetime import datetime, timedelta
from typing import List

import pytest

from sensor_stream_analysis import Reading, SensorKind

BASE_TIME = datetime(2024, 3, 5, 14, 7, 9, 1234)


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWallClock:
    """datetime.now replacement that advances one second per call."""

    def __init__(self, start: datetime = BASE_TIME, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        return value


def make_readings(values, kind=SensorKind.VIBRATION, start=BASE_TIME, interval_ms=100) -> List[Reading]:
    return [
        Reading.create(kind, v, timestamp=start + timedelta(milliseconds=i * interval_ms))
        for i, v in enumerate(values)
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def wall_clock() -> FakeWallClock:
    return FakeWallClock()


@pytest.fixture
def reading_factory():
    return make_readings

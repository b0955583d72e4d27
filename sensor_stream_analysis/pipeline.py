"""
Main Monitoring Pipeline

Single-threaded control loop: pull one reading per interval from a
source, feed it through the session, sleep, repeat.

Loop steps:
1. Pull next_reading() from the source
2. Process it (statistics, moving average, logging, anomaly check)
3. Stop on the stop flag, a full retained array, elapsed duration or an
   exhausted source
4. Sleep for the rest of the interval
5. Close the session (final flush) and run the end-of-session analysis
"""

import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Iterator, Optional

from .config import CONFIG, interval_seconds
from .core.exceptions import AcquisitionFailure
from .core.logger import get_logger
from .readings import Reading
from .session import MonitoringSession, SessionResult

logger = get_logger('pipeline')


class ReadingSource(ABC):
    """
    Pull-style acquisition collaborator.

    next_reading() returns a Reading, None on timeout, or raises
    AcquisitionFailure. A source that can run dry sets ``exhausted``.
    """

    exhausted = False

    @abstractmethod
    def next_reading(self) -> Optional[Reading]:
        pass


class IterableSource(ReadingSource):
    """
    Replays readings from any iterable; None items act as timeouts.
    """

    def __init__(self, readings: Iterable[Optional[Reading]]):
        self._iterator: Iterator[Optional[Reading]] = iter(readings)
        self.exhausted = False

    def next_reading(self) -> Optional[Reading]:
        try:
            return next(self._iterator)
        except StopIteration:
            self.exhausted = True
            return None


def _should_stop(stop: Any) -> bool:
    if stop is None:
        return False
    if hasattr(stop, 'is_set'):
        return stop.is_set()
    return bool(stop())


def run_session(
    source: ReadingSource,
    session: MonitoringSession,
    stop: Any = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
    cfg=CONFIG,
) -> SessionResult:
    """
    Run the control loop until stopped, then finalise.

    Args:
        source: ReadingSource to pull from
        session: MonitoringSession owning all streaming state
        stop: threading.Event-like object or zero-argument callable; checked
              once per iteration
        sleep: Sleep function (injectable for tests)
        clock: Monotonic clock in seconds (injectable for tests)
        cfg: Configuration dictionary

    Returns:
        SessionResult

    Raises:
        IOFailure: after the final best-effort flush has been attempted
    """
    interval_sec = interval_seconds(session.interval_ms, cfg)
    duration_sec = session.duration_sec
    data_logger = session.data_logger

    logger.info("Starting monitoring...")
    logger.info(
        f"Duration: {duration_sec} seconds | Interval: {session.interval_ms} ms | "
        f"Capacity: {session.samples.capacity} readings"
    )
    if data_logger is not None:
        logger.info(f"Output: {data_logger.current_path}")

    start = clock()
    failures = 0
    try:
        while not _should_stop(stop) and not session.is_complete:
            tick = clock()
            try:
                reading = source.next_reading()
            except AcquisitionFailure as exc:
                failures += 1
                logger.warning(f"Failed to read from source: {exc}")
                reading = None

            if reading is not None:
                session.process(reading)
            elif source.exhausted:
                break

            if clock() - start >= duration_sec:
                break

            remaining = interval_sec - (clock() - tick)
            if remaining > 0:
                sleep(remaining)
    finally:
        session.close()

    logger.info(
        f"Data collection completed: {session.statistics.count} readings, "
        f"{failures} acquisition failures"
    )
    return session.finalize()

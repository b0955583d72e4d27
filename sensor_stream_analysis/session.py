"""
Monitoring Session

Caller-owned context that ties the streaming components together:

    reading -> statistics, moving average, retained samples, data logger
            -> anomaly check against the running baseline (after warm-up)
    end of session -> trend, frequency estimate, domain classification

Nothing here is process-wide; every session owns its own state.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .buffers import SampleArray
from .config import CONFIG, interval_seconds, retained_capacity
from .core.base import BaseClassifier, Observable, Observer
from .core.exceptions import CapacityExceeded
from .core.validators import require_valid_config
from .data_logger import DataLogger
from .detectors.anomaly import AnomalyConfig, AnomalyDetector, AnomalyVerdict
from .detectors.frequency import FrequencyEstimate, estimate_peak_frequency
from .detectors.trend import TrendAnalysis, analyze_trend, rate_of_change
from .features import summarize_samples
from .filters import MovingAverage
from .readings import Reading
from .statistics import StatisticsAccumulator, StatisticsSnapshot


@dataclass
class SessionResult:
    """End-of-session analysis over the retained samples."""
    statistics: StatisticsSnapshot
    statistics_by_sensor: Dict[str, StatisticsSnapshot]
    trend: TrendAnalysis
    frequency: FrequencyEstimate
    classification: Optional[Any]
    summary: Dict[str, Any]
    rate_of_change: float
    moving_average: float
    sample_count: int
    anomaly_count: int
    events: List[Tuple[Reading, AnomalyVerdict]] = field(default_factory=list)
    log_files: List[str] = field(default_factory=list)

    @property
    def anomaly_rate(self) -> float:
        return (self.anomaly_count * 100.0 / self.sample_count) if self.sample_count else 0.0


class MonitoringSession:
    """
    Streaming analysis and persistence for one monitoring run.

    Args:
        cfg: Configuration dictionary (validated on construction)
        data_logger: Where every accepted reading is persisted (optional)
        classifier: Domain policy run at finalisation (optional)
        observers: Receive 'reading', 'anomaly', 'rotated' and 'finalized' events
        duration_sec, interval_ms: Override cfg['session'] values; together
            they fix the retained-sample capacity
    """

    def __init__(
        self,
        cfg: Dict[str, Any] = CONFIG,
        data_logger: Optional[DataLogger] = None,
        classifier: Optional[BaseClassifier] = None,
        observers: Sequence[Observer] = (),
        duration_sec: Optional[float] = None,
        interval_ms: Optional[float] = None,
    ):
        require_valid_config(cfg)
        self.cfg = cfg
        self.interval_ms = interval_ms if interval_ms is not None else cfg['session']['interval_ms']
        self.duration_sec = duration_sec if duration_sec is not None else cfg['session']['duration_sec']

        self.statistics = StatisticsAccumulator()
        self.statistics_by_sensor: Dict[str, StatisticsAccumulator] = {}
        self.moving_average = MovingAverage(cfg['moving_average']['capacity'])
        self.detector = AnomalyDetector(AnomalyConfig.from_config(cfg))
        self.samples = SampleArray(retained_capacity(self.duration_sec, self.interval_ms, cfg))
        self.data_logger = data_logger
        self.classifier = classifier

        self.events = Observable()
        for observer in observers:
            self.events.attach(observer)
        if data_logger is not None and data_logger.on_rotate is None:
            data_logger.on_rotate = lambda path: self.events.notify('rotated', path)

        self.anomaly_count = 0
        self.anomalies: List[Tuple[Reading, AnomalyVerdict]] = []
        self.last_average = 0.0

    @property
    def is_complete(self) -> bool:
        """True once the retained sample array is full."""
        return self.samples.is_full

    @property
    def sample_interval_sec(self) -> float:
        return interval_seconds(self.interval_ms)

    def current_statistics_snapshot(self) -> StatisticsSnapshot:
        return self.statistics.snapshot()

    def evaluate_anomaly(self, reading: Reading) -> AnomalyVerdict:
        """Evaluate a reading against the current baseline snapshot."""
        return self.detector.evaluate(reading, self.current_statistics_snapshot())

    def append_and_maybe_flush(self, reading: Reading) -> bool:
        """Hand a reading to the data logger; True if that triggered a flush."""
        if self.data_logger is None:
            return False
        return self.data_logger.append(reading)

    def process(self, reading: Reading) -> Optional[AnomalyVerdict]:
        """
        Feed one reading through the pipeline.

        The anomaly check runs only once at least min_samples_for_analysis
        readings preceded this one; the baseline includes the reading.

        Returns:
            AnomalyVerdict, or None while warming up

        Raises:
            CapacityExceeded: if the retained array is already full
            IOFailure: if the data logger cannot write
        """
        if self.samples.is_full:
            raise CapacityExceeded(
                f"session retained its full {self.samples.capacity} readings"
            )

        preceding = self.statistics.count
        self.statistics.update(reading.value)
        self.statistics_by_sensor.setdefault(reading.type_name, StatisticsAccumulator()).update(reading.value)
        self.last_average = self.moving_average.update(reading.value)
        self.samples.append(reading)
        self.events.notify('reading', reading)
        self.append_and_maybe_flush(reading)

        if preceding < self.detector.config.min_samples_for_analysis:
            return None

        verdict = self.evaluate_anomaly(reading)
        if verdict.is_anomaly:
            self.anomaly_count += 1
            self.anomalies.append((reading, verdict))
            self.events.notify('anomaly', (reading, verdict))
        return verdict

    def process_batch(self, readings: Iterable[Reading]) -> List[Optional[AnomalyVerdict]]:
        return [self.process(reading) for reading in readings]

    def finalize(self) -> SessionResult:
        """
        Run the end-of-session analysis over the retained samples.

        Does not close the data logger; call close() (or use the session as
        a context manager) for the final flush.
        """
        readings = self.samples.items()
        values = self.samples.values()
        window = self.cfg['trend']['window_size']

        result = SessionResult(
            statistics=self.statistics.snapshot(),
            statistics_by_sensor={
                name: acc.snapshot() for name, acc in self.statistics_by_sensor.items()
            },
            trend=analyze_trend(values, window, self.cfg),
            frequency=estimate_peak_frequency(values, self.sample_interval_sec, self.cfg),
            classification=self.classifier.classify(values) if self.classifier is not None else None,
            summary=summarize_samples(values),
            rate_of_change=rate_of_change(readings, window),
            moving_average=self.moving_average.current_average(),
            sample_count=self.statistics.count,
            anomaly_count=self.anomaly_count,
            events=list(self.anomalies),
            log_files=[str(p) for p in self.data_logger.files] if self.data_logger is not None else [],
        )
        self.events.notify('finalized', result)
        return result

    def close(self) -> None:
        """Flush buffered readings and close the log file."""
        if self.data_logger is not None:
            self.data_logger.close()

    def __enter__(self) -> 'MonitoringSession':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""
Anomaly Detector

Compares a reading against the running baseline distribution and an
absolute ceiling.

Logic:
- Warm-up: fewer than min_samples_for_analysis baseline samples -> not analyzable
- Statistical: |x - mean| > threshold_multiplier * stddev, severity = |x - mean| / stddev
- Absolute: |x| > absolute_threshold, severity = |x| / absolute_threshold,
  reported only when the statistical check left severity at zero
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Sequence

from ..config import CONFIG
from ..core.base import BaseValidator
from ..readings import Reading
from ..statistics import StatisticsAccumulator, StatisticsSnapshot

# stddev at or below this is treated as a degenerate (constant) baseline
_MIN_STDDEV = 1e-12


@dataclass(frozen=True)
class AnomalyConfig:
    threshold_multiplier: float = 3.0
    absolute_threshold: float = 1.0
    min_samples_for_analysis: int = 20

    def __post_init__(self):
        BaseValidator.validate_positive(self.threshold_multiplier, 'threshold_multiplier')
        BaseValidator.validate_positive(self.absolute_threshold, 'absolute_threshold')
        BaseValidator.validate_int_at_least(self.min_samples_for_analysis, 0, 'min_samples_for_analysis')

    @classmethod
    def from_config(cls, cfg: Dict[str, Any] = CONFIG) -> 'AnomalyConfig':
        section = cfg['anomaly']
        return cls(
            threshold_multiplier=section['threshold_multiplier'],
            absolute_threshold=section['absolute_threshold'],
            min_samples_for_analysis=section['min_samples_for_analysis'],
        )


@dataclass(frozen=True)
class AnomalyVerdict:
    """Per-reading result; consumed by reporting, never kept as state."""
    is_anomaly: bool
    severity: float
    reason: str
    detected_at: datetime
    analyzable: bool = True
    statistical: bool = False
    absolute: bool = False


def evaluate_anomaly(reading: Reading, baseline: StatisticsSnapshot, config: AnomalyConfig) -> AnomalyVerdict:
    """
    Evaluate one reading against a baseline snapshot.

    Args:
        reading: Reading to evaluate
        baseline: Snapshot of the running statistics
        config: Thresholds and warm-up length

    Returns:
        AnomalyVerdict (not analyzable, zero severity, during warm-up)
    """
    if baseline.count < config.min_samples_for_analysis or baseline.count == 0:
        return AnomalyVerdict(
            is_anomaly=False,
            severity=0.0,
            reason='Not yet analyzable',
            detected_at=reading.timestamp,
            analyzable=False,
        )

    severity = 0.0
    reason = 'Normal'
    statistical = False

    deviation = abs(reading.value - baseline.mean)
    if baseline.stddev > _MIN_STDDEV and deviation > config.threshold_multiplier * baseline.stddev:
        statistical = True
        severity = deviation / baseline.stddev
        reason = f"Statistical anomaly: {severity:.2f} std devs from mean"

    absolute = abs(reading.value) > config.absolute_threshold
    if absolute and severity == 0.0:
        severity = abs(reading.value) / config.absolute_threshold
        reason = f"Absolute threshold exceeded: {reading.value:.2f}"

    return AnomalyVerdict(
        is_anomaly=statistical or absolute,
        severity=severity,
        reason=reason,
        detected_at=reading.timestamp,
        statistical=statistical,
        absolute=absolute,
    )


class AnomalyDetector:
    """
    Holds an AnomalyConfig and evaluates readings against a baseline.
    """

    def __init__(self, config: AnomalyConfig = None, cfg: Dict[str, Any] = CONFIG):
        self.config = config if config is not None else AnomalyConfig.from_config(cfg)

    def evaluate(self, reading: Reading, baseline: StatisticsSnapshot) -> AnomalyVerdict:
        return evaluate_anomaly(reading, baseline, self.config)


def detect_anomalies_batch(readings: Sequence[Reading], config: AnomalyConfig) -> List[AnomalyVerdict]:
    """
    Evaluate every reading of a batch against the batch's own baseline.

    Args:
        readings: Readings, oldest first
        config: Thresholds and warm-up length

    Returns:
        One verdict per reading
    """
    accumulator = StatisticsAccumulator()
    for reading in readings:
        accumulator.update(reading.value)
    baseline = accumulator.snapshot()
    return [evaluate_anomaly(reading, baseline, config) for reading in readings]


def count_anomalies(verdicts: Sequence[AnomalyVerdict]) -> int:
    return sum(1 for v in verdicts if v.is_anomaly)

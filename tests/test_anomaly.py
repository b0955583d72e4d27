from __future__ import annotations

import pytest

from sensor_stream_analysis import (
    AnomalyConfig,
    StatisticsAccumulator,
    detect_anomalies_batch,
    evaluate_anomaly,
)
from sensor_stream_analysis.core import InvalidConfiguration
from sensor_stream_analysis.detectors import count_anomalies

from conftest import make_readings


def _baseline(values):
    acc = StatisticsAccumulator()
    for v in values:
        acc.update(v)
    return acc.snapshot()


def test_warm_up_never_flags_even_extreme_values() -> None:
    config = AnomalyConfig(threshold_multiplier=2.0, absolute_threshold=1.0, min_samples_for_analysis=10)
    baseline = _baseline([0.0] * 9)
    reading = make_readings([1e9])[0]
    verdict = evaluate_anomaly(reading, baseline, config)
    assert not verdict.is_anomaly
    assert verdict.severity == 0.0
    assert not verdict.analyzable


def test_statistical_anomaly_severity_is_stddev_ratio() -> None:
    config = AnomalyConfig(threshold_multiplier=2.0, absolute_threshold=100.0, min_samples_for_analysis=5)
    values = [1.0, 1.0, 1.0, 1.0, 1.0, 10.0]
    baseline = _baseline(values)
    verdict = evaluate_anomaly(make_readings([10.0])[0], baseline, config)
    assert verdict.is_anomaly and verdict.statistical
    assert verdict.severity == pytest.approx(7.5 / baseline.stddev)
    assert verdict.severity > 2.0
    assert verdict.reason.startswith("Statistical anomaly")


def test_absolute_threshold_catches_when_statistics_do_not() -> None:
    config = AnomalyConfig(threshold_multiplier=3.0, absolute_threshold=1.0, min_samples_for_analysis=3)
    baseline = _baseline([1.5, 1.6, 1.4, 1.5])
    verdict = evaluate_anomaly(make_readings([1.5])[0], baseline, config)
    assert verdict.is_anomaly
    assert verdict.absolute and not verdict.statistical
    assert verdict.severity == pytest.approx(1.5)
    assert verdict.reason.startswith("Absolute threshold exceeded")


def test_statistical_severity_wins_when_both_fire() -> None:
    config = AnomalyConfig(threshold_multiplier=1.0, absolute_threshold=1.0, min_samples_for_analysis=2)
    baseline = _baseline([0.0, 0.0, 0.0, 5.0])
    verdict = evaluate_anomaly(make_readings([5.0])[0], baseline, config)
    assert verdict.statistical and verdict.absolute
    assert verdict.severity == pytest.approx((5.0 - baseline.mean) / baseline.stddev)


def test_constant_baseline_does_not_divide_by_zero() -> None:
    config = AnomalyConfig(threshold_multiplier=3.0, absolute_threshold=10.0, min_samples_for_analysis=1)
    verdict = evaluate_anomaly(make_readings([2.0])[0], _baseline([2.0] * 5), config)
    assert not verdict.is_anomaly
    assert verdict.reason == "Normal"


def test_detected_at_is_reading_timestamp() -> None:
    config = AnomalyConfig(min_samples_for_analysis=0)
    reading = make_readings([0.0])[0]
    assert evaluate_anomaly(reading, _baseline([0.0]), config).detected_at == reading.timestamp


@pytest.mark.parametrize("kwargs", [
    {'threshold_multiplier': 0.0},
    {'absolute_threshold': -1.0},
    {'min_samples_for_analysis': -1},
])
def test_config_rejects_bad_values(kwargs) -> None:
    with pytest.raises(InvalidConfiguration):
        AnomalyConfig(**kwargs)


def test_batch_detection_uses_batch_baseline() -> None:
    values = [0.1] * 30 + [0.9] + [0.1] * 9
    config = AnomalyConfig(threshold_multiplier=3.0, absolute_threshold=5.0, min_samples_for_analysis=20)
    verdicts = detect_anomalies_batch(make_readings(values), config)
    assert len(verdicts) == len(values)
    assert count_anomalies(verdicts) == 1
    assert verdicts[30].is_anomaly

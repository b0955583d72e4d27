from __future__ import annotations

import numpy as np
import pytest

from sensor_stream_analysis import (
    BridgeSafetyClassifier,
    ClassifierFactory,
    SafetyTier,
    ThresholdTierClassifier,
)
from sensor_stream_analysis.classifiers import INSUFFICIENT_DATA
from sensor_stream_analysis.core import InvalidConfiguration

from conftest import make_readings


def test_insufficient_data_is_explicit() -> None:
    result = BridgeSafetyClassifier().classify([0.05] * 9)
    assert result.level is None
    assert not result.sufficient
    assert result.label == INSUFFICIENT_DATA
    assert result.sample_count == 9
    assert BridgeSafetyClassifier.safety_tier(result) is None


def test_low_vibration_is_safe() -> None:
    result = BridgeSafetyClassifier().classify(make_readings([0.05] * 20))
    assert result.label == 'safe'
    assert BridgeSafetyClassifier.safety_tier(result) is SafetyTier.SAFE
    assert result.rms_amplitude == pytest.approx(0.05)
    assert result.peak_amplitude == pytest.approx(0.05)


def test_moderate_vibration_is_warning() -> None:
    values = [0.2] * 19 + [0.5]
    result = BridgeSafetyClassifier().classify(values)
    assert result.label == 'warning'
    assert result.level == SafetyTier.WARNING


def test_single_large_spike_is_critical() -> None:
    values = [0.05] * 19 + [1.2]
    result = BridgeSafetyClassifier().classify(values)
    assert result.label == 'critical'
    assert BridgeSafetyClassifier.safety_tier(result) is SafetyTier.CRITICAL


def test_negative_swings_do_not_raise_peak() -> None:
    result = BridgeSafetyClassifier().classify([0.0] * 19 + [-0.35])
    assert result.peak_amplitude == 0.0
    assert result.label == 'safe'


def test_all_negative_window_has_zero_peak() -> None:
    result = BridgeSafetyClassifier().classify([-0.02] * 12)
    assert result.peak_amplitude == 0.0
    assert result.rms_amplitude == pytest.approx(0.02)


def test_reports_dominant_frequency() -> None:
    interval = 0.05
    t = np.arange(200) * interval
    values = 0.05 * np.sin(2 * np.pi * 1.0 * t)
    result = BridgeSafetyClassifier(sample_interval_sec=interval).classify(values)
    assert result.dominant_frequency == pytest.approx(1.0)


def test_custom_tier_table() -> None:
    config = {
        'min_samples': 2,
        'tiers': [{'name': 'quiet', 'max_rms': 1.0, 'max_peak': 2.0}],
        'fallback': {'name': 'loud', 'message': 'Too loud'},
    }
    classifier = ThresholdTierClassifier('noise', config)
    assert classifier.classify([0.5, 0.5]).label == 'quiet'
    loud = classifier.classify([3.0, 3.0])
    assert (loud.level, loud.label, loud.message) == (1, 'loud', 'Too loud')


def test_missing_tier_keys_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        ThresholdTierClassifier('broken', {'min_samples': 2, 'tiers': []})


@pytest.mark.parametrize("tiers, fallback", [
    ([{'name': 'quiet', 'max_rms': 1.0}], {'name': 'loud'}),
    ([{'max_rms': 1.0, 'max_peak': 2.0}], {'name': 'loud'}),
    ([{'name': 'a', 'max_rms': 1.0, 'max_peak': 2.0},
      {'name': 'b', 'max_rms': 0.5, 'max_peak': 3.0}], {'name': 'loud'}),
    ([{'name': 'quiet', 'max_rms': 1.0, 'max_peak': 2.0}], {'message': 'no name'}),
])
def test_bad_tier_table_rejected_at_construction(tiers, fallback) -> None:
    config = {'min_samples': 2, 'tiers': tiers, 'fallback': fallback}
    with pytest.raises(InvalidConfiguration):
        ThresholdTierClassifier('noise', config)


def test_factory_creates_registered_classifier() -> None:
    assert 'bridge_safety' in ClassifierFactory.get_available()
    classifier = ClassifierFactory.create('bridge_safety', sample_interval_sec=0.05)
    assert isinstance(classifier, BridgeSafetyClassifier)
    assert classifier.sample_interval_sec == 0.05


def test_factory_unknown_type() -> None:
    with pytest.raises(ValueError):
        ClassifierFactory.create('does_not_exist')

"""
Domain Classifiers

Map RMS/peak amplitude of a sample window onto an ordered verdict.

Logic:
- Fewer than min_samples samples -> explicit 'insufficient_data' verdict
- The tier table is validated at construction (InvalidConfiguration)
- Tiers are checked in order; the first with rms < max_rms and
  peak < max_peak wins
- Nothing matched -> fallback tier (the most severe)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional, Sequence

from .config import CONFIG, interval_seconds
from .core.base import BaseClassifier, BaseValidator
from .core.exceptions import InvalidConfiguration
from .core.factory import ClassifierFactory
from .core.validators import ConfigValidator
from .detectors.frequency import estimate_peak_frequency
from .features import rms_amplitude, peak_amplitude
from .readings import values_of

INSUFFICIENT_DATA = 'insufficient_data'


class SafetyTier(IntEnum):
    SAFE = 0
    WARNING = 1
    CRITICAL = 2


@dataclass(frozen=True)
class Classification:
    """
    Ordinal verdict for a sample window.

    ``level`` is the tier index (0 = least severe) or None when there was
    not enough data to judge.
    """
    level: Optional[int]
    label: str
    message: str
    rms_amplitude: float = 0.0
    peak_amplitude: float = 0.0
    dominant_frequency: float = 0.0
    sample_count: int = 0

    @property
    def sufficient(self) -> bool:
        return self.level is not None


class ThresholdTierClassifier(BaseClassifier):
    """
    Numeric-range to ordinal-verdict policy driven by a tier table.
    """

    def __init__(self, name: str, config: Dict[str, Any], sample_interval_sec: float = None):
        BaseValidator.validate_config(config, ['min_samples', 'tiers', 'fallback'])
        BaseValidator.validate_int_at_least(config['min_samples'], 1, f"{name}.min_samples")
        tier_errors = ConfigValidator.tier_errors(config, name)
        if tier_errors:
            raise InvalidConfiguration("; ".join(tier_errors))
        super().__init__(name, config)
        self.tiers = list(config['tiers'])
        self.fallback = config['fallback']
        self.sample_interval_sec = (
            interval_seconds(None) if sample_interval_sec is None else sample_interval_sec
        )
        BaseValidator.validate_positive(self.sample_interval_sec, 'sample_interval_sec')

    @property
    def min_samples(self) -> int:
        return self.config['min_samples']

    def classify(self, samples: Sequence[Any]) -> Classification:
        """
        Classify a sample window.

        Args:
            samples: Readings or plain values, oldest first

        Returns:
            Classification
        """
        values = values_of(samples)
        if len(values) < self.min_samples:
            return Classification(
                level=None,
                label=INSUFFICIENT_DATA,
                message='Insufficient data',
                sample_count=len(values),
            )

        rms = rms_amplitude(values)
        peak = peak_amplitude(values)
        frequency = estimate_peak_frequency(values, self.sample_interval_sec)

        level, tier = len(self.tiers), self.fallback
        for i, candidate in enumerate(self.tiers):
            if rms < candidate['max_rms'] and peak < candidate['max_peak']:
                level, tier = i, candidate
                break

        return Classification(
            level=level,
            label=tier['name'],
            message=tier.get('message', ''),
            rms_amplitude=rms,
            peak_amplitude=peak,
            dominant_frequency=frequency.dominant_frequency,
            sample_count=len(values),
        )


class BridgeSafetyClassifier(ThresholdTierClassifier):
    """
    Bridge vibration tiers: safe / warning / critical.
    """

    def __init__(self, config: Dict[str, Any] = None, sample_interval_sec: float = None):
        super().__init__(
            'bridge_safety',
            config if config is not None else CONFIG['bridge_safety'],
            sample_interval_sec=sample_interval_sec,
        )

    @staticmethod
    def safety_tier(result: Classification) -> Optional[SafetyTier]:
        return None if result.level is None else SafetyTier(min(result.level, SafetyTier.CRITICAL))


ClassifierFactory.register('bridge_safety', BridgeSafetyClassifier)

"""
Peak Frequency Estimator

Approximates the dominant oscillation rate by counting strict local maxima.
This is a coarse heuristic, not a spectral transform: harmonics, noise
peaks and plateaus are not resolved, and the rate is only meaningful when
one oscillation dominates the window.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np

from ..config import CONFIG
from ..core.base import BaseValidator
from ..readings import values_of


@dataclass(frozen=True)
class FrequencyEstimate:
    dominant_frequency: float = 0.0
    amplitude: float = 0.0
    peak_count: int = 0
    sufficient: bool = False


def find_local_maxima(values: np.ndarray) -> np.ndarray:
    """Indices of interior points strictly greater than both neighbours."""
    if len(values) < 3:
        return np.array([], dtype=int)
    interior = values[1:-1]
    mask = (interior > values[:-2]) & (interior > values[2:])
    return np.flatnonzero(mask) + 1


def estimate_peak_frequency(
    samples: Sequence,
    sample_interval_sec: float,
    cfg: Dict[str, Any] = CONFIG
) -> FrequencyEstimate:
    """
    Estimate peaks per second and the largest peak value.

    Args:
        samples: Readings or plain values at a fixed interval
        sample_interval_sec: Spacing between samples in seconds
        cfg: Configuration dictionary (minimum sample count)

    Returns:
        FrequencyEstimate; neutral (zeros, sufficient=False) below the
        minimum sample count
    """
    BaseValidator.validate_positive(sample_interval_sec, 'sample_interval_sec')

    values = values_of(samples)
    if len(values) < cfg['frequency']['min_samples']:
        return FrequencyEstimate()

    peaks = find_local_maxima(values)
    total_duration = len(values) * sample_interval_sec
    if len(peaks) == 0:
        return FrequencyEstimate(sufficient=True)

    return FrequencyEstimate(
        dominant_frequency=len(peaks) / total_duration,
        amplitude=float(values[peaks].max()),
        peak_count=int(len(peaks)),
        sufficient=True,
    )

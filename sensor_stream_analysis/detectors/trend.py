"""
Trend Estimator

Ordinary least-squares regression of value against sample index over the
most recent window, plus a time-based rate of change.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence

import numpy as np
from scipy.stats import linregress

from ..config import CONFIG
from ..readings import Reading, values_of

INCREASING = 'increasing'
DECREASING = 'decreasing'
STABLE = 'stable'


@dataclass(frozen=True)
class TrendAnalysis:
    slope: float = 0.0
    correlation: float = 0.0
    direction: str = STABLE
    confidence: float = 0.0
    sufficient: bool = False


def classify_direction(slope: float, deadband: float) -> str:
    if slope > deadband:
        return INCREASING
    if slope < -deadband:
        return DECREASING
    return STABLE


def analyze_trend(samples: Sequence, window_size: int, cfg: Dict[str, Any] = CONFIG) -> TrendAnalysis:
    """
    Fit a line to the last ``window_size`` samples.

    Args:
        samples: Readings or plain values, oldest first
        window_size: Number of most recent samples to regress
        cfg: Configuration dictionary (trend deadband)

    Returns:
        TrendAnalysis; neutral ('stable', zero confidence) when
        window_size < 2 or fewer than window_size samples are given
    """
    if window_size < 2 or len(samples) < window_size:
        return TrendAnalysis()

    y = values_of(samples)[-window_size:]
    x = np.arange(window_size, dtype=np.float64)

    # Index variance is never zero for unit-spaced x with n >= 2
    if np.var(x) < 1e-10:
        return TrendAnalysis()

    fit = linregress(x, y)
    slope = float(fit.slope)
    correlation = float(fit.rvalue) if np.isfinite(fit.rvalue) else 0.0

    return TrendAnalysis(
        slope=slope,
        correlation=correlation,
        direction=classify_direction(slope, cfg['trend']['deadband']),
        confidence=abs(correlation),
        sufficient=True,
    )


def rate_of_change(readings: Sequence[Reading], window_size: int) -> float:
    """
    Value change per second across the most recent window.

    Uses the first and last reading of the window (the whole sequence when
    it is shorter than the window). Returns 0.0 when fewer than two
    readings are given, window_size < 2, or no time elapsed.
    """
    count = len(readings)
    if count < 2 or window_size < 2:
        return 0.0

    start = readings[max(0, count - window_size)]
    end = readings[count - 1]
    elapsed = (end.timestamp - start.timestamp).total_seconds()
    if elapsed <= 0:
        return 0.0
    return (end.value - start.value) / elapsed

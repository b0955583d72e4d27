"""
Sample Summary Module

Statistical and shape features over the retained sample array, computed
once at the end of a session. Unlike the streaming accumulator this has
random access to every value, so the median here is a true order
statistic.
"""

import numpy as np
from scipy.stats import skew, kurtosis

from .readings import values_of


def rms_amplitude(values):
    """sqrt(mean(value^2)); 0.0 for an empty array."""
    values = values_of(values)
    if len(values) == 0:
        return 0.0
    return float(np.sqrt(np.mean(values ** 2)))


def peak_amplitude(values):
    """
    Largest positive excursion; 0.0 for an empty array.

    The peak starts at zero, so an all-negative window has peak 0.0 and
    negative swings never raise it.
    """
    values = values_of(values)
    if len(values) == 0:
        return 0.0
    return max(0.0, float(np.max(values)))


def summarize_samples(samples):
    """
    Summary features for a sample window.

    Args:
        samples: Readings or plain values

    Returns:
        dict: count, mean, std, min, max, median, rms, peak, skew, kurtosis
              (NaN for undefined entries of an empty or constant window)
    """
    values = values_of(samples)
    n = len(values)

    if n == 0:
        return {
            'count': 0, 'mean': np.nan, 'std': np.nan, 'min': np.nan,
            'max': np.nan, 'median': np.nan, 'rms': np.nan, 'peak': np.nan,
            'skew': np.nan, 'kurtosis': np.nan
        }

    # Shape moments are undefined for a constant window
    constant = bool(np.all(values == values[0]))

    return {
        'count': n,
        'mean': float(np.mean(values)),
        'std': float(np.std(values)),
        'min': float(np.min(values)),
        'max': float(np.max(values)),
        'median': float(np.median(values)),
        'rms': rms_amplitude(values),
        'peak': peak_amplitude(values),
        'skew': np.nan if constant or n < 3 else float(skew(values)),
        'kurtosis': np.nan if constant or n < 4 else float(kurtosis(values)),
    }

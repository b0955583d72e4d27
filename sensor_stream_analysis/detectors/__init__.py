"""
Streaming detectors: per-reading anomaly checks and end-of-session
trend and frequency estimators.
"""

from .anomaly import (
    AnomalyConfig,
    AnomalyDetector,
    AnomalyVerdict,
    evaluate_anomaly,
    detect_anomalies_batch,
    count_anomalies,
)
from .trend import TrendAnalysis, analyze_trend, rate_of_change
from .frequency import FrequencyEstimate, estimate_peak_frequency, find_local_maxima

__all__ = [
    'AnomalyConfig',
    'AnomalyDetector',
    'AnomalyVerdict',
    'evaluate_anomaly',
    'detect_anomalies_batch',
    'count_anomalies',
    'TrendAnalysis',
    'analyze_trend',
    'rate_of_change',
    'FrequencyEstimate',
    'estimate_peak_frequency',
    'find_local_maxima',
]

"""
Sensor Stream Analysis

Streaming statistics, anomaly detection and rotating CSV persistence for
timestamped scalar sensor readings.

Components:
- Running statistics and moving-average filter (O(1) per reading)
- Anomaly detector: running baseline + absolute ceiling
- End of session: least-squares trend, peak-count frequency, domain classifier
- Buffered rotating CSV data logger
"""

__version__ = "0.1.0"

from .config import CONFIG, interval_seconds, retained_capacity
from .core import (
    InvalidConfiguration,
    IOFailure,
    AcquisitionFailure,
    CapacityExceeded,
    ClassifierFactory,
    LoggingObserver,
    setup_logging,
    validate_config
)
from .readings import Reading, SensorKind, sensor_type_name, format_timestamp
from .statistics import StatisticsAccumulator, StatisticsSnapshot
from .filters import MovingAverage
from .buffers import FixedBuffer, SampleArray
from .detectors import (
    AnomalyConfig,
    AnomalyDetector,
    AnomalyVerdict,
    evaluate_anomaly,
    detect_anomalies_batch,
    TrendAnalysis,
    analyze_trend,
    rate_of_change,
    FrequencyEstimate,
    estimate_peak_frequency
)
from .features import summarize_samples
from .classifiers import BridgeSafetyClassifier, Classification, SafetyTier, ThresholdTierClassifier
from .data_logger import DataLogger, backup_log_file, create_data_directory
from .data_loader import load_log_file, load_session_logs, session_log_files
from .session import MonitoringSession, SessionResult
from .builder import SessionBuilder
from .pipeline import ReadingSource, IterableSource, run_session
from .reporting import log_events, sensor_summary, format_session_report, save_outputs

__all__ = [
    'CONFIG',
    'interval_seconds',
    'retained_capacity',
    'InvalidConfiguration',
    'IOFailure',
    'AcquisitionFailure',
    'CapacityExceeded',
    'ClassifierFactory',
    'LoggingObserver',
    'setup_logging',
    'validate_config',
    'Reading',
    'SensorKind',
    'sensor_type_name',
    'format_timestamp',
    'StatisticsAccumulator',
    'StatisticsSnapshot',
    'MovingAverage',
    'FixedBuffer',
    'SampleArray',
    'AnomalyConfig',
    'AnomalyDetector',
    'AnomalyVerdict',
    'evaluate_anomaly',
    'detect_anomalies_batch',
    'TrendAnalysis',
    'analyze_trend',
    'rate_of_change',
    'FrequencyEstimate',
    'estimate_peak_frequency',
    'summarize_samples',
    'BridgeSafetyClassifier',
    'Classification',
    'SafetyTier',
    'ThresholdTierClassifier',
    'DataLogger',
    'backup_log_file',
    'create_data_directory',
    'load_log_file',
    'load_session_logs',
    'session_log_files',
    'MonitoringSession',
    'SessionResult',
    'SessionBuilder',
    'ReadingSource',
    'IterableSource',
    'run_session',
    'log_events',
    'sensor_summary',
    'format_session_report',
    'save_outputs'
]

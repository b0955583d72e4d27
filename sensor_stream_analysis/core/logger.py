"""
Logging Infrastructure

Named loggers for the streaming pipeline plus an anomaly tally logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

ROOT_LOGGER_NAME = 'sensor_stream_analysis'


class LoggerManager:
    """
    Centralized logging management.

    Holds the handler configuration shared by every logger in the
    package namespace. File output is opt-in via ``log_dir``.
    """

    _instance: Optional['LoggerManager'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self.loggers: Dict[str, logging.Logger] = {}
        self.log_dir: Optional[Path] = None
        self.level = logging.INFO
        self._initialized = True

    def get_logger(
        self,
        name: str,
        level: Optional[int] = None,
        log_to_console: bool = True
    ) -> logging.Logger:
        """
        Get or create logger.

        Args:
            name: Logger name, nested under the package namespace
            level: Logging level (defaults to the manager level)
            log_to_console: Write to stdout

        Returns:
            Configured logger
        """
        full_name = name if name.startswith(ROOT_LOGGER_NAME) else f"{ROOT_LOGGER_NAME}.{name}"
        if full_name in self.loggers:
            return self.loggers[full_name]

        level = self.level if level is None else level
        logger = logging.getLogger(full_name)
        logger.setLevel(level)
        logger.handlers.clear()
        logger.propagate = False

        detailed_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        simple_formatter = logging.Formatter('%(levelname)s - %(message)s')

        if log_to_console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setLevel(level)
            console_handler.setFormatter(simple_formatter)
            logger.addHandler(console_handler)

        if self.log_dir is not None:
            short_name = full_name.rsplit('.', 1)[-1]
            log_file = self.log_dir / f"{short_name}_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(detailed_formatter)
            logger.addHandler(file_handler)

        self.loggers[full_name] = logger
        return logger


def get_logger(name: str, **kwargs) -> logging.Logger:
    """Convenience function to get logger."""
    return LoggerManager().get_logger(name, **kwargs)


def setup_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    """Reset logging; existing loggers pick up the new handlers on next get_logger."""
    manager = LoggerManager()
    for logger in manager.loggers.values():
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)
    manager.loggers.clear()
    manager.level = level
    manager.log_dir = Path(log_dir) if log_dir is not None else None
    if manager.log_dir is not None:
        manager.log_dir.mkdir(parents=True, exist_ok=True)


class AnomalyDetectionLogger:
    """
    Specialized logger for anomaly events.

    Keeps running tallies so a session summary can be logged at the end.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger('anomaly_detection')
        self.reset_stats()

    def log_anomaly(self, sensor_name: str, verdict: Any) -> None:
        """
        Log one anomaly verdict.

        Args:
            sensor_name: Rendered sensor type name
            verdict: AnomalyVerdict with severity, reason and detected_at
        """
        self.stats['total_anomalies'] += 1
        self.stats['by_sensor'][sensor_name] = self.stats['by_sensor'].get(sensor_name, 0) + 1

        self.logger.warning(
            f"ANOMALY DETECTED at {verdict.detected_at:%Y-%m-%d %H:%M:%S.%f}: "
            f"{verdict.reason} (Sensor: {sensor_name}, Severity: {verdict.severity:.2f})"
        )

    def log_reading(self) -> None:
        self.stats['total_readings'] += 1

    def log_session_summary(self) -> None:
        """Log session anomaly summary."""
        total = self.stats['total_readings']
        anomalies = self.stats['total_anomalies']
        rate = (anomalies * 100.0 / total) if total else 0.0
        self.logger.info("=" * 60)
        self.logger.info("SESSION SUMMARY")
        self.logger.info("=" * 60)
        self.logger.info(f"Total readings: {total}")
        self.logger.info(f"Anomalies detected: {anomalies} ({rate:.1f}%)")
        self.logger.info(f"By sensor: {self.stats['by_sensor']}")
        self.logger.info("=" * 60)

    def reset_stats(self) -> None:
        self.stats = {
            'total_readings': 0,
            'total_anomalies': 0,
            'by_sensor': {},
        }


def get_detection_logger() -> AnomalyDetectionLogger:
    """Get specialized detection logger."""
    return AnomalyDetectionLogger()

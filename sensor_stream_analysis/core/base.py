"""
Base Classes and Abstract Interfaces

Provides the abstraction layer for domain classifiers, validation helpers
and the observer hooks a monitoring session notifies.
"""

import numbers
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Sequence

from .exceptions import InvalidConfiguration
from .logger import AnomalyDetectionLogger


class BaseClassifier(ABC):
    """
    Abstract base class for domain classifiers.

    Strategy Pattern: a session holds one classifier and runs it once over
    the retained samples at finalisation, so policies are interchangeable.
    """

    def __init__(self, name: str, config: Dict[str, Any]):
        """
        Initialize classifier.

        Args:
            name: Classifier identifier
            config: Configuration parameters
        """
        self.name = name
        self.config = config

    @abstractmethod
    def classify(self, samples: Sequence[Any]) -> Any:
        """
        Map a sample window to an ordinal verdict.

        Args:
            samples: Readings or plain values, oldest first

        Returns:
            Classification result
        """
        pass

    @property
    @abstractmethod
    def min_samples(self) -> int:
        """Samples required before a verdict other than 'insufficient data'."""
        pass


class BaseValidator:
    """
    Validation helpers that raise InvalidConfiguration.
    """

    @staticmethod
    def validate_positive(value: float, name: str) -> None:
        if value is None or not value > 0:
            raise InvalidConfiguration(f"{name} must be positive, got {value}")

    @staticmethod
    def validate_non_negative(value: float, name: str) -> None:
        if value is None or value < 0:
            raise InvalidConfiguration(f"{name} must be non-negative, got {value}")

    @staticmethod
    def validate_int_at_least(value: int, minimum: int, name: str) -> None:
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
        if value < minimum:
            raise InvalidConfiguration(f"{name} must be >= {minimum}, got {value}")

    @staticmethod
    def validate_config(config: Dict[str, Any], required_keys: List[str]) -> None:
        """Validate configuration dictionary."""
        if not isinstance(config, dict):
            raise InvalidConfiguration(f"Expected dict, got {type(config)}")

        missing = [key for key in required_keys if key not in config]
        if missing:
            raise InvalidConfiguration(f"Missing required config keys: {missing}")


class Observable:
    """
    Observer pattern for event notifications.
    """

    def __init__(self):
        self._observers: List['Observer'] = []

    def attach(self, observer: 'Observer') -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def detach(self, observer: 'Observer') -> None:
        self._observers.remove(observer)

    def notify(self, event: str, data: Any) -> None:
        for observer in self._observers:
            observer.update(event, data)


class Observer(ABC):
    """
    Observer interface for session events.

    Events: 'reading' (data: reading), 'anomaly' (data: (reading, verdict)),
    'rotated' (data: new path),
    'finalized' (data: SessionResult).
    """

    @abstractmethod
    def update(self, event: str, data: Any) -> None:
        pass


class LoggingObserver(Observer):
    """
    Observer that logs anomalies and the session summary.
    """

    def __init__(self, detection_logger: AnomalyDetectionLogger = None):
        self.detection_logger = detection_logger or AnomalyDetectionLogger()

    def update(self, event: str, data: Any) -> None:
        if event == 'reading':
            self.detection_logger.log_reading()
        elif event == 'anomaly':
            reading, verdict = data
            self.detection_logger.log_anomaly(reading.type_name, verdict)
        elif event == 'rotated':
            self.detection_logger.logger.info(f"Log rotated to {data}")
        elif event == 'finalized':
            self.detection_logger.log_session_summary()

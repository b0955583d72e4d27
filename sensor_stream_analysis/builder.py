"""
Builder Pattern for Session Configuration

Fluent interface for assembling a MonitoringSession.
"""

import copy
from typing import Any, Dict, List, Optional

from . import classifiers  # noqa: F401 registers bridge_safety
from .config import CONFIG, interval_seconds
from .core.base import BaseClassifier, LoggingObserver, Observer
from .core.factory import ClassifierFactory
from .data_logger import DataLogger
from .session import MonitoringSession


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class SessionBuilder:
    """
    Builder for constructing monitoring sessions.

    Builder Pattern: step-by-step construction with fluent interface.
    """

    def __init__(self):
        self.reset()

    def with_config(self, config: Dict[str, Any]) -> 'SessionBuilder':
        """
        Overlay configuration; nested sections are merged key by key.

        Returns:
            self (for fluent interface)
        """
        self._config = _merge(self._config, config)
        return self

    def with_classifier(self, classifier: Any, **kwargs: Any) -> 'SessionBuilder':
        """
        Set the domain classifier, either an instance or a registered name.

        Returns:
            self (for fluent interface)
        """
        self._classifier = classifier
        self._classifier_kwargs = kwargs
        return self

    def with_observer(self, observer: Observer) -> 'SessionBuilder':
        self._observers.append(observer)
        return self

    def with_logging(self, enabled: bool = True) -> 'SessionBuilder':
        """Attach a LoggingObserver for anomaly and summary log lines."""
        self._logging = enabled
        return self

    def with_logger(self, base_name: Optional[str] = None, directory=None, **kwargs: Any) -> 'SessionBuilder':
        """
        Persist readings through a DataLogger created at build time.

        Args:
            base_name: Log file base name
            directory: Log directory
            **kwargs: Other DataLogger arguments (buffer_size, clock, ...)
        """
        self._logger_kwargs = dict(kwargs, base_name=base_name, directory=directory)
        return self

    def build(self) -> MonitoringSession:
        """
        Build and return the session.

        Raises:
            InvalidConfiguration: if the merged configuration is invalid
        """
        config = self._config
        classifier = self._classifier
        if isinstance(classifier, str):
            kwargs = dict(self._classifier_kwargs)
            kwargs.setdefault('sample_interval_sec', interval_seconds(config['session']['interval_ms']))
            classifier = ClassifierFactory.create(classifier, **kwargs)

        observers: List[Observer] = list(self._observers)
        if self._logging:
            observers.append(LoggingObserver())

        # Validate before touching the filesystem
        session = MonitoringSession(cfg=config, classifier=classifier, observers=observers)
        if self._logger_kwargs is not None:
            session.data_logger = DataLogger(cfg=config, **self._logger_kwargs)
            session.data_logger.on_rotate = lambda path: session.events.notify('rotated', path)
        return session

    def reset(self) -> 'SessionBuilder':
        self._config: Dict[str, Any] = copy.deepcopy(CONFIG)
        self._classifier: Optional[BaseClassifier] = None
        self._classifier_kwargs: Dict[str, Any] = {}
        self._observers: List[Observer] = []
        self._logging = False
        self._logger_kwargs: Optional[Dict[str, Any]] = None
        return self

"""
Core module with base classes, errors, logging and validation.
"""

from .exceptions import (
    SensorStreamError,
    InvalidConfiguration,
    IOFailure,
    AcquisitionFailure,
    CapacityExceeded
)

from .base import (
    BaseClassifier,
    BaseValidator,
    Observable,
    Observer,
    LoggingObserver
)

from .factory import ClassifierFactory

from .logger import (
    LoggerManager,
    get_logger,
    setup_logging,
    get_detection_logger,
    AnomalyDetectionLogger
)

from .validators import (
    ConfigValidator,
    validate_config,
    require_valid_config
)

__all__ = [
    # Errors
    'SensorStreamError',
    'InvalidConfiguration',
    'IOFailure',
    'AcquisitionFailure',
    'CapacityExceeded',
    # Base classes
    'BaseClassifier',
    'BaseValidator',
    'Observable',
    'Observer',
    'LoggingObserver',
    # Factories
    'ClassifierFactory',
    # Logging
    'LoggerManager',
    'get_logger',
    'setup_logging',
    'get_detection_logger',
    'AnomalyDetectionLogger',
    # Validators
    'ConfigValidator',
    'validate_config',
    'require_valid_config'
]

"""
Exception Taxonomy

Configuration problems surface at construction time, file problems are
fatal to the data logger and propagate to the caller. Too-few-samples
conditions are not exceptions: analysis functions return neutral
results instead.
"""


class SensorStreamError(Exception):
    """Base class for all package errors."""


class InvalidConfiguration(SensorStreamError, ValueError):
    """Bad capacity, interval or threshold value."""


class IOFailure(SensorStreamError, OSError):
    """A log file could not be created, opened or written."""


class AcquisitionFailure(SensorStreamError, RuntimeError):
    """The reading source failed to produce a reading for this tick."""


class CapacityExceeded(SensorStreamError, IndexError):
    """Append to a fixed-capacity container that is already full."""

"""
Reading Data Contract

One timestamped scalar measurement, handed to the core one at a time in
non-decreasing timestamp order.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntEnum
from typing import Optional, Union

import numpy as np


class SensorKind(IntEnum):
    TEMPERATURE = 0
    VIBRATION = 1
    STRAIN = 2
    HUMIDITY = 3
    PRESSURE = 4
    ACCEL_X = 5
    ACCEL_Y = 6
    ACCEL_Z = 7


# Rendered names in the persisted log, indexed by type code
SENSOR_TYPE_NAMES = (
    'Temperature', 'Vibration', 'Strain', 'Humidity',
    'Pressure', 'Accel_X', 'Accel_Y', 'Accel_Z',
)

# Default (unit, description) per kind
SENSOR_METADATA = {
    SensorKind.TEMPERATURE: ('°C', 'Temperature'),
    SensorKind.VIBRATION: ('m/s²', 'Vibration Amplitude'),
    SensorKind.STRAIN: ('µε', 'Strain'),
    SensorKind.HUMIDITY: ('%', 'Relative Humidity'),
    SensorKind.PRESSURE: ('hPa', 'Atmospheric Pressure'),
    SensorKind.ACCEL_X: ('m/s²', 'Acceleration X'),
    SensorKind.ACCEL_Y: ('m/s²', 'Acceleration Y'),
    SensorKind.ACCEL_Z: ('m/s²', 'Acceleration Z'),
}

TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S.%f'


def sensor_type_name(kind: Union[SensorKind, int]) -> str:
    """Log name for a type code; out-of-range codes render as 'Unknown'."""
    code = int(kind)
    if 0 <= code < len(SENSOR_TYPE_NAMES):
        return SENSOR_TYPE_NAMES[code]
    return 'Unknown'


def format_timestamp(timestamp: datetime) -> str:
    """YYYY-MM-DD HH:MM:SS.ffffff, microseconds zero-padded."""
    return timestamp.strftime(TIMESTAMP_FORMAT)


@dataclass(frozen=True)
class Reading:
    """
    Immutable sensor reading.

    ``kind`` is normally a SensorKind; raw integer codes from hardware are
    accepted as-is so an unexpected code still reaches the log as 'Unknown'.
    ``timestamp`` is naive local time.
    """

    kind: Union[SensorKind, int]
    value: float
    unit: str
    description: str
    timestamp: datetime

    @classmethod
    def create(
        cls,
        kind: Union[SensorKind, int],
        value: float,
        timestamp: Optional[datetime] = None,
        unit: Optional[str] = None,
        description: Optional[str] = None,
    ) -> 'Reading':
        """Build a reading, filling unit/description from the kind's metadata."""
        try:
            kind = SensorKind(kind)
            default_unit, default_description = SENSOR_METADATA[kind]
        except ValueError:
            default_unit, default_description = 'N/A', 'Invalid sensor type'
        return cls(
            kind=kind,
            value=float(value),
            unit=default_unit if unit is None else unit,
            description=default_description if description is None else description,
            timestamp=timestamp if timestamp is not None else datetime.now(),
        )

    @property
    def type_name(self) -> str:
        return sensor_type_name(self.kind)

    def to_csv_row(self) -> str:
        """One log record, without the line terminator."""
        return (
            f"{format_timestamp(self.timestamp)},{self.type_name},"
            f"{self.value:.6f},{self.unit},{self.description}"
        )


def values_of(samples) -> np.ndarray:
    """Float64 array from a sequence of Readings or plain numbers."""
    if isinstance(samples, np.ndarray):
        return samples.astype(np.float64, copy=False)
    return np.fromiter(
        (s.value if isinstance(s, Reading) else s for s in samples),
        dtype=np.float64,
    )

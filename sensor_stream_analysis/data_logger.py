"""
Buffered Rotating Data Logger

Batches readings in memory and writes them as CSV records:

    Timestamp,Sensor_Type,Value,Unit,Description

Flush triggers:
- buffer reaches capacity
- flush interval elapsed since the last flush (bounded staleness at low rates)

Rotation: after a flush, if the durable size exceeds the threshold the
current file is closed and ``<directory>/<base_name>_<YYYYMMDD>_<HHMMSS>.csv``
is opened with a fresh header. Flush always precedes the rotation check,
so rotation never strands buffered readings.

Failure policy:
- creating/opening/writing a file raises IOFailure; the logger does not retry
- a record that cannot be serialized is skipped, counted in
  ``skipped_records`` and logged as a warning; the rest of the flush goes on
"""

import shutil
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from .buffers import FixedBuffer
from .config import CONFIG
from .core.base import BaseValidator
from .core.exceptions import InvalidConfiguration, IOFailure
from .core.logger import get_logger
from .readings import Reading

logger = get_logger('data_logger')


class LoggerState(Enum):
    OPEN = 'open'
    FLUSHING = 'flushing'
    ROTATION_PENDING = 'rotation_pending'
    CLOSED = 'closed'


@dataclass
class LoggerStats:
    sample_count: int
    current_file_size: int
    current_filename: str
    files: List[str] = field(default_factory=list)
    rotations: int = 0
    skipped_records: int = 0
    buffered: int = 0


def create_data_directory(directory) -> Path:
    """
    Create the log directory if missing.

    Raises:
        IOFailure: if the directory cannot be created
    """
    path = Path(directory)
    try:
        if not path.exists():
            path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Created data directory: {path}")
    except OSError as exc:
        raise IOFailure(f"Error creating directory '{path}': {exc}") from exc
    return path


def backup_log_file(filename) -> Path:
    """
    Copy a log file to ``<filename>.bak``.

    Raises:
        IOFailure: if the copy fails
    """
    source = Path(filename)
    backup = source.with_name(source.name + '.bak')
    try:
        shutil.copyfile(source, backup)
    except OSError as exc:
        raise IOFailure(f"Cannot back up '{source}': {exc}") from exc
    logger.info(f"Backup created: {backup}")
    return backup


class DataLogger:
    """
    Size-bounded rotating CSV logger with an in-memory record buffer.

    ``current_file_size`` counts only bytes already written to the open
    file (header included), never buffered records.
    """

    def __init__(
        self,
        base_name: Optional[str] = None,
        directory=None,
        buffer_size: Optional[int] = None,
        flush_interval_ms: Optional[float] = None,
        max_file_size_bytes: Optional[int] = None,
        auto_rotate: Optional[bool] = None,
        cfg=CONFIG,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = datetime.now,
        on_rotate: Optional[Callable[[Path], None]] = None,
    ):
        section = cfg['data_logger']
        self.base_name = base_name if base_name is not None else section['base_name']
        self.directory = Path(directory if directory is not None else section['directory'])
        self.buffer_size = buffer_size if buffer_size is not None else section['buffer_size']
        self.flush_interval_ms = (
            flush_interval_ms if flush_interval_ms is not None else section['flush_interval_ms']
        )
        self.max_file_size_bytes = (
            max_file_size_bytes if max_file_size_bytes is not None else section['max_file_size_bytes']
        )
        self.auto_rotate = section['auto_rotate'] if auto_rotate is None else auto_rotate
        self.header = ','.join(cfg['logging']['csv_header']) + '\n'

        if not self.base_name or '/' in self.base_name:
            raise InvalidConfiguration(f"base_name must be a plain file name, got {self.base_name!r}")
        BaseValidator.validate_positive(self.flush_interval_ms, 'flush_interval_ms')
        BaseValidator.validate_positive(self.max_file_size_bytes, 'max_file_size_bytes')

        self.buffer: FixedBuffer[Reading] = FixedBuffer(self.buffer_size, name='log buffer')
        self._clock = clock
        self._now = now
        self.on_rotate = on_rotate

        self.file = None
        self.current_path: Optional[Path] = None
        self.current_file_size = 0
        self.file_sample_count = 0
        self.sample_count = 0
        self.rotations = 0
        self.skipped_records = 0
        self.files: List[Path] = []
        self.state = LoggerState.CLOSED

        create_data_directory(self.directory)
        self._open_new_file()
        self.last_flush = self._clock()
        logger.info(f"Data logger initialized: {self.current_path}")

    # ------------------------------------------------------------------
    # File handling
    # ------------------------------------------------------------------

    def _next_path(self, attempt: int) -> Path:
        stamp = self._now().strftime('%Y%m%d_%H%M%S')
        if attempt == 0:
            return self.directory / f"{self.base_name}_{stamp}.csv"
        # Same second as an existing file: never truncate it
        return self.directory / f"{self.base_name}_{stamp}_{attempt}.csv"

    def _open_new_file(self) -> None:
        attempt = 0
        while True:
            path = self._next_path(attempt)
            try:
                handle = open(path, 'xb')
                break
            except FileExistsError:
                attempt += 1
            except OSError as exc:
                self.state = LoggerState.CLOSED
                raise IOFailure(f"Cannot create log file '{path}': {exc}") from exc

        self.file = handle
        self.current_path = path
        self.current_file_size = 0
        self.file_sample_count = 0
        self.files.append(path)
        self.state = LoggerState.OPEN
        self._write_header()

    def _write_header(self) -> None:
        data = self.header.encode('utf-8')
        try:
            self.file.write(data)
            self.file.flush()
        except OSError as exc:
            raise IOFailure(f"Cannot write header to '{self.current_path}': {exc}") from exc
        self.current_file_size += len(data)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def append(self, reading: Reading) -> bool:
        """
        Buffer one reading, flushing when the buffer is full or the flush
        interval has elapsed.

        Returns:
            True if a flush happened
        """
        if self.state is LoggerState.CLOSED:
            raise IOFailure("Data logger is closed")

        self.buffer.append(reading)
        self.sample_count += 1

        elapsed_ms = (self._clock() - self.last_flush) * 1000.0
        if self.buffer.is_full or elapsed_ms >= self.flush_interval_ms:
            self.flush()
            return True
        return False

    def log_batch(self, readings: Iterable[Reading]) -> int:
        """Append readings in order; returns the number of flushes triggered."""
        return sum(1 for reading in readings if self.append(reading))

    def flush(self) -> int:
        """
        Write every buffered reading, clear the buffer, and rotate if the
        file has grown past the threshold.

        Returns:
            Number of records written

        Raises:
            IOFailure: if the write fails (the buffer is kept)
        """
        if self.file is None or len(self.buffer) == 0:
            return 0

        self.state = LoggerState.FLUSHING
        lines = []
        for reading in self.buffer:
            try:
                lines.append((reading.to_csv_row() + '\n').encode('utf-8'))
            except (AttributeError, TypeError, ValueError) as exc:
                self.skipped_records += 1
                logger.warning(f"Skipping unserializable record {reading!r}: {exc}")

        payload = b''.join(lines)
        try:
            self.file.write(payload)
            self.file.flush()
        except OSError as exc:
            self.state = LoggerState.OPEN
            raise IOFailure(f"Cannot write to '{self.current_path}': {exc}") from exc

        self.current_file_size += len(payload)
        self.file_sample_count += len(lines)
        self.buffer.clear()
        self.last_flush = self._clock()
        self.state = LoggerState.OPEN

        if self.auto_rotate and self.current_file_size > self.max_file_size_bytes:
            self.rotate()

        return len(lines)

    def rotate(self) -> Path:
        """
        Close the current file and open a fresh one with a new timestamp.

        Returns:
            Path of the new file
        """
        self.state = LoggerState.ROTATION_PENDING
        old_path, old_size = self.current_path, self.current_file_size
        if self.file is not None:
            try:
                self.file.close()
            except OSError as exc:
                raise IOFailure(f"Cannot close '{old_path}': {exc}") from exc
            finally:
                self.file = None
            logger.info(f"Rotated log file: {old_path} ({old_size / (1024.0 * 1024.0):.2f} MB)")

        self._open_new_file()
        self.rotations += 1
        logger.info(f"New log file created: {self.current_path}")
        if self.on_rotate is not None:
            self.on_rotate(self.current_path)
        return self.current_path

    def close(self) -> None:
        """Flush remaining readings and close the file; IOFailure propagates after closing."""
        if self.state is LoggerState.CLOSED:
            return
        try:
            self.flush()
        finally:
            if self.file is not None:
                self.file.close()
                self.file = None
            self.state = LoggerState.CLOSED
            logger.info(f"Data logger closed. Total samples logged: {self.sample_count}")

    def stats(self) -> LoggerStats:
        return LoggerStats(
            sample_count=self.sample_count,
            current_file_size=self.current_file_size,
            current_filename=str(self.current_path),
            files=[str(p) for p in self.files],
            rotations=self.rotations,
            skipped_records=self.skipped_records,
            buffered=len(self.buffer),
        )

    @property
    def closed(self) -> bool:
        return self.state is LoggerState.CLOSED

    def __enter__(self) -> 'DataLogger':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

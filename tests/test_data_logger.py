from __future__ import annotations

from datetime import datetime

import pytest

from sensor_stream_analysis import (
    DataLogger,
    IOFailure,
    InvalidConfiguration,
    Reading,
    SensorKind,
    backup_log_file,
    load_session_logs,
    session_log_files,
)
from sensor_stream_analysis.data_logger import LoggerState

from conftest import BASE_TIME, make_readings

HEADER = "Timestamp,Sensor_Type,Value,Unit,Description\n"


def _logger(tmp_path, clock, wall_clock, **kwargs):
    params = dict(
        base_name='test',
        directory=tmp_path,
        buffer_size=10,
        flush_interval_ms=1000,
        max_file_size_bytes=1024 * 1024,
        clock=clock,
        now=wall_clock,
    )
    params.update(kwargs)
    return DataLogger(**params)


def test_new_file_has_header_only(tmp_path, clock, wall_clock) -> None:
    data_logger = _logger(tmp_path, clock, wall_clock)
    assert data_logger.current_path.name == 'test_20240305_140709.csv'
    assert data_logger.current_file_size == len(HEADER)
    assert data_logger.current_path.read_text(encoding='utf-8') == HEADER
    assert data_logger.state is LoggerState.OPEN
    data_logger.close()


def test_record_format_is_exact(tmp_path, clock, wall_clock) -> None:
    with _logger(tmp_path, clock, wall_clock) as data_logger:
        data_logger.append(Reading.create(SensorKind.VIBRATION, 0.1234567, timestamp=BASE_TIME))
        data_logger.append(Reading.create(SensorKind.TEMPERATURE, -3.5, timestamp=BASE_TIME))
        data_logger.append(Reading.create(42, 1.5, timestamp=datetime(2024, 1, 2, 3, 4, 5)))
        path = data_logger.current_path

    assert path.read_text(encoding='utf-8') == (
        HEADER
        + "2024-03-05 14:07:09.001234,Vibration,0.123457,m/s²,Vibration Amplitude\n"
        + "2024-03-05 14:07:09.001234,Temperature,-3.500000,°C,Temperature\n"
        + "2024-01-02 03:04:05.000000,Unknown,1.500000,N/A,Invalid sensor type\n"
    )


def test_full_buffer_triggers_flush(tmp_path, clock, wall_clock) -> None:
    data_logger = _logger(tmp_path, clock, wall_clock, buffer_size=3)
    readings = make_readings([0.1, 0.2, 0.3])
    assert data_logger.append(readings[0]) is False
    assert data_logger.append(readings[1]) is False
    assert data_logger.current_file_size == len(HEADER)
    assert data_logger.append(readings[2]) is True
    assert len(data_logger.buffer) == 0
    assert data_logger.file_sample_count == 3
    assert data_logger.current_file_size == data_logger.current_path.stat().st_size
    data_logger.close()


def test_flush_interval_bounds_staleness(tmp_path, clock, wall_clock) -> None:
    data_logger = _logger(tmp_path, clock, wall_clock, buffer_size=100, flush_interval_ms=1000)
    readings = make_readings([0.1, 0.2, 0.3])
    assert data_logger.append(readings[0]) is False
    clock.advance(0.5)
    assert data_logger.append(readings[1]) is False
    clock.advance(0.5)
    assert data_logger.append(readings[2]) is True
    assert data_logger.last_flush == clock()
    assert data_logger.file_sample_count == 3
    data_logger.close()


def test_rotates_once_past_threshold(tmp_path, clock, wall_clock) -> None:
    readings = make_readings([0.1, 0.2, 0.3, 0.4, 0.5])
    row_len = len((readings[0].to_csv_row() + '\n').encode('utf-8'))
    rotated = []
    data_logger = _logger(
        tmp_path, clock, wall_clock,
        buffer_size=1,
        max_file_size_bytes=len(HEADER) + 2 * row_len,
        on_rotate=rotated.append,
    )
    first_path = data_logger.current_path
    data_logger.log_batch(readings)
    data_logger.close()

    assert data_logger.rotations == 1
    assert rotated == [data_logger.current_path]
    assert data_logger.files == [first_path, data_logger.current_path]

    first = first_path.read_text(encoding='utf-8').splitlines()
    second = data_logger.current_path.read_text(encoding='utf-8').splitlines()
    assert first[0] == HEADER.strip() and second[0] == HEADER.strip()
    assert len(first) == 1 + 3
    assert len(second) == 1 + 2

    stats = data_logger.stats()
    assert stats.sample_count == 5
    assert stats.rotations == 1
    assert stats.buffered == 0


def test_rotated_session_reloads_in_order(tmp_path, clock, wall_clock) -> None:
    values = [0.01 * i for i in range(11)]
    readings = make_readings(values)
    row_len = len((readings[0].to_csv_row() + '\n').encode('utf-8'))
    data_logger = _logger(
        tmp_path, clock, wall_clock,
        buffer_size=2,
        max_file_size_bytes=len(HEADER) + 3 * row_len,
    )
    data_logger.log_batch(readings)
    data_logger.close()

    assert data_logger.rotations == 2
    assert session_log_files(tmp_path, 'test') == data_logger.files
    df = load_session_logs(data_logger.files)
    assert list(df['Value']) == pytest.approx(values)
    assert (df['Sensor_Type'] == 'Vibration').all()
    assert df['Timestamp'].is_monotonic_increasing


def test_same_second_rotation_never_clobbers(tmp_path, clock) -> None:
    data_logger = _logger(tmp_path, clock, lambda: BASE_TIME)
    data_logger.append(make_readings([0.5])[0])
    data_logger.flush()
    first = data_logger.current_path
    second = data_logger.rotate()
    data_logger.close()

    assert second.name == 'test_20240305_140709_1.csv'
    assert first.read_text(encoding='utf-8').count('\n') == 2
    assert session_log_files(tmp_path, 'test') == [first, second]


def test_close_flushes_and_is_idempotent(tmp_path, clock, wall_clock) -> None:
    data_logger = _logger(tmp_path, clock, wall_clock, buffer_size=50)
    data_logger.log_batch(make_readings([1.0, 2.0]))
    data_logger.close()
    data_logger.close()
    assert data_logger.closed
    assert data_logger.current_path.read_text(encoding='utf-8').count('\n') == 3
    with pytest.raises(IOFailure):
        data_logger.append(make_readings([3.0])[0])


def test_unserializable_record_is_skipped(tmp_path, clock, wall_clock) -> None:
    bad = Reading(kind=SensorKind.STRAIN, value=None, unit='µε', description='Strain', timestamp=BASE_TIME)
    with _logger(tmp_path, clock, wall_clock) as data_logger:
        data_logger.append(make_readings([1.0])[0])
        data_logger.append(bad)
        data_logger.append(make_readings([2.0])[0])
        assert data_logger.flush() == 2
    assert data_logger.skipped_records == 1
    assert data_logger.current_path.read_text(encoding='utf-8').count('\n') == 3


def test_write_failure_keeps_buffer(tmp_path, clock, wall_clock) -> None:
    class BrokenFile:
        def write(self, data):
            raise OSError("disk full")

        def flush(self):
            pass

        def close(self):
            pass

    data_logger = _logger(tmp_path, clock, wall_clock)
    data_logger.append(make_readings([1.0])[0])
    data_logger.file.close()
    data_logger.file = BrokenFile()
    with pytest.raises(IOFailure):
        data_logger.flush()
    assert len(data_logger.buffer) == 1
    assert data_logger.state is LoggerState.OPEN
    with pytest.raises(IOFailure):
        data_logger.close()
    assert data_logger.closed


def test_uncreatable_directory_raises(tmp_path, clock, wall_clock) -> None:
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    with pytest.raises(IOFailure):
        _logger(blocker / 'logs', clock, wall_clock)


@pytest.mark.parametrize("kwargs", [
    {'base_name': ''},
    {'base_name': 'a/b'},
    {'buffer_size': 0},
    {'flush_interval_ms': 0},
    {'max_file_size_bytes': -1},
])
def test_invalid_settings_rejected(tmp_path, clock, wall_clock, kwargs) -> None:
    with pytest.raises(InvalidConfiguration):
        _logger(tmp_path, clock, wall_clock, **kwargs)


def test_backup_copies_file(tmp_path, clock, wall_clock) -> None:
    with _logger(tmp_path, clock, wall_clock) as data_logger:
        data_logger.append(make_readings([1.0])[0])
    backup = backup_log_file(data_logger.current_path)
    assert backup.name.endswith('.csv.bak')
    assert backup.read_bytes() == data_logger.current_path.read_bytes()

"""
Log Loading Module

Reads persisted CSV logs back for audit:
- Timestamp parsing
- Gap summary between consecutive readings
- Concatenation of a rotated session in file order
"""

from pathlib import Path

import pandas as pd

from .config import CONFIG
from .core.logger import get_logger
from .readings import TIMESTAMP_FORMAT

logger = get_logger('data_loader')


def load_log_file(filepath, cfg=CONFIG):
    """
    Load one CSV log.

    Unit and description stay strings ('N/A' is not treated as missing).

    Args:
        filepath: Path to CSV file
        cfg: Configuration dictionary

    Returns:
        DataFrame with the header columns, Timestamp as datetime64
    """
    df = pd.read_csv(
        filepath,
        encoding='utf-8',
        dtype={'Sensor_Type': str, 'Unit': str, 'Description': str},
        keep_default_na=False,
    )
    expected = cfg['logging']['csv_header']
    if list(df.columns) != expected:
        raise ValueError(f"Unexpected columns in {filepath}: {list(df.columns)}")
    df['Value'] = df['Value'].astype(float)
    df['Timestamp'] = pd.to_datetime(df['Timestamp'], format=TIMESTAMP_FORMAT)
    return df


def session_log_files(directory, base_name):
    """
    Log files for a base name in write order.

    Names are <base>_<YYYYMMDD>_<HHMMSS>[_<n>].csv; files opened within the
    same second carry an increasing _<n> suffix.
    """
    def order(path):
        parts = path.stem[len(base_name) + 1:].split('_')
        counter = int(parts[2]) if len(parts) > 2 and parts[2].isdigit() else 0
        return parts[0], parts[1] if len(parts) > 1 else '', counter

    return sorted(Path(directory).glob(f"{base_name}_*.csv"), key=order)


def load_session_logs(paths, cfg=CONFIG):
    """
    Load a rotated session, keeping file order.

    Args:
        paths: Log file paths in the order they were written
        cfg: Configuration dictionary

    Returns:
        DataFrame with a 'source_file' column
    """
    frames = []
    for path in paths:
        df = load_log_file(path, cfg)
        df['source_file'] = str(path)
        frames.append(df)
    if not frames:
        return pd.DataFrame(columns=cfg['logging']['csv_header'] + ['source_file'])
    return pd.concat(frames, ignore_index=True)


def audit_gaps(df, thresholds=(0.5, 1, 5, 30)):
    """
    Summarize gaps between consecutive readings.

    Args:
        df: DataFrame from load_log_file / load_session_logs
        thresholds: Gap sizes in seconds to count

    Returns:
        dict: gap description plus counts above each threshold
    """
    gaps = df['Timestamp'].diff().dt.total_seconds().dropna()
    audit = {
        'readings': len(df),
        'gap_summary': gaps.describe().to_dict() if len(gaps) else {},
        'out_of_order': int((gaps < 0).sum()),
    }
    for t in thresholds:
        audit[f'gaps_over_{t}s'] = int((gaps > t).sum())

    logger.info(f"Log audit: {audit['readings']} readings, {audit['out_of_order']} out of order")
    return audit

"""
Sensor Stream Analysis - Configuration Module

Central configuration dictionary consolidating all thresholds, capacities
and logger policies for the streaming pipeline.
"""

import numpy as np

CONFIG = {
    # Acquisition cadence (the source itself lives outside the package)
    'session': {
        'interval_ms': 100,              # one reading per 100 ms
        'duration_sec': 60,              # retained array holds duration*1000/interval readings
    },

    # Windowed mean for live display
    'moving_average': {
        'capacity': 20,
    },

    # Per-reading anomaly detection against the running baseline
    'anomaly': {
        'threshold_multiplier': 3.0,     # |x - mean| > k * stddev
        'absolute_threshold': 1.0,       # |x| > ceiling, regardless of history (1 m/s^2)
        'min_samples_for_analysis': 20,  # warm-up period
    },

    # End-of-session least-squares trend
    'trend': {
        'window_size': 50,
        'deadband': 1e-6,                # |slope| below this is 'stable'
    },

    # Peak-counting oscillation estimate (not a spectral transform)
    'frequency': {
        'min_samples': 4,
    },

    # Bridge vibration safety tiers, checked in order; first match wins
    'bridge_safety': {
        'min_samples': 10,
        'tiers': [
            {'name': 'safe', 'max_rms': 0.1, 'max_peak': 0.3,
             'message': 'Normal vibration levels - Bridge is safe'},
            {'name': 'warning', 'max_rms': 0.3, 'max_peak': 0.8,
             'message': 'Elevated vibration levels - Monitor closely'},
        ],
        'fallback': {'name': 'critical',
                     'message': 'CRITICAL: Excessive vibration - Immediate inspection required'},
    },

    # Buffered rotating CSV writer
    'data_logger': {
        'directory': 'data',
        'base_name': 'sensor_data',
        'buffer_size': 100,
        'flush_interval_ms': 1000,
        'max_file_size_bytes': 10 * 1024 * 1024,
        'auto_rotate': True,
    },

    # Report schemas
    'logging': {
        'csv_header': ['Timestamp', 'Sensor_Type', 'Value', 'Unit', 'Description'],
        'event_log_columns': [
            'detected_at', 'sensor_type', 'value', 'unit', 'severity', 'reason'
        ],
        'sensor_summary_columns': [
            'sensor_type', 'count', 'mean', 'stddev', 'variance', 'min', 'max'
        ],
    },
}


def interval_seconds(interval_ms, cfg=None):
    """Convert a sampling interval in milliseconds to seconds."""
    if interval_ms is None:
        interval_ms = (cfg or CONFIG)['session']['interval_ms']
    return interval_ms / 1000.0


def retained_capacity(duration_sec=None, interval_ms=None, cfg=None):
    """Number of readings a session retains: duration * 1000 / interval."""
    session = (cfg or CONFIG)['session']
    if duration_sec is None:
        duration_sec = session['duration_sec']
    if interval_ms is None:
        interval_ms = session['interval_ms']
    return int(np.floor(duration_sec * 1000 / interval_ms))

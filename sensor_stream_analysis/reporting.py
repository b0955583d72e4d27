"""
Event Logging and Reporting Module

Turns a finished session into tables and text for operators.
"""

import os

import pandas as pd

from .config import CONFIG
from .readings import format_timestamp


def log_events(events, cfg=CONFIG):
    """
    Build the anomaly event log.

    Args:
        events: Sequence of (Reading, AnomalyVerdict) pairs
        cfg: Configuration dictionary

    Returns:
        DataFrame: one row per anomaly, columns from cfg['logging']['event_log_columns']
    """
    rows = [
        {
            'detected_at': verdict.detected_at,
            'sensor_type': reading.type_name,
            'value': reading.value,
            'unit': reading.unit,
            'severity': verdict.severity,
            'reason': verdict.reason,
        }
        for reading, verdict in events
        if verdict.is_anomaly
    ]
    return pd.DataFrame(rows, columns=cfg['logging']['event_log_columns'])


def sensor_summary(statistics_by_sensor, cfg=CONFIG):
    """
    Per-sensor statistics table.

    Args:
        statistics_by_sensor: Mapping of sensor type name to StatisticsSnapshot
        cfg: Configuration dictionary

    Returns:
        DataFrame sorted by sensor type
    """
    rows = [
        {
            'sensor_type': name,
            'count': snap.count,
            'mean': snap.mean,
            'stddev': snap.stddev,
            'variance': snap.variance,
            'min': snap.min,
            'max': snap.max,
        }
        for name, snap in statistics_by_sensor.items()
    ]
    df = pd.DataFrame(rows, columns=cfg['logging']['sensor_summary_columns'])
    return df.sort_values('sensor_type').reset_index(drop=True)


def format_statistics(snapshot, sensor_name):
    lines = [f"=== {sensor_name} Statistics ===", f"Samples: {snapshot.count}"]
    if snapshot.count == 0:
        lines.append("No samples yet")
        return "\n".join(lines)
    lines += [
        f"Mean: {snapshot.mean:.6f}",
        f"Min: {snapshot.min:.6f}",
        f"Max: {snapshot.max:.6f}",
        f"Std Dev: {snapshot.stddev:.6f}",
        f"Variance: {snapshot.variance:.6f}",
    ]
    return "\n".join(lines)


def format_anomaly(reading, verdict):
    return (
        f"ANOMALY DETECTED at {format_timestamp(verdict.detected_at)}: "
        f"{verdict.reason} (Sensor: {reading.type_name}, Severity: {verdict.severity:.2f})"
    )


def format_trend(trend):
    return "\n".join([
        "=== Trend Analysis ===",
        f"Direction: {trend.direction}",
        f"Slope: {trend.slope:.6f}",
        f"Correlation: {trend.correlation:.6f}",
        f"Confidence: {trend.confidence * 100.0:.2f}%",
    ])


def format_classification(classification):
    return "\n".join([
        "=== Classification ===",
        f"RMS Amplitude: {classification.rms_amplitude:.6f}",
        f"Peak Amplitude: {classification.peak_amplitude:.6f}",
        f"Dominant Frequency: {classification.dominant_frequency:.3f} Hz (peak-count estimate)",
        f"Status: {classification.label.upper()}",
        f"Message: {classification.message}",
    ])


def format_session_report(result, sensor_name='Sensor'):
    """
    Human-readable report for a SessionResult.

    Args:
        result: SessionResult from MonitoringSession.finalize()
        sensor_name: Heading for the overall statistics block

    Returns:
        str
    """
    sections = [format_statistics(result.statistics, sensor_name)]
    if len(result.statistics_by_sensor) > 1:
        for name, snap in sorted(result.statistics_by_sensor.items()):
            sections.append(format_statistics(snap, name))
    if result.classification is not None:
        sections.append(format_classification(result.classification))
    sections.append(format_trend(result.trend))

    summary = [
        "Summary:",
        f"- Total samples: {result.sample_count}",
        f"- Anomalies detected: {result.anomaly_count} ({result.anomaly_rate:.1f}%)",
        f"- Median: {result.summary['median']:.6f}" if result.summary['count'] else "- Median: n/a",
        f"- Rate of change: {result.rate_of_change:.6f} per second",
    ]
    for path in result.log_files:
        summary.append(f"- Data logged to: {path}")
    sections.append("\n".join(summary))
    return "\n\n".join(sections)


def save_outputs(result, output_dir='outputs', cfg=CONFIG):
    """
    Save the anomaly event log and per-sensor summary as CSV files.

    Args:
        result: SessionResult
        output_dir: Output directory
        cfg: Configuration dictionary

    Returns:
        tuple: (event_log_path, summary_path)
    """
    os.makedirs(output_dir, exist_ok=True)

    events = log_events(result.events, cfg)
    event_path = os.path.join(output_dir, 'event_log.csv')
    events.to_csv(event_path, index=False)

    summary = sensor_summary(result.statistics_by_sensor, cfg)
    summary_path = os.path.join(output_dir, 'sensor_summary.csv')
    summary.to_csv(summary_path, index=False)

    return event_path, summary_path

"""
Example Usage Script

Demonstrates a bridge-vibration monitoring session on simulated data.
"""

import sys
import threading
from datetime import datetime, timedelta
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import numpy as np

from sensor_stream_analysis import (
    IOFailure,
    Reading,
    SensorKind,
    SessionBuilder,
    format_session_report,
    load_session_logs,
    run_session,
    save_outputs,
)
from sensor_stream_analysis.pipeline import ReadingSource
from sensor_stream_analysis.reporting import format_anomaly


class SimulatedBridgeSource(ReadingSource):
    """
    Low-level bridge vibration: 2 Hz oscillation plus noise and rare spikes.

    Timestamps advance by the sampling interval so the run does not need a
    real clock.
    """

    def __init__(self, interval_ms=100, seed=42):
        self.rng = np.random.default_rng(seed)
        self.interval = timedelta(milliseconds=interval_ms)
        self.now = datetime.now()
        self.step = 0

    def next_reading(self):
        t = self.step * self.interval.total_seconds()
        value = 0.1 + 0.05 * np.sin(2 * np.pi * 2.0 * t) + self.rng.normal(0, 0.01)
        if self.rng.random() < 0.01:
            value += self.rng.choice([-1.0, 1.0]) * 2.0
        self.step += 1
        self.now += self.interval
        return Reading.create(SensorKind.VIBRATION, abs(value), timestamp=self.now)


if __name__ == '__main__':
    output_dir = Path(__file__).parent / 'outputs'

    session = (
        SessionBuilder()
        .with_config({'session': {'duration_sec': 30, 'interval_ms': 100}})
        .with_classifier('bridge_safety')
        .with_logger(base_name='bridge_vibration', directory=output_dir / 'data')
        .with_logging()
        .build()
    )

    stop = threading.Event()
    try:
        # No sleeping: simulated timestamps already advance per reading
        result = run_session(SimulatedBridgeSource(), session, stop=stop, sleep=lambda s: None)
    except IOFailure as exc:
        print(f"Data logging failed with errors: {exc}")
        sys.exit(1)

    print(format_session_report(result, sensor_name='Bridge Vibration'))

    for reading, verdict in result.events[:5]:
        print(format_anomaly(reading, verdict))

    event_path, summary_path = save_outputs(result, output_dir=str(output_dir))
    print(f"\nSaved event log: {event_path}")
    print(f"Saved sensor summary: {summary_path}")

    logs = load_session_logs(result.log_files)
    print(f"Reloaded {len(logs)} readings from {len(result.log_files)} log file(s)")

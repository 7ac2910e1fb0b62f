"""
Replay sensor source for recorded IMU sessions.

Recordings use the logger CSV layout:
    timestamp,accel_x,accel_y,accel_z,gyro_x,gyro_y,gyro_z
"""

import threading
import time
from pathlib import Path
from typing import Callable, Optional, Union

import numpy as np
import logging

from repcounter.core.window_buffer import NUM_CHANNELS, Sample

logger = logging.getLogger(__name__)


def load_recording(path: Union[str, Path]) -> np.ndarray:
    """Load a CSV recording as an (N, 6) array, dropping the timestamp column."""
    table = np.loadtxt(path, delimiter=",", skiprows=1, ndmin=2)
    if table.shape[1] != NUM_CHANNELS + 1:
        raise ValueError(
            f"{path}: expected {NUM_CHANNELS + 1} columns, found {table.shape[1]}"
        )
    return table[:, 1:]


class ReplaySensorSource:
    """
    Pushes recorded samples from a background thread.

    With realtime=True samples are paced at the subscribed rate; otherwise
    they are delivered as fast as the callback consumes them.
    """

    def __init__(self, samples: np.ndarray, realtime: bool = False):
        samples = np.asarray(samples, dtype=np.float64)
        if samples.ndim != 2 or samples.shape[1] != NUM_CHANNELS:
            raise ValueError(f"samples must have shape (N, {NUM_CHANNELS}), got {samples.shape}")
        self.samples = samples
        self.realtime = realtime
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.finished = threading.Event()

    @classmethod
    def from_csv(cls, path: Union[str, Path], realtime: bool = False) -> "ReplaySensorSource":
        return cls(load_recording(path), realtime=realtime)

    def is_available(self) -> bool:
        return len(self.samples) > 0

    def subscribe(self, rate_hz: float, callback: Callable[[Sample], None]) -> None:
        if self._thread is not None and self._thread.is_alive():
            raise RuntimeError("ReplaySensorSource already has a subscriber")
        self._stop.clear()
        self.finished.clear()
        self._thread = threading.Thread(
            target=self._run, args=(rate_hz, callback), name="repcounter-replay", daemon=True
        )
        self._thread.start()

    def _run(self, rate_hz: float, callback: Callable[[Sample], None]):
        interval = 1.0 / rate_hz
        next_tick = time.monotonic()
        try:
            for row in self.samples:
                if self._stop.is_set():
                    return
                callback(Sample.from_sequence(row))
                if self.realtime:
                    next_tick += interval
                    delay = next_tick - time.monotonic()
                    if delay > 0:
                        self._stop.wait(delay)
        finally:
            self.finished.set()
            logger.debug("Replay finished")

    def unsubscribe(self) -> None:
        self._stop.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._thread = None

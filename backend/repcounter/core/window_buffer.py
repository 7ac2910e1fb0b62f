"""
Sliding window buffer over the six inertial channels.

Samples are written column by column into a fixed (6, window_size) array.
When the write index reaches window_size the completed window is handed out
for classification, the newest `window_size - overlap` samples are shifted
to the front, and writing resumes after them. Memory stays fixed no matter
how long the stream runs.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

from repcounter.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


CHANNELS = ("accel_x", "accel_y", "accel_z", "gyro_x", "gyro_y", "gyro_z")
NUM_CHANNELS = len(CHANNELS)


@dataclass(frozen=True)
class Sample:
    """One 6-axis inertial sample (user acceleration + rotation rate)."""
    accel_x: float
    accel_y: float
    accel_z: float
    gyro_x: float
    gyro_y: float
    gyro_z: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "Sample":
        if len(values) != NUM_CHANNELS:
            raise ValueError(f"Expected {NUM_CHANNELS} channel values, got {len(values)}")
        return cls(*(float(v) for v in values))

    def as_tuple(self):
        return (self.accel_x, self.accel_y, self.accel_z,
                self.gyro_x, self.gyro_y, self.gyro_z)


@dataclass(frozen=True)
class Window:
    """A completed, read-only window of shape (6, window_size)."""
    data: np.ndarray
    sequence: int  # 0-based index of this window within the session

    @property
    def size(self) -> int:
        return self.data.shape[1]

    def channel(self, name: str) -> np.ndarray:
        return self.data[CHANNELS.index(name)]


class SlidingWindowBuffer:
    """
    Fixed-capacity, overlap-preserving buffer.

    push() returns a Window exactly when the buffer fills, which happens
    after the first `window_size` samples and then every `overlap` samples.
    """

    def __init__(self, window_size: int, overlap: int):
        if window_size <= 0:
            raise ConfigurationError(f"window_size must be positive, got {window_size}")
        if not 0 < overlap < window_size:
            raise ConfigurationError(
                f"overlap must satisfy 0 < overlap < window_size "
                f"(overlap={overlap}, window_size={window_size})"
            )
        self.window_size = window_size
        self.overlap = overlap
        self._buffer = np.zeros((NUM_CHANNELS, window_size), dtype=np.float64)
        self._index = 0
        self._windows_emitted = 0

    @property
    def index(self) -> int:
        """Current write index, always within [0, window_size]."""
        return self._index

    @property
    def windows_emitted(self) -> int:
        return self._windows_emitted

    def push(self, sample: Sample) -> Optional[Window]:
        """Append one sample; return the completed window if the buffer filled."""
        self._buffer[:, self._index] = sample.as_tuple()
        self._index += 1

        if self._index < self.window_size:
            return None

        # Copy before sliding so the classifier sees an immutable snapshot
        data = self._buffer.copy()
        data.setflags(write=False)
        window = Window(data=data, sequence=self._windows_emitted)
        self._windows_emitted += 1

        self._slide()
        return window

    def _slide(self):
        keep = self.window_size - self.overlap
        self._buffer[:, :keep] = self._buffer[:, self.overlap:]
        self._index = keep

    def reset(self):
        """Zero all channels and rewind the write index."""
        self._buffer.fill(0.0)
        self._index = 0
        self._windows_emitted = 0

"""
Counter configuration for the streaming rep pipeline.

TIMING (defaults, 50 Hz wrist IMU):
- Window: 100 samples = 2.0 seconds of motion per classification
- Slide: 25 samples = one new classification every 0.5 seconds
- History: 5 classifications = 2.5 seconds of debounce context
"""

from dataclasses import dataclass

from repcounter.core.errors import ConfigurationError


@dataclass(frozen=True)
class CounterConfig:
    """
    Constants the core requires from its environment.

    `overlap` is the slide between consecutive windows: a window is
    classified every `overlap` samples, and consecutive windows share
    `window_size - overlap` samples.
    """
    window_size: int = 100
    sampling_rate: float = 50.0
    overlap: int = 25
    history_size: int = 5
    confidence_threshold: float = 0.50
    curl_confirmation_threshold: int = 3
    target_reps: int = 10
    target_label: str = "bicep_curl"
    aux_state_size: int = 400

    def __post_init__(self):
        if self.window_size <= 0:
            raise ConfigurationError(f"window_size must be positive, got {self.window_size}")
        if not 0 < self.overlap < self.window_size:
            raise ConfigurationError(
                f"overlap must satisfy 0 < overlap < window_size "
                f"(overlap={self.overlap}, window_size={self.window_size})"
            )
        if self.sampling_rate <= 0:
            raise ConfigurationError(f"sampling_rate must be positive, got {self.sampling_rate}")
        if self.history_size <= 0:
            raise ConfigurationError(f"history_size must be positive, got {self.history_size}")
        if not 1 <= self.curl_confirmation_threshold <= self.history_size:
            raise ConfigurationError(
                f"curl_confirmation_threshold must be in [1, {self.history_size}], "
                f"got {self.curl_confirmation_threshold}"
            )
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ConfigurationError(
                f"confidence_threshold must be in [0, 1], got {self.confidence_threshold}"
            )
        if self.target_reps < 1:
            raise ConfigurationError(f"target_reps must be at least 1, got {self.target_reps}")
        if self.aux_state_size < 0:
            raise ConfigurationError(f"aux_state_size must be non-negative, got {self.aux_state_size}")
        if not self.target_label:
            raise ConfigurationError("target_label must not be empty")

    @property
    def slide_seconds(self) -> float:
        """Seconds between consecutive classifications."""
        return self.overlap / self.sampling_rate

    @property
    def window_seconds(self) -> float:
        return self.window_size / self.sampling_rate

    @property
    def samples_to_keep(self) -> int:
        """Samples carried over into the next window after a classification."""
        return self.window_size - self.overlap

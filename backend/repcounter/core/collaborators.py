"""Contracts for the collaborators the core consumes but does not implement."""

import numpy as np
from dataclasses import dataclass
from typing import Callable, Protocol

from repcounter.core.classification_gate import ClassifierOutput
from repcounter.core.events import EventKind
from repcounter.core.window_buffer import Sample


class SensorSource(Protocol):
    """Push source of fixed-rate 6-axis samples."""

    def is_available(self) -> bool:
        ...

    def subscribe(self, rate_hz: float, callback: Callable[[Sample], None]) -> None:
        ...

    def unsubscribe(self) -> None:
        """Stop delivery; no callback may run after this returns."""
        ...


class Classifier(Protocol):
    """Stateless window classifier. Raises ClassifierError on failure."""

    def predict(self, window: np.ndarray, aux_state: np.ndarray) -> ClassifierOutput:
        ...


class SyncSink(Protocol):
    """Receives completed sets. May raise SinkUnreachable."""

    def notify_completed_set(self, rep_count: int) -> None:
        ...


class HapticSink(Protocol):
    def trigger(self, event_kind: EventKind) -> None:
        ...


@dataclass(frozen=True)
class CounterPreferences:
    """User preferences pushed from the companion device."""
    target_reps: int
    haptics_enabled: bool = True


class PreferencesProvider(Protocol):
    def get_preferences(self) -> CounterPreferences:
        ...

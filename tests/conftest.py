"""Shared fakes for the rep counting core."""

from typing import Callable, Iterable, List, Optional

import numpy as np
import pytest

from repcounter.core import (
    ClassifierOutput,
    CounterConfig,
    Sample,
    SinkUnreachable,
)


class FakeSensorSource:
    """Synchronous source: tests push samples on the calling thread."""

    def __init__(self, available: bool = True):
        self.available = available
        self.callback: Optional[Callable[[Sample], None]] = None
        self.subscribe_calls = 0
        self.unsubscribe_calls = 0
        self.rate_hz = None

    def is_available(self) -> bool:
        return self.available

    def subscribe(self, rate_hz, callback):
        self.subscribe_calls += 1
        self.rate_hz = rate_hz
        self.callback = callback

    def unsubscribe(self):
        self.unsubscribe_calls += 1
        self.callback = None

    def push(self, count: int, value: float = 0.0):
        for _ in range(count):
            if self.callback is None:
                return
            self.callback(Sample(value, value, value, value, value, value))


class ScriptedClassifier:
    """
    Returns one scripted result per call.

    Script entries are a label string (confidence 0.9), a ClassifierOutput,
    or an Exception instance to raise. The last entry repeats.
    """

    def __init__(self, script: Iterable):
        self.script = list(script)
        self.calls = 0
        self.aux_states: List[np.ndarray] = []

    def predict(self, window, aux_state):
        self.aux_states.append(aux_state)
        entry = self.script[min(self.calls, len(self.script) - 1)]
        self.calls += 1
        if isinstance(entry, Exception):
            raise entry
        if isinstance(entry, ClassifierOutput):
            return entry
        other = "other" if entry != "other" else "bicep_curl"
        return ClassifierOutput(label=entry, probabilities={entry: 0.9, other: 0.1})


class RecordingSyncSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: List[int] = []

    def notify_completed_set(self, rep_count: int):
        self.sent.append(rep_count)
        if self.fail:
            raise SinkUnreachable("peer not reachable")


class RecordingHapticSink:
    def __init__(self):
        self.triggered = []

    def trigger(self, event_kind):
        self.triggered.append(event_kind)


@pytest.fixture
def small_config() -> CounterConfig:
    """Tiny windows so each classification needs only a few samples."""
    return CounterConfig(
        window_size=4,
        overlap=2,
        sampling_rate=50.0,
        history_size=5,
        curl_confirmation_threshold=3,
        target_reps=2,
        aux_state_size=8,
    )


@pytest.fixture
def sensor() -> FakeSensorSource:
    return FakeSensorSource()


@pytest.fixture
def sync_sink() -> RecordingSyncSink:
    return RecordingSyncSink()


@pytest.fixture
def haptics() -> RecordingHapticSink:
    return RecordingHapticSink()

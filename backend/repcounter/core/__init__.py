"""
Streaming rep counting core for wrist-worn inertial sensors.

PIPELINE COMPONENTS:
1. SlidingWindowBuffer: Fixed (6, window_size) buffer, emits a window every `overlap` samples
2. ClassificationGate: Runs the opaque classifier and applies the confidence gate
3. JitterFilter: Majority vote over the last few gated labels
4. RepStateMachine: IDLE/IN_REP machine, counts a rep on the falling edge
5. SessionController: Start/stop lifecycle, haptics and set sync

The gate, filter and state machine are also exposed as pure functions
(gate_prediction, debounce, advance) over explicit state.

Usage:
    from repcounter.core import CounterConfig, SessionController

    controller = SessionController(
        CounterConfig(), sensor_source, classifier,
        sync_sink=sync_sink, haptic_sink=haptics, on_event=print,
    )
    controller.start()
    ...
    controller.stop()
"""

from repcounter.core.counter_config import CounterConfig
from repcounter.core.errors import (
    RepCounterError, ConfigurationError, SensorUnavailable,
    ClassifierError, SinkUnreachable,
)
from repcounter.core.window_buffer import Sample, Window, SlidingWindowBuffer, CHANNELS
from repcounter.core.classification_gate import (
    BinaryLabel, ClassifierOutput, ClassificationGate, GateResult, gate_prediction
)
from repcounter.core.jitter_filter import JitterFilter, debounce
from repcounter.core.rep_state_machine import RepState, CounterState, RepStateMachine, advance
from repcounter.core.events import (
    EventKind, RepCompleted, GoalReached, StatusChanged, SessionEvent, Status
)
from repcounter.core.collaborators import CounterPreferences
from repcounter.core.handoff import ClassificationWorker
from repcounter.core.sinks import NotificationDispatcher, HttpSyncSink, HttpPreferencesSource
from repcounter.core.sensors import ReplaySensorSource, load_recording
from repcounter.core.model_classifier import ProbabilisticModelClassifier
from repcounter.core.session import SessionController, SessionSnapshot
from repcounter.core.offline import OfflineResult, count_reps_in_recording

__all__ = [
    # Configuration & errors
    "CounterConfig",
    "RepCounterError",
    "ConfigurationError",
    "SensorUnavailable",
    "ClassifierError",
    "SinkUnreachable",

    # Windowing
    "Sample",
    "Window",
    "SlidingWindowBuffer",
    "CHANNELS",

    # Classification gate
    "BinaryLabel",
    "ClassifierOutput",
    "ClassificationGate",
    "GateResult",
    "gate_prediction",

    # Debounce
    "JitterFilter",
    "debounce",

    # Rep state machine
    "RepState",
    "CounterState",
    "RepStateMachine",
    "advance",

    # Events
    "EventKind",
    "RepCompleted",
    "GoalReached",
    "StatusChanged",
    "SessionEvent",
    "Status",

    # Collaborators
    "CounterPreferences",
    "ClassificationWorker",
    "NotificationDispatcher",
    "HttpSyncSink",
    "HttpPreferencesSource",
    "ReplaySensorSource",
    "load_recording",
    "ProbabilisticModelClassifier",

    # Orchestration
    "SessionController",
    "SessionSnapshot",
    "OfflineResult",
    "count_reps_in_recording",
]

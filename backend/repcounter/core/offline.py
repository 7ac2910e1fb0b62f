"""
Offline rep counting over a recorded session.

Runs the same buffer -> gate -> filter -> state machine pipeline as a live
session, synchronously and without sinks. Useful for evaluating a classifier
against logged recordings.
"""

import time
from dataclasses import dataclass, field
from typing import List

import numpy as np
import logging

from repcounter.core.classification_gate import ClassificationGate
from repcounter.core.counter_config import CounterConfig
from repcounter.core.events import GoalReached, RepCompleted, SessionEvent
from repcounter.core.jitter_filter import JitterFilter
from repcounter.core.rep_state_machine import RepStateMachine
from repcounter.core.window_buffer import Sample, SlidingWindowBuffer

logger = logging.getLogger(__name__)


@dataclass
class OfflineResult:
    rep_count: int
    windows_classified: int
    prediction_errors: int
    goal_reached: bool
    duration_seconds: float
    processing_time_seconds: float
    events: List[SessionEvent] = field(default_factory=list)

    @property
    def rep_events(self) -> List[RepCompleted]:
        return [e for e in self.events if isinstance(e, RepCompleted)]


def count_reps_in_recording(
    samples: np.ndarray,
    classifier,
    config: CounterConfig
) -> OfflineResult:
    """Count reps in an (N, 6) sample array."""
    started = time.monotonic()

    buffer = SlidingWindowBuffer(config.window_size, config.overlap)
    gate = ClassificationGate(
        classifier,
        target_label=config.target_label,
        confidence_threshold=config.confidence_threshold,
        aux_state_size=config.aux_state_size,
    )
    jitter = JitterFilter(config.history_size, config.curl_confirmation_threshold)
    machine = RepStateMachine(config.target_reps)

    events: List[SessionEvent] = []
    windows = 0
    errors = 0
    for row in np.asarray(samples, dtype=np.float64):
        window = buffer.push(Sample.from_sequence(row))
        if window is None:
            continue
        result = gate.evaluate(window)
        windows += 1
        if result.failed:
            errors += 1
            continue
        events.extend(machine.process(jitter.filter(result.label)))

    processing_time = time.monotonic() - started
    logger.info(
        f"Offline count: {machine.rep_count} reps from {len(samples)} samples "
        f"({windows} windows, {errors} errors) in {processing_time:.2f}s"
    )
    return OfflineResult(
        rep_count=machine.rep_count,
        windows_classified=windows,
        prediction_errors=errors,
        goal_reached=any(isinstance(e, GoalReached) for e in events),
        duration_seconds=len(samples) / config.sampling_rate,
        processing_time_seconds=processing_time,
        events=events,
    )

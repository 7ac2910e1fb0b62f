"""
Two-state rep machine driven by the debounced label.

STATES:
- IDLE: no sustained target activity
- IN_REP: sustained target activity in progress

A rep is finalized on the falling edge (IN_REP + OTHER), so one sustained
activation counts at most once no matter how many windows report TARGET
while it lasts.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple
import logging

from repcounter.core.classification_gate import BinaryLabel
from repcounter.core.events import (
    GoalReached, RepCompleted, SessionEvent, Status, StatusChanged
)

logger = logging.getLogger(__name__)


class RepState(Enum):
    IDLE = "idle"
    IN_REP = "in_rep"


@dataclass(frozen=True)
class CounterState:
    state: RepState = RepState.IDLE
    rep_count: int = 0


def advance(
    current: CounterState,
    label: BinaryLabel,
    target_reps: int
) -> Tuple[CounterState, List[SessionEvent]]:
    """Apply one debounced label and return the new state plus emitted events."""
    if current.state is RepState.IDLE:
        if label is BinaryLabel.TARGET:
            return replace(current, state=RepState.IN_REP), [StatusChanged(Status.IN_REP)]
        return current, []

    if label is BinaryLabel.TARGET:
        return current, []

    count = current.rep_count + 1
    events: List[SessionEvent] = [RepCompleted(count), StatusChanged(Status.DONE)]
    if count == target_reps:
        events.append(GoalReached(count))
        events.append(StatusChanged(Status.GOAL_REACHED))
    return CounterState(state=RepState.IDLE, rep_count=count), events


class RepStateMachine:
    """Stateful wrapper around advance()."""

    def __init__(self, target_reps: int = 10):
        self.target_reps = target_reps
        self._current = CounterState()

    @property
    def state(self) -> RepState:
        return self._current.state

    @property
    def rep_count(self) -> int:
        return self._current.rep_count

    def process(self, label: BinaryLabel) -> List[SessionEvent]:
        previous = self._current
        self._current, events = advance(previous, label, self.target_reps)
        if self._current.state is not previous.state:
            logger.debug(f"Rep state {previous.state.value} -> {self._current.state.value}")
        return events

    def reset(self, target_reps: Optional[int] = None):
        if target_reps is not None:
            self.target_reps = target_reps
        self._current = CounterState()

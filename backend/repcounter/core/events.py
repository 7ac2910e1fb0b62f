"""Discrete session events delivered to the consumer callback."""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class EventKind(str, Enum):
    REP_COMPLETED = "rep_completed"
    GOAL_REACHED = "goal_reached"
    STATUS_CHANGED = "status_changed"


@dataclass(frozen=True)
class RepCompleted:
    count: int
    kind: EventKind = EventKind.REP_COMPLETED


@dataclass(frozen=True)
class GoalReached:
    count: int
    kind: EventKind = EventKind.GOAL_REACHED


@dataclass(frozen=True)
class StatusChanged:
    message: str
    kind: EventKind = EventKind.STATUS_CHANGED


SessionEvent = Union[RepCompleted, GoalReached, StatusChanged]


class Status:
    """User-visible status messages."""
    READY = "Ready"
    STARTED = "Started!"
    IN_REP = "In Rep..."
    DONE = "Done!"
    GOAL_REACHED = "Goal Reached!"
    PREDICTION_ERROR = "Prediction Error"
    SENSORS_UNAVAILABLE = "Sensors not available"

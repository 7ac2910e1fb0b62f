"""Database models."""

from repcounter.models.base import Base
from repcounter.models.workout_set import WorkoutSet
from repcounter.models.preferences import CounterPreferencesRecord, PREFERENCES_ROW_ID

__all__ = [
    "Base",
    "WorkoutSet",
    "CounterPreferencesRecord",
    "PREFERENCES_ROW_ID",
]

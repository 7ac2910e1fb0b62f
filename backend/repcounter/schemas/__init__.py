"""Pydantic schemas for API request/response models."""

from repcounter.schemas.workout_set import (
    SetFinishedRequest,
    WeightUpdateRequest,
    WorkoutSetResponse,
    WorkoutSetListResponse,
)
from repcounter.schemas.preferences import (
    PreferencesResponse,
    PreferencesUpdateRequest,
)

__all__ = [
    "SetFinishedRequest",
    "WeightUpdateRequest",
    "WorkoutSetResponse",
    "WorkoutSetListResponse",
    "PreferencesResponse",
    "PreferencesUpdateRequest",
]

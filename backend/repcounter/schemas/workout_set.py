"""Workout set schemas."""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field


class SetFinishedRequest(BaseModel):
    """Sent by the counting device when a set ends."""
    rep_count: int = Field(..., ge=1, description="Reps counted by the device")


class WeightUpdateRequest(BaseModel):
    """Schema for recording the weight used for a set."""
    weight: float = Field(..., ge=0, description="Weight in kg")


class WorkoutSetResponse(BaseModel):
    id: str  # String ID for SQLite compatibility
    completed_at: datetime
    rep_count: int
    weight: Optional[float] = None
    weight_display: str

    class Config:
        from_attributes = True


class WorkoutSetListResponse(BaseModel):
    """Set history, newest first."""
    items: List[WorkoutSetResponse]
    total: int

"""Counter preference schemas."""

from typing import Optional
from pydantic import BaseModel, Field, model_validator


class PreferencesResponse(BaseModel):
    target_reps: int
    haptics_enabled: bool

    class Config:
        from_attributes = True


class PreferencesUpdateRequest(BaseModel):
    """Partial update; omitted fields keep their stored value."""
    target_reps: Optional[int] = Field(None, ge=1, le=1000)
    haptics_enabled: Optional[bool] = None

    @model_validator(mode="after")
    def require_one_field(self) -> "PreferencesUpdateRequest":
        if self.target_reps is None and self.haptics_enabled is None:
            raise ValueError("At least one of target_reps or haptics_enabled is required")
        return self

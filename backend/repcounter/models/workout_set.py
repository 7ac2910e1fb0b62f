"""Completed set model."""

import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, Float, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from repcounter.models.base import Base, TimestampMixin, utcnow


class WorkoutSet(Base, TimestampMixin):
    """
    A finished set reported by the counting device.

    The rep count is what the device counted; weight is optional and
    filled in by the user afterwards.
    """

    __tablename__ = "workout_sets"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4())
    )
    completed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False,
        index=True
    )
    rep_count: Mapped[int] = mapped_column(Integer, nullable=False)
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)  # kg

    @property
    def weight_display(self) -> str:
        """Weight without a trailing .0, or '---' when not recorded."""
        if self.weight is None:
            return "---"
        return "%g" % self.weight

    def __repr__(self) -> str:
        return f"<WorkoutSet(id={self.id}, reps={self.rep_count}, weight={self.weight})>"

"""Counter preferences model (single row)."""

from sqlalchemy import Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column

from repcounter.models.base import Base, TimestampMixin


PREFERENCES_ROW_ID = 1


class CounterPreferencesRecord(Base, TimestampMixin):
    """Target reps and haptics switch pushed to the counting device."""

    __tablename__ = "counter_preferences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=PREFERENCES_ROW_ID)
    target_reps: Mapped[int] = mapped_column(Integer, default=10, nullable=False)
    haptics_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<CounterPreferences(target={self.target_reps}, haptics={self.haptics_enabled})>"

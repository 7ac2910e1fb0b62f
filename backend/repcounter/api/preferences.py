"""Counter preference endpoints polled by the counting device."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from repcounter.config import Settings, get_settings
from repcounter.database import get_db
from repcounter.models.preferences import CounterPreferencesRecord, PREFERENCES_ROW_ID
from repcounter.schemas.preferences import PreferencesResponse, PreferencesUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


async def _get_or_create(db: AsyncSession, settings: Settings) -> CounterPreferencesRecord:
    result = await db.execute(
        select(CounterPreferencesRecord).where(CounterPreferencesRecord.id == PREFERENCES_ROW_ID)
    )
    record = result.scalar_one_or_none()
    if record is None:
        record = CounterPreferencesRecord(
            id=PREFERENCES_ROW_ID,
            target_reps=settings.target_reps,
            haptics_enabled=settings.haptics_enabled
        )
        db.add(record)
        await db.flush()
    return record


@router.get("", response_model=PreferencesResponse)
async def get_preferences(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Current target reps and haptics switch."""
    return await _get_or_create(db, settings)


@router.put("", response_model=PreferencesResponse)
async def update_preferences(
    request: PreferencesUpdateRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """Update preferences; the device picks them up at its next session start."""
    record = await _get_or_create(db, settings)

    if request.target_reps is not None:
        record.target_reps = request.target_reps
    if request.haptics_enabled is not None:
        record.haptics_enabled = request.haptics_enabled

    await db.commit()
    await db.refresh(record)

    logger.info(f"Preferences saved: target={record.target_reps}, haptics={record.haptics_enabled}")
    return record

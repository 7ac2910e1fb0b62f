"""Completed set history endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, delete, desc, func
from sqlalchemy.ext.asyncio import AsyncSession

from repcounter.config import Settings, get_settings
from repcounter.database import get_db
from repcounter.models.workout_set import WorkoutSet
from repcounter.schemas.workout_set import (
    SetFinishedRequest,
    WeightUpdateRequest,
    WorkoutSetResponse,
    WorkoutSetListResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


async def _trim_history(db: AsyncSession, limit: int) -> int:
    """Delete all but the `limit` most recent sets. Returns rows removed."""
    stale = await db.execute(
        select(WorkoutSet.id)
        .order_by(desc(WorkoutSet.completed_at))
        .offset(limit)
    )
    stale_ids = [row[0] for row in stale.all()]
    if stale_ids:
        await db.execute(delete(WorkoutSet).where(WorkoutSet.id.in_(stale_ids)))
    return len(stale_ids)


@router.post("", response_model=WorkoutSetResponse, status_code=status.HTTP_201_CREATED)
async def record_finished_set(
    request: SetFinishedRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings)
):
    """
    Record a set finished on the counting device.

    History is newest-first and capped at `history_limit` sets; the oldest
    sets are dropped once the cap is exceeded.
    """
    workout_set = WorkoutSet(rep_count=request.rep_count)
    db.add(workout_set)
    await db.flush()

    removed = await _trim_history(db, settings.history_limit)
    await db.commit()
    await db.refresh(workout_set)

    logger.info(f"Set recorded: {workout_set.rep_count} reps (trimmed {removed} old sets)")
    return workout_set


@router.get("", response_model=WorkoutSetListResponse)
async def list_sets(db: AsyncSession = Depends(get_db)):
    """Set history, newest first."""
    result = await db.execute(select(WorkoutSet).order_by(desc(WorkoutSet.completed_at)))
    sets = result.scalars().all()

    total_result = await db.execute(select(func.count(WorkoutSet.id)))
    return WorkoutSetListResponse(
        items=[WorkoutSetResponse.model_validate(s) for s in sets],
        total=total_result.scalar()
    )


@router.patch("/{set_id}", response_model=WorkoutSetResponse)
async def update_set_weight(
    set_id: str,
    request: WeightUpdateRequest,
    db: AsyncSession = Depends(get_db)
):
    """Record the weight used for a set."""
    result = await db.execute(select(WorkoutSet).where(WorkoutSet.id == set_id))
    workout_set = result.scalar_one_or_none()

    if not workout_set:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Set not found"
        )

    workout_set.weight = request.weight
    await db.commit()
    await db.refresh(workout_set)

    logger.info(f"Set {set_id} weight updated to {workout_set.weight_display} kg")
    return workout_set

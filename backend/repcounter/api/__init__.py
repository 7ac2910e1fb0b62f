"""API routes."""

from fastapi import APIRouter

from repcounter.api import sets, preferences

api_router = APIRouter()

api_router.include_router(sets.router, prefix="/sets", tags=["Sets"])
api_router.include_router(preferences.router, prefix="/preferences", tags=["Preferences"])

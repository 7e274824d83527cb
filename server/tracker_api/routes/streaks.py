"""Streak API routes."""
from datetime import date

from fastapi import APIRouter, Depends

from ..config import get_settings
from ..dependencies import get_local_today, get_user_id
from ..models.streaks import Streak
from ..services import analytics
from ..services.store import EntryStore, get_store

router = APIRouter(prefix="/api/streaks", tags=["Streaks"])


@router.get("", response_model=list[Streak])
async def get_streaks(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_local_today),
    store: EntryStore = Depends(get_store),
):
    """
    Get current streaks for the user's targets.

    New personal bests of three days or more are saved as a side effect.
    """
    results = await analytics.streaks(store, user_id, today, get_settings().streak_lookback_days)
    return [Streak.model_validate(r) for r in results]

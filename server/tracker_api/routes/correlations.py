"""Activity and mood correlation API routes."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..config import get_settings
from ..dependencies import get_local_today, get_user_id
from ..models.correlations import Correlations
from ..services import analytics
from ..services.store import EntryStore, get_store

router = APIRouter(prefix="/api/correlations", tags=["Correlations"])


@router.get("", response_model=Correlations)
async def get_correlations(
    days: Optional[int] = Query(default=None, ge=7, le=365, description="Days of history to analyze"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_local_today),
    store: EntryStore = Depends(get_store),
):
    """Get mood correlation insights and session patterns."""
    window = days or get_settings().correlation_lookback_days
    result = await analytics.correlations(store, user_id, today, window)
    return Correlations.model_validate(result)

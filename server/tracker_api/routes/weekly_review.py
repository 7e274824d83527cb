"""Weekly review API routes."""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..dependencies import get_local_today, get_user_id
from ..models.weekly_review import WeeklyReview
from ..services import analytics
from ..services.commentary import CommentaryClient, get_commentary_client
from ..services.store import EntryStore, get_store

router = APIRouter(prefix="/api/weekly-review", tags=["Weekly Review"])


@router.get("", response_model=WeeklyReview)
async def get_weekly_review(
    week_start: Optional[date] = Query(default=None, description="Any date in the week; defaults to this week"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_local_today),
    store: EntryStore = Depends(get_store),
    commentary: CommentaryClient = Depends(get_commentary_client),
):
    """Get the Week Score, target progress, scorecards and highlights for a week."""
    review = await analytics.weekly_review(store, commentary, user_id, today, week_start)
    return WeeklyReview.model_validate(review)

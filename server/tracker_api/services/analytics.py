"""Fetch-then-compute orchestration for the analytics routes.

Store reads for a request have no ordering between them, so they run
concurrently in worker threads and are all awaited before any computation
starts. A failing read fails the whole request; nothing partial is
returned.
"""
import asyncio
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from fastapi import HTTPException

from behavior_engine.correlations import CorrelationResult, analyze_correlations
from behavior_engine.daily_metrics import (
    RHYTHM_WINDOW_DAYS,
    DailyMetrics,
    Metric,
    TrendResult,
    build_trends,
    calculate_daily_metrics,
)
from behavior_engine.dates import week_start as week_start_of
from behavior_engine.streaks import StreakResult, calculate_streaks
from behavior_engine.weekly_scorer import WeeklyReview, build_weekly_review, commentary_context

from .commentary import CommentaryClient
from .store import EntryStore

logger = logging.getLogger(__name__)


async def _gather(action: str, *calls):
    """Run blocking store calls concurrently; any failure becomes a generic 500."""
    try:
        return await asyncio.gather(*(asyncio.to_thread(func, *args) for func, *args in calls))
    except Exception:
        logger.exception(f"Store failure while trying to {action}")
        raise HTTPException(status_code=500, detail=f"Failed to {action}")


async def daily_metrics(store: EntryStore, user_id: str, as_of: date) -> DailyMetrics:
    start = as_of - timedelta(days=RHYTHM_WINDOW_DAYS - 1)
    (entries,) = await _gather("load metrics", (store.fetch_entries, user_id, start, as_of))
    return calculate_daily_metrics(entries, as_of)


async def metric_trends(
    store: EntryStore, user_id: str, as_of: date, period_days: int
) -> dict[Metric, TrendResult]:
    # 14 days for the week-over-week delta plus the Rhythm window before it
    span = max(period_days, 14) + RHYTHM_WINDOW_DAYS - 1
    start = as_of - timedelta(days=span - 1)
    (entries,) = await _gather("load metric trends", (store.fetch_entries, user_id, start, as_of))
    return build_trends(entries, as_of, period_days)


async def streaks(
    store: EntryStore, user_id: str, as_of: date, lookback_days: int
) -> list[StreakResult]:
    start = as_of - timedelta(days=lookback_days)
    entries, targets, existing = await _gather(
        "load streaks",
        (store.fetch_entries, user_id, start, as_of),
        (store.fetch_targets, user_id),
        (store.fetch_streak_state, user_id),
    )
    results = calculate_streaks(entries, targets, existing, as_of, lookback_days)

    now = datetime.now(timezone.utc)
    to_save = [r.to_user_streak(user_id, as_of, now) for r in results if r.should_persist]
    if to_save:
        await _gather("save streaks", *((store.upsert_streak_state, row) for row in to_save))
    return results


async def weekly_review(
    store: EntryStore,
    commentary: CommentaryClient,
    user_id: str,
    as_of: date,
    week_start: Optional[date] = None,
) -> WeeklyReview:
    start = week_start_of(week_start or as_of)
    end = start + timedelta(days=6)
    previous_start = start - timedelta(days=7)

    current, previous, targets = await _gather(
        "generate weekly review",
        (store.fetch_entries, user_id, start, end),
        (store.fetch_entries, user_id, previous_start, start - timedelta(days=1)),
        (store.fetch_targets, user_id),
    )
    review = build_weekly_review(start, as_of, current, previous, targets)

    if review.has_enough_data:
        review.coach_summary = await commentary.generate(commentary_context(review))
    return review


async def correlations(
    store: EntryStore, user_id: str, as_of: date, days: int
) -> CorrelationResult:
    start = as_of - timedelta(days=days - 1)
    entries, moods = await _gather(
        "load correlations",
        (store.fetch_entries, user_id, start, as_of),
        (store.fetch_moods, user_id, start, as_of),
    )
    return analyze_correlations(entries, moods)

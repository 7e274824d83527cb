"""Daily metric API routes."""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from behavior_engine.daily_metrics import Metric
from behavior_engine.dates import InvalidPeriodError, parse_period

from ..dependencies import get_local_today, get_user_id
from ..models.metrics import DailyMetrics, MetricTrends
from ..services import analytics
from ..services.store import EntryStore, get_store

router = APIRouter(prefix="/api/metrics", tags=["Metrics"])


@router.get("", response_model=DailyMetrics)
async def get_daily_metrics(
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_local_today),
    store: EntryStore = Depends(get_store),
):
    """Get today's Focus, Balance and Rhythm with breakdowns and a nudge."""
    metrics = await analytics.daily_metrics(store, user_id, today)
    return DailyMetrics.model_validate(metrics)


@router.get("/trend", response_model=MetricTrends)
async def get_metric_trends(
    period: str = Query(default="7d", description="Trend length: 7d or 30d"),
    user_id: str = Depends(get_user_id),
    today: date = Depends(get_local_today),
    store: EntryStore = Depends(get_store),
):
    """Get per-day values, averages, personal bests and week-over-week change."""
    try:
        period_days = parse_period(period)
    except InvalidPeriodError as e:
        raise HTTPException(status_code=400, detail=str(e))

    trends = await analytics.metric_trends(store, user_id, today, period_days)
    return MetricTrends.model_validate(
        {
            "period": period,
            "focus": trends[Metric.FOCUS],
            "balance": trends[Metric.BALANCE],
            "rhythm": trends[Metric.RHYTHM],
        },
        from_attributes=True,
    )

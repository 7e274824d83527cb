"""
Behavior Engine.

Pure analytics over logged time entries and mood check-ins: daily Focus,
Balance and Rhythm scores, streaks with grace days, the weekly review
score, and activity/mood correlations.
"""

from .correlations import CorrelationResult, analyze_correlations, cohens_d
from .daily_metrics import DailyMetrics, TrendResult, build_trends, calculate_daily_metrics
from .models import MoodCheckin, Target, TimeEntry, UserStreak
from .streaks import StreakResult, calculate_streaks
from .taxonomy import (
    AggregatedCategory,
    TargetType,
    TimeCategory,
    aggregate_by_view,
    get_aggregated_category,
)
from .weekly_scorer import WeeklyReview, build_weekly_review

__all__ = [
    "AggregatedCategory",
    "CorrelationResult",
    "DailyMetrics",
    "MoodCheckin",
    "StreakResult",
    "Target",
    "TargetType",
    "TimeCategory",
    "TimeEntry",
    "TrendResult",
    "UserStreak",
    "WeeklyReview",
    "aggregate_by_view",
    "analyze_correlations",
    "build_trends",
    "build_weekly_review",
    "calculate_daily_metrics",
    "calculate_streaks",
    "cohens_d",
    "get_aggregated_category",
]

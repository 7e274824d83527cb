"""Pydantic models for analytics API responses."""
from .metrics import DailyMetrics, MetricScore, MetricTrend, MetricTrends
from .streaks import Streak, WeeklyConsistency
from .weekly_review import WeeklyReview
from .correlations import Correlations, CorrelationInsight, SessionPattern

__all__ = [
    "DailyMetrics",
    "MetricScore",
    "MetricTrend",
    "MetricTrends",
    "Streak",
    "WeeklyConsistency",
    "WeeklyReview",
    "Correlations",
    "CorrelationInsight",
    "SessionPattern",
]

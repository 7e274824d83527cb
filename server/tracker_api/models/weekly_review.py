"""Weekly review models."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from behavior_engine.daily_metrics import Direction
from behavior_engine.taxonomy import TimeCategory
from behavior_engine.weekly_scorer import DayRating, FeedbackTone, HighlightType


class TargetProgress(BaseModel):
    """Progress toward one weekly target."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    target_key: str = Field(serialization_alias="targetKey")
    target_type: str = Field(serialization_alias="targetType")
    label: str
    current_minutes: int = Field(serialization_alias="currentMinutes")
    target_minutes: int = Field(serialization_alias="targetMinutes")
    percentage: int
    score: int
    is_limit: bool = Field(serialization_alias="isLimit")
    previous_minutes: Optional[int] = Field(default=None, serialization_alias="previousMinutes")
    change_minutes: Optional[int] = Field(default=None, serialization_alias="changeMinutes")
    trend: Optional[Direction] = None
    improvement_percentage: Optional[int] = Field(default=None, serialization_alias="improvementPercentage")
    feedback_message: str = Field(serialization_alias="feedbackMessage")
    feedback_tone: FeedbackTone = Field(serialization_alias="feedbackTone")


class DayScore(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    day: str
    rating: DayRating
    minutes: int


class Scorecard(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    target_key: str = Field(serialization_alias="targetKey")
    label: str
    is_limit: bool = Field(serialization_alias="isLimit")
    days: list[DayScore]
    good_days: int = Field(serialization_alias="goodDays")
    rough_days: int = Field(serialization_alias="roughDays")


class CategoryShare(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    category: TimeCategory
    label: str
    minutes: int
    percentage: int
    entry_count: int = Field(serialization_alias="entryCount")


class Highlight(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    type: HighlightType
    text: str
    subtext: Optional[str] = None


class WeeklyReview(BaseModel):
    """Review of one Sunday-start week."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    week_start: date = Field(serialization_alias="weekStart")
    week_end: date = Field(serialization_alias="weekEnd")
    week_score: int = Field(ge=0, le=100, serialization_alias="weekScore")
    week_score_label: str = Field(serialization_alias="weekScoreLabel")
    active_days: int = Field(serialization_alias="activeDays")
    evaluated_days: int = Field(serialization_alias="evaluatedDays")
    highlights: list[Highlight]
    total_minutes: int = Field(serialization_alias="totalMinutes")
    entry_count: int = Field(serialization_alias="entryCount")
    previous_week_minutes: Optional[int] = Field(default=None, serialization_alias="previousWeekMinutes")
    has_enough_data: bool = Field(serialization_alias="hasEnoughData")
    has_previous_week_data: bool = Field(serialization_alias="hasPreviousWeekData")
    target_progress: list[TargetProgress] = Field(serialization_alias="targetProgress")
    scorecards: list[Scorecard]
    category_breakdown: list[CategoryShare] = Field(serialization_alias="categoryBreakdown")
    best_days: list[str] = Field(serialization_alias="bestDays")
    best_hours: list[str] = Field(serialization_alias="bestHours")
    insights: list[str]
    coach_summary: Optional[str] = Field(default=None, serialization_alias="coachSummary")

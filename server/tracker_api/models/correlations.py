"""Correlation insight models."""
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from behavior_engine.correlations import CorrelationDirection, InsightType
from behavior_engine.models import MoodLevel, TimePeriod


class CorrelationInsight(BaseModel):
    """An association between an activity and mood."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    type: InsightType
    category: str
    direction: CorrelationDirection
    effect_size: float = Field(serialization_alias="effectSize")
    strength_percent: int = Field(serialization_alias="strengthPercent")
    sample_size_with: int = Field(serialization_alias="sampleSizeWith")
    sample_size_without: int = Field(serialization_alias="sampleSizeWithout")
    description: str
    avg_mood_with: float = Field(serialization_alias="avgMoodWith")
    avg_mood_without: float = Field(serialization_alias="avgMoodWithout")
    duration_threshold: Optional[int] = Field(default=None, serialization_alias="durationThreshold")


class SessionPattern(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: str
    from_period: TimePeriod = Field(serialization_alias="fromPeriod")
    to_period: TimePeriod = Field(serialization_alias="toPeriod")
    from_mood: MoodLevel = Field(serialization_alias="fromMood")
    to_mood_avg: float = Field(serialization_alias="toMoodAvg")
    sample_size: int = Field(serialization_alias="sampleSize")
    description: str


class Correlations(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    insights: list[CorrelationInsight]
    session_patterns: list[SessionPattern] = Field(serialization_alias="sessionPatterns")
    total_days_tracked: int = Field(serialization_alias="totalDaysTracked")
    days_needed: int = Field(serialization_alias="daysNeeded")
    has_enough_data: bool = Field(serialization_alias="hasEnoughData")

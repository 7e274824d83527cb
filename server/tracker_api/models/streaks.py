"""Streak models."""
from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class WeeklyConsistency(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    days_hit: int = Field(serialization_alias="daysHit")
    days_elapsed: int = Field(serialization_alias="daysElapsed")
    percentage: int
    is_perfect: bool = Field(serialization_alias="isPerfect")


class Streak(BaseModel):
    """Current state of one streak type."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    streak_type: str = Field(serialization_alias="streakType")
    label: str
    description: str
    current_streak: int = Field(serialization_alias="currentStreak")
    streak_start_date: Optional[date] = Field(default=None, serialization_alias="streakStartDate")
    grace_days_used: int = Field(serialization_alias="graceDaysUsed")
    grace_days_remaining: int = Field(serialization_alias="graceDaysRemaining")
    personal_best: int = Field(serialization_alias="personalBest")
    is_new_personal_best: bool = Field(serialization_alias="isNewPersonalBest")
    next_milestone: Optional[int] = Field(default=None, serialization_alias="nextMilestone")
    recent_milestone: Optional[int] = Field(default=None, serialization_alias="recentMilestone")
    weekly_consistency: WeeklyConsistency = Field(serialization_alias="weeklyConsistency")
    daily_target_minutes: Optional[int] = Field(default=None, serialization_alias="dailyTargetMinutes")

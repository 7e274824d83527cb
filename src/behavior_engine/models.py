"""
Core records consumed by the analytics engine.

Entries and mood check-ins are immutable inputs created elsewhere. Day
aggregates are rebuilt on every call and never stored.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from .taxonomy import (
    TARGET_CONFIGS,
    AggregatedCategory,
    TargetDirection,
    TargetType,
    TimeCategory,
    aggregate_by_view,
    target_categories,
)

logger = logging.getLogger(__name__)


class EntryStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"


class TimePeriod(str, Enum):
    """Part of the day a mood check-in belongs to."""

    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


class MoodLevel(str, Enum):
    LOW = "low"
    OKAY = "okay"
    GREAT = "great"


MOOD_NUMERIC: Dict[MoodLevel, int] = {
    MoodLevel.LOW: 0,
    MoodLevel.OKAY: 1,
    MoodLevel.GREAT: 2,
}


@dataclass(frozen=True)
class TimeEntry:
    """A block of logged time on a user-local calendar date."""

    user_id: str
    date: date
    category: TimeCategory
    duration_minutes: int
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: EntryStatus = EntryStatus.CONFIRMED

    @property
    def is_confirmed(self) -> bool:
        return self.status == EntryStatus.CONFIRMED


@dataclass(frozen=True)
class MoodCheckin:
    user_id: str
    date: date
    period: TimePeriod
    mood: MoodLevel

    @property
    def score(self) -> int:
        return MOOD_NUMERIC[self.mood]


@dataclass(frozen=True)
class Target:
    """
    A weekly goal.

    weekly_target_minutes may be None, in which case the catalogue default
    for the target type applies. Direction defaults to the catalogue's.
    """

    target_type: TargetType
    weekly_target_minutes: Optional[int] = None
    direction: Optional[TargetDirection] = None
    categories: Tuple[TimeCategory, ...] = ()
    label: Optional[str] = None
    target_id: Optional[str] = None

    @property
    def config(self):
        return TARGET_CONFIGS[self.target_type]

    @property
    def effective_direction(self) -> TargetDirection:
        return self.direction or self.config.direction

    @property
    def weekly_minutes(self) -> int:
        if self.weekly_target_minutes is None:
            return self.config.default_weekly_minutes
        return self.weekly_target_minutes

    @property
    def daily_minutes(self) -> int:
        return round(self.weekly_minutes / 7)

    @property
    def related_categories(self) -> Tuple[TimeCategory, ...]:
        return target_categories(self.target_type, list(self.categories))

    @property
    def display_label(self) -> str:
        return self.label or self.config.label

    @property
    def key(self) -> str:
        return self.target_id or self.target_type.value

    @property
    def is_limit(self) -> bool:
        return self.effective_direction == TargetDirection.AT_MOST


@dataclass
class UserStreak:
    """Persisted streak state for one (user, streak type)."""

    user_id: str
    streak_type: str
    current_streak_days: int = 0
    current_streak_start_date: Optional[date] = None
    personal_best_days: int = 0
    personal_best_achieved_at: Optional[date] = None
    last_calculated_at: Optional[datetime] = None


@dataclass
class DayAggregate:
    """Everything logged on one date, rolled up."""

    date: date
    minutes_by_category: Dict[TimeCategory, int] = field(default_factory=dict)
    entry_count: int = 0
    mood_scores: Dict[TimePeriod, int] = field(default_factory=dict)

    @property
    def minutes_by_group(self) -> Dict[AggregatedCategory, int]:
        return aggregate_by_view(self.minutes_by_category)

    @property
    def average_mood(self) -> Optional[float]:
        if not self.mood_scores:
            return None
        return sum(self.mood_scores.values()) / len(self.mood_scores)

    def minutes_in(self, categories: Iterable[TimeCategory]) -> int:
        return sum(self.minutes_by_category.get(c, 0) for c in categories)


def confirmed(entries: Iterable[TimeEntry]) -> List[TimeEntry]:
    """Drop pending entries; only confirmed time ever reaches a metric."""
    return [e for e in entries if e.is_confirmed]


def build_day_aggregates(
    entries: Iterable[TimeEntry],
    moods: Iterable[MoodCheckin] = (),
) -> Dict[date, DayAggregate]:
    """Group confirmed entries and mood check-ins by their local date."""
    days: Dict[date, DayAggregate] = {}

    for entry in confirmed(entries):
        day = days.setdefault(entry.date, DayAggregate(date=entry.date))
        day.minutes_by_category[entry.category] = (
            day.minutes_by_category.get(entry.category, 0) + entry.duration_minutes
        )
        day.entry_count += 1

    for checkin in moods:
        day = days.setdefault(checkin.date, DayAggregate(date=checkin.date))
        # Later check-ins for the same slot replace earlier ones.
        day.mood_scores[checkin.period] = checkin.score

    return days

"""
Streak Engine.

Walks backward from the day before `as_of` and counts consecutive days that
met a streak's threshold. A small weekly allowance of grace days forgives
isolated misses; a forgiven day still counts toward the streak length.

Today is never part of the current streak because it is still in
progress. It only shows up in the weekly consistency ratio, and only once
it already counts.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .dates import week_start
from .models import DayAggregate, Target, TimeEntry, UserStreak, build_day_aggregates
from .taxonomy import TargetType, TimeCategory

logger = logging.getLogger(__name__)

MILESTONES: Tuple[int, ...] = (7, 14, 30, 60, 100, 365)
MIN_CELEBRATION_STREAK = 3
DEFAULT_LOOKBACK_DAYS = 365


class StreakKind(str, Enum):
    """How a day is judged."""

    MINUTES = "minutes"  # minutes in categories >= threshold
    ENTRIES = "entries"  # at least one entry in categories
    ABSENCE = "absence"  # active day with nothing in categories


@dataclass(frozen=True)
class StreakConfig:
    streak_type: str
    label: str
    description: str
    kind: StreakKind
    categories: Tuple[TimeCategory, ...]
    threshold_minutes: int = 0
    grace_days_per_week: int = 1


STREAK_CONFIGS: Dict[str, StreakConfig] = {
    "deep_work": StreakConfig(
        "deep_work",
        "Deep Work",
        "Days with 2h+ deep work",
        StreakKind.MINUTES,
        (TimeCategory.DEEP_WORK,),
        threshold_minutes=120,
        grace_days_per_week=1,
    ),
    "learning": StreakConfig(
        "learning",
        "Learning",
        "Days with 30m+ learning",
        StreakKind.MINUTES,
        (TimeCategory.LEARNING,),
        threshold_minutes=30,
        grace_days_per_week=1,
    ),
    "exercise": StreakConfig(
        "exercise",
        "Exercise",
        "Days with any exercise or movement",
        StreakKind.ENTRIES,
        (TimeCategory.EXERCISE, TimeCategory.MOVEMENT),
        grace_days_per_week=2,
    ),
    "relationships": StreakConfig(
        "relationships",
        "Connection",
        "Days with time for people",
        StreakKind.ENTRIES,
        (TimeCategory.SOCIAL, TimeCategory.CALLS),
        grace_days_per_week=2,
    ),
    "self_care": StreakConfig(
        "self_care",
        "Self Care",
        "Days with rest or self care",
        StreakKind.ENTRIES,
        (TimeCategory.SELF_CARE, TimeCategory.REST),
        grace_days_per_week=2,
    ),
    "focus": StreakConfig(
        "focus",
        "Focus",
        "Active days without entertainment",
        StreakKind.ABSENCE,
        (TimeCategory.ENTERTAINMENT,),
        grace_days_per_week=1,
    ),
}

TARGET_TO_STREAK: Dict[TargetType, str] = {
    TargetType.DEEP_WORK: "deep_work",
    TargetType.LEARNING: "learning",
    TargetType.EXERCISE: "exercise",
    TargetType.RELATIONSHIPS: "relationships",
    TargetType.SELF_CARE: "self_care",
    TargetType.LESS_DISTRACTION: "focus",
}

DEFAULT_STREAK_TYPES: Tuple[str, ...] = ("deep_work", "exercise", "focus")


@dataclass
class WeeklyConsistency:
    days_hit: int
    days_elapsed: int

    @property
    def percentage(self) -> int:
        if self.days_elapsed == 0:
            return 0
        return round(self.days_hit / self.days_elapsed * 100)

    @property
    def is_perfect(self) -> bool:
        return self.days_elapsed > 0 and self.days_hit == self.days_elapsed


@dataclass
class StreakResult:
    """Outcome of one streak calculation."""

    streak_type: str
    label: str
    description: str
    current_streak: int
    streak_start_date: Optional[date]
    grace_days_used: int
    grace_days_remaining: int
    personal_best: int
    previous_best: int
    is_new_personal_best: bool
    next_milestone: Optional[int]
    recent_milestone: Optional[int]
    weekly_consistency: WeeklyConsistency
    daily_target_minutes: Optional[int] = None
    grace_dates: List[date] = field(default_factory=list)

    @property
    def should_persist(self) -> bool:
        return self.is_new_personal_best and self.current_streak >= MIN_CELEBRATION_STREAK

    def to_user_streak(self, user_id: str, as_of: date, now: datetime) -> UserStreak:
        """Row to upsert when this result sets a new personal best."""
        return UserStreak(
            user_id=user_id,
            streak_type=self.streak_type,
            current_streak_days=self.current_streak,
            current_streak_start_date=self.streak_start_date,
            personal_best_days=self.personal_best,
            personal_best_achieved_at=as_of,
            last_calculated_at=now,
        )


def next_milestone(streak: int) -> Optional[int]:
    """Smallest milestone strictly above the streak."""
    for milestone in MILESTONES:
        if milestone > streak:
            return milestone
    return None


def recent_milestone(streak: int) -> Optional[int]:
    """Largest milestone already reached."""
    reached = [m for m in MILESTONES if m <= streak]
    return reached[-1] if reached else None


def format_minutes(minutes: int) -> str:
    hours, mins = divmod(minutes, 60)
    if hours and mins:
        return f"{hours}h {mins}m"
    if hours:
        return f"{hours}h"
    return f"{mins}m"


def is_streak_day(
    day: Optional[DayAggregate], config: StreakConfig, daily_target: Optional[int] = None
) -> bool:
    """Whether one day meets the streak's bar."""
    if day is None or day.entry_count == 0:
        return False

    minutes = day.minutes_in(config.categories)
    if config.kind == StreakKind.ABSENCE:
        return minutes == 0
    if daily_target is not None:
        return minutes >= daily_target
    if config.kind == StreakKind.MINUTES:
        return minutes >= config.threshold_minutes
    return minutes > 0


def weekly_consistency(
    days: Mapping[date, DayAggregate],
    config: StreakConfig,
    as_of: date,
    daily_target: Optional[int] = None,
) -> WeeklyConsistency:
    """
    Hits so far this calendar week over days elapsed so far.

    Days after as_of are never counted. as_of itself only joins once it is
    already a hit; absence streaks can still be broken later in the day, so
    their today never joins.
    """
    start = week_start(as_of)
    elapsed = (as_of - start).days
    hit = sum(
        1
        for offset in range(elapsed)
        if is_streak_day(days.get(start + timedelta(days=offset)), config, daily_target)
    )
    if config.kind != StreakKind.ABSENCE and is_streak_day(days.get(as_of), config, daily_target):
        hit += 1
        elapsed += 1
    return WeeklyConsistency(hit, elapsed)


def calculate_streak(
    days: Mapping[date, DayAggregate],
    config: StreakConfig,
    as_of: date,
    existing_best: int = 0,
    daily_target: Optional[int] = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> StreakResult:
    """
    Calculate the current streak for one streak type.

    Args:
        days: Day aggregates keyed by local date
        config: Streak definition
        as_of: The user's today
        existing_best: Personal best already on record
        daily_target: Minutes per day derived from a weekly target, if any
        lookback_days: How far back the walk may go

    Returns:
        StreakResult with personal best and milestone bookkeeping
    """
    grace_by_week: Dict[date, int] = {}
    grace_dates: List[date] = []
    streak = 0
    hits = 0
    start: Optional[date] = None

    day = as_of - timedelta(days=1)
    for _ in range(lookback_days):
        if is_streak_day(days.get(day), config, daily_target):
            hits += 1
        else:
            week = week_start(day)
            if grace_by_week.get(week, 0) >= config.grace_days_per_week:
                break
            grace_by_week[week] = grace_by_week.get(week, 0) + 1
            grace_dates.append(day)
        streak += 1
        start = day
        day -= timedelta(days=1)

    if hits == 0:
        # nothing but forgiven misses is not a streak
        streak, start, grace_dates = 0, None, []
        grace_by_week = {}

    used_this_week = grace_by_week.get(week_start(as_of), 0)
    is_new_best = streak > existing_best

    result = StreakResult(
        streak_type=config.streak_type,
        label=config.label,
        description=(
            f"Days with {format_minutes(daily_target)} {config.label.lower()}"
            if daily_target is not None and config.kind != StreakKind.ABSENCE
            else config.description
        ),
        current_streak=streak,
        streak_start_date=start,
        grace_days_used=len(grace_dates),
        grace_days_remaining=max(0, config.grace_days_per_week - used_this_week),
        personal_best=max(existing_best, streak),
        previous_best=existing_best,
        is_new_personal_best=is_new_best,
        next_milestone=next_milestone(streak),
        recent_milestone=recent_milestone(streak),
        weekly_consistency=weekly_consistency(days, config, as_of, daily_target),
        daily_target_minutes=daily_target,
        grace_dates=grace_dates,
    )

    logger.debug(
        f"[STREAK] {config.streak_type}: {streak} days "
        f"(grace used {result.grace_days_used}, best {result.personal_best})"
    )
    return result


def plan_streaks(targets: Iterable[Target]) -> List[Tuple[str, Optional[int]]]:
    """
    Decide which streaks to evaluate and with which daily target.

    A target that maps to a streak type contributes its weekly minutes / 7
    as the daily threshold. With no mapped targets the default set is used
    with built-in thresholds.
    """
    planned: Dict[str, Optional[int]] = {}
    for target in targets:
        streak_type = TARGET_TO_STREAK.get(target.target_type)
        if streak_type is None:
            continue
        daily = target.daily_minutes if target.weekly_target_minutes else None
        planned[streak_type] = daily

    if not planned:
        planned = {streak_type: None for streak_type in DEFAULT_STREAK_TYPES}

    return list(planned.items())


def calculate_streaks(
    entries: Iterable[TimeEntry],
    targets: Iterable[Target],
    existing: Mapping[str, UserStreak],
    as_of: date,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> List[StreakResult]:
    """Evaluate every planned streak for a user."""
    days = build_day_aggregates(entries)
    results = []
    for streak_type, daily_target in plan_streaks(targets):
        config = STREAK_CONFIGS[streak_type]
        record = existing.get(streak_type)
        existing_best = record.personal_best_days if record else 0
        results.append(
            calculate_streak(days, config, as_of, existing_best, daily_target, lookback_days)
        )

    celebrating = [r.streak_type for r in results if r.should_persist]
    if celebrating:
        logger.info(f"[STREAK] New personal bests: {celebrating}")
    return results

"""
Weekly Scorer.

Builds the weekly review for one Sunday-start week: a composite 0-100
Week Score, per-target progress and day scorecards, a category breakdown,
and a short ordered list of highlights.

Week Score components:
- Active days (35): days with any entry over days eligible for evaluation
- Target progress (45): average per-target progress score
- Consistency (20): "good" day ratings over the most that were possible

For the week containing as_of only the days before as_of are evaluated,
since today is still in progress.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .dates import week_dates
from .daily_metrics import Direction
from .models import DayAggregate, Target, TimeEntry, build_day_aggregates, confirmed
from .taxonomy import (
    CATEGORY_LABELS,
    AggregatedCategory,
    TargetDirection,
    TimeCategory,
    get_aggregated_category,
)

logger = logging.getLogger(__name__)

MIN_ENTRIES_FOR_REVIEW = 7
TREND_DEAD_BAND = 0.1
IMPROVEMENT_SWING_PERCENT = 20
MAX_HIGHLIGHTS = 4
LIMIT_NEUTRAL_MINUTES = 30
FOCUS_HOUR_SHARE = 0.3

ACTIVE_DAYS_WEIGHT = 35
TARGET_PROGRESS_WEIGHT = 45
CONSISTENCY_WEIGHT = 20
# Credit for weeks without targets
NO_TARGET_PROGRESS_WEIGHT = 20
NO_TARGET_CONSISTENCY_WEIGHT = 10

WEEK_SCORE_LABELS: Tuple[Tuple[int, str], ...] = (
    (85, "Exceptional week"),
    (70, "Strong week"),
    (55, "Good progress"),
    (40, "Building momentum"),
    (25, "Getting started"),
    (0, "Room to grow"),
)


class DayRating(str, Enum):
    GOOD = "good"
    NEUTRAL = "neutral"
    ROUGH = "rough"
    NO_DATA = "no_data"


class FeedbackTone(str, Enum):
    SUCCESS = "success"
    NEUTRAL = "neutral"
    WARNING = "warning"
    DANGER = "danger"


class HighlightType(str, Enum):
    CONSISTENCY = "consistency"
    TARGET_HIT = "target_hit"
    IMPROVEMENT = "improvement"
    PERSONAL_BEST = "personal_best"


@dataclass
class TargetProgress:
    target: Target
    label: str
    current_minutes: int
    target_minutes: int
    percentage: int
    score: int
    is_limit: bool
    previous_minutes: Optional[int] = None
    change_minutes: Optional[int] = None
    trend: Optional[Direction] = None
    improvement_percentage: Optional[int] = None
    feedback_message: str = ""
    feedback_tone: FeedbackTone = FeedbackTone.NEUTRAL

    @property
    def target_key(self) -> str:
        return self.target.key

    @property
    def target_type(self) -> str:
        return self.target.target_type.value

    @property
    def is_met(self) -> bool:
        if self.is_limit:
            return self.current_minutes <= self.target_minutes
        return self.percentage >= 100


@dataclass
class DayScore:
    date: date
    day: str
    rating: DayRating
    minutes: int


@dataclass
class Scorecard:
    target_key: str
    label: str
    is_limit: bool
    days: List[DayScore] = field(default_factory=list)

    @property
    def good_days(self) -> int:
        return sum(1 for d in self.days if d.rating == DayRating.GOOD)

    @property
    def rough_days(self) -> int:
        return sum(1 for d in self.days if d.rating == DayRating.ROUGH)


@dataclass
class CategoryShare:
    category: TimeCategory
    label: str
    minutes: int
    percentage: int
    entry_count: int


@dataclass
class Highlight:
    type: HighlightType
    text: str
    subtext: Optional[str] = None


@dataclass
class WeeklyReview:
    """Everything the weekly review screen shows."""

    week_start: date
    week_end: date
    week_score: int
    week_score_label: str
    active_days: int
    evaluated_days: int
    highlights: List[Highlight]
    total_minutes: int
    entry_count: int
    previous_week_minutes: Optional[int]
    previous_week_entry_count: int
    has_enough_data: bool
    has_previous_week_data: bool
    target_progress: List[TargetProgress]
    scorecards: List[Scorecard]
    category_breakdown: List[CategoryShare]
    best_days: List[str]
    best_hours: List[str]
    insights: List[str]
    coach_summary: Optional[str] = None


# ----------------------------------------------------------------------------
# Per-target helpers
# ----------------------------------------------------------------------------


def calculate_target_progress(current: int, target: int, direction: TargetDirection) -> int:
    """
    Display percentage for a target.

    Growth targets fill up to 100. Limit targets sit at 100 while at or
    under the limit and lose a point per percent of overshoot.
    """
    if direction == TargetDirection.AT_MOST:
        if target <= 0:
            return 100 if current <= 0 else 0
        ratio = current / target
        if ratio <= 1:
            return 100
        return max(0, round(100 - (ratio - 1) * 100))

    if target <= 0:
        return 0
    return round(min(current / target, 1) * 100)


def target_score(current: int, target: int, direction: TargetDirection) -> int:
    """Per-target contribution to the progress component, 0-100."""
    if target <= 0:
        if direction == TargetDirection.AT_MOST:
            return 100 if current <= 0 else 0
        return 0
    ratio = current / target
    if direction == TargetDirection.AT_MOST:
        # exactly at the limit is 50, half the limit or less is 100
        return round(max(0.0, min(100.0, (1 - ratio + 0.5) * 100)))
    return round(min(ratio, 1) * 100)


def get_target_feedback(current: int, target: int, direction: TargetDirection) -> Tuple[str, FeedbackTone]:
    if direction == TargetDirection.AT_MOST:
        if current == 0:
            return "Perfect!", FeedbackTone.SUCCESS
        percent = current / target * 100 if target > 0 else float("inf")
        if percent < 50:
            return "Great restraint", FeedbackTone.SUCCESS
        if percent <= 100:
            return "Within limit", FeedbackTone.NEUTRAL
        if percent <= 150:
            return "Slightly over", FeedbackTone.WARNING
        return "Over limit", FeedbackTone.DANGER

    percent = calculate_target_progress(current, target, direction)
    if percent >= 100:
        return "Target reached!", FeedbackTone.SUCCESS
    if percent >= 75:
        return "Almost there", FeedbackTone.NEUTRAL
    if percent >= 50:
        return "Halfway", FeedbackTone.NEUTRAL
    if percent >= 25:
        return "Getting started", FeedbackTone.WARNING
    return "Needs attention", FeedbackTone.DANGER


def rate_day(day: Optional[DayAggregate], target: Target) -> Tuple[DayRating, int]:
    """Rate one day for one target. A day with no entries has no data."""
    if day is None or day.entry_count == 0:
        return DayRating.NO_DATA, 0

    minutes = day.minutes_in(target.related_categories)
    if target.is_limit:
        if minutes == 0:
            return DayRating.GOOD, minutes
        if minutes <= LIMIT_NEUTRAL_MINUTES:
            return DayRating.NEUTRAL, minutes
        return DayRating.ROUGH, minutes

    daily_target = target.weekly_minutes / 7
    if minutes >= daily_target:
        return DayRating.GOOD, minutes
    if minutes > 0:
        return DayRating.NEUTRAL, minutes
    return DayRating.ROUGH, minutes


def week_score_label(score: int) -> str:
    for floor, label in WEEK_SCORE_LABELS:
        if score >= floor:
            return label
    return WEEK_SCORE_LABELS[-1][1]


def count_evaluated_days(week_start: date, as_of: date) -> int:
    """7 for past weeks, 0 for future ones, days before today otherwise."""
    if as_of < week_start:
        return 0
    return min(7, (as_of - week_start).days)


def format_hour(hour: int) -> str:
    if hour == 0:
        return "12 AM"
    if hour == 12:
        return "12 PM"
    if hour < 12:
        return f"{hour} AM"
    return f"{hour - 12} PM"


def _hours(minutes: int) -> float:
    return round(minutes / 60, 1)


def _is_productive(category: TimeCategory) -> bool:
    return get_aggregated_category(category) != AggregatedCategory.ESCAPE


# ----------------------------------------------------------------------------
# Review builder
# ----------------------------------------------------------------------------


class WeeklyScorer:
    """
    Scores one week of entries against a set of targets.

    Usage:
        scorer = WeeklyScorer(week_start, as_of)
        review = scorer.review(current_entries, previous_entries, targets)
    """

    def __init__(self, week_start: date, as_of: date):
        self.week_start = week_start
        self.week_end = week_start + timedelta(days=6)
        self.as_of = as_of
        self.dates = week_dates(week_start)
        self.evaluated_days = count_evaluated_days(week_start, as_of)
        self.evaluated_dates = self.dates[: self.evaluated_days]

    def review(
        self,
        entries: Iterable[TimeEntry],
        previous_entries: Iterable[TimeEntry],
        targets: Sequence[Target],
    ) -> WeeklyReview:
        current = [e for e in confirmed(entries) if self.week_start <= e.date <= self.week_end]
        previous = confirmed(previous_entries)
        days = build_day_aggregates(current)
        previous_days = build_day_aggregates(previous)

        total_minutes = sum(e.duration_minutes for e in current)
        has_enough = len(current) >= MIN_ENTRIES_FOR_REVIEW
        has_previous = len(previous) >= MIN_ENTRIES_FOR_REVIEW
        previous_minutes = sum(e.duration_minutes for e in previous) if has_previous else None

        progress = [self._target_progress(t, days, previous_days, has_previous) for t in targets]
        scorecards = [self._scorecard(t, days) for t in targets]
        breakdown = self._category_breakdown(current, total_minutes)
        productive = self._productive_minutes(days)
        best_days = [d.strftime("%A") for d, _ in productive[:2]]
        best_hours = self._best_hours(current)

        active_days = sum(
            1 for d in self.evaluated_dates if d in days and days[d].entry_count > 0
        )
        score = self._week_score(active_days, progress, scorecards)

        review = WeeklyReview(
            week_start=self.week_start,
            week_end=self.week_end,
            week_score=score,
            week_score_label=week_score_label(score),
            active_days=active_days,
            evaluated_days=self.evaluated_days,
            highlights=self._highlights(active_days, progress, productive),
            total_minutes=total_minutes,
            entry_count=len(current),
            previous_week_minutes=previous_minutes,
            previous_week_entry_count=len(previous),
            has_enough_data=has_enough,
            has_previous_week_data=has_previous,
            target_progress=progress,
            scorecards=scorecards,
            category_breakdown=breakdown,
            best_days=best_days,
            best_hours=best_hours,
            insights=self._insights(best_days, best_hours, breakdown, total_minutes, previous_minutes),
        )

        logger.info(
            f"[WEEKLY] Week of {self.week_start}: score {score} "
            f"({active_days}/{self.evaluated_days} active, {len(targets)} targets)"
        )
        return review

    def _target_progress(
        self,
        target: Target,
        days: Dict[date, DayAggregate],
        previous_days: Dict[date, DayAggregate],
        has_previous: bool,
    ) -> TargetProgress:
        categories = target.related_categories
        direction = target.effective_direction
        weekly = target.weekly_minutes
        current = sum(day.minutes_in(categories) for day in days.values())
        previous = sum(day.minutes_in(categories) for day in previous_days.values())
        message, tone = get_target_feedback(current, weekly, direction)

        progress = TargetProgress(
            target=target,
            label=target.display_label,
            current_minutes=current,
            target_minutes=weekly,
            percentage=calculate_target_progress(current, weekly, direction),
            score=target_score(current, weekly, direction),
            is_limit=target.is_limit,
            feedback_message=message,
            feedback_tone=tone,
        )

        if has_previous:
            progress.previous_minutes = previous
            progress.change_minutes = current - previous
            if previous > 0:
                change = current - previous
                if abs(change) < previous * TREND_DEAD_BAND:
                    progress.trend = Direction.SAME
                elif change > 0:
                    progress.trend = Direction.UP
                else:
                    progress.trend = Direction.DOWN
                if target.is_limit:
                    progress.improvement_percentage = round((previous - current) / previous * 100)

        return progress

    def _scorecard(self, target: Target, days: Dict[date, DayAggregate]) -> Scorecard:
        card = Scorecard(target_key=target.key, label=target.display_label, is_limit=target.is_limit)
        for d in self.evaluated_dates:
            rating, minutes = rate_day(days.get(d), target)
            card.days.append(DayScore(d, d.strftime("%a"), rating, minutes))
        return card

    def _week_score(
        self,
        active_days: int,
        progress: Sequence[TargetProgress],
        scorecards: Sequence[Scorecard],
    ) -> int:
        evaluated = self.evaluated_days
        coverage = active_days / evaluated if evaluated else 0.0

        score = round(coverage * ACTIVE_DAYS_WEIGHT)

        if progress:
            average = sum(p.score for p in progress) / len(progress)
            score += round(min(average, 100) / 100 * TARGET_PROGRESS_WEIGHT)
        else:
            score += round(coverage * NO_TARGET_PROGRESS_WEIGHT)

        if scorecards:
            possible = len(scorecards) * active_days
            if possible > 0:
                good = sum(card.good_days for card in scorecards)
                score += round(good / possible * CONSISTENCY_WEIGHT)
        else:
            score += round(coverage * NO_TARGET_CONSISTENCY_WEIGHT)

        return max(0, min(100, score))

    def _category_breakdown(self, entries: List[TimeEntry], total_minutes: int) -> List[CategoryShare]:
        minutes: Dict[TimeCategory, int] = {}
        counts: Dict[TimeCategory, int] = {}
        for entry in entries:
            minutes[entry.category] = minutes.get(entry.category, 0) + entry.duration_minutes
            counts[entry.category] = counts.get(entry.category, 0) + 1

        shares = [
            CategoryShare(
                category=category,
                label=CATEGORY_LABELS[category],
                minutes=mins,
                percentage=round(mins / total_minutes * 100) if total_minutes else 0,
                entry_count=counts[category],
            )
            for category, mins in minutes.items()
        ]
        return sorted(shares, key=lambda s: s.minutes, reverse=True)

    def _productive_minutes(self, days: Dict[date, DayAggregate]) -> List[Tuple[date, int]]:
        """Days with productive time, most first. Ties keep calendar order."""
        totals = []
        for d in self.dates:
            day = days.get(d)
            if day is None:
                continue
            mins = sum(m for c, m in day.minutes_by_category.items() if _is_productive(c))
            if mins > 0:
                totals.append((d, mins))
        return sorted(totals, key=lambda item: item[1], reverse=True)

    def _best_hours(self, entries: List[TimeEntry]) -> List[str]:
        hour_minutes: Dict[int, int] = {}
        hour_focus: Dict[int, int] = {}
        for entry in entries:
            if entry.start_time is None:
                continue
            hour = entry.start_time.hour
            hour_minutes[hour] = hour_minutes.get(hour, 0) + entry.duration_minutes
            if entry.category in (TimeCategory.DEEP_WORK, TimeCategory.LEARNING):
                hour_focus[hour] = hour_focus.get(hour, 0) + entry.duration_minutes

        focused = [
            (hour, mins)
            for hour, mins in sorted(hour_minutes.items())
            if hour_focus.get(hour, 0) > mins * FOCUS_HOUR_SHARE
        ]
        focused.sort(key=lambda item: item[1], reverse=True)
        return [format_hour(hour) for hour, _ in focused[:2]]

    def _insights(
        self,
        best_days: List[str],
        best_hours: List[str],
        breakdown: List[CategoryShare],
        total_minutes: int,
        previous_minutes: Optional[int],
    ) -> List[str]:
        insights = []
        if best_days and best_hours:
            insights.append(f"Best focus: {' & '.join(best_days)}, {'-'.join(best_hours)}")

        if breakdown:
            top = breakdown[0]
            insights.append(f"Most time: {top.label} ({_hours(top.minutes)}h, {top.percentage}%)")

        if previous_minutes:
            change = round((total_minutes - previous_minutes) / previous_minutes * 100)
            if change > 10:
                insights.append(f"Logged {change}% more time than last week")
            elif change < -10:
                insights.append(f"Logged {abs(change)}% less time than last week")

        return insights

    def _highlights(
        self,
        active_days: int,
        progress: Sequence[TargetProgress],
        productive: List[Tuple[date, int]],
    ) -> List[Highlight]:
        highlights = []

        if active_days >= 6:
            highlights.append(
                Highlight(
                    HighlightType.CONSISTENCY,
                    f"{active_days}/{self.evaluated_days} days active",
                    "Perfect week!" if active_days == self.evaluated_days else "Nearly perfect",
                )
            )

        met = [p for p in progress if p.is_met]
        if met:
            highlights.append(
                Highlight(
                    HighlightType.TARGET_HIT,
                    f"Hit {len(met)} of {len(progress)} targets",
                    ", ".join(p.label for p in met),
                )
            )

        for p in progress:
            if p.change_minutes is None or not p.previous_minutes:
                continue
            change_percent = round(p.change_minutes / p.previous_minutes * 100)
            if p.is_limit and change_percent <= -IMPROVEMENT_SWING_PERCENT:
                highlights.append(
                    Highlight(
                        HighlightType.IMPROVEMENT,
                        f"{abs(change_percent)}% less {p.label.lower()}",
                        "vs last week",
                    )
                )
            elif not p.is_limit and change_percent >= IMPROVEMENT_SWING_PERCENT:
                highlights.append(
                    Highlight(
                        HighlightType.IMPROVEMENT,
                        f"{change_percent}% more {p.label.lower()}",
                        "vs last week",
                    )
                )

        if productive:
            best_date, minutes = productive[0]
            highlights.append(
                Highlight(
                    HighlightType.PERSONAL_BEST,
                    f"Best day: {best_date.strftime('%A')}",
                    f"{_hours(minutes)}h of focused time",
                )
            )

        return highlights[:MAX_HIGHLIGHTS]


def build_weekly_review(
    week_start: date,
    as_of: date,
    entries: Iterable[TimeEntry],
    previous_entries: Iterable[TimeEntry],
    targets: Sequence[Target],
) -> WeeklyReview:
    """Convenience wrapper around WeeklyScorer."""
    return WeeklyScorer(week_start, as_of).review(entries, previous_entries, targets)


def commentary_context(review: WeeklyReview) -> dict:
    """Structured numbers handed to the text-generation collaborator."""
    return {
        "week_start": review.week_start.isoformat(),
        "week_score": review.week_score,
        "week_score_label": review.week_score_label,
        "active_days": review.active_days,
        "evaluated_days": review.evaluated_days,
        "total_hours": _hours(review.total_minutes),
        "entry_count": review.entry_count,
        "previous_week_hours": (
            _hours(review.previous_week_minutes) if review.previous_week_minutes is not None else None
        ),
        "best_days": review.best_days,
        "best_hours": review.best_hours,
        "categories": [
            {"label": c.label, "hours": _hours(c.minutes), "percentage": c.percentage}
            for c in review.category_breakdown
        ],
        "targets": [
            {
                "label": p.label,
                "hours": _hours(p.current_minutes),
                "target_hours": _hours(p.target_minutes),
                "percentage": p.percentage,
                "trend": p.trend.value if p.trend else None,
                "change_hours": _hours(p.change_minutes) if p.change_minutes is not None else None,
                "want_less": p.is_limit,
            }
            for p in review.target_progress
        ],
        "scorecards": [
            {"label": s.label, "good_days": s.good_days, "rough_days": s.rough_days}
            for s in review.scorecards
        ],
        "highlights": [h.text for h in review.highlights],
    }

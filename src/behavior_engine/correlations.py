"""
Correlation Engine.

Looks for descriptive associations between what a user logged on a day and
how they felt that day. Only days with at least one mood check-in take
part. Effect sizes are Cohen's d on the 0-2 mood scale; nothing here claims
causation or runs significance tests.

Three insight families:
- category presence: days with any minutes of a raw category vs days without
- category duration: days with >= 60 / 120 minutes of an energy group vs fewer
- session patterns: how one part of the day's mood carries into a later one
"""

import logging
import math
import statistics
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import (
    MOOD_NUMERIC,
    DayAggregate,
    MoodCheckin,
    MoodLevel,
    TimeEntry,
    TimePeriod,
    build_day_aggregates,
)
from .taxonomy import (
    CATEGORY_LABELS,
    ENERGY_VIEW,
    AggregatedCategory,
    TimeCategory,
    get_aggregated_category,
)

logger = logging.getLogger(__name__)

MIN_DAYS_FOR_INSIGHTS = 7
MIN_SAMPLE_SIZE = 3
MIN_EFFECT_SIZE = 0.2
# Reported when the two groups do not overlap at all and d is undefined.
MAX_EFFECT_SIZE = 2.0
DURATION_THRESHOLDS: Tuple[int, ...] = (60, 120)
DURATION_MARGIN = 1.2

SESSION_PAIRS: Tuple[Tuple[TimePeriod, TimePeriod], ...] = (
    (TimePeriod.MORNING, TimePeriod.AFTERNOON),
    (TimePeriod.AFTERNOON, TimePeriod.EVENING),
    (TimePeriod.MORNING, TimePeriod.EVENING),
)

FROM_MOOD_LABELS: Dict[MoodLevel, str] = {
    MoodLevel.GREAT: "energized",
    MoodLevel.LOW: "low energy",
    MoodLevel.OKAY: "steady",
}


class InsightType(str, Enum):
    CATEGORY_PRESENCE = "category_presence"
    CATEGORY_DURATION = "category_duration"


class CorrelationDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass
class CorrelationInsight:
    id: str
    type: InsightType
    category: str
    direction: CorrelationDirection
    effect_size: float
    strength_percent: int
    sample_size_with: int
    sample_size_without: int
    description: str
    avg_mood_with: float
    avg_mood_without: float
    duration_threshold: Optional[int] = None


@dataclass
class SessionPattern:
    id: str
    from_period: TimePeriod
    to_period: TimePeriod
    from_mood: MoodLevel
    to_mood_avg: float
    sample_size: int
    description: str


@dataclass
class CorrelationResult:
    insights: List[CorrelationInsight]
    session_patterns: List[SessionPattern]
    total_days_tracked: int
    days_needed: int
    has_enough_data: bool


# ----------------------------------------------------------------------------
# Statistics
# ----------------------------------------------------------------------------


def _mean(values: Sequence[float]) -> float:
    return statistics.mean(values) if values else 0.0


def pooled_std(group1: Sequence[float], group2: Sequence[float]) -> float:
    """(n-1)-weighted pooled standard deviation; 0 when either group has < 2 values."""
    n1, n2 = len(group1), len(group2)
    if n1 < 2 or n2 < 2:
        return 0.0
    sd1 = statistics.stdev(group1)
    sd2 = statistics.stdev(group2)
    return math.sqrt(((n1 - 1) * sd1 ** 2 + (n2 - 1) * sd2 ** 2) / (n1 + n2 - 2))


def cohens_d(group1: Sequence[float], group2: Sequence[float]) -> float:
    """
    Difference of means over pooled standard deviation.

    Returns 0 for groups smaller than 2 or a pooled SD of 0, so the result
    is always finite. Swapping the groups flips the sign.
    """
    pooled = pooled_std(group1, group2)
    if pooled == 0:
        return 0.0
    return (_mean(group1) - _mean(group2)) / pooled


def _effect_size(with_moods: Sequence[float], without_moods: Sequence[float]) -> float:
    d = cohens_d(with_moods, without_moods)
    if d == 0 and pooled_std(with_moods, without_moods) == 0:
        diff = _mean(with_moods) - _mean(without_moods)
        if diff != 0:
            # zero spread in both groups and different means: fully separated
            return math.copysign(MAX_EFFECT_SIZE, diff)
    return d


def _percent_diff(avg_with: float, avg_without: float) -> int:
    if avg_without > 0:
        return round((avg_with - avg_without) / avg_without * 100)
    return 100 if avg_with > avg_without else -100


# ----------------------------------------------------------------------------
# Insight generators
# ----------------------------------------------------------------------------


def _split_insight(
    days: Sequence[DayAggregate],
    has_condition,
) -> Optional[Tuple[List[float], List[float], float]]:
    with_moods = [d.average_mood for d in days if has_condition(d)]
    without_moods = [d.average_mood for d in days if not has_condition(d)]
    if len(with_moods) < MIN_SAMPLE_SIZE or len(without_moods) < MIN_SAMPLE_SIZE:
        return None
    effect = _effect_size(with_moods, without_moods)
    if abs(effect) < MIN_EFFECT_SIZE:
        return None
    return with_moods, without_moods, effect


def presence_insights(days: Sequence[DayAggregate]) -> List[CorrelationInsight]:
    insights = []
    for category in TimeCategory:
        split = _split_insight(days, lambda d, c=category: d.minutes_by_category.get(c, 0) > 0)
        if split is None:
            continue
        with_moods, without_moods, effect = split
        avg_with, avg_without = _mean(with_moods), _mean(without_moods)
        percent = abs(_percent_diff(avg_with, avg_without))
        label = CATEGORY_LABELS[category].lower()
        positive = effect > 0

        insights.append(
            CorrelationInsight(
                id=f"presence:{category.value}",
                type=InsightType.CATEGORY_PRESENCE,
                category=category.value,
                direction=CorrelationDirection.POSITIVE if positive else CorrelationDirection.NEGATIVE,
                effect_size=abs(effect),
                strength_percent=percent,
                sample_size_with=len(with_moods),
                sample_size_without=len(without_moods),
                description=(
                    f"Your mood is {percent}% higher on days when you do {label}"
                    if positive
                    else f"Your mood tends to be {percent}% lower on days with {label}"
                ),
                avg_mood_with=avg_with,
                avg_mood_without=avg_without,
            )
        )
    return insights


def duration_insights(days: Sequence[DayAggregate]) -> List[CorrelationInsight]:
    insights = []
    for group in ENERGY_VIEW:
        for threshold in DURATION_THRESHOLDS:
            split = _split_insight(
                days,
                lambda d, g=group.key, t=threshold: d.minutes_by_group.get(g, 0) >= t,
            )
            if split is None:
                continue
            with_moods, without_moods, effect = split
            avg_with, avg_without = _mean(with_moods), _mean(without_moods)
            percent = abs(_percent_diff(avg_with, avg_without))
            label = group.label.lower()
            hours = threshold // 60
            positive = effect > 0

            insights.append(
                CorrelationInsight(
                    id=f"duration:{group.key.value}:{threshold}",
                    type=InsightType.CATEGORY_DURATION,
                    category=group.key.value,
                    direction=CorrelationDirection.POSITIVE if positive else CorrelationDirection.NEGATIVE,
                    effect_size=abs(effect),
                    strength_percent=percent,
                    sample_size_with=len(with_moods),
                    sample_size_without=len(without_moods),
                    description=(
                        f"Your mood is {percent}% higher on days with {hours}+ hours of {label}"
                        if positive
                        else f"Your mood tends to be {percent}% lower on days with {hours}+ hours of {label}"
                    ),
                    avg_mood_with=avg_with,
                    avg_mood_without=avg_without,
                    duration_threshold=threshold,
                )
            )
    return insights


def _to_mood_label(average: float) -> str:
    if average >= 1.5:
        return "great"
    if average >= 0.5:
        return "okay"
    return "low"


def session_patterns(days: Sequence[DayAggregate]) -> List[SessionPattern]:
    """Mood carry-over between parts of the day, most observed first."""
    patterns = []
    for from_period, to_period in SESSION_PAIRS:
        for from_mood in MoodLevel:
            wanted = MOOD_NUMERIC[from_mood]
            to_scores = [
                d.mood_scores[to_period]
                for d in days
                if d.mood_scores.get(from_period) == wanted and to_period in d.mood_scores
            ]
            if len(to_scores) < MIN_SAMPLE_SIZE:
                continue

            average = _mean(to_scores)
            patterns.append(
                SessionPattern(
                    id=f"session:{from_period.value}:{to_period.value}:{from_mood.value}",
                    from_period=from_period,
                    to_period=to_period,
                    from_mood=from_mood,
                    to_mood_avg=average,
                    sample_size=len(to_scores),
                    description=(
                        f"When your {from_period.value} starts {FROM_MOOD_LABELS[from_mood]}, "
                        f"your {to_period.value} mood tends to be {_to_mood_label(average)}"
                    ),
                )
            )
    return sorted(patterns, key=lambda p: p.sample_size, reverse=True)


def deduplicate(
    presence: Sequence[CorrelationInsight], duration: Sequence[CorrelationInsight]
) -> List[CorrelationInsight]:
    """
    Keep every presence insight (one per raw category) and at most one
    duration insight per energy group.

    A group's strongest duration insight survives only if no raw category
    in that group produced a presence insight, or if it beats the
    strongest such presence insight by DURATION_MARGIN.
    """
    best_presence: Dict[AggregatedCategory, float] = {}
    for insight in presence:
        group = get_aggregated_category(TimeCategory(insight.category))
        best_presence[group] = max(best_presence.get(group, 0.0), insight.effect_size)

    best_duration: Dict[str, CorrelationInsight] = {}
    for insight in duration:
        current = best_duration.get(insight.category)
        if current is None or insight.effect_size > current.effect_size:
            best_duration[insight.category] = insight

    kept = list(presence)
    for group_key, insight in best_duration.items():
        rival = best_presence.get(AggregatedCategory(group_key))
        if rival is None or insight.effect_size > rival * DURATION_MARGIN:
            kept.append(insight)

    return sorted(kept, key=lambda i: i.effect_size, reverse=True)


def qualifying_days(entries: Iterable[TimeEntry], moods: Iterable[MoodCheckin]) -> List[DayAggregate]:
    """Day aggregates for dates with at least one mood check-in, oldest first."""
    days = build_day_aggregates(entries, moods)
    return [days[d] for d in sorted(days) if days[d].mood_scores]


def analyze_correlations(
    entries: Iterable[TimeEntry], moods: Iterable[MoodCheckin]
) -> CorrelationResult:
    """
    Run every insight generator over the joined entry and mood history.

    Below MIN_DAYS_FOR_INSIGHTS mood days the result is empty and
    days_needed says how many more are required.
    """
    days = qualifying_days(entries, moods)
    tracked = len(days)

    if tracked < MIN_DAYS_FOR_INSIGHTS:
        logger.info(f"[CORRELATION] {tracked} mood days, need {MIN_DAYS_FOR_INSIGHTS}")
        return CorrelationResult(
            insights=[],
            session_patterns=[],
            total_days_tracked=tracked,
            days_needed=MIN_DAYS_FOR_INSIGHTS - tracked,
            has_enough_data=False,
        )

    insights = deduplicate(presence_insights(days), duration_insights(days))
    patterns = session_patterns(days)
    logger.info(
        f"[CORRELATION] {tracked} mood days: {len(insights)} insights, "
        f"{len(patterns)} session patterns"
    )
    return CorrelationResult(
        insights=insights,
        session_patterns=patterns,
        total_days_tracked=tracked,
        days_needed=0,
        has_enough_data=True,
    )

"""
Daily Metric Calculator.

Turns one day's confirmed entries into three 0-100 scores:

- Focus: weighted productive minutes against a fixed daily target
- Balance: body, mind and connection minutes against per-factor targets
- Rhythm: how many essential routines met their weekly threshold over the
  trailing 7-day window

Each score maps to a color band and a short label. The trend builder
replays the same calculation over a 7 or 30 day range.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .dates import date_window
from .models import DayAggregate, TimeEntry, build_day_aggregates
from .taxonomy import TimeCategory

logger = logging.getLogger(__name__)


class Metric(str, Enum):
    FOCUS = "focus"
    BALANCE = "balance"
    RHYTHM = "rhythm"


class ColorBand(str, Enum):
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"
    SAME = "same"


@dataclass(frozen=True)
class BandTable:
    """Score cut-offs for one metric. Green wins over yellow wins over red."""

    green: int
    yellow: int
    green_label: str
    yellow_label: str
    red_label: str

    def band(self, score: int) -> ColorBand:
        if score >= self.green:
            return ColorBand.GREEN
        if score >= self.yellow:
            return ColorBand.YELLOW
        return ColorBand.RED

    def label(self, score: int) -> str:
        return {
            ColorBand.GREEN: self.green_label,
            ColorBand.YELLOW: self.yellow_label,
            ColorBand.RED: self.red_label,
        }[self.band(score)]


BAND_TABLES: Dict[Metric, BandTable] = {
    Metric.FOCUS: BandTable(80, 50, "Locked in", "Building", "Scattered"),
    Metric.BALANCE: BandTable(70, 40, "Recharged", "Running low", "Running on fumes"),
    Metric.RHYTHM: BandTable(75, 45, "Dialed in", "Getting there", "Off track"),
}

FOCUS_WEIGHTS: Dict[TimeCategory, float] = {
    TimeCategory.DEEP_WORK: 1.0,
    TimeCategory.LEARNING: 0.9,
    TimeCategory.CREATING: 0.8,
    TimeCategory.SHALLOW_WORK: 0.3,
}
FOCUS_DAILY_TARGET = 240

# name -> (categories, daily target minutes)
BALANCE_FACTORS: Dict[str, Tuple[Tuple[TimeCategory, ...], int]] = {
    "body": ((TimeCategory.EXERCISE, TimeCategory.MOVEMENT, TimeCategory.MEALS), 90),
    "mind": ((TimeCategory.REST, TimeCategory.SELF_CARE), 30),
    "connection": ((TimeCategory.SOCIAL, TimeCategory.CALLS), 30),
}


@dataclass(frozen=True)
class Essential:
    name: str
    categories: Tuple[TimeCategory, ...]
    weekly_threshold: int


RHYTHM_WINDOW_DAYS = 7
RHYTHM_ESSENTIALS: Tuple[Essential, ...] = (
    Essential("Deep Work", (TimeCategory.DEEP_WORK, TimeCategory.LEARNING, TimeCategory.CREATING), 420),
    Essential("Movement", (TimeCategory.EXERCISE, TimeCategory.MOVEMENT), 210),
    Essential("Recharge", (TimeCategory.REST, TimeCategory.SELF_CARE, TimeCategory.MEALS), 140),
    Essential("Connect", (TimeCategory.SOCIAL, TimeCategory.CALLS), 105),
)

NUDGES: Dict[Tuple[Metric, ColorBand], str] = {
    (Metric.FOCUS, ColorBand.RED): "Start a deep work block to get Focus moving.",
    (Metric.BALANCE, ColorBand.RED): "Take a break. Your body and mind need it.",
    (Metric.RHYTHM, ColorBand.RED): "Log your essentials to build Rhythm back up.",
    (Metric.FOCUS, ColorBand.YELLOW): "One more focus session pushes you to green.",
    (Metric.BALANCE, ColorBand.YELLOW): "A quick walk or call would boost Balance.",
    (Metric.RHYTHM, ColorBand.YELLOW): "Keep showing up. Rhythm builds day by day.",
}
ALL_GREEN_NUDGE = "All metrics looking strong. Keep it up!"


def ratio_score(minutes: float, target: float) -> int:
    """minutes/target as a 0-100 integer; a zero target scores 0."""
    if target <= 0:
        return 0
    return round(max(0.0, min(100.0, minutes / target * 100)))


def color_band(metric: Metric, score: int) -> ColorBand:
    return BAND_TABLES[metric].band(score)


def metric_label(metric: Metric, score: int) -> str:
    return BAND_TABLES[metric].label(score)


# ----------------------------------------------------------------------------
# Results
# ----------------------------------------------------------------------------


@dataclass
class MetricScore:
    """A scored metric with its band, label and metric-specific details."""

    metric: Metric
    score: int
    details: dict = field(default_factory=dict)

    @property
    def color_band(self) -> ColorBand:
        return color_band(self.metric, self.score)

    @property
    def label(self) -> str:
        return metric_label(self.metric, self.score)


@dataclass
class DailyMetrics:
    date: date
    focus: MetricScore
    balance: MetricScore
    rhythm: MetricScore

    @property
    def scores(self) -> List[MetricScore]:
        return [self.focus, self.balance, self.rhythm]

    @property
    def nudge(self) -> str:
        return pick_nudge(self.scores)


@dataclass
class TrendPoint:
    date: date
    label: str
    value: int
    color_band: ColorBand


@dataclass
class PersonalBestPoint:
    value: int
    date: date


@dataclass
class WeekDelta:
    change: int
    direction: Direction


@dataclass
class TrendResult:
    """Trend of one metric over a 7 or 30 day range ending at as_of."""

    metric: Metric
    current: int
    average: int
    trend: List[TrendPoint]
    personal_best: Optional[PersonalBestPoint]
    vs_last_week: Optional[WeekDelta]
    details: dict

    @property
    def color_band(self) -> ColorBand:
        return color_band(self.metric, self.current)

    @property
    def label(self) -> str:
        return metric_label(self.metric, self.current)


# ----------------------------------------------------------------------------
# Calculators
# ----------------------------------------------------------------------------


def calculate_focus(minutes_by_category: Mapping[TimeCategory, int]) -> MetricScore:
    weighted = 0.0
    breakdown: Dict[str, int] = {}
    for category, weight in FOCUS_WEIGHTS.items():
        minutes = minutes_by_category.get(category, 0)
        if minutes:
            weighted += minutes * weight
            breakdown[category.value] = minutes

    return MetricScore(
        Metric.FOCUS,
        ratio_score(weighted, FOCUS_DAILY_TARGET),
        {
            "weighted_minutes": round(weighted),
            "target": FOCUS_DAILY_TARGET,
            "breakdown": breakdown,
        },
    )


def calculate_balance(minutes_by_category: Mapping[TimeCategory, int]) -> MetricScore:
    """
    Average of the three clamped factor scores.

    Adding minutes to any factor can only raise its sub-score, so the
    average never goes down.
    """
    details: Dict[str, int] = {}
    sub_scores = []
    for name, (categories, target) in BALANCE_FACTORS.items():
        minutes = sum(minutes_by_category.get(c, 0) for c in categories)
        sub_score = ratio_score(minutes, target)
        sub_scores.append(sub_score)
        details[name] = sub_score
        details[f"{name}_minutes"] = minutes

    score = round(sum(sub_scores) / len(sub_scores)) if sub_scores else 0
    return MetricScore(Metric.BALANCE, score, details)


def calculate_rhythm(days: Mapping[date, DayAggregate], as_of: date) -> MetricScore:
    """Score essentials against their weekly thresholds over the 7 days ending at as_of."""
    window = date_window(as_of, RHYTHM_WINDOW_DAYS)
    essentials = []
    hits = 0
    for essential in RHYTHM_ESSENTIALS:
        minutes = sum(days[d].minutes_in(essential.categories) for d in window if d in days)
        hit = minutes >= essential.weekly_threshold
        hits += hit
        essentials.append(
            {
                "name": essential.name,
                "minutes": minutes,
                "threshold": essential.weekly_threshold,
                "hit": hit,
            }
        )

    score = round(hits / len(RHYTHM_ESSENTIALS) * 100) if RHYTHM_ESSENTIALS else 0
    return MetricScore(
        Metric.RHYTHM,
        score,
        {
            "essentials": essentials,
            "essentials_hit": hits,
            "window_start": window[0].isoformat(),
            "window_end": window[-1].isoformat(),
        },
    )


def calculate_daily_metrics(entries: Iterable[TimeEntry], as_of: date) -> DailyMetrics:
    """
    Compute Focus, Balance and Rhythm for `as_of`.

    Focus and Balance only look at as_of itself; Rhythm also needs the six
    days before it, so pass at least that much history.
    """
    days = build_day_aggregates(entries)
    today = days.get(as_of)
    minutes = dict(today.minutes_by_category) if today else {}

    metrics = DailyMetrics(
        date=as_of,
        focus=calculate_focus(minutes),
        balance=calculate_balance(minutes),
        rhythm=calculate_rhythm(days, as_of),
    )
    logger.debug(
        f"[METRICS] {as_of}: focus={metrics.focus.score} "
        f"balance={metrics.balance.score} rhythm={metrics.rhythm.score}"
    )
    return metrics


def pick_nudge(scores: Sequence[MetricScore]) -> str:
    """One actionable sentence aimed at the weakest metric."""
    if not scores:
        return ALL_GREEN_NUDGE
    lowest = scores[0]
    for score in scores[1:]:
        # ties go to the later metric
        if score.score <= lowest.score:
            lowest = score
    return NUDGES.get((lowest.metric, lowest.color_band), ALL_GREEN_NUDGE)


# ----------------------------------------------------------------------------
# Trends
# ----------------------------------------------------------------------------


def _trend_label(day: date, period_days: int) -> str:
    if period_days <= 7:
        return day.strftime("%a")
    return day.strftime("%d")


def _mean(values: Sequence[int]) -> int:
    if not values:
        return 0
    return round(sum(values) / len(values))


def _personal_best(points: Sequence[TrendPoint]) -> Optional[PersonalBestPoint]:
    best: Optional[PersonalBestPoint] = None
    for point in points:
        if point.value > (best.value if best else 0):
            best = PersonalBestPoint(point.value, point.date)
    return best


def build_trends(
    entries: Iterable[TimeEntry], as_of: date, period_days: int
) -> Dict[Metric, TrendResult]:
    """
    Per-day Focus/Balance/Rhythm over `period_days` ending at as_of.

    vs_last_week compares the mean of the last 7 days with the mean of the
    7 days before them, so entries should reach back at least
    max(period_days, 14) + 6 days.
    """
    days = build_day_aggregates(entries)
    span = date_window(as_of, max(period_days, 14))

    values: Dict[Metric, Dict[date, int]] = {m: {} for m in Metric}
    for day in span:
        minutes = dict(days[day].minutes_by_category) if day in days else {}
        values[Metric.FOCUS][day] = calculate_focus(minutes).score
        values[Metric.BALANCE][day] = calculate_balance(minutes).score
        values[Metric.RHYTHM][day] = calculate_rhythm(days, day).score

    today = days.get(as_of)
    today_minutes = dict(today.minutes_by_category) if today else {}
    current_details = {
        Metric.FOCUS: calculate_focus(today_minutes).details,
        Metric.BALANCE: calculate_balance(today_minutes).details,
        Metric.RHYTHM: calculate_rhythm(days, as_of).details,
    }

    period = span[-period_days:]
    results: Dict[Metric, TrendResult] = {}
    for metric in Metric:
        series = values[metric]
        points = [
            TrendPoint(d, _trend_label(d, period_days), series[d], color_band(metric, series[d]))
            for d in period
        ]
        last_week = [series[d] for d in span[-7:]]
        prior_week = [series[d] for d in span[-14:-7]]
        change = _mean(last_week) - _mean(prior_week)
        direction = Direction.UP if change > 0 else Direction.DOWN if change < 0 else Direction.SAME

        results[metric] = TrendResult(
            metric=metric,
            current=series[as_of],
            average=_mean([p.value for p in points]),
            trend=points,
            personal_best=_personal_best(points),
            vs_last_week=WeekDelta(change, direction),
            details=current_details[metric],
        )

    return results

"""
Category Taxonomy.

Static mapping of the raw activity categories a user can log into the six
aggregated "energy view" groups, plus the target/intention catalogue that
ties goals back to raw categories.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


class TimeCategory(str, Enum):
    """Raw category of a logged time entry."""

    DEEP_WORK = "deep_work"
    SHALLOW_WORK = "shallow_work"
    MEETINGS = "meetings"
    LEARNING = "learning"
    CREATING = "creating"
    ADMIN = "admin"
    ERRANDS = "errands"
    CHORES = "chores"
    COMMUTE = "commute"
    EXERCISE = "exercise"
    MOVEMENT = "movement"
    MEALS = "meals"
    SLEEP = "sleep"
    REST = "rest"
    SELF_CARE = "self_care"
    SOCIAL = "social"
    CALLS = "calls"
    ENTERTAINMENT = "entertainment"
    OTHER = "other"


class AggregatedCategory(str, Enum):
    """Coarse energy-view group."""

    FOCUS = "focus"
    OPS = "ops"
    BODY = "body"
    RECOVERY = "recovery"
    CONNECTION = "connection"
    ESCAPE = "escape"


CATEGORY_LABELS: Dict[TimeCategory, str] = {
    TimeCategory.DEEP_WORK: "Deep Work",
    TimeCategory.SHALLOW_WORK: "Shallow Work",
    TimeCategory.MEETINGS: "Meetings",
    TimeCategory.LEARNING: "Learning",
    TimeCategory.CREATING: "Creating",
    TimeCategory.ADMIN: "Admin",
    TimeCategory.ERRANDS: "Errands",
    TimeCategory.CHORES: "Chores",
    TimeCategory.COMMUTE: "Commute",
    TimeCategory.EXERCISE: "Exercise",
    TimeCategory.MOVEMENT: "Movement",
    TimeCategory.MEALS: "Meals",
    TimeCategory.SLEEP: "Sleep",
    TimeCategory.REST: "Rest",
    TimeCategory.SELF_CARE: "Self Care",
    TimeCategory.SOCIAL: "Social",
    TimeCategory.CALLS: "Calls",
    TimeCategory.ENTERTAINMENT: "Entertainment",
    TimeCategory.OTHER: "Other",
}


@dataclass(frozen=True)
class CategoryGroup:
    """One energy-view group and the raw categories it owns."""

    key: AggregatedCategory
    label: str
    categories: Tuple[TimeCategory, ...]


ENERGY_VIEW: Tuple[CategoryGroup, ...] = (
    CategoryGroup(
        AggregatedCategory.FOCUS,
        "Focus",
        (TimeCategory.DEEP_WORK, TimeCategory.LEARNING, TimeCategory.CREATING),
    ),
    CategoryGroup(
        AggregatedCategory.OPS,
        "Ops",
        (
            TimeCategory.SHALLOW_WORK,
            TimeCategory.MEETINGS,
            TimeCategory.ADMIN,
            TimeCategory.ERRANDS,
            TimeCategory.CHORES,
            TimeCategory.COMMUTE,
        ),
    ),
    CategoryGroup(
        AggregatedCategory.BODY,
        "Body",
        (TimeCategory.EXERCISE, TimeCategory.MOVEMENT, TimeCategory.MEALS, TimeCategory.SLEEP),
    ),
    CategoryGroup(
        AggregatedCategory.RECOVERY,
        "Recovery",
        (TimeCategory.REST, TimeCategory.SELF_CARE),
    ),
    CategoryGroup(
        AggregatedCategory.CONNECTION,
        "Connection",
        (TimeCategory.SOCIAL, TimeCategory.CALLS),
    ),
    CategoryGroup(
        AggregatedCategory.ESCAPE,
        "Escape",
        (TimeCategory.ENTERTAINMENT, TimeCategory.OTHER),
    ),
)


def _build_category_index() -> Dict[TimeCategory, AggregatedCategory]:
    """Invert ENERGY_VIEW, refusing any gap or overlap in the partition."""
    index: Dict[TimeCategory, AggregatedCategory] = {}
    for group in ENERGY_VIEW:
        for category in group.categories:
            if category in index:
                raise RuntimeError(
                    f"Category {category.value} is in both {index[category].value} "
                    f"and {group.key.value}"
                )
            index[category] = group.key

    missing = [c.value for c in TimeCategory if c not in index]
    if missing:
        raise RuntimeError(f"Categories without an energy group: {missing}")

    grouped = {g.key for g in ENERGY_VIEW}
    if grouped != set(AggregatedCategory):
        raise RuntimeError("Every aggregated category needs exactly one group")

    return index


_CATEGORY_TO_GROUP = _build_category_index()


def get_aggregated_category(category: TimeCategory) -> AggregatedCategory:
    """Return the energy group a raw category belongs to."""
    return _CATEGORY_TO_GROUP[TimeCategory(category)]


def categories_in(group: AggregatedCategory) -> Tuple[TimeCategory, ...]:
    for g in ENERGY_VIEW:
        if g.key == group:
            return g.categories
    raise KeyError(group)


def aggregate_by_view(minutes_by_category: Mapping[TimeCategory, int]) -> Dict[AggregatedCategory, int]:
    """
    Sum per-category minutes into energy groups.

    Groups that end up with zero minutes are left out of the result.
    """
    totals: Dict[AggregatedCategory, int] = {}
    for category, minutes in minutes_by_category.items():
        if not minutes:
            continue
        group = get_aggregated_category(category)
        totals[group] = totals.get(group, 0) + minutes
    return {group: total for group, total in totals.items() if total > 0}


# ----------------------------------------------------------------------------
# Targets / intentions
# ----------------------------------------------------------------------------


class TargetType(str, Enum):
    """User intention a weekly target is set for."""

    DEEP_WORK = "deep_work"
    LESS_DISTRACTION = "less_distraction"
    WORK_LIFE_BALANCE = "work_life_balance"
    EXERCISE = "exercise"
    SELF_CARE = "self_care"
    RELATIONSHIPS = "relationships"
    LEARNING = "learning"
    CUSTOM = "custom"


class TargetDirection(str, Enum):
    AT_LEAST = "at_least"
    AT_MOST = "at_most"


@dataclass(frozen=True)
class TargetConfig:
    """Catalogue entry for a target type."""

    label: str
    direction: TargetDirection
    default_weekly_minutes: int
    categories: Tuple[TimeCategory, ...]


TARGET_CONFIGS: Dict[TargetType, TargetConfig] = {
    TargetType.DEEP_WORK: TargetConfig(
        "Deep Work", TargetDirection.AT_LEAST, 900, (TimeCategory.DEEP_WORK,)
    ),
    TargetType.LESS_DISTRACTION: TargetConfig(
        "Less Distraction", TargetDirection.AT_MOST, 420, (TimeCategory.ENTERTAINMENT,)
    ),
    TargetType.WORK_LIFE_BALANCE: TargetConfig(
        "Work-Life Balance",
        TargetDirection.AT_LEAST,
        600,
        (TimeCategory.REST, TimeCategory.SELF_CARE, TimeCategory.SOCIAL, TimeCategory.CALLS),
    ),
    TargetType.EXERCISE: TargetConfig(
        "Exercise", TargetDirection.AT_LEAST, 150, (TimeCategory.EXERCISE, TimeCategory.MOVEMENT)
    ),
    TargetType.SELF_CARE: TargetConfig(
        "Self Care", TargetDirection.AT_LEAST, 210, (TimeCategory.SELF_CARE, TimeCategory.REST)
    ),
    TargetType.RELATIONSHIPS: TargetConfig(
        "Relationships", TargetDirection.AT_LEAST, 300, (TimeCategory.SOCIAL, TimeCategory.CALLS)
    ),
    TargetType.LEARNING: TargetConfig(
        "Learning", TargetDirection.AT_LEAST, 210, (TimeCategory.LEARNING,)
    ),
    # Custom targets carry their own categories.
    TargetType.CUSTOM: TargetConfig("Custom", TargetDirection.AT_LEAST, 300, ()),
}


def target_categories(
    target_type: TargetType, custom: Optional[List[TimeCategory]] = None
) -> Tuple[TimeCategory, ...]:
    """Raw categories whose minutes count toward a target of this type."""
    if target_type == TargetType.CUSTOM:
        return tuple(custom or ())
    return TARGET_CONFIGS[target_type].categories


if len(TARGET_CONFIGS) != len(TargetType):
    raise RuntimeError("TARGET_CONFIGS must cover every TargetType")

"""
Unit tests for the category taxonomy.
"""
import pytest

from behavior_engine.taxonomy import (
    ENERGY_VIEW,
    TARGET_CONFIGS,
    AggregatedCategory,
    TargetDirection,
    TargetType,
    TimeCategory,
    aggregate_by_view,
    categories_in,
    get_aggregated_category,
    target_categories,
)


class TestEnergyViewPartition:
    """Every raw category belongs to exactly one energy group."""

    def test_each_category_in_exactly_one_group(self):
        """No raw category is missing or listed twice."""
        for category in TimeCategory:
            owners = [g.key for g in ENERGY_VIEW if category in g.categories]
            assert len(owners) == 1, f"{category.value} is in {owners}"

    def test_groups_cover_every_aggregated_category(self):
        assert {g.key for g in ENERGY_VIEW} == set(AggregatedCategory)

    def test_union_of_groups_is_full_category_set(self):
        members = [c for g in ENERGY_VIEW for c in g.categories]
        assert sorted(members) == sorted(TimeCategory)
        assert len(members) == len(set(members))

    @pytest.mark.parametrize(
        "category,group",
        [
            (TimeCategory.DEEP_WORK, AggregatedCategory.FOCUS),
            (TimeCategory.MEETINGS, AggregatedCategory.OPS),
            (TimeCategory.SLEEP, AggregatedCategory.BODY),
            (TimeCategory.SELF_CARE, AggregatedCategory.RECOVERY),
            (TimeCategory.CALLS, AggregatedCategory.CONNECTION),
            (TimeCategory.OTHER, AggregatedCategory.ESCAPE),
        ],
    )
    def test_get_aggregated_category(self, category, group):
        assert get_aggregated_category(category) == group

    def test_lookup_accepts_plain_strings(self):
        """String values coming from storage resolve like enum members."""
        assert get_aggregated_category("entertainment") == AggregatedCategory.ESCAPE

    def test_categories_in(self):
        assert categories_in(AggregatedCategory.CONNECTION) == (TimeCategory.SOCIAL, TimeCategory.CALLS)


class TestAggregateByView:
    """Test aggregate_by_view sums into groups and drops empty ones."""

    def test_sums_into_groups(self):
        result = aggregate_by_view(
            {
                TimeCategory.DEEP_WORK: 90,
                TimeCategory.LEARNING: 30,
                TimeCategory.EXERCISE: 45,
            }
        )
        assert result == {AggregatedCategory.FOCUS: 120, AggregatedCategory.BODY: 45}

    def test_zero_minute_groups_are_omitted(self):
        """A group with no logged minutes must not appear with value 0."""
        result = aggregate_by_view({TimeCategory.SOCIAL: 0, TimeCategory.REST: 20})
        assert AggregatedCategory.CONNECTION not in result
        assert result == {AggregatedCategory.RECOVERY: 20}

    def test_empty_input(self):
        assert aggregate_by_view({}) == {}


class TestTargetCatalogue:
    """Test target types map to directions and categories."""

    def test_every_target_type_configured(self):
        assert set(TARGET_CONFIGS) == set(TargetType)

    def test_less_distraction_is_a_limit(self):
        config = TARGET_CONFIGS[TargetType.LESS_DISTRACTION]
        assert config.direction == TargetDirection.AT_MOST
        assert config.categories == (TimeCategory.ENTERTAINMENT,)

    def test_custom_target_uses_supplied_categories(self):
        assert target_categories(TargetType.CUSTOM) == ()
        assert target_categories(TargetType.CUSTOM, [TimeCategory.CHORES]) == (TimeCategory.CHORES,)

    def test_builtin_target_ignores_supplied_categories(self):
        assert target_categories(TargetType.EXERCISE, [TimeCategory.CHORES]) == (
            TimeCategory.EXERCISE,
            TimeCategory.MOVEMENT,
        )

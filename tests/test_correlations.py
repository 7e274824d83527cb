"""
Unit tests for the correlation engine.
"""
from datetime import timedelta

import pytest

from behavior_engine.correlations import (
    MAX_EFFECT_SIZE,
    CorrelationDirection,
    CorrelationInsight,
    InsightType,
    analyze_correlations,
    cohens_d,
    deduplicate,
    pooled_std,
    qualifying_days,
    session_patterns,
)
from behavior_engine.models import MoodLevel, TimePeriod

from conftest import AS_OF, make_entry, make_mood


def day(offset):
    return AS_OF - timedelta(days=offset)


def insight(id, category, effect, type=InsightType.CATEGORY_PRESENCE):
    return CorrelationInsight(
        id=id,
        type=type,
        category=category,
        direction=CorrelationDirection.POSITIVE,
        effect_size=effect,
        strength_percent=10,
        sample_size_with=3,
        sample_size_without=3,
        description="",
        avg_mood_with=1.5,
        avg_mood_without=1.0,
    )


class TestCohensD:
    """Test the effect size helper."""

    def test_known_value(self):
        assert cohens_d([1, 2, 3], [2, 3, 4]) == pytest.approx(-1.0)

    def test_swapping_groups_flips_sign(self):
        a, b = [2, 2, 1, 2], [0, 1, 0, 1]
        assert cohens_d(a, b) == pytest.approx(-cohens_d(b, a))

    def test_small_groups_are_zero(self):
        assert cohens_d([2], [0, 1, 0]) == 0
        assert pooled_std([2], [0, 1]) == 0

    def test_zero_spread_is_zero(self):
        assert cohens_d([2, 2, 2], [0, 0, 0]) == 0


class TestAnalyzeCorrelations:
    """Test end-to-end insight generation."""

    def test_not_enough_days(self):
        moods = [make_mood(day(d), "morning", "great") for d in range(3)]
        result = analyze_correlations([], moods)

        assert result.has_enough_data is False
        assert result.insights == []
        assert result.session_patterns == []
        assert result.total_days_tracked == 3
        assert result.days_needed == 4

    def test_days_without_mood_do_not_qualify(self):
        entries = [make_entry(day(d), "exercise", 60) for d in range(10)]
        moods = [make_mood(day(d), "evening", "okay") for d in range(5)]
        assert len(qualifying_days(entries, moods)) == 5
        assert analyze_correlations(entries, moods).days_needed == 2

    def test_presence_of_a_category_lifts_mood(self):
        """Six exercise days feel great, four days without feel low."""
        entries, moods = [], []
        for d in range(6):
            entries += [make_entry(day(d), "exercise", 60), make_entry(day(d), "meals", 30)]
            moods.append(make_mood(day(d), "morning", "great"))
        for d in range(6, 10):
            entries.append(make_entry(day(d), "meals", 30))
            moods.append(make_mood(day(d), "morning", "low"))

        result = analyze_correlations(entries, moods)

        assert result.has_enough_data is True
        assert result.total_days_tracked == 10
        assert len(result.insights) == 1
        found = result.insights[0]
        assert found.id == "presence:exercise"
        assert found.direction == CorrelationDirection.POSITIVE
        assert found.effect_size == MAX_EFFECT_SIZE
        assert found.sample_size_with == 6
        assert found.sample_size_without == 4
        assert found.description == "Your mood is 100% higher on days when you do exercise"

    def test_negative_presence(self):
        entries, moods = [], []
        for d, level in zip(range(4), ["low", "okay", "low", "okay"]):
            entries.append(make_entry(day(d), "entertainment", 30))
            moods.append(make_mood(day(d), "evening", level))
        for d, level in zip(range(4, 8), ["great", "great", "okay", "great"]):
            moods.append(make_mood(day(d), "evening", level))

        result = analyze_correlations(entries, moods)

        assert [i.id for i in result.insights] == ["presence:entertainment"]
        found = result.insights[0]
        assert found.direction == CorrelationDirection.NEGATIVE
        assert found.effect_size > 2
        assert found.avg_mood_with == pytest.approx(0.5)
        assert found.avg_mood_without == pytest.approx(1.75)
        assert found.description == "Your mood tends to be 71% lower on days with entertainment"

    def test_duration_threshold_insight(self):
        """Every day has focus time, so only the long-session split separates moods."""
        entries, moods = [], []
        for d, level in zip(range(4), ["great", "great", "great", "okay"]):
            entries.append(make_entry(day(d), "deep_work", 150))
            moods.append(make_mood(day(d), "afternoon", level))
        for d, level in zip(range(4, 8), ["low", "okay", "low", "low"]):
            entries.append(make_entry(day(d), "deep_work", 30))
            moods.append(make_mood(day(d), "afternoon", level))

        result = analyze_correlations(entries, moods)

        assert [i.id for i in result.insights] == ["duration:focus:60"]
        found = result.insights[0]
        assert found.type == InsightType.CATEGORY_DURATION
        assert found.duration_threshold == 60
        assert found.category == "focus"
        assert found.description == "Your mood is 600% higher on days with 1+ hours of focus"

    def test_effect_sizes_are_finite(self):
        entries = [make_entry(day(d), "social", 60) for d in range(0, 10, 2)]
        moods = [make_mood(day(d), "morning", "okay") for d in range(10)]
        result = analyze_correlations(entries, moods)
        assert result.insights == []


class TestDeduplicate:
    """At most one duration insight per group, and only when it clearly wins."""

    def test_duration_needs_margin_over_presence(self):
        presence = [insight("presence:exercise", "exercise", 1.0)]
        weak = insight("duration:body:60", "body", 1.1, InsightType.CATEGORY_DURATION)
        strong = insight("duration:body:120", "body", 1.3, InsightType.CATEGORY_DURATION)

        assert [i.id for i in deduplicate(presence, [weak])] == ["presence:exercise"]
        assert [i.id for i in deduplicate(presence, [weak, strong])] == [
            "duration:body:120",
            "presence:exercise",
        ]

    def test_duration_kept_without_presence_rival(self):
        presence = [insight("presence:exercise", "exercise", 1.0)]
        other = insight("duration:focus:60", "focus", 0.5, InsightType.CATEGORY_DURATION)
        kept = deduplicate(presence, [other])
        assert [i.id for i in kept] == ["presence:exercise", "duration:focus:60"]

    def test_one_duration_per_group(self):
        durations = [
            insight("duration:escape:60", "escape", 0.6, InsightType.CATEGORY_DURATION),
            insight("duration:escape:120", "escape", 0.9, InsightType.CATEGORY_DURATION),
        ]
        assert [i.id for i in deduplicate([], durations)] == ["duration:escape:120"]


class TestSessionPatterns:
    def test_patterns_sorted_by_sample_size(self):
        moods = []
        for d in range(3):
            moods += [make_mood(day(d), "morning", "great"), make_mood(day(d), "afternoon", "great")]
        for d in range(3, 7):
            moods += [make_mood(day(d), "morning", "low"), make_mood(day(d), "afternoon", "okay")]

        patterns = session_patterns(qualifying_days([], moods))

        assert [(p.from_mood, p.sample_size) for p in patterns] == [
            (MoodLevel.LOW, 4),
            (MoodLevel.GREAT, 3),
        ]
        assert patterns[0].from_period == TimePeriod.MORNING
        assert patterns[0].to_period == TimePeriod.AFTERNOON
        assert patterns[0].to_mood_avg == pytest.approx(1.0)
        assert patterns[0].description == (
            "When your morning starts low energy, your afternoon mood tends to be okay"
        )
        assert patterns[1].description == (
            "When your morning starts energized, your afternoon mood tends to be great"
        )

    def test_too_few_samples(self):
        moods = [make_mood(day(0), "morning", "great"), make_mood(day(0), "evening", "okay")]
        assert session_patterns(qualifying_days([], moods)) == []

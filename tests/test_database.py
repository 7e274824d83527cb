"""
Tests for the SQLite store.
"""
from datetime import date, datetime, timezone

import pytest

from behavior_engine.models import EntryStatus, UserStreak
from behavior_engine.taxonomy import TargetDirection, TargetType, TimeCategory

from conftest import AS_OF, USER_ID, make_entry


def streak_row(best, current=None, streak_type="deep_work"):
    return UserStreak(
        user_id=USER_ID,
        streak_type=streak_type,
        current_streak_days=best if current is None else current,
        current_streak_start_date=date(2024, 1, 9),
        personal_best_days=best,
        personal_best_achieved_at=AS_OF,
        last_calculated_at=datetime(2024, 1, 15, 12, tzinfo=timezone.utc),
    )


class TestSchema:
    def test_initialize_is_idempotent(self, tracker_db):
        tracker_db.initialize()
        with tracker_db.get_conn() as conn:
            tables = {
                row["name"]
                for row in conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            }
        assert {"time_entries", "mood_checkins", "targets", "user_streaks"} <= tables


class TestEntries:
    """Test entry reads."""

    def test_pending_entries_filtered_by_default(self, entry_store, insert_entries):
        insert_entries(
            [
                make_entry(AS_OF, "deep_work", 90, start_hour=9),
                make_entry(AS_OF, "admin", 25, status=EntryStatus.PENDING),
            ]
        )

        confirmed = entry_store.fetch_entries(USER_ID, AS_OF, AS_OF)
        everything = entry_store.fetch_entries(USER_ID, AS_OF, AS_OF, status=None)

        assert [e.category for e in confirmed] == [TimeCategory.DEEP_WORK]
        assert confirmed[0].start_time.hour == 9
        assert len(everything) == 2

    def test_date_range_is_inclusive(self, entry_store, insert_entries):
        insert_entries(
            [
                make_entry(date(2024, 1, 9), "meals", 30),
                make_entry(date(2024, 1, 10), "meals", 30),
                make_entry(date(2024, 1, 15), "meals", 30),
                make_entry(date(2024, 1, 16), "meals", 30),
            ]
        )
        entries = entry_store.fetch_entries(USER_ID, date(2024, 1, 10), AS_OF)
        assert [e.date for e in entries] == [date(2024, 1, 10), AS_OF]

    def test_other_users_not_returned(self, entry_store, insert_entries):
        insert_entries([make_entry(AS_OF, "meals", 30, user_id="someone-else")])
        assert entry_store.fetch_entries(USER_ID, AS_OF, AS_OF) == []


class TestMoodsAndTargets:
    def test_fetch_moods(self, tracker_db, entry_store):
        with tracker_db.get_conn() as conn:
            conn.execute(
                "INSERT INTO mood_checkins (user_id, date, period, mood) VALUES (?, ?, ?, ?)",
                (USER_ID, AS_OF.isoformat(), "morning", "great"),
            )
            conn.commit()

        moods = entry_store.fetch_moods(USER_ID, AS_OF, AS_OF)
        assert len(moods) == 1
        assert moods[0].score == 2

    def test_target_parsing(self, tracker_db, entry_store):
        with tracker_db.get_conn() as conn:
            conn.executemany(
                """
                INSERT INTO targets (user_id, target_type, direction, weekly_target_minutes, categories, label, active)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (USER_ID, "deep_work", None, None, None, None, 1),
                    (USER_ID, "custom", "at_least", 240, "reading_missing,learning, creating", "Side project", 1),
                    (USER_ID, "exercise", None, 150, None, None, 0),
                ],
            )
            conn.commit()

        with pytest.raises(ValueError):
            entry_store.fetch_targets(USER_ID)

        with tracker_db.get_conn() as conn:
            conn.execute("UPDATE targets SET categories = 'learning,creating' WHERE target_type = 'custom'")
            conn.commit()

        targets = entry_store.fetch_targets(USER_ID)
        assert [t.target_type for t in targets] == [TargetType.DEEP_WORK, TargetType.CUSTOM]
        assert targets[0].weekly_minutes == 900
        assert targets[0].effective_direction == TargetDirection.AT_LEAST
        assert targets[1].related_categories == (TimeCategory.LEARNING, TimeCategory.CREATING)
        assert targets[1].display_label == "Side project"
        assert targets[1].key == targets[1].target_id


class TestStreakState:
    """Persisted personal bests only ever go up."""

    def test_insert_then_read(self, entry_store):
        assert entry_store.upsert_streak_state(streak_row(6)) is True
        state = entry_store.fetch_streak_state(USER_ID)

        assert list(state) == ["deep_work"]
        assert state["deep_work"].personal_best_days == 6
        assert state["deep_work"].current_streak_start_date == date(2024, 1, 9)
        assert state["deep_work"].personal_best_achieved_at == AS_OF

    def test_higher_best_replaces(self, entry_store):
        entry_store.upsert_streak_state(streak_row(6))
        assert entry_store.upsert_streak_state(streak_row(9)) is True
        assert entry_store.fetch_streak_state(USER_ID)["deep_work"].personal_best_days == 9

    def test_lower_or_equal_best_never_overwrites(self, entry_store):
        entry_store.upsert_streak_state(streak_row(9))
        assert entry_store.upsert_streak_state(streak_row(5)) is False
        assert entry_store.upsert_streak_state(streak_row(9, current=3)) is False

        stored = entry_store.fetch_streak_state(USER_ID)["deep_work"]
        assert stored.personal_best_days == 9
        assert stored.current_streak_days == 9

    def test_filter_by_type(self, entry_store):
        entry_store.upsert_streak_state(streak_row(4))
        entry_store.upsert_streak_state(streak_row(3, streak_type="exercise"))
        assert list(entry_store.fetch_streak_state(USER_ID, "exercise")) == ["exercise"]

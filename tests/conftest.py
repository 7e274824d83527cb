"""
Pytest fixtures for time tracker analytics tests.
"""
import sys
from datetime import date, time, timedelta
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Ensure src/ is on sys.path so tests can import behavior_engine.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
for path in (SRC, ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Load environment variables
load_dotenv()

from behavior_engine.models import EntryStatus, MoodCheckin, MoodLevel, TimeEntry, TimePeriod  # noqa: E402
from behavior_engine.taxonomy import TimeCategory  # noqa: E402

USER_ID = "user-1"

# Monday; its week starts on Sunday 2024-01-14
AS_OF = date(2024, 1, 15)


def make_entry(
    day: date,
    category: str,
    minutes: int,
    start_hour: int = None,
    status: EntryStatus = EntryStatus.CONFIRMED,
    user_id: str = USER_ID,
) -> TimeEntry:
    """Build a TimeEntry with sensible defaults."""
    return TimeEntry(
        user_id=user_id,
        date=day,
        category=TimeCategory(category),
        duration_minutes=minutes,
        start_time=time(start_hour, 0) if start_hour is not None else None,
        status=status,
    )


def make_mood(day: date, period: str, mood: str, user_id: str = USER_ID) -> MoodCheckin:
    return MoodCheckin(user_id=user_id, date=day, period=TimePeriod(period), mood=MoodLevel(mood))


def days_before(anchor: date, *offsets: int) -> list:
    """Dates `offset` days before anchor, in the order given."""
    return [anchor - timedelta(days=o) for o in offsets]


@pytest.fixture
def as_of():
    return AS_OF


@pytest.fixture
def entry():
    """Factory fixture for TimeEntry objects."""
    return make_entry


@pytest.fixture
def mood():
    """Factory fixture for MoodCheckin objects."""
    return make_mood


@pytest.fixture
def tracker_db(tmp_path):
    """A DatabaseManager on a fresh temporary SQLite file with the schema applied."""
    from server.tracker_api.database import DatabaseManager

    manager = DatabaseManager(db_path=str(tmp_path / "tracker.db"))
    manager.initialize()
    return manager


@pytest.fixture
def entry_store(tracker_db):
    """EntryStore bound to the temporary database."""
    from server.tracker_api.services.store import EntryStore

    return EntryStore(tracker_db)


@pytest.fixture
def insert_entries(tracker_db):
    """Insert TimeEntry objects straight into the temporary database."""

    def _insert(entries):
        with tracker_db.get_conn() as conn:
            conn.executemany(
                """
                INSERT INTO time_entries (user_id, date, category, duration_minutes, start_time, end_time, status)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        e.user_id,
                        e.date.isoformat(),
                        e.category.value,
                        e.duration_minutes,
                        e.start_time.isoformat(timespec="minutes") if e.start_time else None,
                        e.end_time.isoformat(timespec="minutes") if e.end_time else None,
                        e.status.value,
                    )
                    for e in entries
                ],
            )
            conn.commit()

    return _insert

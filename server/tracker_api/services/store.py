"""Entry, mood, target and streak storage backed by SQLite."""
import logging
from datetime import date, datetime, time
from typing import Optional

from behavior_engine.models import EntryStatus, MoodCheckin, MoodLevel, Target, TimeEntry, TimePeriod, UserStreak
from behavior_engine.taxonomy import TargetDirection, TargetType, TimeCategory

from ..database import DatabaseManager, db_manager

logger = logging.getLogger(__name__)

# Only ever raises the stored best. A concurrent writer holding a smaller
# best leaves the row alone.
UPSERT_STREAK_SQL = """
INSERT INTO user_streaks (
    user_id, streak_type, current_streak_days, current_streak_start_date,
    personal_best_days, personal_best_achieved_at, last_calculated_at
) VALUES (?, ?, ?, ?, ?, ?, ?)
ON CONFLICT (user_id, streak_type) DO UPDATE SET
    current_streak_days = excluded.current_streak_days,
    current_streak_start_date = excluded.current_streak_start_date,
    personal_best_days = excluded.personal_best_days,
    personal_best_achieved_at = excluded.personal_best_achieved_at,
    last_calculated_at = excluded.last_calculated_at
WHERE excluded.personal_best_days > user_streaks.personal_best_days
"""


def _parse_date(value) -> Optional[date]:
    return date.fromisoformat(value) if value else None


def _parse_time(value) -> Optional[time]:
    if not value:
        return None
    return time.fromisoformat(value)


def _row_to_entry(row) -> TimeEntry:
    """Convert SQLite row to TimeEntry."""
    return TimeEntry(
        user_id=row["user_id"],
        date=date.fromisoformat(row["date"]),
        category=TimeCategory(row["category"]),
        duration_minutes=int(row["duration_minutes"]),
        start_time=_parse_time(row["start_time"]),
        end_time=_parse_time(row["end_time"]),
        status=EntryStatus(row["status"]),
    )


def _row_to_mood(row) -> MoodCheckin:
    return MoodCheckin(
        user_id=row["user_id"],
        date=date.fromisoformat(row["date"]),
        period=TimePeriod(row["period"]),
        mood=MoodLevel(row["mood"]),
    )


def _row_to_target(row) -> Target:
    categories = tuple(
        TimeCategory(c.strip()) for c in (row["categories"] or "").split(",") if c.strip()
    )
    return Target(
        target_type=TargetType(row["target_type"]),
        weekly_target_minutes=row["weekly_target_minutes"],
        direction=TargetDirection(row["direction"]) if row["direction"] else None,
        categories=categories,
        label=row["label"],
        target_id=str(row["id"]),
    )


def _row_to_streak(row) -> UserStreak:
    last = row["last_calculated_at"]
    return UserStreak(
        user_id=row["user_id"],
        streak_type=row["streak_type"],
        current_streak_days=row["current_streak_days"],
        current_streak_start_date=_parse_date(row["current_streak_start_date"]),
        personal_best_days=row["personal_best_days"],
        personal_best_achieved_at=_parse_date(row["personal_best_achieved_at"]),
        last_calculated_at=datetime.fromisoformat(last) if last else None,
    )


class EntryStore:
    """
    Data-store collaborator for the analytics routes.

    Methods are synchronous; the analytics service runs them in worker
    threads so independent fetches overlap.
    """

    def __init__(self, manager: DatabaseManager = None):
        self.manager = manager or db_manager

    def fetch_entries(
        self,
        user_id: str,
        start: date,
        end: date,
        status: Optional[EntryStatus] = EntryStatus.CONFIRMED,
    ) -> list[TimeEntry]:
        """Entries dated start..end inclusive, confirmed only unless status is None."""
        sql = "SELECT * FROM time_entries WHERE user_id = ? AND date >= ? AND date <= ?"
        params = [user_id, start.isoformat(), end.isoformat()]
        if status is not None:
            sql += " AND status = ?"
            params.append(status.value)
        sql += " ORDER BY date, start_time"

        with self.manager.get_conn() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_entry(row) for row in rows]

    def fetch_moods(self, user_id: str, start: date, end: date) -> list[MoodCheckin]:
        with self.manager.get_conn() as conn:
            rows = conn.execute(
                """
                SELECT * FROM mood_checkins
                WHERE user_id = ? AND date >= ? AND date <= ?
                ORDER BY date
                """,
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
        return [_row_to_mood(row) for row in rows]

    def fetch_targets(self, user_id: str) -> list[Target]:
        with self.manager.get_conn() as conn:
            rows = conn.execute(
                "SELECT * FROM targets WHERE user_id = ? AND active = 1 ORDER BY id",
                (user_id,),
            ).fetchall()
        return [_row_to_target(row) for row in rows]

    def fetch_streak_state(self, user_id: str, streak_type: Optional[str] = None) -> dict[str, UserStreak]:
        """Persisted streak rows keyed by streak type."""
        sql = "SELECT * FROM user_streaks WHERE user_id = ?"
        params = [user_id]
        if streak_type:
            sql += " AND streak_type = ?"
            params.append(streak_type)

        with self.manager.get_conn() as conn:
            rows = conn.execute(sql, params).fetchall()
        return {row["streak_type"]: _row_to_streak(row) for row in rows}

    def upsert_streak_state(self, streak: UserStreak) -> bool:
        """
        Write a streak row if it raises the stored personal best.

        Returns:
            True if a row was inserted or updated
        """
        params = (
            streak.user_id,
            streak.streak_type,
            streak.current_streak_days,
            streak.current_streak_start_date.isoformat() if streak.current_streak_start_date else None,
            streak.personal_best_days,
            streak.personal_best_achieved_at.isoformat() if streak.personal_best_achieved_at else None,
            streak.last_calculated_at.isoformat() if streak.last_calculated_at else None,
        )
        with self.manager.get_conn() as conn:
            cursor = conn.execute(UPSERT_STREAK_SQL, params)
            conn.commit()
            written = cursor.rowcount > 0

        if written:
            logger.info(
                f"[STREAK] Saved {streak.streak_type} best of {streak.personal_best_days} days "
                f"for {streak.user_id}"
            )
        return written


store = EntryStore()


def get_store() -> EntryStore:
    """FastAPI dependency returning the shared store."""
    return store

"""SQLite connection manager and schema for time-tracking data."""
import sqlite3
from contextlib import contextmanager
from typing import Generator
import logging

from .config import get_settings

log = logging.getLogger(__name__)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS time_entries (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    category TEXT NOT NULL,
    duration_minutes INTEGER NOT NULL CHECK (duration_minutes > 0),
    start_time TEXT,
    end_time TEXT,
    status TEXT NOT NULL DEFAULT 'confirmed'
);
CREATE INDEX IF NOT EXISTS idx_time_entries_user_date ON time_entries (user_id, date);

CREATE TABLE IF NOT EXISTS mood_checkins (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    date TEXT NOT NULL,
    period TEXT NOT NULL,
    mood TEXT NOT NULL,
    UNIQUE (user_id, date, period)
);

CREATE TABLE IF NOT EXISTS targets (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    target_type TEXT NOT NULL,
    direction TEXT,
    weekly_target_minutes INTEGER,
    categories TEXT,
    label TEXT,
    active INTEGER NOT NULL DEFAULT 1
);

CREATE TABLE IF NOT EXISTS user_streaks (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    streak_type TEXT NOT NULL,
    current_streak_days INTEGER NOT NULL DEFAULT 0,
    current_streak_start_date TEXT,
    personal_best_days INTEGER NOT NULL DEFAULT 0,
    personal_best_achieved_at TEXT,
    last_calculated_at TEXT,
    UNIQUE (user_id, streak_type)
);
"""


class DatabaseManager:
    """
    SQLite database manager for time-tracking data.

    Every call opens its own connection so concurrent requests never share
    a cursor.
    """

    def __init__(self, settings=None, db_path: str = None):
        self.settings = settings or get_settings()
        self.db_path = db_path or self.settings.db_path

    @contextmanager
    def get_conn(self) -> Generator[sqlite3.Connection, None, None]:
        """Get a read-write connection to the tracker database."""
        yield from self._connect(self.db_path)

    def initialize(self) -> None:
        """Create tables and indexes if they do not exist yet."""
        with self.get_conn() as conn:
            conn.executescript(SCHEMA_SQL)
            conn.commit()
        log.info(f"Database schema ready at {self.db_path}")

    def _connect(self, db_path: str) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(db_path, check_same_thread=False, timeout=10)
        conn.row_factory = sqlite3.Row  # Enable dict-like row access
        try:
            yield conn
        finally:
            conn.close()


# Singleton instance
db_manager = DatabaseManager()

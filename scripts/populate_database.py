#!/usr/bin/env python3
"""
Create the tracker SQLite database and seed it with a demo user.

Generates several weeks of time entries, mood check-ins and targets so the
analytics endpoints have something to show.

Usage:
    python scripts/populate_database.py [--days 42] [--user demo-user]
"""
import argparse
import os
import random
import sqlite3
import sys
from datetime import date, timedelta
from pathlib import Path

# Base directory (project root)
BASE_DIR = Path(__file__).parent.parent
sys.path.insert(0, str(BASE_DIR / "src"))
sys.path.insert(0, str(BASE_DIR))

from server.tracker_api.database import SCHEMA_SQL  # noqa: E402

DEMO_TARGETS = [
    # (target_type, direction, weekly minutes)
    ("deep_work", "at_least", 900),
    ("exercise", "at_least", 150),
    ("less_distraction", "at_most", 420),
]

# (category, start hour, min minutes, max minutes, probability)
DAY_TEMPLATE = [
    ("sleep", 0, 360, 480, 0.95),
    ("meals", 8, 15, 30, 0.9),
    ("deep_work", 9, 60, 180, 0.75),
    ("meetings", 11, 30, 90, 0.6),
    ("meals", 12, 20, 45, 0.85),
    ("shallow_work", 13, 30, 90, 0.7),
    ("learning", 15, 20, 60, 0.4),
    ("exercise", 17, 20, 60, 0.5),
    ("movement", 18, 10, 30, 0.5),
    ("calls", 19, 10, 30, 0.35),
    ("social", 19, 30, 120, 0.3),
    ("entertainment", 20, 30, 120, 0.55),
    ("rest", 21, 15, 45, 0.5),
]

MOODS = ["low", "okay", "great"]
PERIODS = ["morning", "afternoon", "evening"]


def generate_day(rng: random.Random, user_id: str, day: date) -> tuple[list, list]:
    """Entries and mood check-ins for one day."""
    entries = []
    did_exercise = False
    for category, hour, low, high, probability in DAY_TEMPLATE:
        if rng.random() > probability:
            continue
        minutes = rng.randint(low, high)
        start = f"{hour:02d}:00"
        end_total = hour * 60 + minutes
        end = f"{(end_total // 60) % 24:02d}:{end_total % 60:02d}"
        entries.append((user_id, day.isoformat(), category, minutes, start, end, "confirmed"))
        did_exercise = did_exercise or category == "exercise"

    # A few unconfirmed suggestions that analytics must ignore
    if rng.random() < 0.2:
        entries.append((user_id, day.isoformat(), "admin", 25, "16:00", "16:25", "pending"))

    moods = []
    if rng.random() < 0.8:
        bias = 1 if did_exercise else 0
        for period in PERIODS:
            if rng.random() < 0.7:
                level = min(2, max(0, rng.randint(0, 2) + bias - (1 if rng.random() < 0.3 else 0)))
                moods.append((user_id, day.isoformat(), period, MOODS[level]))

    return entries, moods


def populate(db_path: Path, user_id: str, days: int, seed: int) -> dict:
    """
    Recreate the database and insert demo data.

    Returns:
        Row counts per table
    """
    if db_path.exists():
        os.remove(db_path)
        print(f"  Removed existing: {db_path.name}")

    rng = random.Random(seed)
    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()
    cursor.executescript(SCHEMA_SQL)

    today = date.today()
    all_entries, all_moods = [], []
    for offset in range(days, -1, -1):
        entries, moods = generate_day(rng, user_id, today - timedelta(days=offset))
        all_entries.extend(entries)
        all_moods.extend(moods)

    cursor.executemany(
        """
        INSERT INTO time_entries (user_id, date, category, duration_minutes, start_time, end_time, status)
        VALUES (?, ?, ?, ?, ?, ?, ?)
        """,
        all_entries,
    )
    cursor.executemany(
        "INSERT INTO mood_checkins (user_id, date, period, mood) VALUES (?, ?, ?, ?)",
        all_moods,
    )
    cursor.executemany(
        """
        INSERT INTO targets (user_id, target_type, direction, weekly_target_minutes)
        VALUES (?, ?, ?, ?)
        """,
        [(user_id, t, d, m) for t, d, m in DEMO_TARGETS],
    )
    conn.commit()

    counts = {}
    for table in ("time_entries", "mood_checkins", "targets", "user_streaks"):
        cursor.execute(f"SELECT COUNT(*) FROM {table}")
        counts[table] = cursor.fetchone()[0]

    conn.close()
    return counts


def main():
    """Populate the tracker database."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--days", type=int, default=42, help="Days of history to generate")
    parser.add_argument("--user", default="demo-user", help="User id to seed")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--db", default=str(BASE_DIR / "tracker.db"), help="Database file")
    args = parser.parse_args()

    db_path = Path(args.db)

    print("=" * 60)
    print("Time Tracker Database Population Script")
    print("=" * 60)
    print(f"\nDatabase: {db_path}")
    print(f"User: {args.user}, days: {args.days}\n")

    counts = populate(db_path, args.user, args.days, args.seed)

    for table, count in counts.items():
        print(f"  {table}: {count} rows")

    print()
    print("=" * 60)
    print(f"Complete! Total rows: {sum(counts.values())}")
    print("=" * 60)

    size_kb = db_path.stat().st_size / 1024
    print(f"\nDatabase file created: {db_path} ({size_kb:.1f} KB)")


if __name__ == "__main__":
    main()

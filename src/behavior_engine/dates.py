"""
Rolling window helpers.

Pure calendar arithmetic on user-local dates. Nothing here touches entries,
and nothing reads the system clock unless a caller explicitly asks for
"today" in a timezone.
"""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

TREND_PERIODS = {"7d": 7, "30d": 30}


class InvalidTimezoneError(ValueError):
    """Raised when a timezone name is missing or unknown."""


class InvalidPeriodError(ValueError):
    """Raised for an unsupported trend period."""


def date_window(anchor: date, length: int) -> List[date]:
    """
    The `length` calendar dates ending at `anchor` (inclusive), oldest first.

    A non-positive length yields an empty window.
    """
    if length <= 0:
        return []
    start = anchor - timedelta(days=length - 1)
    return [start + timedelta(days=i) for i in range(length)]


def adjacent_windows(anchor: date, length: int = 7) -> Tuple[List[date], List[date]]:
    """Return (previous, current) back-to-back windows ending at `anchor`."""
    current = date_window(anchor, length)
    previous = date_window(anchor - timedelta(days=length), length)
    return previous, current


def week_start(day: date) -> date:
    """Sunday on or before `day`."""
    # Monday is 0, Sunday is 6
    return day - timedelta(days=(day.weekday() + 1) % 7)


def week_dates(start: date) -> List[date]:
    return [start + timedelta(days=i) for i in range(7)]


def today_in_timezone(tz_name: Optional[str], now: Optional[datetime] = None) -> date:
    """
    Resolve the user's local calendar date.

    Args:
        tz_name: IANA timezone name, e.g. "America/New_York"
        now: Instant to resolve (defaults to the current UTC time)

    Raises:
        InvalidTimezoneError: if tz_name is empty or unknown
    """
    if not tz_name:
        raise InvalidTimezoneError("timezone is required")
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise InvalidTimezoneError(f"Unknown timezone '{tz_name}'") from e

    instant = now or datetime.now(timezone.utc)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(zone).date()


def parse_period(period: str) -> int:
    """Translate "7d" / "30d" into a day count."""
    try:
        return TREND_PERIODS[period]
    except KeyError:
        raise InvalidPeriodError(
            f"Invalid period '{period}'. Must be one of: {list(TREND_PERIODS.keys())}"
        ) from None

"""
Unit tests for rolling window date helpers.
"""
from datetime import date, datetime, timezone

import pytest

from behavior_engine.dates import (
    InvalidPeriodError,
    InvalidTimezoneError,
    adjacent_windows,
    date_window,
    parse_period,
    today_in_timezone,
    week_dates,
    week_start,
)


class TestDateWindow:
    """Test date_window builds oldest-first inclusive windows."""

    def test_window_ends_at_anchor(self):
        window = date_window(date(2024, 3, 10), 3)
        assert window == [date(2024, 3, 8), date(2024, 3, 9), date(2024, 3, 10)]

    def test_crosses_year_boundary(self):
        window = date_window(date(2024, 1, 2), 5)
        assert window[0] == date(2023, 12, 29)
        assert window[-1] == date(2024, 1, 2)
        assert len(window) == 5

    def test_crosses_leap_day(self):
        window = date_window(date(2024, 3, 1), 2)
        assert window == [date(2024, 2, 29), date(2024, 3, 1)]

    def test_non_positive_length_is_empty(self):
        assert date_window(date(2024, 1, 1), 0) == []

    def test_adjacent_windows_are_back_to_back(self):
        previous, current = adjacent_windows(date(2024, 1, 14), 7)
        assert current[0] == date(2024, 1, 8)
        assert previous[-1] == date(2024, 1, 7)
        assert previous[0] == date(2024, 1, 1)


class TestWeeks:
    """Weeks start on Sunday."""

    @pytest.mark.parametrize(
        "day,expected",
        [
            (date(2024, 1, 14), date(2024, 1, 14)),  # Sunday
            (date(2024, 1, 15), date(2024, 1, 14)),  # Monday
            (date(2024, 1, 20), date(2024, 1, 14)),  # Saturday
            (date(2024, 1, 2), date(2023, 12, 31)),
        ],
    )
    def test_week_start(self, day, expected):
        assert week_start(day) == expected

    def test_week_dates(self):
        dates = week_dates(date(2024, 1, 14))
        assert len(dates) == 7
        assert dates[-1] == date(2024, 1, 20)


class TestTodayInTimezone:
    """Test the user-local calendar date resolution."""

    def test_local_date_behind_utc(self):
        """03:00 UTC is still the previous evening in New York."""
        now = datetime(2024, 1, 15, 3, 0, tzinfo=timezone.utc)
        assert today_in_timezone("America/New_York", now) == date(2024, 1, 14)

    def test_local_date_ahead_of_utc(self):
        now = datetime(2024, 1, 14, 20, 0, tzinfo=timezone.utc)
        assert today_in_timezone("Asia/Tokyo", now) == date(2024, 1, 15)

    def test_naive_now_is_treated_as_utc(self):
        now = datetime(2024, 1, 15, 3, 0)
        assert today_in_timezone("America/New_York", now) == date(2024, 1, 14)

    @pytest.mark.parametrize("tz_name", [None, "", "Not/AZone"])
    def test_invalid_timezone_rejected(self, tz_name):
        with pytest.raises(InvalidTimezoneError):
            today_in_timezone(tz_name)


class TestParsePeriod:
    def test_known_periods(self):
        assert parse_period("7d") == 7
        assert parse_period("30d") == 30

    def test_unknown_period(self):
        with pytest.raises(InvalidPeriodError):
            parse_period("90d")

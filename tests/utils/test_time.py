"""
Tests for day arithmetic utilities.

Verifies UTC normalization, day boundaries, day differences and the
reference-day fallback to wall-clock time.
"""

import pytest
from datetime import datetime, timezone, timedelta
from unittest.mock import patch

from streamwin_app.utils.time import (
    to_utc, start_of_day, end_of_day, add_days, days_between, whole_days,
    get_reference_now, reference_today, format_day, format_instant
)


class TestToUtc:
    """Test to_utc function."""

    def test_naive_datetime_is_read_as_utc(self):
        """Should attach UTC to naive datetimes without shifting them."""
        result = to_utc(datetime(2024, 1, 10, 9, 30))
        assert result == datetime(2024, 1, 10, 9, 30, tzinfo=timezone.utc)
        assert result.tzinfo == timezone.utc

    def test_aware_datetime_is_converted(self):
        """Should convert other zones to UTC."""
        paris = timezone(timedelta(hours=1))
        result = to_utc(datetime(2024, 1, 10, 0, 30, tzinfo=paris))
        assert result == datetime(2024, 1, 9, 23, 30, tzinfo=timezone.utc)


class TestDayBoundaries:
    """Test start_of_day and end_of_day functions."""

    def test_start_of_day(self):
        """Should truncate to midnight UTC."""
        ts = datetime(2024, 1, 10, 17, 45, 12, tzinfo=timezone.utc)
        assert start_of_day(ts) == datetime(2024, 1, 10, tzinfo=timezone.utc)

    def test_end_of_day_has_millisecond_resolution(self):
        """Should end the day at 23:59:59.999."""
        ts = datetime(2024, 1, 10, 3, 0, tzinfo=timezone.utc)
        assert end_of_day(ts) == datetime(2024, 1, 10, 23, 59, 59, 999000, tzinfo=timezone.utc)

    def test_boundaries_follow_utc_not_local_offset(self):
        """Should pick the UTC day of an instant given in another zone."""
        tokyo = timezone(timedelta(hours=9))
        ts = datetime(2024, 1, 11, 2, 0, tzinfo=tokyo)  # 2024-01-10 17:00 UTC
        assert start_of_day(ts) == datetime(2024, 1, 10, tzinfo=timezone.utc)


class TestDayDifferences:
    """Test days_between, whole_days and add_days functions."""

    def test_partial_days_round_up(self):
        """Should count any started day."""
        start = datetime(2024, 1, 12, tzinfo=timezone.utc)
        end = end_of_day(datetime(2024, 1, 13, tzinfo=timezone.utc))
        assert days_between(start, end) == 2

    def test_order_does_not_matter(self):
        """Should be symmetric."""
        a = datetime(2024, 1, 1, tzinfo=timezone.utc)
        b = datetime(2024, 1, 4, 6, tzinfo=timezone.utc)
        assert days_between(a, b) == days_between(b, a) == 4

    def test_identical_instants(self):
        """Should return zero for equal instants."""
        ts = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert days_between(ts, ts) == 0

    def test_whole_days_rounds_down(self):
        """Should count only complete days."""
        start = datetime(2024, 1, 12, tzinfo=timezone.utc)
        end = end_of_day(datetime(2024, 1, 13, tzinfo=timezone.utc))
        assert whole_days(start, end) == 1

    def test_add_days_crosses_month_and_leap_day(self):
        """Should shift by calendar days in UTC."""
        ts = datetime(2024, 2, 28, 12, tzinfo=timezone.utc)
        assert add_days(ts, 1) == datetime(2024, 2, 29, 12, tzinfo=timezone.utc)
        assert add_days(ts, 2) == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        assert add_days(ts, -59) == datetime(2023, 12, 31, 12, tzinfo=timezone.utc)

    def test_days_between_ignores_daylight_saving(self):
        """Should give whole days across the European DST switch."""
        before = datetime(2024, 3, 30, tzinfo=timezone.utc)
        after = datetime(2024, 4, 1, tzinfo=timezone.utc)
        assert days_between(before, after) == 2


class TestReferenceToday:
    """Test get_reference_now and reference_today functions."""

    def test_uses_explicit_instant(self):
        """Should prefer the instant passed in."""
        now = datetime(2024, 1, 20, 15, 30, tzinfo=timezone.utc)
        assert get_reference_now(now) == now
        assert reference_today(now) == datetime(2024, 1, 20, 23, 59, 59, 999000, tzinfo=timezone.utc)

    def test_falls_back_to_wall_clock_time(self):
        """Should fall back to wall-clock time when no instant is given."""
        with patch('streamwin_app.utils.time.datetime') as mock_datetime:
            mock_now = datetime(2024, 1, 20, 8, 0, tzinfo=timezone.utc)
            mock_datetime.now.return_value = mock_now

            result = reference_today()
            assert result == datetime(2024, 1, 20, 23, 59, 59, 999000, tzinfo=timezone.utc)
            mock_datetime.now.assert_called_once_with(timezone.utc)


class TestFormatting:
    """Test format_day and format_instant functions."""

    def test_format_day_defaults_to_french_short_date(self):
        """Should render day/month/year."""
        assert format_day(datetime(2024, 1, 12, tzinfo=timezone.utc)) == "12/01/2024"

    def test_format_day_custom_pattern(self):
        """Should honour a custom strftime pattern."""
        assert format_day(datetime(2024, 1, 12, tzinfo=timezone.utc), "%Y-%m-%d") == "2024-01-12"

    def test_format_instant(self):
        """Should render ISO8601 with milliseconds."""
        ts = datetime(2024, 1, 12, 23, 59, 59, 999000, tzinfo=timezone.utc)
        assert format_instant(ts) == "2024-01-12T23:59:59.999+00:00"

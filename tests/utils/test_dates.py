"""Tests for local date handling."""

from datetime import date, datetime

import pytest

from run_analytics.utils.dates import (
    date_key,
    date_key_prefix,
    from_date_key,
    in_window,
    iter_days,
    local_date_key,
    parse_local_date,
)


class TestParseLocalDate:
    """Tests for parse_local_date."""

    def test_z_suffix_is_ignored(self):
        """Z and no-Z timestamps give the same wall-clock time."""
        assert parse_local_date("2024-03-10T06:00:00Z") == parse_local_date("2024-03-10T06:00:00")

    def test_result_is_naive(self):
        parsed = parse_local_date("2024-03-10T23:45:00Z")
        assert parsed == datetime(2024, 3, 10, 23, 45)
        assert parsed.tzinfo is None

    def test_reparsing_keeps_calendar_date(self):
        """Parsing is idempotent on the calendar date."""
        first = parse_local_date("2024-12-31T23:59:59Z")
        again = parse_local_date(first.isoformat())
        assert again.date() == first.date() == date(2024, 12, 31)

    def test_invalid_timestamp(self):
        with pytest.raises(ValueError):
            parse_local_date("not a date")


class TestDateKeys:
    """Tests for YYYY-MM-DD keys."""

    @pytest.mark.parametrize("timestamp", ["2024-03-10T06:00:00Z", "2024-03-10T06:00:00"])
    def test_local_date_key(self, timestamp):
        assert local_date_key(timestamp) == "2024-03-10"

    def test_zero_padding(self):
        assert date_key(date(2024, 1, 5)) == "2024-01-05"

    def test_prefix_agrees_with_local_key(self):
        """Truncation and parsing give the same key for well-formed input."""
        for timestamp in ("2024-01-05T00:00:00Z", "2023-07-31T23:59:59", "2024-02-29T12:00:00Z"):
            assert date_key_prefix(timestamp) == local_date_key(timestamp)

    def test_prefix_with_space_separator(self):
        assert date_key_prefix("2024-03-10 07:00:00") == "2024-03-10"
        assert local_date_key("2024-03-10 07:00:00") == "2024-03-10"

    def test_key_round_trip(self):
        """A key survives parsing and formatting unchanged."""
        assert date_key(from_date_key("2024-02-29")) == "2024-02-29"
        assert from_date_key("2024-02-29") == date(2024, 2, 29)


class TestWindows:
    """Tests for calendar-day iteration and windows."""

    def test_iter_days_inclusive(self):
        days = list(iter_days(date(2024, 2, 27), date(2024, 3, 1)))
        assert days == [date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_iter_days_single_day(self):
        assert list(iter_days(date(2024, 3, 1), date(2024, 3, 1))) == [date(2024, 3, 1)]

    def test_iter_days_reversed_is_empty(self):
        assert list(iter_days(date(2024, 3, 2), date(2024, 3, 1))) == []

    def test_in_window_bounds_inclusive(self):
        start, end = date(2024, 3, 1), date(2024, 3, 7)
        assert in_window(start, start, end)
        assert in_window(end, start, end)
        assert not in_window(date(2024, 2, 29), start, end)
        assert not in_window(date(2024, 3, 8), start, end)

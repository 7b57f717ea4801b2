"""Local calendar-date handling for activity timestamps.

Provider records carry ``start_date_local`` as local wall-clock time, but
sometimes suffix it with ``Z``. Parsing that suffix would shift the instant
into UTC and move runs near midnight into the wrong day bucket, so every
date extraction goes through :func:`parse_local_date`.
"""

from datetime import date, datetime, timedelta
from typing import Iterator


def parse_local_date(timestamp: str) -> datetime:
    """
    Parse a local wall-clock ISO timestamp.

    A single trailing ``Z`` is stripped so the value is read as naive local
    time rather than converted from UTC.

    Args:
        timestamp: ISO-8601 timestamp, e.g. "2024-03-10T06:00:00Z"

    Returns:
        Naive datetime with the wall-clock components of the input
    """
    normalized = timestamp[:-1] if timestamp.endswith("Z") else timestamp
    return datetime.fromisoformat(normalized)


def local_date_key(timestamp: str) -> str:
    """Get the YYYY-MM-DD key for a local timestamp."""
    return date_key(parse_local_date(timestamp))


def date_key_prefix(timestamp: str) -> str:
    """
    Get the YYYY-MM-DD key from the first ten characters of the timestamp.

    Only used for daily TRIMP bucketing, where the date portion is all that
    is needed. ``Activity`` only accepts timestamps for which this agrees
    with :func:`local_date_key`, whatever separator follows the date.
    """
    return timestamp[:10]


def date_key(value: date) -> str:
    """Format a date (or datetime) as a zero-padded YYYY-MM-DD key."""
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def from_date_key(key: str) -> date:
    """Parse a YYYY-MM-DD key back into a date."""
    year, month, day = (int(part) for part in key.split("-"))
    return date(year, month, day)


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def in_window(day: date, start: date, end: date) -> bool:
    """Check whether a day falls inside an inclusive window."""
    return start <= day <= end

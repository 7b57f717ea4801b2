"""Utility modules for run analytics."""

from .dates import (
    date_key,
    date_key_prefix,
    from_date_key,
    iter_days,
    local_date_key,
    parse_local_date,
)
from .formatting import (
    format_duration,
    format_pace,
    format_speed_as_pace,
    format_time,
)
from .numbers import clamp, round_half_up, round_half_up_to

__all__ = [
    "date_key",
    "date_key_prefix",
    "from_date_key",
    "iter_days",
    "local_date_key",
    "parse_local_date",
    "format_duration",
    "format_pace",
    "format_speed_as_pace",
    "format_time",
    "clamp",
    "round_half_up",
    "round_half_up_to",
]

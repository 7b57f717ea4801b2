"""Display formatting for paces and durations."""

import math
from typing import Optional

from .numbers import round_half_up

KM_PER_MILE = 1.60934
PLACEHOLDER = "--:--"


def format_pace(pace_min_per_km: float, use_miles: bool = False) -> str:
    """
    Format a pace as M:SS.

    Args:
        pace_min_per_km: Pace in minutes per kilometer
        use_miles: Convert to minutes per mile first

    Returns:
        Pace string, seconds rounded to the nearest whole second
    """
    pace = pace_min_per_km * KM_PER_MILE if use_miles else pace_min_per_km
    total_seconds = round_half_up(pace * 60)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_speed_as_pace(meters_per_second: Optional[float]) -> str:
    """Format a speed in m/s as a M:SS per km pace."""
    if not meters_per_second or meters_per_second <= 0:
        return PLACEHOLDER
    return format_pace((1 / meters_per_second) * 1000 / 60)


def format_time(seconds: Optional[float]) -> str:
    """
    Format seconds as H:MM:SS, or M:SS under an hour.

    Seconds are rounded to the nearest whole second. Missing, zero or
    non-finite values give a placeholder.
    """
    if not seconds or not math.isfinite(seconds):
        return PLACEHOLDER
    if seconds < 0:
        return f"-{format_time(-seconds)}"

    total = round_half_up(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration(seconds: float) -> str:
    """Format seconds as H:MM:SS or M:SS, dropping fractional seconds."""
    total = int(seconds)
    hours, remainder = divmod(total, 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"

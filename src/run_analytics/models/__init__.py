"""Data models for run analytics."""

from .activity import (
    RUN_TYPES,
    Activity,
    Gear,
    filter_runs,
    is_run_like,
    parse_activities,
)

__all__ = [
    "RUN_TYPES",
    "Activity",
    "Gear",
    "filter_runs",
    "is_run_like",
    "parse_activities",
]

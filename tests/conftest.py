"""Shared fixtures for run analytics tests."""

import itertools
from datetime import date, timedelta

import pytest

from run_analytics.models.activity import Activity


@pytest.fixture
def make_activity():
    """
    Factory for Activity objects.

    ``day`` may be a date or a YYYY-MM-DD string; the start time is 07:00
    local with a trailing Z, the way the provider exports it.
    """
    ids = itertools.count(1)

    def _make(
        day="2024-03-10",
        distance=5000.0,
        moving_time=1500.0,
        activity_type="Run",
        **fields,
    ) -> Activity:
        if isinstance(day, date):
            day = day.isoformat()
        record = {
            "id": next(ids),
            "name": f"{activity_type} {day}",
            "type": activity_type,
            "sport_type": fields.pop("sport_type", activity_type),
            "start_date_local": fields.pop("start_date_local", f"{day}T07:00:00Z"),
            "distance": distance,
            "moving_time": moving_time,
        }
        record.update(fields)
        return Activity.model_validate(record)

    return _make


@pytest.fixture
def daily_runs(make_activity):
    """Factory for one identical run per day over a date range, inclusive."""

    def _make(start: date, end: date, **fields):
        runs = []
        day = start
        while day <= end:
            runs.append(make_activity(day=day, **fields))
            day += timedelta(days=1)
        return runs

    return _make

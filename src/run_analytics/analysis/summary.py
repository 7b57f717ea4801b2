"""
Period Summary

Headline numbers for a viewed period (run count, distance, pace, longest
run, streaks) and the daily mileage trend with a trailing sum.
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..models.activity import Activity, Gear, filter_runs
from ..utils.dates import date_key, from_date_key, iter_days
from .race import PeriodMode, PeriodSelection


# view -> (days shown, trailing window in days)
MILEAGE_TREND_VIEWS = {
    "month": (30, 7),
    "year": (365, 90),
    "all": (730, 365),
}

SHOE_ID_PREFIX = "g"


@dataclass
class PeriodSummary:
    """Headline statistics for runs in a period."""

    run_count: int
    total_distance_km: float
    avg_distance_km: float
    avg_pace_min_per_km: float
    longest_run_km: float
    longest_streak: int  # consecutive days with a run
    longest_break: int  # days without a run between two run days

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "run_count": self.run_count,
            "total_distance_km": round(self.total_distance_km, 2),
            "avg_distance_km": round(self.avg_distance_km, 2),
            "avg_pace_min_per_km": round(self.avg_pace_min_per_km, 3),
            "longest_run_km": round(self.longest_run_km, 2),
            "longest_streak": self.longest_streak,
            "longest_break": self.longest_break,
        }


@dataclass(frozen=True)
class MileagePoint:
    """Distance run on one day plus the trailing-window total ending that day."""

    date: str
    distance_km: float
    trailing_km: float


def in_period(
    activity: Activity,
    period: PeriodSelection,
    today: Optional[date] = None,
) -> bool:
    """
    Whether an activity's local date falls in the selected period.

    Month mode without a month is all-time, as in the race windows. A
    missing year falls back to today's year; without ``today`` it matches
    every year.
    """
    if period.mode == PeriodMode.ALL:
        return True
    if period.mode == PeriodMode.MONTH and period.month is None:
        return True

    day = activity.local_date
    year = period.year
    if year is None and today is not None:
        year = today.year
    if year is not None and day.year != year:
        return False
    if period.mode == PeriodMode.MONTH:
        return day.month == period.month
    return True


def calculate_streaks(activities: Iterable[Activity]) -> Tuple[int, int]:
    """
    Longest run streak and longest break, in days.

    Both are measured on distinct local run dates.

    Returns:
        (longest_streak, longest_break)
    """
    run_days = sorted({from_date_key(a.date_key) for a in activities})
    if not run_days:
        return 0, 0

    longest_streak = 1
    current_streak = 1
    longest_break = 0

    for previous, current in zip(run_days, run_days[1:]):
        gap = (current - previous).days
        if gap == 1:
            current_streak += 1
        else:
            current_streak = 1
        longest_streak = max(longest_streak, current_streak)
        longest_break = max(longest_break, gap - 1)

    return longest_streak, longest_break


def summarize_period(
    activities: Iterable[Activity],
    period: PeriodSelection,
    today: Optional[date] = None,
) -> PeriodSummary:
    """
    Summarize the runs in a period.

    Args:
        activities: Activities to summarize; non-runs are ignored
        period: Viewed period
        today: Used for the year when the period has none

    Returns:
        PeriodSummary; all zeros if there are no runs in the period
    """
    runs = [a for a in filter_runs(activities) if in_period(a, period, today)]

    total_distance = sum(r.distance for r in runs)
    total_time = sum(r.moving_time for r in runs)
    avg_pace = (total_time / total_distance) * 1000 / 60 if total_distance > 0 else 0.0
    longest = max((r.distance for r in runs), default=0.0)
    longest_streak, longest_break = calculate_streaks(runs)

    return PeriodSummary(
        run_count=len(runs),
        total_distance_km=total_distance / 1000,
        avg_distance_km=(total_distance / 1000) / len(runs) if runs else 0.0,
        avg_pace_min_per_km=avg_pace,
        longest_run_km=longest / 1000,
        longest_streak=longest_streak,
        longest_break=longest_break,
    )


@dataclass(frozen=True)
class GearMileage:
    """Distance on one piece of gear, in the viewed period and lifetime."""

    gear_id: str
    name: str
    brand_name: Optional[str]
    primary: bool
    period_km: float
    lifetime_km: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "gear_id": self.gear_id,
            "name": self.name,
            "brand_name": self.brand_name,
            "primary": self.primary,
            "period_km": round(self.period_km, 1),
            "lifetime_km": round(self.lifetime_km, 1),
        }


def calculate_gear_mileage(
    activities: Iterable[Activity],
    gear: Iterable[Gear],
    period: PeriodSelection = PeriodSelection(),
    today: Optional[date] = None,
) -> List[GearMileage]:
    """
    Per-shoe mileage for the viewed period.

    Every activity with a ``gear_id`` in the period counts toward that gear.
    Only shoes are reported; the provider's shoe ids start with "g" and bike
    ids with "b".

    Returns:
        GearMileage sorted by period distance, then lifetime distance, both
        descending
    """
    period_meters: Dict[str, float] = {}
    for activity in activities:
        if activity.gear_id and in_period(activity, period, today):
            period_meters[activity.gear_id] = (
                period_meters.get(activity.gear_id, 0.0) + activity.distance
            )

    mileage = [
        GearMileage(
            gear_id=item.id,
            name=item.name,
            brand_name=item.brand_name,
            primary=item.primary,
            period_km=period_meters.get(item.id, 0.0) / 1000,
            lifetime_km=item.distance / 1000,
        )
        for item in gear
        if item.id.startswith(SHOE_ID_PREFIX)
    ]
    mileage.sort(key=lambda m: (m.period_km, m.lifetime_km), reverse=True)
    return mileage


def calculate_mileage_trend(
    activities: Iterable[Activity],
    anchor_date: date,
    view: str = "month",
) -> List[MileagePoint]:
    """
    Daily run distance with a trailing sum, ending on the anchor date.

    Views:
    - month: 30 days back, 7-day trailing sum
    - year: 365 days back, 90-day trailing sum
    - all: 730 days back, 365-day trailing sum

    Returns:
        One MileagePoint per day, oldest first

    Raises:
        ValueError: If view is not one of the above
    """
    if view not in MILEAGE_TREND_VIEWS:
        raise ValueError(f"Unknown mileage trend view: {view!r}")
    interval_days, trailing_days = MILEAGE_TREND_VIEWS[view]

    daily_km: Dict[str, float] = {}
    for run in filter_runs(activities):
        key = run.date_key
        daily_km[key] = daily_km.get(key, 0.0) + run.distance_km

    start = anchor_date - timedelta(days=interval_days)
    points = []
    for day in iter_days(start, anchor_date):
        window_start = day - timedelta(days=trailing_days - 1)
        trailing = sum(
            daily_km.get(date_key(d), 0.0) for d in iter_days(window_start, day)
        )
        points.append(
            MileagePoint(
                date=date_key(day),
                distance_km=daily_km.get(date_key(day), 0.0),
                trailing_km=trailing,
            )
        )
    return points

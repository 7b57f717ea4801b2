"""
Race Time Predictions

Extrapolates the longest run of the selected period to standard race
distances with the Riegel formula, then nudges the result by current
fitness (CTL) and form (TSB). Also produces a 0-100 race readiness score.

The Riegel formula: T2 = T1 * (D2/D1)^1.06

Where:
- T1 = known time
- D1 = known distance
- T2 = predicted time
- D2 = target distance
"""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..metrics.fitness import calculate_training_load_history
from ..metrics.load import DEFAULT_MAX_HR, DEFAULT_REST_HR, activities_to_daily_loads
from ..models.activity import Activity, filter_runs
from ..utils.dates import in_window
from ..utils.numbers import clamp, round_half_up

logger = logging.getLogger(__name__)


RIEGEL_EXPONENT = 1.06
ALL_TIME_WINDOW_DAYS = 90
QUALITY_WINDOW_DAYS = 28
LONG_RUN_WINDOW_DAYS = 14

# Quality session thresholds
QUALITY_MIN_DISTANCE_M = 5000
QUALITY_HR_FRACTION = 0.82
QUALITY_SPEED_FACTOR = 1.03
QUALITY_SUFFER_SCORE = 50


class RaceDistance(Enum):
    """Race distances predicted, with values in meters."""
    FIVE_K = 5000
    TEN_K = 10000
    HALF_MARATHON = 21097.5

    @classmethod
    def from_string(cls, s: str) -> Optional["RaceDistance"]:
        """Parse race distance from string."""
        mapping = {
            "5k": cls.FIVE_K,
            "5km": cls.FIVE_K,
            "10k": cls.TEN_K,
            "10km": cls.TEN_K,
            "half": cls.HALF_MARATHON,
            "half_marathon": cls.HALF_MARATHON,
            "21k": cls.HALF_MARATHON,
        }
        return mapping.get(s.lower().replace("-", "_").replace(" ", "_"))

    @property
    def display_name(self) -> str:
        """Get human-readable name."""
        names = {
            RaceDistance.FIVE_K: "5K",
            RaceDistance.TEN_K: "10K",
            RaceDistance.HALF_MARATHON: "Half Marathon",
        }
        return names[self]

    @property
    def meters(self) -> float:
        return float(self.value)


RACE_DISTANCES = (RaceDistance.FIVE_K, RaceDistance.TEN_K, RaceDistance.HALF_MARATHON)


class PeriodMode(str, Enum):
    """Which slice of history the user is looking at."""
    ALL = "all"
    YEAR = "year"
    MONTH = "month"


@dataclass(frozen=True)
class PeriodSelection:
    """
    A viewed period. ``month`` is 1-12; month mode without a month is
    treated as all-time.
    """

    mode: PeriodMode = PeriodMode.ALL
    year: Optional[int] = None
    month: Optional[int] = None


@dataclass(frozen=True)
class PeriodWindows:
    """Current and comparison date windows, all bounds inclusive."""

    current_start: date
    current_end: date
    previous_start: date
    previous_end: date


@dataclass
class RacePrediction:
    """Predicted result for one race distance."""

    name: str
    distance_m: float
    time_sec: float
    pace_m_per_s: Optional[float]
    delta_sec: Optional[float] = None  # vs previous period, negative = faster
    is_faster: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "distance_m": self.distance_m,
            "time_sec": round(self.time_sec, 1),
            "pace_m_per_s": round(self.pace_m_per_s, 3) if self.pace_m_per_s else None,
            "delta_sec": round(self.delta_sec, 1) if self.delta_sec is not None else None,
            "is_faster": self.is_faster,
        }


@dataclass
class RacePredictionReport:
    """Race predictions plus the fitness context they were adjusted with."""

    predictions: List[RacePrediction]
    ctl: float
    tsb: float
    has_previous_period: bool
    readiness_score: int
    readiness_band: str
    quality_runs: int
    longest_recent_run_km: float
    windows: Optional[PeriodWindows] = field(default=None, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "predictions": [p.to_dict() for p in self.predictions],
            "ctl": self.ctl,
            "tsb": self.tsb,
            "has_previous_period": self.has_previous_period,
            "readiness_score": self.readiness_score,
            "readiness_band": self.readiness_band,
            "quality_runs": self.quality_runs,
            "longest_recent_run_km": round(self.longest_recent_run_km, 2),
        }


def riegel_formula(
    known_time: float,
    known_distance: float,
    target_distance: float,
    exponent: float = RIEGEL_EXPONENT,
) -> float:
    """
    Predict a time over target_distance from a known performance.

    Args:
        known_time: Time in seconds over the known distance
        known_distance: Known distance in meters
        target_distance: Distance to predict, in meters
        exponent: Fatigue factor (default 1.06)

    Returns:
        Predicted time in seconds

    Raises:
        ValueError: If known_distance is not positive
    """
    if known_distance <= 0:
        raise ValueError("Distance must be positive")
    return known_time * (target_distance / known_distance) ** exponent


def _end_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def resolve_period_windows(period: PeriodSelection, today: date) -> PeriodWindows:
    """
    Work out the current and previous windows for a period selection.

    - month: the calendar month vs the month before
    - year: the calendar year vs the year before
    - all: the last 90 days vs the 90 days before that

    A month or year that contains today ends today.
    """
    if period.mode == PeriodMode.MONTH and period.month is not None:
        year = period.year if period.year is not None else today.year
        current_start = date(year, period.month, 1)
        is_current_month = year == today.year and period.month == today.month
        current_end = today if is_current_month else _end_of_month(year, period.month)
        previous_end = current_start - timedelta(days=1)
        previous_start = previous_end.replace(day=1)
    elif period.mode == PeriodMode.YEAR:
        year = period.year if period.year is not None else today.year
        current_start = date(year, 1, 1)
        current_end = today if year == today.year else date(year, 12, 31)
        previous_start = date(year - 1, 1, 1)
        previous_end = date(year - 1, 12, 31)
    else:
        current_end = today
        current_start = current_end - timedelta(days=ALL_TIME_WINDOW_DAYS)
        previous_end = current_start - timedelta(days=1)
        previous_start = previous_end - timedelta(days=ALL_TIME_WINDOW_DAYS)

    return PeriodWindows(current_start, current_end, previous_start, previous_end)


def fitness_multiplier(ctl: float) -> float:
    """Time multiplier from fitness: fitter runners get faster predictions."""
    if ctl > 40:
        return 0.98
    elif ctl > 25:
        return 0.99
    elif ctl < 10:
        return 1.02
    return 1.0


def freshness_multiplier(tsb: float) -> float:
    """Time multiplier from form: fresh is faster, fatigued is slower."""
    if tsb > 15:
        return 0.985
    elif tsb > 5:
        return 0.99
    elif tsb < -15:
        return 1.03
    elif tsb < -5:
        return 1.015
    return 1.0


def average_speed(runs: Sequence[Activity]) -> Optional[float]:
    """
    Distance-weighted average speed of a set of runs.

    Returns:
        Meters per second, or None if there is no distance or time
    """
    if not runs:
        return None
    total_distance = sum(run.distance for run in runs)
    total_time = sum(run.moving_time for run in runs)
    if total_distance <= 0 or total_time <= 0:
        return None
    return total_distance / total_time


def is_quality_run(
    run: Activity,
    max_hr: float,
    period_avg_speed: Optional[float],
) -> bool:
    """
    Whether a run counts as a quality session for readiness.

    It must be at least 5 km and show high effort by heart rate (82% of max),
    by speed (3% quicker than the period average) or by suffer score (50+).
    """
    high_effort_by_hr = bool(run.average_heartrate) and run.average_heartrate >= max_hr * QUALITY_HR_FRACTION
    high_effort_by_speed = (
        bool(period_avg_speed) and run.average_speed >= period_avg_speed * QUALITY_SPEED_FACTOR
    )
    high_effort_by_suffer = (run.suffer_score or 0) >= QUALITY_SUFFER_SCORE
    meaningful_distance = run.distance >= QUALITY_MIN_DISTANCE_M
    return meaningful_distance and (high_effort_by_hr or high_effort_by_speed or high_effort_by_suffer)


def calculate_readiness_score(
    ctl: float,
    tsb: float,
    quality_run_count: int,
    longest_recent_run_km: float,
) -> int:
    """
    Race readiness score (0-100).

    Weighted blend of:
    - fitness: CTL from 8 to 40 (35 points)
    - freshness: TSB closest to +8 (25 points)
    - quality density: 6 quality runs in 28 days (20 points)
    - long-run support: a 16 km run in 14 days (20 points)
    """
    fitness_score = clamp((ctl - 8) / 32) * 35
    freshness_score = (1 - clamp(abs(tsb - 8) / 25)) * 25
    quality_score = clamp(quality_run_count / 6) * 20
    long_run_score = clamp(longest_recent_run_km / 16) * 20
    return round_half_up(fitness_score + freshness_score + quality_score + long_run_score)


def readiness_band(score: int) -> str:
    """'ready' at 75+, 'building' at 55+, otherwise 'base'."""
    if score >= 75:
        return "ready"
    if score >= 55:
        return "building"
    return "base"


def _longest_timed(runs: Sequence[Activity]) -> Optional[Activity]:
    """Longest run with both distance and moving time, if any."""
    timed = [r for r in runs if r.distance > 0 and r.moving_time > 0]
    return max(timed, key=lambda r: r.distance) if timed else None


def predict_race_times(
    activities: Iterable[Activity],
    period: PeriodSelection,
    today: date,
    max_hr: float = DEFAULT_MAX_HR,
    rest_hr: float = DEFAULT_REST_HR,
) -> Optional[RacePredictionReport]:
    """
    Predict 5K, 10K and half marathon times for the selected period.

    Fitness and form come from the training load history over the whole
    activity set, read on the last day of the current window.

    Args:
        activities: Full activity history
        period: Viewed period
        today: Date that counts as today for period clamping
        max_hr: Athlete's maximum heart rate
        rest_hr: Athlete's resting heart rate

    Returns:
        RacePredictionReport, or None if the current window has no usable runs
    """
    activities = list(activities)
    runs = filter_runs(activities)
    if not runs:
        logger.debug("No runs available for race predictions")
        return None

    windows = resolve_period_windows(period, today)

    current_runs = [
        r for r in runs if in_window(r.local_date, windows.current_start, windows.current_end)
    ]
    previous_runs = [
        r for r in runs if in_window(r.local_date, windows.previous_start, windows.previous_end)
    ]

    current_avg_speed = average_speed(current_runs)
    if not current_avg_speed:
        logger.debug(
            "No usable runs between %s and %s for race predictions",
            windows.current_start, windows.current_end,
        )
        return None

    daily_loads = activities_to_daily_loads(activities, max_hr, rest_hr)
    metrics = calculate_training_load_history(
        daily_loads, windows.current_start, windows.current_end
    )
    latest = metrics[-1] if metrics else None
    ctl = latest.ctl if latest else 0.0
    tsb = latest.tsb if latest else 0.0

    adjustment = fitness_multiplier(ctl) * freshness_multiplier(tsb)

    reference_run = _longest_timed(current_runs)
    if reference_run is None:
        logger.debug("No timed run to base race predictions on")
        return None
    previous_reference = _longest_timed(previous_runs)

    predictions = []
    for race in RACE_DISTANCES:
        predicted_time = riegel_formula(
            reference_run.moving_time, reference_run.distance, race.meters
        )
        predicted_time *= adjustment
        predicted_pace = race.meters / predicted_time if predicted_time > 0 else None

        delta = None
        is_faster = False
        if previous_reference is not None:
            previous_time = riegel_formula(
                previous_reference.moving_time, previous_reference.distance, race.meters
            )
            delta = predicted_time - previous_time
            is_faster = delta < 0

        predictions.append(
            RacePrediction(
                name=race.display_name,
                distance_m=race.meters,
                time_sec=predicted_time,
                pace_m_per_s=predicted_pace,
                delta_sec=delta,
                is_faster=is_faster,
            )
        )

    quality_start = windows.current_end - timedelta(days=QUALITY_WINDOW_DAYS - 1)
    quality_runs = [
        r for r in runs
        if in_window(r.local_date, quality_start, windows.current_end)
        and is_quality_run(r, max_hr, current_avg_speed)
    ]

    long_run_start = windows.current_end - timedelta(days=LONG_RUN_WINDOW_DAYS - 1)
    longest_recent_run_km = max(
        (r.distance_km for r in runs if in_window(r.local_date, long_run_start, windows.current_end)),
        default=0.0,
    )

    score = calculate_readiness_score(ctl, tsb, len(quality_runs), longest_recent_run_km)

    return RacePredictionReport(
        predictions=predictions,
        ctl=ctl,
        tsb=tsb,
        has_previous_period=bool(previous_runs),
        readiness_score=score,
        readiness_band=readiness_band(score),
        quality_runs=len(quality_runs),
        longest_recent_run_km=longest_recent_run_km,
        windows=windows,
    )

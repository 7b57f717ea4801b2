"""
Training Health Metrics

Windowed indicators of how training is going as of an anchor date:
- ACWR (Acute:Chronic Workload Ratio) for injury risk
- Weekly ramp in distance
- Consistency of run frequency over recent weeks
- Long-run share of the week
- Efficiency index (distance per heartbeat)
- GAP trend (fortnight over fortnight, estimated from summary data)

Every window is made of whole local calendar days and ends on the anchor
date. Activities after the anchor are ignored, so the metrics describe the
period being viewed rather than today.
"""

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from ..metrics.fitness import calculate_training_load_history
from ..metrics.gap import estimate_gap_pace
from ..metrics.load import DEFAULT_MAX_HR, DEFAULT_REST_HR, activities_to_daily_loads
from ..models.activity import Activity, is_run_like
from ..utils.dates import in_window
from ..utils.numbers import round_half_up


CONSISTENCY_WEEKS = 6
TARGET_RUNS_PER_WEEK = 4
EFFICIENCY_WINDOW_DAYS = 28
GAP_TREND_WINDOW_DAYS = 14

# Classification bands
HIGH_RISK = "high_risk"
HIGH = "high"
BALANCED = "balanced"
LOW = "low"
DELOAD = "deload"
STRONG = "strong"
MODERATE = "moderate"
EFFICIENT = "efficient"
DEVELOPING = "developing"
IMPROVING = "improving"
STABLE = "stable"
DECLINING = "declining"
UNKNOWN = "unknown"

BAND_COLORS = {
    HIGH_RISK: "red",
    HIGH: "dark_orange",
    BALANCED: "green",
    LOW: "yellow",
    DELOAD: "blue",
    STRONG: "green",
    MODERATE: "yellow",
    EFFICIENT: "green",
    DEVELOPING: "dark_orange",
    IMPROVING: "green",
    STABLE: "yellow",
    DECLINING: "dark_orange",
    UNKNOWN: "grey50",
}


@dataclass(frozen=True)
class WeeklyRamp:
    """Change in weekly distance versus the week before."""

    ramp_km: float
    ramp_percent: Optional[float]

    def to_dict(self) -> dict:
        return {
            "ramp_km": round(self.ramp_km, 2),
            "ramp_percent": round(self.ramp_percent, 1) if self.ramp_percent is not None else None,
        }


@dataclass(frozen=True)
class HealthSnapshot:
    """All training health metrics for one anchor date."""

    anchor_date: date
    acwr: Optional[float]
    weekly_ramp: WeeklyRamp
    consistency_score: int
    long_run_ratio: Optional[float]
    efficiency_index: Optional[float]
    gap_trend: Optional[float]

    def bands(self) -> Dict[str, str]:
        """Qualitative band for each metric."""
        return {
            "acwr": classify_acwr(self.acwr),
            "weekly_ramp": classify_ramp(self.weekly_ramp.ramp_percent),
            "consistency_score": classify_consistency(self.consistency_score),
            "long_run_ratio": classify_long_run_ratio(self.long_run_ratio),
            "efficiency_index": classify_efficiency_index(self.efficiency_index),
            "gap_trend": classify_gap_trend(self.gap_trend),
        }

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "anchor_date": self.anchor_date.isoformat(),
            "acwr": round(self.acwr, 2) if self.acwr is not None else None,
            "weekly_ramp": self.weekly_ramp.to_dict(),
            "consistency_score": self.consistency_score,
            "long_run_ratio": round(self.long_run_ratio, 1) if self.long_run_ratio is not None else None,
            "efficiency_index": round(self.efficiency_index, 3) if self.efficiency_index is not None else None,
            "gap_trend": round(self.gap_trend, 1) if self.gap_trend is not None else None,
            "bands": self.bands(),
        }


def _runs_through(activities: Iterable[Activity], anchor_date: date) -> List[Activity]:
    """Run-like activities dated on or before the anchor."""
    return [a for a in activities if is_run_like(a) and a.local_date <= anchor_date]


def _runs_between(runs: Iterable[Activity], start: date, end: date) -> List[Activity]:
    return [a for a in runs if in_window(a.local_date, start, end)]


def _standard_deviation(values: List[float]) -> float:
    """Population standard deviation."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    variance = sum((v - mean) ** 2 for v in values) / len(values)
    return math.sqrt(variance)


def calculate_acwr(
    activities: Iterable[Activity],
    anchor_date: date,
    max_hr: float = DEFAULT_MAX_HR,
    rest_hr: float = DEFAULT_REST_HR,
) -> Optional[float]:
    """
    Acute:Chronic Workload Ratio as of the anchor date.

    Uses the last day of the training load history from the first run up to
    the anchor: ATL / CTL.

    Returns:
        ACWR, or None without runs or with zero chronic load
    """
    runs = _runs_through(activities, anchor_date)
    if not runs:
        return None

    daily_loads = activities_to_daily_loads(runs, max_hr, rest_hr)
    start = min(run.local_date for run in runs)

    history = calculate_training_load_history(daily_loads, start, anchor_date)
    if not history:
        return None

    latest = history[-1]
    if latest.ctl <= 0:
        return None

    return latest.atl / latest.ctl


def weekly_distance_window(
    activities: Iterable[Activity],
    anchor_date: date,
) -> Tuple[float, float]:
    """
    Run distance in the 7 days ending on the anchor and the 7 days before.

    Returns:
        (current_km, previous_km)
    """
    start_current = anchor_date - timedelta(days=6)
    end_previous = start_current - timedelta(days=1)
    start_previous = end_previous - timedelta(days=6)

    current_km = 0.0
    previous_km = 0.0
    for run in _runs_through(activities, anchor_date):
        day = run.local_date
        if in_window(day, start_current, anchor_date):
            current_km += run.distance_km
        elif in_window(day, start_previous, end_previous):
            previous_km += run.distance_km

    return current_km, previous_km


def calculate_weekly_ramp(
    activities: Iterable[Activity],
    anchor_date: date,
) -> WeeklyRamp:
    """
    Week-over-week change in run distance.

    Returns:
        WeeklyRamp; ramp_percent is None when the previous week was empty
    """
    current_km, previous_km = weekly_distance_window(activities, anchor_date)
    ramp_km = current_km - previous_km
    ramp_percent = (ramp_km / previous_km) * 100 if previous_km > 0 else None
    return WeeklyRamp(ramp_km=ramp_km, ramp_percent=ramp_percent)


def weekly_run_counts(
    activities: Iterable[Activity],
    anchor_date: date,
    weeks: int = CONSISTENCY_WEEKS,
) -> List[int]:
    """Run counts per 7-day bucket going back from the anchor (index 0 = latest)."""
    counts = [0] * weeks
    for run in _runs_through(activities, anchor_date):
        week_index = (anchor_date - run.local_date).days // 7
        if 0 <= week_index < weeks:
            counts[week_index] += 1
    return counts


def calculate_consistency_score(
    activities: Iterable[Activity],
    anchor_date: date,
    weeks: int = CONSISTENCY_WEEKS,
) -> int:
    """
    Consistency score (0-100) from run frequency and its stability.

    Frequency rewards an average of 4 runs per week. Stability penalizes
    week-to-week variation (coefficient of variation).

    Returns:
        Score 0-100, 0 if there were no runs in any bucket
    """
    counts = weekly_run_counts(activities, anchor_date, weeks)
    if not any(counts):
        return 0

    average_runs = sum(counts) / len(counts)
    sd = _standard_deviation(counts)
    cv = sd / average_runs if average_runs > 0 else 1.0

    frequency_score = min(1.0, average_runs / TARGET_RUNS_PER_WEEK)
    stability_score = max(0.0, 1 - min(cv, 1.0))

    return round_half_up((frequency_score * 0.65 + stability_score * 0.35) * 100)


def calculate_long_run_ratio(
    activities: Iterable[Activity],
    anchor_date: date,
) -> Optional[float]:
    """
    Longest run as a percentage of the week's distance.

    Returns:
        Percentage, or None if no distance was run in the 7 days to the anchor
    """
    week_runs = _runs_between(
        _runs_through(activities, anchor_date),
        anchor_date - timedelta(days=6),
        anchor_date,
    )
    total_km = sum(run.distance_km for run in week_runs)
    if total_km <= 0:
        return None
    longest_km = max(run.distance_km for run in week_runs)
    return longest_km / total_km * 100


def calculate_efficiency_index(
    activities: Iterable[Activity],
    anchor_date: date,
    window_days: int = EFFICIENCY_WINDOW_DAYS,
) -> Optional[float]:
    """
    Meters covered per heartbeat over the trailing window.

    Heartbeats for a run are (avg HR / 60) * moving time. Runs without a
    positive heart rate are left out entirely. Higher is more economical.

    Returns:
        Meters per heartbeat, or None if no heart rate data
    """
    window_runs = _runs_between(
        _runs_through(activities, anchor_date),
        anchor_date - timedelta(days=window_days - 1),
        anchor_date,
    )

    total_distance = 0.0
    total_heartbeats = 0.0
    for run in window_runs:
        if not run.average_heartrate or run.average_heartrate <= 0 or run.moving_time <= 0:
            continue
        total_heartbeats += (run.average_heartrate / 60) * run.moving_time
        total_distance += run.distance

    if total_heartbeats <= 0:
        return None
    return total_distance / total_heartbeats


def average_gap_pace(runs: Iterable[Activity]) -> Optional[float]:
    """
    Distance-weighted estimated GAP in seconds per km.

    Returns:
        Average GAP, or None if no run has usable distance and time
    """
    weighted_sum = 0.0
    total_distance = 0.0
    for run in runs:
        gap_pace = estimate_gap_pace(run)
        if gap_pace is None:
            continue
        weighted_sum += gap_pace * run.distance
        total_distance += run.distance

    if total_distance <= 0:
        return None
    return weighted_sum / total_distance


def calculate_gap_trend(
    activities: Iterable[Activity],
    anchor_date: date,
    window_days: int = GAP_TREND_WINDOW_DAYS,
) -> Optional[float]:
    """
    Change in estimated GAP between the last two windows.

    Compares the trailing window ending on the anchor with the window of the
    same length just before it.

    Returns:
        Seconds per km difference (negative = faster), or None unless both
        windows have runs
    """
    runs = _runs_through(activities, anchor_date)
    current_start = anchor_date - timedelta(days=window_days - 1)
    previous_end = current_start - timedelta(days=1)
    previous_start = previous_end - timedelta(days=window_days - 1)

    current_pace = average_gap_pace(_runs_between(runs, current_start, anchor_date))
    previous_pace = average_gap_pace(_runs_between(runs, previous_start, previous_end))

    if current_pace is None or previous_pace is None:
        return None
    return current_pace - previous_pace


def calculate_health_snapshot(
    activities: Iterable[Activity],
    anchor_date: date,
    max_hr: float = DEFAULT_MAX_HR,
    rest_hr: float = DEFAULT_REST_HR,
) -> HealthSnapshot:
    """Calculate every training health metric for one anchor date."""
    activities = list(activities)
    return HealthSnapshot(
        anchor_date=anchor_date,
        acwr=calculate_acwr(activities, anchor_date, max_hr, rest_hr),
        weekly_ramp=calculate_weekly_ramp(activities, anchor_date),
        consistency_score=calculate_consistency_score(activities, anchor_date),
        long_run_ratio=calculate_long_run_ratio(activities, anchor_date),
        efficiency_index=calculate_efficiency_index(activities, anchor_date),
        gap_trend=calculate_gap_trend(activities, anchor_date),
    )


# ============================================================================
# Classification bands
# ============================================================================

def classify_acwr(acwr: Optional[float]) -> str:
    """
    Injury-risk band for an ACWR value.

    - > 1.5: high risk
    - > 1.3: high
    - 0.8 - 1.3: balanced
    - < 0.8: low
    """
    if acwr is None:
        return UNKNOWN
    if acwr > 1.5:
        return HIGH_RISK
    if acwr > 1.3:
        return HIGH
    if acwr >= 0.8:
        return BALANCED
    return LOW


def classify_ramp(ramp_percent: Optional[float]) -> str:
    """Band for a week-over-week distance change in percent."""
    if ramp_percent is None:
        return UNKNOWN
    if ramp_percent > 20:
        return HIGH_RISK
    if ramp_percent > 10:
        return HIGH
    if ramp_percent >= -10:
        return BALANCED
    return DELOAD


def classify_consistency(score: int) -> str:
    if score >= 75:
        return STRONG
    if score >= 50:
        return MODERATE
    return LOW


def classify_long_run_ratio(ratio: Optional[float]) -> str:
    """Band for the long run's share of weekly distance."""
    if ratio is None:
        return UNKNOWN
    if ratio > 40:
        return HIGH
    if ratio >= 20:
        return BALANCED
    return LOW


def classify_efficiency_index(index: Optional[float]) -> str:
    if index is None:
        return UNKNOWN
    if index >= 1.4:
        return EFFICIENT
    if index >= 1.1:
        return MODERATE
    return DEVELOPING


def classify_gap_trend(delta_sec_per_km: Optional[float]) -> str:
    """Band for a GAP change; a few seconds either way counts as stable."""
    if delta_sec_per_km is None:
        return UNKNOWN
    if delta_sec_per_km < -5:
        return IMPROVING
    if delta_sec_per_km > 5:
        return DECLINING
    return STABLE

"""
Grade Adjusted Pace (GAP)

GAP estimates the flat-ground pace that would take the same effort as the
pace actually run on a slope. The energy cost of running on a grade comes
from Minetti's polynomial fit:

    C(i) = 155.4 i^5 - 30.4 i^4 - 43.3 i^3 + 46.3 i^2 + 19.5 i + 3.6

where i is the gradient as a decimal and C is in J/kg/m. The ratio of C(i)
to the flat cost C(0) is the adjustment factor: uphill costs more (> 1),
moderate downhill costs less (< 1).

References:
- Minetti, A.E. et al. (2002). Energy cost of walking and running at
  extreme uphill and downhill slopes. J Appl Physiol 93: 1039-1046.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ..models.activity import Activity
from ..utils.numbers import round_half_up


# Coefficients of C(i), highest power first
MINETTI_COEFFICIENTS = (155.4, -30.4, -43.3, 46.3, 19.5, 3.6)

# The polynomial is only fitted for slopes between -45% and +45%
MAX_GRADE = 0.45

# Ceiling for the whole-activity grade estimate from summary data
MAX_ESTIMATED_GRADE = 0.25

# Split length for per-kilometre splits, in meters
SPLIT_DISTANCE = 1000.0


@dataclass
class ActivityGAP:
    """GAP summary for a sampled activity stream. Paces are in min/km."""

    overall_gap_pace: float
    average_actual_pace: float
    gap_paces: List[float] = field(default_factory=list)
    total_adjusted_time: float = 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "overall_gap_pace": round(self.overall_gap_pace, 3),
            "average_actual_pace": round(self.average_actual_pace, 3),
            "gap_paces": self.gap_paces,
            "total_adjusted_time": round(self.total_adjusted_time, 1),
        }


def metabolic_cost(grade: float) -> float:
    """
    Energy cost of running at a grade.

    Args:
        grade: Gradient as decimal (0.10 = 10% uphill, -0.10 = 10% downhill),
               clamped to +/-45%

    Returns:
        Metabolic cost in J/kg/m
    """
    g = max(-MAX_GRADE, min(MAX_GRADE, grade))
    cost = 0.0
    for coefficient in MINETTI_COEFFICIENTS:
        cost = cost * g + coefficient
    return cost


def gap_adjustment_factor(grade: float) -> float:
    """Cost of running at a grade relative to flat ground (1.0 when flat)."""
    return metabolic_cost(grade) / metabolic_cost(0.0)


def calculate_gap(pace: float, grade: float) -> float:
    """
    Grade adjusted pace for a single point.

    Args:
        pace: Actual pace in seconds per meter
        grade: Gradient as decimal

    Returns:
        Equivalent flat-ground pace in seconds per meter
    """
    return pace / gap_adjustment_factor(grade)


def calculate_activity_gap(
    velocities: Sequence[float],
    grades: Sequence[Optional[float]],
) -> ActivityGAP:
    """
    Calculate GAP over a whole activity stream.

    Each sample is taken to cover one second. Samples with zero or negative
    velocity count as stopped: they get a 0 in the per-point series and are
    left out of the totals. A missing grade sample counts as flat.

    Args:
        velocities: Velocities in m/s
        grades: Grades as decimals, aligned with velocities

    Returns:
        ActivityGAP; all zeros if the streams are empty or misaligned
    """
    if len(velocities) != len(grades) or len(velocities) == 0:
        return ActivityGAP(overall_gap_pace=0.0, average_actual_pace=0.0)

    total_time = 0.0
    total_adjusted_time = 0.0
    total_distance = 0.0
    gap_paces: List[float] = []

    for velocity, grade in zip(velocities, grades):
        if velocity <= 0:
            gap_paces.append(0.0)
            continue

        pace = 1 / velocity
        gap_pace = calculate_gap(pace, grade or 0.0)
        gap_paces.append(gap_pace * 1000 / 60)

        # One second at this velocity; adjusted time is the same distance at GAP
        total_distance += velocity
        total_time += 1
        total_adjusted_time += gap_pace * velocity

    if total_distance > 0:
        average_actual_pace = (total_time / total_distance) * 1000 / 60
        overall_gap_pace = (total_adjusted_time / total_distance) * 1000 / 60
    else:
        average_actual_pace = 0.0
        overall_gap_pace = 0.0

    return ActivityGAP(
        overall_gap_pace=overall_gap_pace,
        average_actual_pace=average_actual_pace,
        gap_paces=gap_paces,
        total_adjusted_time=total_adjusted_time,
    )


def estimate_average_grade(activity: Activity) -> float:
    """
    Rough average grade from summary data: climb over distance.

    Only the total climb is known, not where it happened or how much was
    descended, so this is clamped to [0, 0.25] and is only good for a coarse
    whole-activity adjustment.
    """
    if activity.distance <= 0:
        return 0.0
    grade = activity.total_elevation_gain / activity.distance
    return max(0.0, min(MAX_ESTIMATED_GRADE, grade))


def estimate_gap_pace(activity: Activity) -> Optional[float]:
    """
    Estimated GAP for an activity in seconds per km, from summary data.

    Returns:
        Adjusted pace, or None when distance or moving time is zero
    """
    if activity.distance <= 0 or activity.moving_time <= 0:
        return None
    pace_sec_per_km = activity.moving_time / activity.distance * 1000
    return pace_sec_per_km / gap_adjustment_factor(estimate_average_grade(activity))


@dataclass(frozen=True)
class Split:
    """One split of a sampled activity. ``distance_km`` labels where it ended."""

    distance_km: int
    pace_min_per_km: float
    average_hr: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "distance_km": self.distance_km,
            "pace_min_per_km": round(self.pace_min_per_km, 3),
            "average_hr": self.average_hr,
        }


def calculate_splits(
    distances: Sequence[float],
    times: Optional[Sequence[float]] = None,
    heart_rates: Optional[Sequence[Optional[float]]] = None,
    split_distance: float = SPLIT_DISTANCE,
) -> List[Split]:
    """
    Break cumulative distance/time streams into per-kilometre splits.

    A split closes once it covers at least ``split_distance`` meters, and the
    last sample closes whatever is left over. Without a time stream every
    split has a pace of 0. Heart rate samples that are missing or 0 are left
    out of the split average.

    Args:
        distances: Cumulative distance in meters per sample
        times: Cumulative elapsed seconds per sample
        heart_rates: Heart rate per sample, in bpm

    Returns:
        Splits in order; empty if there are no samples or the streams are
        misaligned
    """
    count = len(distances)
    if count == 0:
        return []
    if times is not None and len(times) != count:
        return []
    if heart_rates is not None and len(heart_rates) != count:
        return []

    splits: List[Split] = []
    split_dist = 0.0
    split_time = 0.0
    hr_total = 0.0
    hr_count = 0
    last_dist = 0.0
    last_time = 0.0

    for i, d in enumerate(distances):
        t = times[i] if times is not None else 0.0
        hr = heart_rates[i] if heart_rates is not None else None

        split_dist += d - last_dist
        split_time += t - last_time
        if hr:
            hr_total += hr
            hr_count += 1

        is_last = i == count - 1
        if split_dist >= split_distance or (is_last and split_dist > 0):
            splits.append(
                Split(
                    distance_km=round_half_up(d / 1000),
                    pace_min_per_km=(split_time / split_dist) * 1000 / 60,
                    average_hr=round_half_up(hr_total / hr_count) if hr_count else None,
                )
            )
            split_dist = 0.0
            split_time = 0.0
            hr_total = 0.0
            hr_count = 0

        last_dist = d
        last_time = t

    return splits

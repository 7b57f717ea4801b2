"""Training load calculations (TRIMP and daily load buckets)."""

import logging
import math
from typing import Dict, Iterable

from ..models.activity import Activity, is_run_like
from ..utils.dates import date_key_prefix
from ..utils.numbers import round_half_up

logger = logging.getLogger(__name__)


DEFAULT_MAX_HR = 185
DEFAULT_REST_HR = 60

# Banister's sex-specific coefficients (a, b)
TRIMP_COEFFICIENTS = {
    "male": (0.64, 1.92),
    "female": (0.86, 1.67),
}

# Fraction of heart rate reserve assumed when nothing better is recorded
ESTIMATED_HRR_FRACTION = 0.6


def calculate_trimp(
    duration_min: float,
    avg_hr: float,
    max_hr: float,
    rest_hr: float = DEFAULT_REST_HR,
    sex: str = "male",
) -> float:
    """
    Training Impulse using Banister's exponential formula.

    TRIMP accounts for both duration and intensity, with an exponential
    weighting that emphasizes high-intensity work.

    Args:
        duration_min: Duration of activity in minutes
        avg_hr: Average heart rate during activity
        max_hr: Maximum heart rate
        rest_hr: Resting heart rate
        sex: 'male' or 'female' (selects the exponential coefficients)

    Returns:
        TRIMP rounded to a whole number, 0 for nonsensical heart rates
    """
    if avg_hr <= rest_hr or max_hr <= rest_hr:
        return 0.0

    # Heart rate ratio (fraction of HRR used)
    hrr = (avg_hr - rest_hr) / (max_hr - rest_hr)
    hrr = max(0.0, min(1.0, hrr))

    a, b = TRIMP_COEFFICIENTS.get(sex.lower(), TRIMP_COEFFICIENTS["male"])

    # TRIMP = duration * hrr * a * e^(b * hrr)
    trimp = duration_min * hrr * a * math.exp(b * hrr)
    return float(round_half_up(trimp))


def calculate_activity_trimp(
    activity: Activity,
    max_hr: float,
    rest_hr: float = DEFAULT_REST_HR,
) -> float:
    """
    TRIMP for a single activity, with fallbacks for missing heart rate.

    Order of preference:
    1. Heart-rate TRIMP from the recorded average heart rate
    2. The provider's suffer score, used as-is
    3. Heart-rate TRIMP assuming a moderate effort at 60% of reserve

    Args:
        activity: The activity to score
        max_hr: Athlete's maximum heart rate
        rest_hr: Athlete's resting heart rate

    Returns:
        TRIMP value for the activity
    """
    duration_min = activity.moving_time / 60

    if activity.average_heartrate:
        return calculate_trimp(duration_min, activity.average_heartrate, max_hr, rest_hr)

    if activity.suffer_score:
        return activity.suffer_score

    estimated_hr = rest_hr + (max_hr - rest_hr) * ESTIMATED_HRR_FRACTION
    return calculate_trimp(duration_min, estimated_hr, max_hr, rest_hr)


def activities_to_daily_loads(
    activities: Iterable[Activity],
    max_hr: float,
    rest_hr: float = DEFAULT_REST_HR,
) -> Dict[str, float]:
    """
    Sum TRIMP per local calendar day across run activities.

    Days are keyed by the date portion of the local start timestamp. Several
    runs on the same day add up.

    Args:
        activities: Activities in any order
        max_hr: Athlete's maximum heart rate
        rest_hr: Athlete's resting heart rate

    Returns:
        Mapping of YYYY-MM-DD to total TRIMP for that day
    """
    daily_loads: Dict[str, float] = {}
    skipped = 0

    for activity in activities:
        if not is_run_like(activity):
            skipped += 1
            continue

        day = date_key_prefix(activity.start_date_local)
        trimp = calculate_activity_trimp(activity, max_hr, rest_hr)
        daily_loads[day] = daily_loads.get(day, 0.0) + trimp

    if skipped:
        logger.debug("Skipped %d non-run activities when bucketing daily load", skipped)

    return daily_loads

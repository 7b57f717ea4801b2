"""Fitness-Fatigue model calculations (CTL, ATL, TSB)."""

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Dict, List, Optional

from ..utils.dates import date_key, from_date_key, iter_days
from ..utils.numbers import round_half_up_to

logger = logging.getLogger(__name__)


CTL_TIME_CONSTANT = 42  # Chronic Training Load (fitness)
ATL_TIME_CONSTANT = 7  # Acute Training Load (fatigue)


@dataclass(frozen=True)
class TrainingLoadMetric:
    """Fitness-Fatigue model values for one calendar day."""

    date: str  # YYYY-MM-DD
    ctl: float  # Chronic Training Load (fitness) - 42 day EWMA
    atl: float  # Acute Training Load (fatigue) - 7 day EWMA
    tsb: float  # Training Stress Balance (form) = CTL - ATL
    trimp: float  # Summed TRIMP for the day

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "date": self.date,
            "ctl": self.ctl,
            "atl": self.atl,
            "tsb": self.tsb,
            "trimp": self.trimp,
        }


@dataclass(frozen=True)
class FitnessState:
    """
    Unrounded CTL/ATL as of the end of ``last_date``.

    Lets callers extend a history one day at a time instead of replaying it
    from the first activity. ``last_date`` is None before any day has been
    processed.
    """

    last_date: Optional[date] = None
    ctl: float = 0.0
    atl: float = 0.0

    @property
    def tsb(self) -> float:
        return self.ctl - self.atl


@dataclass(frozen=True)
class TSBInterpretation:
    """Qualitative reading of a TSB value."""

    status: str  # 'fresh', 'neutral', 'fatigued'
    description: str
    color: str


def calculate_ewma(
    current_value: float,
    previous_ewma: float,
    time_constant: int,
) -> float:
    """
    Exponentially Weighted Moving Average.

    Uses the formula: EWMA_n = EWMA_{n-1} * decay + value * (1 - decay)
    where decay = e^(-1/time_constant)

    Args:
        current_value: Today's training load
        previous_ewma: Yesterday's EWMA value
        time_constant: Time constant in days (42 for CTL, 7 for ATL)

    Returns:
        New EWMA value
    """
    decay = math.exp(-1 / time_constant)
    return previous_ewma * decay + current_value * (1 - decay)


def calculate_training_load_history(
    daily_loads: Dict[str, float],
    start_date: date,
    end_date: date,
) -> List[TrainingLoadMetric]:
    """
    Calculate CTL, ATL and TSB for every day from start_date to end_date.

    CTL and ATL are running averages over the whole training history, so the
    replay starts at the earliest day with load (or start_date, whichever is
    earlier) and only days from start_date onward are returned. Days without
    load still decay both averages.

    Args:
        daily_loads: Mapping of YYYY-MM-DD to that day's TRIMP
        start_date: First day to include in the result
        end_date: Last day to include in the result

    Returns:
        One TrainingLoadMetric per day, oldest first; empty if there is no load
    """
    if not daily_loads:
        return []

    first_load_date = from_date_key(min(daily_loads))
    calculation_start = min(first_load_date, start_date)

    logger.debug(
        "Replaying training load from %s, reporting %s to %s",
        calculation_start, start_date, end_date,
    )

    metrics: List[TrainingLoadMetric] = []
    ctl = 0.0
    atl = 0.0

    for day in iter_days(calculation_start, end_date):
        key = date_key(day)
        trimp = daily_loads.get(key, 0.0)

        ctl = calculate_ewma(trimp, ctl, CTL_TIME_CONSTANT)
        atl = calculate_ewma(trimp, atl, ATL_TIME_CONSTANT)

        if day >= start_date:
            metrics.append(
                TrainingLoadMetric(
                    date=key,
                    ctl=round_half_up_to(ctl),
                    atl=round_half_up_to(atl),
                    tsb=round_half_up_to(ctl - atl),
                    trimp=trimp,
                )
            )

    return metrics


def advance_fitness_state(
    state: FitnessState,
    daily_loads: Dict[str, float],
    through_date: date,
) -> FitnessState:
    """
    Extend a FitnessState day by day up to and including through_date.

    A fresh state (``last_date`` None) starts at the earliest day in
    daily_loads, which gives the same values as a full history replay.

    Args:
        state: State to continue from
        daily_loads: Mapping of YYYY-MM-DD to that day's TRIMP
        through_date: Last day to fold into the state

    Returns:
        New state; the input state is returned unchanged if there is
        nothing to process
    """
    if state.last_date is None:
        if not daily_loads:
            return state
        first_day = from_date_key(min(daily_loads))
    else:
        first_day = state.last_date + timedelta(days=1)

    if first_day > through_date:
        return state

    ctl = state.ctl
    atl = state.atl
    for day in iter_days(first_day, through_date):
        trimp = daily_loads.get(date_key(day), 0.0)
        ctl = calculate_ewma(trimp, ctl, CTL_TIME_CONSTANT)
        atl = calculate_ewma(trimp, atl, ATL_TIME_CONSTANT)

    return FitnessState(last_date=through_date, ctl=ctl, atl=atl)


def interpret_tsb(tsb: float) -> TSBInterpretation:
    """
    Get a fitness/freshness reading for a TSB value.

    Args:
        tsb: Training Stress Balance

    Returns:
        TSBInterpretation with status, description and display color
    """
    if tsb > 15:
        return TSBInterpretation("fresh", "Well rested, ready for hard effort", "green")
    elif tsb > 5:
        return TSBInterpretation("fresh", "Fresh, good for racing", "chartreuse3")
    elif tsb > -10:
        return TSBInterpretation("neutral", "Balanced training load", "yellow")
    elif tsb > -25:
        return TSBInterpretation("fatigued", "Accumulated fatigue", "dark_orange")
    else:
        return TSBInterpretation("fatigued", "Overreaching, consider rest", "red")

"""Training metrics calculations."""

from .load import (
    DEFAULT_MAX_HR,
    DEFAULT_REST_HR,
    activities_to_daily_loads,
    calculate_activity_trimp,
    calculate_trimp,
)
from .fitness import (
    ATL_TIME_CONSTANT,
    CTL_TIME_CONSTANT,
    FitnessState,
    TrainingLoadMetric,
    TSBInterpretation,
    advance_fitness_state,
    calculate_ewma,
    calculate_training_load_history,
    interpret_tsb,
)
from .gap import (
    SPLIT_DISTANCE,
    ActivityGAP,
    Split,
    calculate_activity_gap,
    calculate_gap,
    calculate_splits,
    estimate_average_grade,
    estimate_gap_pace,
    gap_adjustment_factor,
    metabolic_cost,
)
from .zones import (
    DEFAULT_ZONES,
    HeartRateZone,
    HeartRateZoneAnalysis,
    ZoneDefinition,
    analyze_heart_rate_zones,
    build_zones,
    calculate_average_hr,
    estimate_max_hr,
    get_zone_index,
)

__all__ = [
    # Load calculations
    "DEFAULT_MAX_HR",
    "DEFAULT_REST_HR",
    "activities_to_daily_loads",
    "calculate_activity_trimp",
    "calculate_trimp",
    # Fitness model
    "ATL_TIME_CONSTANT",
    "CTL_TIME_CONSTANT",
    "FitnessState",
    "TrainingLoadMetric",
    "TSBInterpretation",
    "advance_fitness_state",
    "calculate_ewma",
    "calculate_training_load_history",
    "interpret_tsb",
    # Grade adjusted pace
    "SPLIT_DISTANCE",
    "ActivityGAP",
    "Split",
    "calculate_activity_gap",
    "calculate_gap",
    "calculate_splits",
    "estimate_average_grade",
    "estimate_gap_pace",
    "gap_adjustment_factor",
    "metabolic_cost",
    # HR zones
    "DEFAULT_ZONES",
    "HeartRateZone",
    "HeartRateZoneAnalysis",
    "ZoneDefinition",
    "analyze_heart_rate_zones",
    "build_zones",
    "calculate_average_hr",
    "estimate_max_hr",
    "get_zone_index",
]

"""Windowed training analysis: health metrics, race predictions, summaries."""

from .health import (
    BAND_COLORS,
    HealthSnapshot,
    WeeklyRamp,
    calculate_acwr,
    calculate_consistency_score,
    calculate_efficiency_index,
    calculate_gap_trend,
    calculate_health_snapshot,
    calculate_long_run_ratio,
    calculate_weekly_ramp,
    classify_acwr,
    classify_consistency,
    classify_efficiency_index,
    classify_gap_trend,
    classify_long_run_ratio,
    classify_ramp,
)
from .race import (
    RACE_DISTANCES,
    PeriodMode,
    PeriodSelection,
    PeriodWindows,
    RaceDistance,
    RacePrediction,
    RacePredictionReport,
    calculate_readiness_score,
    fitness_multiplier,
    freshness_multiplier,
    is_quality_run,
    predict_race_times,
    readiness_band,
    resolve_period_windows,
    riegel_formula,
)
from .summary import (
    GearMileage,
    MileagePoint,
    PeriodSummary,
    calculate_gear_mileage,
    calculate_mileage_trend,
    calculate_streaks,
    summarize_period,
)

__all__ = [
    # Health metrics
    "BAND_COLORS",
    "HealthSnapshot",
    "WeeklyRamp",
    "calculate_acwr",
    "calculate_consistency_score",
    "calculate_efficiency_index",
    "calculate_gap_trend",
    "calculate_health_snapshot",
    "calculate_long_run_ratio",
    "calculate_weekly_ramp",
    "classify_acwr",
    "classify_consistency",
    "classify_efficiency_index",
    "classify_gap_trend",
    "classify_long_run_ratio",
    "classify_ramp",
    # Race predictions
    "RACE_DISTANCES",
    "PeriodMode",
    "PeriodSelection",
    "PeriodWindows",
    "RaceDistance",
    "RacePrediction",
    "RacePredictionReport",
    "calculate_readiness_score",
    "fitness_multiplier",
    "freshness_multiplier",
    "is_quality_run",
    "predict_race_times",
    "readiness_band",
    "resolve_period_windows",
    "riegel_formula",
    # Summaries
    "GearMileage",
    "MileagePoint",
    "PeriodSummary",
    "calculate_gear_mileage",
    "calculate_mileage_trend",
    "calculate_streaks",
    "summarize_period",
]

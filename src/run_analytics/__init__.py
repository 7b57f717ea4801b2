"""Training load, fitness and race analytics for running activities."""

from .models import Activity, is_run_like, parse_activities
from .metrics import (
    activities_to_daily_loads,
    calculate_activity_trimp,
    calculate_trimp,
    FitnessState,
    TrainingLoadMetric,
    advance_fitness_state,
    calculate_training_load_history,
    calculate_gap,
    gap_adjustment_factor,
)
from .analysis import (
    HealthSnapshot,
    PeriodSelection,
    RacePredictionReport,
    calculate_acwr,
    calculate_health_snapshot,
    predict_race_times,
)
from .exceptions import ActivityDataError, ConfigurationError, RunAnalyticsError

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Models
    "Activity",
    "is_run_like",
    "parse_activities",
    # Metrics - Load
    "activities_to_daily_loads",
    "calculate_activity_trimp",
    "calculate_trimp",
    # Metrics - Fitness
    "FitnessState",
    "TrainingLoadMetric",
    "advance_fitness_state",
    "calculate_training_load_history",
    # Metrics - GAP
    "calculate_gap",
    "gap_adjustment_factor",
    # Analysis
    "HealthSnapshot",
    "PeriodSelection",
    "RacePredictionReport",
    "calculate_acwr",
    "calculate_health_snapshot",
    "predict_race_times",
    # Exceptions
    "ActivityDataError",
    "ConfigurationError",
    "RunAnalyticsError",
]

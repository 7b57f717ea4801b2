"""Activity data model and run classification."""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..exceptions import ActivityDataError
from ..utils.dates import date_key, date_key_prefix, local_date_key, parse_local_date
from ..utils.numbers import round_half_up


RUN_TYPES = ("Run", "TrailRun", "VirtualRun")

# Kilojoules of mechanical work to kcal, as used by the provider
KILOJOULES_TO_CALORIES = 1.07


class Activity(BaseModel):
    """
    One recorded exercise session, as delivered by the activity provider.

    Field names follow the provider's export format. ``type`` is accepted as
    an alias for ``activity_type``. Instances are immutable.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: Union[int, str]
    name: str = ""
    activity_type: str = Field(default="", alias="type")
    sport_type: str = ""
    start_date_local: str
    distance: float = Field(default=0.0, ge=0, description="Distance in meters")
    moving_time: float = Field(default=0.0, ge=0, description="Moving time in seconds")
    elapsed_time: Optional[float] = Field(default=None, ge=0)
    total_elevation_gain: float = Field(default=0.0, ge=0, description="Climb in meters")
    average_speed: float = Field(default=0.0, ge=0, description="Meters per second")
    average_heartrate: Optional[float] = None
    max_heartrate: Optional[float] = None
    suffer_score: Optional[float] = None
    calories: Optional[float] = None
    kilojoules: Optional[float] = None
    gear_id: Optional[str] = None

    @field_validator("start_date_local")
    @classmethod
    def _check_start_date_local(cls, value: str) -> str:
        """Require an ISO timestamp that starts with its YYYY-MM-DD date."""
        try:
            key = local_date_key(value)
        except ValueError:
            raise ValueError(f"not an ISO-8601 timestamp: {value!r}") from None
        if date_key_prefix(value) != key:
            raise ValueError(f"must start with a YYYY-MM-DD date: {value!r}")
        return value

    @model_validator(mode="before")
    @classmethod
    def _derive_average_speed(cls, data: Any) -> Any:
        """Fill in average_speed from distance / moving_time when absent."""
        if not isinstance(data, dict) or data.get("average_speed") is not None:
            return data
        data = dict(data)
        distance = data.get("distance")
        moving_time = data.get("moving_time")
        numeric = isinstance(distance, (int, float)) and isinstance(moving_time, (int, float))
        if numeric and distance > 0 and moving_time > 0:
            data["average_speed"] = distance / moving_time
        else:
            data["average_speed"] = 0.0
        return data

    @property
    def is_run(self) -> bool:
        """Whether this activity counts as a run."""
        return is_run_like(self)

    @property
    def local_datetime(self) -> datetime:
        """Start time as naive local wall-clock datetime."""
        return parse_local_date(self.start_date_local)

    @property
    def local_date(self) -> date:
        """Local calendar date the activity started on."""
        return self.local_datetime.date()

    @property
    def date_key(self) -> str:
        """Local calendar date as a YYYY-MM-DD key."""
        return date_key(self.local_datetime)

    @property
    def distance_km(self) -> float:
        return self.distance / 1000

    @property
    def estimated_calories(self) -> float:
        """Recorded calories, else estimated from kilojoules, else 0."""
        if self.calories:
            return self.calories
        if self.kilojoules:
            return round_half_up(self.kilojoules * KILOJOULES_TO_CALORIES)
        return 0


class Gear(BaseModel):
    """A piece of equipment from the athlete profile, e.g. a pair of shoes."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    name: str = ""
    brand_name: Optional[str] = None
    distance: float = Field(default=0.0, ge=0, description="Lifetime distance in meters")
    primary: bool = False


def is_run_like(activity: Activity) -> bool:
    """
    Check whether an activity is a run.

    An activity is run-like when either its type or its sport type is one of
    Run, TrailRun or VirtualRun. Every run filter in the package uses this
    predicate.
    """
    return activity.activity_type in RUN_TYPES or activity.sport_type in RUN_TYPES


def filter_runs(activities: Iterable[Activity]) -> List[Activity]:
    """Keep only run-like activities, preserving order."""
    return [a for a in activities if is_run_like(a)]


def parse_activities(records: Iterable[Dict[str, Any]]) -> List[Activity]:
    """
    Validate raw provider records into Activity objects.

    Args:
        records: Iterable of dictionaries in the provider's export format

    Returns:
        List of Activity, in input order

    Raises:
        ActivityDataError: If a record is not a mapping or fails validation
    """
    activities = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ActivityDataError(
                f"Activity record {index} is not an object",
                index=index,
            )
        try:
            activities.append(Activity.model_validate(record))
        except ValidationError as e:
            raise ActivityDataError(
                f"Activity record {index} is invalid",
                index=index,
                details={"errors": e.errors(include_url=False)},
            ) from e
    return activities

"""Heart rate zone calculations."""

from dataclasses import dataclass, field
from typing import List, Sequence

from ..utils.numbers import round_half_up


@dataclass(frozen=True)
class ZoneDefinition:
    """A zone expressed as a fraction range of maximum heart rate."""

    name: str
    min_pct: float
    max_pct: float
    color: str


@dataclass(frozen=True)
class HeartRateZone:
    """A heart rate zone with absolute bpm bounds."""

    name: str
    min_hr: int
    max_hr: int
    color: str

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "min": self.min_hr,
            "max": self.max_hr,
            "color": self.color,
        }


@dataclass
class HeartRateZoneAnalysis:
    """Time spent in each zone for one activity."""

    zones: List[HeartRateZone]
    time_in_zones: List[int] = field(default_factory=list)  # seconds per zone
    percentage_in_zones: List[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "zones": [zone.to_dict() for zone in self.zones],
            "time_in_zones": self.time_in_zones,
            "percentage_in_zones": [round(p, 1) for p in self.percentage_in_zones],
        }


# Five-zone model on % of max HR:
# Zone 1: Recovery (50-60%)
# Zone 2: Aerobic (60-70%)
# Zone 3: Tempo (70-80%)
# Zone 4: Threshold (80-90%)
# Zone 5: Anaerobic (90-100%)
DEFAULT_ZONES = (
    ZoneDefinition("Zone 1 - Recovery", 0.50, 0.60, "grey62"),
    ZoneDefinition("Zone 2 - Aerobic", 0.60, 0.70, "green"),
    ZoneDefinition("Zone 3 - Tempo", 0.70, 0.80, "yellow"),
    ZoneDefinition("Zone 4 - Threshold", 0.80, 0.90, "dark_orange"),
    ZoneDefinition("Zone 5 - Anaerobic", 0.90, 1.00, "red"),
)


def estimate_max_hr(age: float) -> int:
    """
    Estimate maximum heart rate from age using Tanaka formula.

    Tanaka formula: 208 - (0.7 * age)
    More accurate than the older 220 - age formula.

    Args:
        age: Age in years

    Returns:
        Estimated maximum heart rate
    """
    return round_half_up(208 - 0.7 * age)


def build_zones(
    max_hr: float,
    zone_defs: Sequence[ZoneDefinition] = DEFAULT_ZONES,
) -> List[HeartRateZone]:
    """
    Turn %-of-max zone definitions into absolute heart rate zones.

    Args:
        max_hr: Maximum heart rate
        zone_defs: Zone definitions, lowest zone first

    Returns:
        List of HeartRateZone with bounds rounded to whole bpm
    """
    return [
        HeartRateZone(
            name=zone.name,
            min_hr=round_half_up(max_hr * zone.min_pct),
            max_hr=round_half_up(max_hr * zone.max_pct),
            color=zone.color,
        )
        for zone in zone_defs
    ]


def get_zone_index(hr: float, zones: Sequence[HeartRateZone]) -> int:
    """
    Return the 0-based index of the zone a heart rate falls into.

    Zones include their lower bound and exclude their upper bound. Anything
    at or above the top zone's upper bound counts as the top zone.

    Returns:
        Zone index, or -1 if below zone 1
    """
    for index, zone in enumerate(zones):
        if zone.min_hr <= hr < zone.max_hr:
            return index
    if zones and hr >= zones[-1].max_hr:
        return len(zones) - 1
    return -1


def analyze_heart_rate_zones(
    heart_rates: Sequence[float],
    max_hr: float,
    zone_defs: Sequence[ZoneDefinition] = DEFAULT_ZONES,
) -> HeartRateZoneAnalysis:
    """
    Calculate time in each zone from a heart rate stream.

    Args:
        heart_rates: Heart rate samples, one per second
        max_hr: Athlete's maximum heart rate
        zone_defs: Zone definitions, lowest zone first

    Returns:
        HeartRateZoneAnalysis; samples below zone 1 are not counted
    """
    zones = build_zones(max_hr, zone_defs)
    time_in_zones = [0] * len(zones)

    for hr in heart_rates:
        index = get_zone_index(hr, zones)
        if index >= 0:
            time_in_zones[index] += 1

    total_time = sum(time_in_zones)
    percentage_in_zones = [
        (t / total_time) * 100 if total_time > 0 else 0.0
        for t in time_in_zones
    ]

    return HeartRateZoneAnalysis(
        zones=zones,
        time_in_zones=time_in_zones,
        percentage_in_zones=percentage_in_zones,
    )


def calculate_average_hr(heart_rates: Sequence[float]) -> int:
    """Average heart rate of a stream, rounded to whole bpm (0 if empty)."""
    if not heart_rates:
        return 0
    return round_half_up(sum(heart_rates) / len(heart_rates))

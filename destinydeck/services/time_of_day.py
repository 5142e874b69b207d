"""
Time-of-day crime detection.

Witnesses are scarcer at night. The modifier multiplies an action's base
witness chance; the crime sub-procedure clamps the product to 0-100.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class TimePeriod(str, Enum):
    DAWN = "DAWN"
    DAY = "DAY"
    DUSK = "DUSK"
    NIGHT = "NIGHT"


@dataclass(frozen=True, slots=True)
class PeriodBand:
    """Hours [start_hour, end_hour) belonging to a period."""

    period: TimePeriod
    start_hour: int
    end_hour: int

    def contains(self, hour: int) -> bool:
        return self.start_hour <= hour < self.end_hour


# Hours not covered by a band are NIGHT
DEFAULT_PERIOD_BANDS: tuple[PeriodBand, ...] = (
    PeriodBand(TimePeriod.DAWN, 5, 7),
    PeriodBand(TimePeriod.DAY, 7, 18),
    PeriodBand(TimePeriod.DUSK, 18, 20),
)

DEFAULT_DETECTION_MODIFIERS: dict[TimePeriod, float] = {
    TimePeriod.DAWN: 0.9,
    TimePeriod.DAY: 1.2,
    TimePeriod.DUSK: 0.9,
    TimePeriod.NIGHT: 0.6,
}


def period_for(now: datetime, bands: tuple[PeriodBand, ...] = DEFAULT_PERIOD_BANDS) -> TimePeriod:
    for band in bands:
        if band.contains(now.hour):
            return band.period
    return TimePeriod.NIGHT


class ClockTimeOfDayService:
    """
    Detection modifier derived from the hour of `now`.

    Args:
        modifiers: Period -> modifier (defaults above)
        location_overrides: Location id -> fixed modifier (e.g. a lawless
            camp where nobody reports anything)
    """

    def __init__(
        self,
        modifiers: Mapping[TimePeriod, float] | None = None,
        location_overrides: Mapping[str, float] | None = None,
    ):
        self.modifiers = dict(DEFAULT_DETECTION_MODIFIERS)
        self.modifiers.update(modifiers or {})
        self.location_overrides = dict(location_overrides or {})

    async def get_crime_detection_modifier(self, location_id: str | None, now: datetime) -> float:
        if location_id is not None and location_id in self.location_overrides:
            return self.location_overrides[location_id]
        return self.modifiers[period_for(now)]


class FixedTimeOfDayService:
    """Same modifier everywhere, all the time."""

    def __init__(self, modifier: float = 1.0):
        self.modifier = modifier

    async def get_crime_detection_modifier(self, location_id: str | None, now: datetime) -> float:
        return self.modifier

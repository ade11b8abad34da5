"""User preference enums."""

from enum import Enum


class WeekStart(str, Enum):
    """First weekday shown in the calendar."""

    SUNDAY = "sunday"
    MONDAY = "monday"
    SATURDAY = "saturday"

    @property
    def weekday(self) -> int:
        """Python weekday number (Monday is 0)."""
        return {"monday": 0, "saturday": 5, "sunday": 6}[self.value]


class UnitSystem(str, Enum):
    """Unit system used when logging distance and weight."""

    IMPERIAL = "imperial"
    METRIC = "metric"

    @property
    def distance_units(self) -> list[str]:
        """Allowed distance units, default first."""
        if self is UnitSystem.IMPERIAL:
            return ["mi"]
        return ["km", "m"]

    @property
    def weight_units(self) -> list[str]:
        """Allowed weight units, default first."""
        if self is UnitSystem.IMPERIAL:
            return ["lbs"]
        return ["kg"]

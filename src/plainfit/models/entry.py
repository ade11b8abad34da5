"""Fitness entry model."""

from dataclasses import dataclass
from datetime import datetime

from ..utils.dates import ensure_aware


@dataclass
class FitnessEntry:
    """One logged round of an exercise.

    Entries that were performed together share a ``set_id``; a set is the
    unit that gets created, edited and deleted as a whole.
    """

    exercise_type_id: int
    date: datetime
    set_id: int
    duration: int = 0  # milliseconds
    reps: int = 0
    distance: float | None = None
    distance_unit: str | None = None
    weight: float | None = None
    weight_unit: str | None = None
    description: str | None = None
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "exercise_type_id": self.exercise_type_id,
            "duration": self.duration,
            "date": ensure_aware(self.date).isoformat(),
            "set_id": self.set_id,
            "reps": self.reps,
            "distance": self.distance,
            "distance_unit": self.distance_unit,
            "weight": self.weight,
            "weight_unit": self.weight_unit,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "FitnessEntry":
        """Create from dictionary."""
        date = data["date"]
        if isinstance(date, str):
            date = datetime.fromisoformat(date)
        return cls(
            id=id,
            exercise_type_id=data["exercise_type_id"],
            date=ensure_aware(date),
            set_id=data["set_id"],
            duration=data.get("duration", 0),
            reps=data.get("reps", 0),
            distance=data.get("distance"),
            distance_unit=data.get("distance_unit"),
            weight=data.get("weight"),
            weight_unit=data.get("weight_unit"),
            description=data.get("description"),
        )

    def interchange_key(self) -> tuple:
        """Fields that identify an entry independent of its row id."""
        return (
            self.duration,
            ensure_aware(self.date),
            self.set_id,
            self.reps,
            self.distance,
            self.distance_unit,
            self.weight,
            self.weight_unit,
            self.description,
        )

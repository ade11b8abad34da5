"""Data models for plainfit."""

from .activity import Activity
from .category import Category
from .entry import FitnessEntry
from .exercise_type import ExerciseType, MeasurementKind
from .preferences import UnitSystem, WeekStart

__all__ = [
    "Activity",
    "Category",
    "ExerciseType",
    "FitnessEntry",
    "MeasurementKind",
    "UnitSystem",
    "WeekStart",
]

"""Calendar activity model."""

from dataclasses import dataclass, field

from .category import Category
from .exercise_type import ExerciseType


@dataclass(frozen=True)
class Activity:
    """A (category, exercise type) pair used to badge a calendar day.

    Equality and hashing use the exercise type id only, so a day never shows
    the same exercise twice even if it belongs to several categories.
    """

    exercise_type: ExerciseType = field(compare=False, hash=False)
    category: Category | None = field(default=None, compare=False, hash=False)
    exercise_type_id: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "exercise_type_id", self.exercise_type.id)

    @property
    def icon(self) -> str:
        return self.exercise_type.resolve_icon(self.category)

    @property
    def color(self) -> str:
        return self.exercise_type.resolve_color(self.category)

    def as_names(self) -> tuple[str | None, str]:
        """Return ``(category name, exercise type name)``."""
        return (
            self.category.name if self.category else None,
            self.exercise_type.name,
        )

"""Exercise type model and measurement kinds."""

from dataclasses import dataclass, field
from enum import Enum

from .category import DEFAULT_COLOR, DEFAULT_ICON, Category


class MeasurementKind(str, Enum):
    """Measurement fields that are meaningful for an exercise."""

    WEIGHT = "weight"
    REPS = "reps"
    DISTANCE = "distance"
    TIME = "time"


def parse_kinds(value: str) -> frozenset[MeasurementKind]:
    """Parse a comma-joined kind string such as ``"distance,time"``.

    Raises:
        ValueError: If the string is empty or names an unknown kind
    """
    parts = [part.strip() for part in value.split(",") if part.strip()]
    if not parts:
        raise ValueError("An exercise type needs at least one measurement kind")
    return frozenset(MeasurementKind(part) for part in parts)


def format_kinds(kinds) -> str:
    """Serialize kinds as a sorted, comma-joined string."""
    return ",".join(sorted(MeasurementKind(kind).value for kind in kinds))


@dataclass
class ExerciseType:
    """A named activity with the measurement kinds it tracks."""

    name: str
    kinds: frozenset[MeasurementKind] = field(
        default_factory=lambda: frozenset({MeasurementKind.REPS})
    )
    icon: str | None = None  # Falls back to the owning category's icon
    color: str | None = None
    id: int | None = None

    def __post_init__(self):
        self.kinds = frozenset(MeasurementKind(kind) for kind in self.kinds)
        if not self.kinds:
            raise ValueError("An exercise type needs at least one measurement kind")

    @property
    def type(self) -> str:
        """Composite type string as stored in the database."""
        return format_kinds(self.kinds)

    def tracks(self, kind: MeasurementKind) -> bool:
        """Check whether the exercise records the given measurement."""
        return MeasurementKind(kind) in self.kinds

    def resolve_icon(self, category: Category | None) -> str:
        if self.icon:
            return self.icon
        return category.icon if category else DEFAULT_ICON

    def resolve_color(self, category: Category | None) -> str:
        if self.color:
            return self.color
        return category.color if category else DEFAULT_COLOR

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "type": self.type,
            "icon": self.icon,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "ExerciseType":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            kinds=parse_kinds(data["type"]),
            icon=data.get("icon"),
            color=data.get("color"),
        )

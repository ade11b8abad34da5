"""Category model."""

from dataclasses import dataclass

DEFAULT_ICON = "figure.run"
DEFAULT_COLOR = "#007AFF"


@dataclass
class Category:
    """A user-defined grouping of exercise types (e.g. "Cardio")."""

    name: str
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    id: int | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "icon": self.icon,
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "Category":
        """Create from dictionary."""
        return cls(
            id=id,
            name=data["name"],
            icon=data.get("icon") or DEFAULT_ICON,
            color=data.get("color") or DEFAULT_COLOR,
        )

"""Data directory and user settings."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from .models.preferences import UnitSystem, WeekStart

logger = logging.getLogger(__name__)

DATA_DIR_ENV = "PLAINFIT_DATA_DIR"
DEFAULT_DATA_DIR = Path.home() / ".plainfit"
SETTINGS_FILENAME = "settings.yaml"


def get_data_dir(override: Path | str | None = None) -> Path:
    """Get the data directory, creating it if needed.

    Resolution order: explicit override, ``PLAINFIT_DATA_DIR``, ``~/.plainfit``.
    """
    if override is not None:
        data_dir = Path(override).expanduser()
    elif os.environ.get(DATA_DIR_ENV):
        data_dir = Path(os.environ[DATA_DIR_ENV]).expanduser()
    else:
        data_dir = DEFAULT_DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


@dataclass
class Settings:
    """User preferences that affect calendar layout and logging units."""

    week_start: WeekStart = WeekStart.SUNDAY
    unit_system: UnitSystem = UnitSystem.IMPERIAL

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.value,
            "unit_system": self.unit_system.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        """Create from dictionary, falling back to defaults for bad values."""
        settings = cls()
        for key, enum_cls in (("week_start", WeekStart), ("unit_system", UnitSystem)):
            raw = data.get(key)
            if raw is None:
                continue
            try:
                setattr(settings, key, enum_cls(str(raw).lower()))
            except ValueError:
                logger.warning("Ignoring invalid %s setting: %r", key, raw)
        return settings


class SettingsFile:
    """Load and save :class:`Settings` as YAML."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or get_data_dir() / SETTINGS_FILENAME

    def load(self) -> Settings:
        if not self.path.exists():
            return Settings()
        with open(self.path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("Settings file %s is not a mapping, using defaults", self.path)
            return Settings()
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings.to_dict(), f)

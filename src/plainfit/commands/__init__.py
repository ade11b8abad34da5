"""CLI commands for plainfit."""

from .backup import backup, restore
from .calendar import calendar
from .categories import category
from .entries import day, log, set_group
from .exercises import exercise
from .export import export
from .import_data import import_data
from .init import init
from .settings import settings

__all__ = [
    "backup",
    "calendar",
    "category",
    "day",
    "export",
    "exercise",
    "import_data",
    "init",
    "log",
    "restore",
    "set_group",
    "settings",
]

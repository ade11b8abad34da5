"""Utility functions for plainfit."""

from .dates import ensure_aware, from_storage, start_of_day, to_storage
from .formatters import format_duration, format_value, parse_duration

__all__ = [
    "ensure_aware",
    "format_duration",
    "format_value",
    "from_storage",
    "parse_duration",
    "start_of_day",
    "to_storage",
]

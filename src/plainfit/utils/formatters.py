"""Display formatting for durations and measurements."""

import re

_DURATION_PATTERN = re.compile(
    r"^\s*(?:(?:(?P<h>\d+):)?(?P<m>\d+):)?(?P<s>\d+)(?:\.(?P<ms>\d{1,3}))?\s*$"
)


def format_duration(milliseconds: int) -> str:
    """Format milliseconds as ``HH:MM:SS``."""
    total_seconds = milliseconds // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_duration(value: str) -> int:
    """Parse ``[[HH:]MM:]SS[.mmm]`` into milliseconds.

    Raises:
        ValueError: If the string is not a duration
    """
    match = _DURATION_PATTERN.match(value)
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")

    hours = int(match.group("h") or 0)
    minutes = int(match.group("m") or 0)
    seconds = int(match.group("s"))
    millis = int((match.group("ms") or "0").ljust(3, "0"))
    return ((hours * 60 + minutes) * 60 + seconds) * 1000 + millis


def format_value(value: float | None) -> str:
    """Format a measurement without trailing zeros (5.0 -> "5")."""
    if value is None:
        return ""
    text = repr(float(value))
    if "." in text and "e" not in text:
        text = text.rstrip("0").rstrip(".")
    return text

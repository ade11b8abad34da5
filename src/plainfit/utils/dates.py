"""Timestamp helpers.

Timestamps are stored as fixed-width UTC ISO-8601 strings so that SQL string
comparison orders them chronologically. Naive datetimes are treated as local
time.
"""

from datetime import date, datetime, time, timedelta, timezone, tzinfo


def ensure_aware(value: datetime) -> datetime:
    """Attach the local timezone to a naive datetime."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def to_storage(value: datetime) -> str:
    """Format a datetime for the ``date`` column."""
    return ensure_aware(value).astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_storage(value: str) -> datetime:
    """Parse a ``date`` column value back into an aware UTC datetime."""
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _resolve_tz(day: date | datetime, tz: tzinfo | None) -> tzinfo | None:
    if tz is not None:
        return tz
    if isinstance(day, datetime) and day.tzinfo is not None:
        return day.tzinfo
    return None


def local_date(value: datetime, tz: tzinfo | None = None) -> date:
    """Calendar date of ``value`` in ``tz`` (local timezone by default)."""
    aware = ensure_aware(value)
    return aware.astimezone(tz).date() if tz else aware.astimezone().date()


def start_of_day(day: date | datetime, tz: tzinfo | None = None) -> datetime:
    """Midnight at the start of ``day``.

    An aware datetime keeps its own timezone unless ``tz`` is given. Dates and
    naive datetimes use ``tz``, or the local timezone when ``tz`` is None.
    """
    tz = _resolve_tz(day, tz)
    if isinstance(day, datetime):
        day = local_date(day, tz) if day.tzinfo else day.date()
    midnight = datetime.combine(day, time.min)
    if tz is None:
        return midnight.astimezone()
    return midnight.replace(tzinfo=tz)


def day_bounds(day: date | datetime, tz: tzinfo | None = None) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` range covering one calendar day."""
    tz = _resolve_tz(day, tz)
    start = start_of_day(day, tz)
    end = start_of_day(start.date() + timedelta(days=1), tz)
    return start, end

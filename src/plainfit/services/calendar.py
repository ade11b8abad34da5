"""Calendar layout and per-day activity badges."""

import calendar as _calendar
from datetime import date, datetime, timedelta, tzinfo
from typing import TYPE_CHECKING

from ..models.activity import Activity
from ..models.preferences import WeekStart
from ..utils.dates import local_date, start_of_day

if TYPE_CHECKING:
    from ..db.store import FitnessStore

WEEKS_PER_MONTH_VIEW = 6


def _as_date(day: date | datetime) -> date:
    return day.date() if isinstance(day, datetime) else day


def month_bounds(day: date | datetime) -> tuple[date, date]:
    """First day of the month containing ``day`` and first day of the next."""
    first = _as_date(day).replace(day=1)
    if first.month == 12:
        return first, first.replace(year=first.year + 1, month=1)
    return first, first.replace(month=first.month + 1)


def month_title(day: date | datetime) -> str:
    """Heading such as ``"March 2024"``."""
    return _as_date(day).strftime("%B %Y")


def weekday_labels(week_start: WeekStart = WeekStart.SUNDAY) -> list[str]:
    """Abbreviated weekday names starting on ``week_start``."""
    names = list(_calendar.day_abbr)  # Monday first
    offset = week_start.weekday
    return names[offset:] + names[:offset]


def weeks_for_month(
    day: date | datetime, week_start: WeekStart = WeekStart.SUNDAY
) -> list[list[date]]:
    """Six rows of seven dates covering the month containing ``day``.

    The grid starts on the last ``week_start`` weekday on or before the 1st
    and spills into the neighbouring months to fill every row.
    """
    first, _ = month_bounds(day)
    offset = (first.weekday() - week_start.weekday) % 7
    current = first - timedelta(days=offset)

    weeks = []
    for _ in range(WEEKS_PER_MONTH_VIEW):
        week = [current + timedelta(days=i) for i in range(7)]
        weeks.append(week)
        current += timedelta(days=7)
    return weeks


async def month_activity(
    store: "FitnessStore", day: date | datetime, tz: tzinfo | None = None
) -> dict[int, set[Activity]]:
    """Distinct activities per day of the month containing ``day``.

    Entries are fetched together with their exercise type and first category
    in a single query. Days without entries are absent from the result.

    Returns:
        Mapping of day-of-month to the set of activities logged that day
    """
    if tz is None and isinstance(day, datetime) and day.tzinfo is not None:
        tz = day.tzinfo

    first, following = month_bounds(day)
    start = start_of_day(first, tz)
    end = start_of_day(following, tz)

    activity: dict[int, set[Activity]] = {}
    for entry, exercise_type, category in await store.entries.with_exercise_types(start, end):
        entry_day = local_date(entry.date, tz)
        activity.setdefault(entry_day.day, set()).add(Activity(exercise_type, category))
    return activity

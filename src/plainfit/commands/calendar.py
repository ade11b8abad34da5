"""Month calendar command."""

from datetime import date, datetime

import click

from ..services.calendar import month_activity, month_title, weekday_labels, weeks_for_month
from .base import async_command, get_app, open_store

CELL_WIDTH = 5


def _parse_month(value: str | None) -> date:
    if value is None:
        return date.today().replace(day=1)
    try:
        return datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM, got {value!r}") from None


def render_month(month: date, weeks: list[list[date]], active_days: set[int], labels: list[str]) -> str:
    """Text grid of the month; days with activity are starred."""
    lines = [month_title(month).center(CELL_WIDTH * 7).rstrip()]
    lines.append("".join(label[:3].rjust(CELL_WIDTH) for label in labels))
    for week in weeks:
        cells = []
        for day in week:
            if day.month != month.month:
                cells.append(" " * CELL_WIDTH)
            elif day.day in active_days:
                cells.append(f"{day.day}*".rjust(CELL_WIDTH))
            else:
                cells.append(f"{day.day}".rjust(CELL_WIDTH - 1) + " ")
        lines.append("".join(cells).rstrip())
    return "\n".join(lines)


@click.command()
@click.argument("month", required=False)
@click.pass_context
@async_command
async def calendar(ctx, month: str | None):
    """Show a month (YYYY-MM, defaults to the current one) and what was done each day."""
    store = await open_store(ctx)
    settings = get_app(ctx).settings
    first = _parse_month(month)

    activity = await month_activity(store, first)
    weeks = weeks_for_month(first, settings.week_start)
    click.echo()
    click.echo(render_month(first, weeks, set(activity), weekday_labels(settings.week_start)))

    if not activity:
        click.echo("\nNo activity this month.")
        return

    click.echo()
    for day_of_month in sorted(activity):
        names = sorted(
            f"{item.exercise_type.name}" + (f" ({item.category.name})" if item.category else "")
            for item in activity[day_of_month]
        )
        click.echo(f"{first.replace(day=day_of_month).isoformat()}  {', '.join(names)}")

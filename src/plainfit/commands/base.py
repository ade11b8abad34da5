"""Shared CLI utilities."""

import asyncio
from dataclasses import dataclass
from datetime import date, datetime
from functools import wraps

import click

from ..config import Settings, SettingsFile
from ..db import FitnessStore, StoreError


@dataclass
class AppContext:
    """Objects shared by every command through ``click.Context.obj``."""

    store: FitnessStore
    settings_file: SettingsFile

    @property
    def settings(self) -> Settings:
        return self.settings_file.load()


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def get_app(ctx: click.Context) -> AppContext:
    return ctx.find_object(AppContext)


async def open_store(ctx: click.Context) -> FitnessStore:
    """Return the store after making sure its schema is current."""
    app = get_app(ctx)
    if not app.store.db_path.exists():
        echo_error("Database not initialized. Run 'plainfit init' first.")
        ctx.exit(1)
    try:
        await app.store.open(seed=False)
    except StoreError as e:
        echo_error(str(e))
        ctx.exit(1)
    return app.store


def fail(ctx: click.Context, error: Exception) -> None:
    """Report an error and exit with status 1."""
    echo_error(str(error))
    ctx.exit(1)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def parse_day(value: str | None) -> date:
    """Parse ``YYYY-MM-DD``, ``today`` or ``yesterday``."""
    if value is None or value == "today":
        return date.today()
    if value == "yesterday":
        return date.fromordinal(date.today().toordinal() - 1)
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"Expected YYYY-MM-DD, got {value!r}") from None


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    # Calculate column widths
    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = []
    lines.append("".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers)).rstrip())
    lines.append("".join("-" * w + " " * padding for w in widths).rstrip())
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)).rstrip()
        )

    return "\n".join(lines)

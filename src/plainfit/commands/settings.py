"""View and change user settings."""

import click

from ..config import Settings
from ..models.preferences import UnitSystem, WeekStart
from .base import echo_success, fail, get_app

SETTING_TYPES = {
    "week_start": WeekStart,
    "unit_system": UnitSystem,
}


@click.group()
def settings():
    """Show or change settings."""
    pass


@settings.command("show")
@click.pass_context
def show(ctx):
    """Print the current settings."""
    app = get_app(ctx)
    for key, value in app.settings.to_dict().items():
        click.echo(f"{key}: {value}")
    click.echo(f"\n(from {app.settings_file.path})")


@settings.command("set")
@click.argument("key", type=click.Choice(sorted(SETTING_TYPES)))
@click.argument("value")
@click.pass_context
def set_setting(ctx, key: str, value: str):
    """Change one setting.

    \b
    week_start:  sunday, monday or saturday
    unit_system: imperial or metric
    """
    app = get_app(ctx)
    enum_cls = SETTING_TYPES[key]
    try:
        parsed = enum_cls(value.lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        fail(ctx, ValueError(f"Invalid {key} '{value}'. Choose from: {choices}"))

    current: Settings = app.settings
    setattr(current, key, parsed)
    app.settings_file.save(current)
    echo_success(f"{key} set to {parsed.value}")

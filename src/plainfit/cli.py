"""CLI entry point for plainfit."""

import logging

import click

from . import __version__
from .commands import (
    backup,
    calendar,
    category,
    day,
    export,
    exercise,
    import_data,
    init,
    log,
    restore,
    set_group,
    settings,
)
from .commands.base import AppContext
from .config import SETTINGS_FILENAME, SettingsFile, get_data_dir
from .db import FitnessStore, get_db_path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="plainfit")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False),
    envvar="PLAINFIT_DATA_DIR",
    help="Directory holding the database and settings (default: ~/.plainfit)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def main(ctx, data_dir: str | None, verbose: bool):
    """plainfit: a plain fitness log.

    Track sets of exercises in a local SQLite database, browse them by day
    or month, and move them in and out as CSV.

    Example usage:

        # Create the database with the built-in exercises
        plainfit init

        # Log a set
        plainfit log Squat --rounds 3 --reps 5 --weight 135

        # See what you did
        plainfit day
        plainfit calendar

        # Move data around
        plainfit export -o ~/Desktop
        plainfit backup ~/Backups
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
    )
    directory = get_data_dir(data_dir)
    ctx.obj = AppContext(
        store=FitnessStore(get_db_path(directory)),
        settings_file=SettingsFile(directory / SETTINGS_FILENAME),
    )


# Register commands
main.add_command(init)
main.add_command(category)
main.add_command(exercise)
main.add_command(log)
main.add_command(day)
main.add_command(set_group)
main.add_command(calendar)
main.add_command(export)
main.add_command(import_data)
main.add_command(backup)
main.add_command(restore)
main.add_command(settings)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()

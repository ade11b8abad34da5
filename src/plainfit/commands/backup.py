"""Backup and restore commands."""

from pathlib import Path

import click

from ..db import StoreError
from ..services.backup import backup_database, restore_database
from .base import async_command, echo_info, echo_success, fail, get_app


@click.command()
@click.argument("destination", type=click.Path(), default=".")
@click.pass_context
def backup(ctx, destination: str):
    """Copy the database to DESTINATION (a file or directory)."""
    store = get_app(ctx).store
    try:
        path = backup_database(store.db_path, Path(destination))
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Backup written to {path}")


@click.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@async_command
async def restore(ctx, source: str, yes: bool):
    """Replace the database with the backup at SOURCE.

    The backup is validated first. The current database is kept next to it
    with a .bak suffix.
    """
    store = get_app(ctx).store
    if store.db_path.exists() and not yes:
        if not click.confirm(f"Replace {store.db_path} with {source}?"):
            return

    try:
        rollback = await restore_database(store.db_path, Path(source))
    except StoreError as e:
        fail(ctx, e)

    echo_success(f"Restored database from {source}")
    if rollback is not None:
        echo_info(f"Previous database saved as {rollback}")

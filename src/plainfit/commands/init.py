"""Initialize database command."""

import click

from ..db import StoreError
from .base import async_command, echo_info, echo_success, fail, get_app


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the plainfit database.

    Creates the schema (or migrates an existing database) and, on first run,
    seeds the built-in categories, exercise types and a few tutorial sets.
    """
    store = get_app(ctx).store
    echo_info(f"Initializing plainfit in {store.db_path.parent}")

    try:
        version = await store.open()
    except StoreError as e:
        fail(ctx, e)

    echo_success(f"Database ready (schema version {version})")
    categories = await store.categories.count()
    entries = await store.entries.count()
    echo_info(f"{categories} categories, {entries} entries")

    click.echo()
    click.echo("Next steps:")
    click.echo("  plainfit exercise list            # Browse exercise types")
    click.echo("  plainfit log                      # Log a set interactively")
    click.echo("  plainfit day                      # Show today's entries")

"""Import entries from CSV."""

from pathlib import Path

import click

from ..db import CsvImportError, StoreError
from ..services.csv_interchange import import_csv_file
from .base import async_command, echo_error, echo_success, echo_warning, fail, open_store


@click.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@async_command
async def import_data(ctx, path: str, yes: bool):
    """Replace all entries with the contents of a CSV export.

    Exercise types are matched by name and tracked kinds and must already
    exist. The file is checked completely before anything is deleted; if
    any row is invalid nothing changes.

    Example:
        plainfit import plainfit_export_20240301_120000.csv
    """
    store = await open_store(ctx)
    existing = await store.entries.count()

    if existing and not yes:
        echo_warning(f"Importing deletes all {existing} existing entries.")
        if not click.confirm("Continue?"):
            return

    try:
        count = await import_csv_file(store, Path(path))
    except CsvImportError as e:
        echo_error("Import aborted, no entries were changed.")
        fail(ctx, e)
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Imported {count} entries from {path}")

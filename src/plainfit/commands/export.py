"""Export entries to CSV."""

from pathlib import Path

import click

from ..db import StoreError
from ..services.csv_interchange import export_csv, export_csv_file
from .base import async_command, echo_success, fail, open_store


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=".",
    show_default=True,
    help="File or directory to write to, or '-' for stdout",
)
@click.pass_context
@async_command
async def export(ctx, output: str):
    """Export every entry to CSV.

    When OUTPUT is a directory the file is named
    plainfit_export_<timestamp>.csv.

    Examples:
        # Export into the current directory
        plainfit export

        # Print to stdout
        plainfit export -o -
    """
    store = await open_store(ctx)

    if output == "-":
        await export_csv(store, click.get_text_stream("stdout"))
        return

    try:
        path = await export_csv_file(store, Path(output))
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Exported entries to {path}")

"""Category commands."""

import click

from ..db import StoreError
from ..models.category import DEFAULT_COLOR, DEFAULT_ICON, Category
from .base import (
    async_command,
    echo_info,
    echo_success,
    fail,
    format_table,
    open_store,
)


@click.group()
def category():
    """Manage exercise categories."""
    pass


@category.command("list")
@click.pass_context
@async_command
async def list_categories(ctx):
    """List all categories with their exercise counts."""
    store = await open_store(ctx)
    categories = await store.categories.list_all()
    if not categories:
        echo_info("No categories yet. Add one with 'plainfit category add NAME'.")
        return

    rows = []
    for item in categories:
        types = await store.exercise_types.for_category(item.id)
        rows.append([str(item.id), item.name, item.icon, item.color, str(len(types))])
    click.echo(format_table(["ID", "Name", "Icon", "Color", "Exercises"], rows))


@category.command("show")
@click.argument("category_id", type=int)
@click.pass_context
@async_command
async def show(ctx, category_id: int):
    """Show the exercise types in a category."""
    store = await open_store(ctx)
    item = await store.categories.get(category_id)
    if item is None:
        fail(ctx, LookupError(f"Category {category_id} not found"))

    click.echo(click.style(item.name, bold=True))
    types = await store.exercise_types.for_category(category_id)
    if not types:
        echo_info("No exercise types in this category.")
        return
    rows = [[str(t.id), t.name, t.type] for t in types]
    click.echo(format_table(["ID", "Name", "Tracks"], rows))


@category.command("add")
@click.argument("name")
@click.option("--icon", default=DEFAULT_ICON, show_default=True, help="Icon name")
@click.option("--color", default=DEFAULT_COLOR, show_default=True, help="Hex color")
@click.pass_context
@async_command
async def add(ctx, name: str, icon: str, color: str):
    """Add a category."""
    store = await open_store(ctx)
    try:
        item = await store.categories.create(Category(name=name, icon=icon, color=color))
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Category '{item.name}' added with ID {item.id}")


@category.command("edit")
@click.argument("category_id", type=int)
@click.option("--name", help="New name")
@click.option("--icon", help="New icon name")
@click.option("--color", help="New hex color")
@click.pass_context
@async_command
async def edit(ctx, category_id: int, name: str | None, icon: str | None, color: str | None):
    """Rename a category or change its icon."""
    store = await open_store(ctx)
    item = await store.categories.get(category_id)
    if item is None:
        fail(ctx, LookupError(f"Category {category_id} not found"))

    item.name = name or item.name
    item.icon = icon or item.icon
    item.color = color or item.color
    try:
        await store.categories.update(item)
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Category {category_id} updated")


@category.command("delete")
@click.argument("category_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@async_command
async def delete(ctx, category_id: int, yes: bool):
    """Delete a category. Its exercise types are kept."""
    store = await open_store(ctx)
    item = await store.categories.get(category_id)
    if item is None:
        fail(ctx, LookupError(f"Category {category_id} not found"))

    if not yes and not click.confirm(f"Delete category '{item.name}'?"):
        return
    await store.categories.delete(category_id)
    echo_success(f"Category '{item.name}' deleted")

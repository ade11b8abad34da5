"""Exercise type commands."""

import click

from ..db import FitnessStore, StoreError
from ..models.exercise_type import ExerciseType, MeasurementKind
from .base import (
    async_command,
    echo_info,
    echo_success,
    fail,
    format_table,
    open_store,
)

KIND_CHOICE = click.Choice([kind.value for kind in MeasurementKind])


async def _resolve_categories(ctx, store: FitnessStore, names: tuple[str, ...]) -> list[int]:
    ids = []
    for name in names:
        item = await store.categories.get_by_name(name)
        if item is None:
            fail(ctx, LookupError(f"Category '{name}' not found"))
        ids.append(item.id)
    return ids


@click.group()
def exercise():
    """Manage exercise types."""
    pass


@exercise.command("list")
@click.option("--category", "-c", "category_name", help="Only show this category")
@click.pass_context
@async_command
async def list_exercises(ctx, category_name: str | None):
    """List exercise types and the categories they belong to."""
    store = await open_store(ctx)
    if category_name:
        item = await store.categories.get_by_name(category_name)
        if item is None:
            fail(ctx, LookupError(f"Category '{category_name}' not found"))
        types = await store.exercise_types.for_category(item.id)
    else:
        types = await store.exercise_types.list_all()

    if not types:
        echo_info("No exercise types found.")
        return

    rows = []
    for exercise_type in types:
        categories = await store.exercise_types.categories_for(exercise_type.id)
        rows.append(
            [
                str(exercise_type.id),
                exercise_type.name,
                exercise_type.type,
                ", ".join(c.name for c in categories) or "-",
            ]
        )
    click.echo(format_table(["ID", "Name", "Tracks", "Categories"], rows))


@exercise.command("add")
@click.argument("name")
@click.option(
    "--kind", "-k", "kinds", type=KIND_CHOICE, multiple=True, required=True,
    help="Measurement to track (repeatable)",
)
@click.option("--category", "-c", "categories", multiple=True, help="Category name (repeatable)")
@click.option("--icon", help="Icon name (defaults to the category's)")
@click.option("--color", help="Hex color (defaults to the category's)")
@click.pass_context
@async_command
async def add(ctx, name: str, kinds: tuple[str, ...], categories: tuple[str, ...],
              icon: str | None, color: str | None):
    """Add an exercise type.

    Example:

        plainfit exercise add "Trail Run" -k distance -k time -c Cardio
    """
    store = await open_store(ctx)
    category_ids = await _resolve_categories(ctx, store, categories)
    try:
        exercise_type = await store.exercise_types.create(
            ExerciseType(name=name, kinds=frozenset(kinds), icon=icon, color=color),
            category_ids=category_ids,
        )
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Exercise '{exercise_type.name}' ({exercise_type.type}) added with ID {exercise_type.id}")


@exercise.command("edit")
@click.argument("type_id", type=int)
@click.option("--name", help="New name")
@click.option("--kind", "-k", "kinds", type=KIND_CHOICE, multiple=True,
              help="Replace the tracked measurements (repeatable)")
@click.option("--category", "-c", "categories", multiple=True,
              help="Replace the categories (repeatable)")
@click.option("--icon", help="New icon name")
@click.option("--color", help="New hex color")
@click.pass_context
@async_command
async def edit(ctx, type_id: int, name: str | None, kinds: tuple[str, ...],
               categories: tuple[str, ...], icon: str | None, color: str | None):
    """Change an exercise type."""
    store = await open_store(ctx)
    exercise_type = await store.exercise_types.get(type_id)
    if exercise_type is None:
        fail(ctx, LookupError(f"Exercise type {type_id} not found"))
    category_ids = await _resolve_categories(ctx, store, categories) if categories else None

    exercise_type.name = name or exercise_type.name
    if kinds:
        exercise_type.kinds = frozenset(MeasurementKind(k) for k in kinds)
    exercise_type.icon = icon or exercise_type.icon
    exercise_type.color = color or exercise_type.color

    try:
        await store.exercise_types.update(exercise_type, category_ids)
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Exercise type {type_id} updated")


@exercise.command("delete")
@click.argument("type_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@async_command
async def delete(ctx, type_id: int, yes: bool):
    """Delete an exercise type together with its logged entries."""
    store = await open_store(ctx)
    exercise_type = await store.exercise_types.get(type_id)
    if exercise_type is None:
        fail(ctx, LookupError(f"Exercise type {type_id} not found"))

    if not yes and not click.confirm(
        f"Delete '{exercise_type.name}' and every entry logged for it?"
    ):
        return
    await store.exercise_types.delete(type_id)
    echo_success(f"Exercise type '{exercise_type.name}' deleted")

"""Logging and browsing sets of exercise entries."""

from datetime import date, datetime, time

import click

from ..db import FitnessStore, StoreError
from ..models.entry import FitnessEntry
from ..models.exercise_type import ExerciseType, MeasurementKind
from ..models.preferences import UnitSystem
from ..prompts import RoundValues, SetPrompter
from ..utils.formatters import format_duration, format_value, parse_duration
from .base import (
    async_command,
    echo_info,
    echo_success,
    echo_warning,
    fail,
    format_table,
    get_app,
    open_store,
    parse_day,
)

DISTANCE_UNITS = click.Choice(["mi", "km", "m"])
WEIGHT_UNITS = click.Choice(["lbs", "kg"])


def _parse_time(value: str | None) -> time | None:
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError:
        raise click.BadParameter(f"Expected HH:MM, got {value!r}") from None


def performed_at(day: date, at: time | None = None) -> datetime:
    """Local timestamp for a set logged on ``day``.

    Without an explicit time, today's sets use the current time and past
    days use noon. Timestamps are whole seconds, matching CSV exports.
    """
    if at is None:
        at = datetime.now().time() if day == date.today() else time(12, 0)
    return datetime.combine(day, at.replace(microsecond=0)).astimezone()


def build_set(
    exercise_type: ExerciseType,
    rounds: list[RoundValues],
    when: datetime,
    set_id: int,
    description: str | None = None,
) -> list[FitnessEntry]:
    """One entry per round, sharing ``set_id`` and ``when``."""
    return [
        FitnessEntry(
            exercise_type_id=exercise_type.id,
            date=when,
            set_id=set_id,
            duration=values.duration,
            reps=values.reps,
            distance=values.distance,
            distance_unit=values.distance_unit,
            weight=values.weight,
            weight_unit=values.weight_unit,
            description=description,
        )
        for values in rounds
    ]


def rounds_from_options(
    exercise_type: ExerciseType,
    unit_system: UnitSystem,
    rounds: int,
    reps: int | None,
    weight: float | None,
    weight_unit: str | None,
    distance: float | None,
    distance_unit: str | None,
    duration: str | None,
) -> list[RoundValues]:
    """Identical rounds from command line values.

    Values for measurements the exercise type does not track are dropped.

    Raises:
        click.BadParameter: If the duration cannot be parsed
    """
    values = RoundValues()
    if exercise_type.tracks(MeasurementKind.REPS) and reps is not None:
        values.reps = reps
    if exercise_type.tracks(MeasurementKind.WEIGHT) and weight is not None:
        values.weight = weight
        values.weight_unit = weight_unit or unit_system.weight_units[0]
    if exercise_type.tracks(MeasurementKind.DISTANCE) and distance is not None:
        values.distance = distance
        values.distance_unit = distance_unit or unit_system.distance_units[0]
    if exercise_type.tracks(MeasurementKind.TIME) and duration is not None:
        try:
            values.duration = parse_duration(duration)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--duration") from None

    return [RoundValues(**vars(values)) for _ in range(rounds)]


def warn_untracked(exercise_type: ExerciseType, **given) -> None:
    """Warn about command line values the exercise type would ignore."""
    for kind in MeasurementKind:
        option = "duration" if kind is MeasurementKind.TIME else kind.value
        if given.get(option) is not None and not exercise_type.tracks(kind):
            echo_warning(f"'{exercise_type.name}' does not track {kind.value}; ignoring --{option}")


def describe_round(entry: FitnessEntry, exercise_type: ExerciseType) -> str:
    """Short summary of the tracked measurements of one entry."""
    parts = []
    if exercise_type.tracks(MeasurementKind.REPS):
        parts.append(f"{entry.reps} reps")
    if exercise_type.tracks(MeasurementKind.WEIGHT) and entry.weight is not None:
        parts.append(f"{format_value(entry.weight)} {entry.weight_unit or ''}".rstrip())
    if exercise_type.tracks(MeasurementKind.DISTANCE) and entry.distance is not None:
        parts.append(f"{format_value(entry.distance)} {entry.distance_unit or ''}".rstrip())
    if exercise_type.tracks(MeasurementKind.TIME):
        parts.append(format_duration(entry.duration))
    return ", ".join(parts) or "-"


async def _resolve_exercise(ctx, store: FitnessStore, name: str, type_: str | None) -> ExerciseType:
    exercise_type = await store.exercise_types.get_by_name(name, type_)
    if exercise_type is None:
        fail(ctx, LookupError(f"Exercise type '{name}' not found"))
    return exercise_type


@click.command()
@click.argument("exercise_name", required=False)
@click.option("--type", "type_", help="Disambiguate by tracked kinds, e.g. 'reps,weight'")
@click.option("--date", "-d", "day", help="Day of the set (YYYY-MM-DD, today, yesterday)")
@click.option("--time", "-t", "at", help="Time of the set (HH:MM)")
@click.option("--rounds", "-r", type=click.IntRange(min=1), default=1, show_default=True,
              help="Number of identical rounds")
@click.option("--reps", type=click.IntRange(min=0), help="Repetitions per round")
@click.option("--weight", "-w", type=float, help="Weight per round")
@click.option("--weight-unit", type=WEIGHT_UNITS, help="Weight unit")
@click.option("--distance", type=float, help="Distance per round")
@click.option("--distance-unit", type=DISTANCE_UNITS, help="Distance unit")
@click.option("--duration", help="Duration per round ([[HH:]MM:]SS)")
@click.option("--description", "-m", help="Notes for the set")
@click.pass_context
@async_command
async def log(
    ctx,
    exercise_name: str | None,
    type_: str | None,
    day: str | None,
    at: str | None,
    rounds: int,
    reps: int | None,
    weight: float | None,
    weight_unit: str | None,
    distance: float | None,
    distance_unit: str | None,
    duration: str | None,
    description: str | None,
):
    """Log a set of one exercise.

    Without EXERCISE_NAME an interactive questionnaire asks for the
    exercise and each round.

    Examples:

        plainfit log

        plainfit log Squat --rounds 3 --reps 5 --weight 135

        plainfit log Running --distance 3.1 --duration 28:30 -d yesterday
    """
    store = await open_store(ctx)
    settings = get_app(ctx).settings
    when = performed_at(parse_day(day), _parse_time(at))

    if exercise_name is None:
        prompter = SetPrompter(store, settings.unit_system)
        exercise_type = await prompter.choose_exercise_type()
        if exercise_type is None:
            echo_info("Nothing logged.")
            return
        round_values = await prompter.collect_rounds(exercise_type)
        description = await prompter.ask_description(description)
    else:
        exercise_type = await _resolve_exercise(ctx, store, exercise_name, type_)
        warn_untracked(exercise_type, reps=reps, weight=weight, distance=distance, duration=duration)
        round_values = rounds_from_options(
            exercise_type, settings.unit_system, rounds,
            reps, weight, weight_unit, distance, distance_unit, duration,
        )

    if not round_values:
        echo_info("Nothing logged.")
        return

    set_id = await store.entries.generate_set_id()
    try:
        entries = await store.entries.create_many(
            build_set(exercise_type, round_values, when, set_id, description)
        )
    except StoreError as e:
        fail(ctx, e)

    echo_success(
        f"Logged {len(entries)} round(s) of '{exercise_type.name}' as set {set_id}"
    )


@click.command()
@click.argument("day", required=False)
@click.pass_context
@async_command
async def day(ctx, day: str | None):
    """Show the sets logged on DAY (defaults to today)."""
    store = await open_store(ctx)
    target = parse_day(day)
    entries = await store.entries.for_day(target)

    if not entries:
        echo_info(f"No entries on {target.isoformat()}.")
        return

    types = {t.id: t for t in await store.exercise_types.list_all()}
    rows = []
    for entry in entries:
        exercise_type = types[entry.exercise_type_id]
        rows.append(
            [
                str(entry.set_id),
                entry.date.astimezone().strftime("%H:%M"),
                exercise_type.name,
                describe_round(entry, exercise_type),
                entry.description or "",
            ]
        )

    click.echo(f"\n{target.strftime('%A, %B %d %Y')}\n")
    click.echo(format_table(["Set", "Time", "Exercise", "Round", "Notes"], rows))


@click.group(name="set")
def set_group():
    """Show, edit and delete logged sets."""
    pass


@set_group.command("show")
@click.argument("set_id", type=int)
@click.pass_context
@async_command
async def show_set(ctx, set_id: int):
    """Show every round of a set."""
    store = await open_store(ctx)
    entries = await store.entries.by_set(set_id)
    exercise_type = await store.entries.exercise_type_for_set(set_id)
    if not entries or exercise_type is None:
        fail(ctx, LookupError(f"Set {set_id} not found"))

    first = entries[0]
    click.echo(f"\nSet {set_id}: {exercise_type.name} ({exercise_type.type})")
    click.echo(f"Date: {first.date.astimezone().strftime('%Y-%m-%d %H:%M')}")
    if first.description:
        click.echo(f"Notes: {first.description}")
    click.echo()
    rows = [
        [str(index), str(entry.id), describe_round(entry, exercise_type)]
        for index, entry in enumerate(entries, start=1)
    ]
    click.echo(format_table(["Round", "Entry", "Values"], rows))


@set_group.command("edit")
@click.argument("set_id", type=int)
@click.option("--rounds", "-r", type=click.IntRange(min=1), help="Number of identical rounds")
@click.option("--reps", type=click.IntRange(min=0), help="Repetitions per round")
@click.option("--weight", "-w", type=float, help="Weight per round")
@click.option("--weight-unit", type=WEIGHT_UNITS, help="Weight unit")
@click.option("--distance", type=float, help="Distance per round")
@click.option("--distance-unit", type=DISTANCE_UNITS, help="Distance unit")
@click.option("--duration", help="Duration per round ([[HH:]MM:]SS)")
@click.option("--description", "-m", help="Notes for the set")
@click.pass_context
@async_command
async def edit_set(
    ctx,
    set_id: int,
    rounds: int | None,
    reps: int | None,
    weight: float | None,
    weight_unit: str | None,
    distance: float | None,
    distance_unit: str | None,
    duration: str | None,
    description: str | None,
):
    """Edit a set.

    With measurement options every round is replaced by identical rounds
    built from them; otherwise the rounds are asked for interactively, with
    the current values as defaults. The set keeps its id and date.
    """
    store = await open_store(ctx)
    existing = await store.entries.by_set(set_id)
    exercise_type = await store.entries.exercise_type_for_set(set_id)
    if not existing or exercise_type is None:
        fail(ctx, LookupError(f"Set {set_id} not found"))

    settings = get_app(ctx).settings
    first = existing[0]
    measurements = (reps, weight, distance, duration)

    if any(value is not None for value in measurements) or rounds is not None:
        warn_untracked(exercise_type, reps=reps, weight=weight, distance=distance, duration=duration)
        template = RoundValues.from_entry(first)
        round_values = rounds_from_options(
            exercise_type,
            settings.unit_system,
            rounds or len(existing),
            reps if reps is not None else template.reps,
            weight if weight is not None else template.weight,
            weight_unit or template.weight_unit,
            distance if distance is not None else template.distance,
            distance_unit or template.distance_unit,
            duration,
        )
        if duration is None and exercise_type.tracks(MeasurementKind.TIME):
            for values in round_values:
                values.duration = template.duration
        notes = description if description is not None else first.description
    elif description is not None:
        round_values = [RoundValues.from_entry(entry) for entry in existing]
        notes = description
    else:
        prompter = SetPrompter(store, settings.unit_system)
        round_values = await prompter.collect_rounds(exercise_type, existing)
        notes = await prompter.ask_description(first.description)

    if not round_values:
        echo_info("Set unchanged.")
        return

    try:
        entries = await store.entries.replace_set(
            set_id, build_set(exercise_type, round_values, first.date, set_id, notes)
        )
    except StoreError as e:
        fail(ctx, e)
    echo_success(f"Set {set_id} now has {len(entries)} round(s)")


@set_group.command("delete")
@click.argument("set_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
@async_command
async def delete_set(ctx, set_id: int, yes: bool):
    """Delete every round of a set."""
    store = await open_store(ctx)
    entries = await store.entries.by_set(set_id)
    if not entries:
        fail(ctx, LookupError(f"Set {set_id} not found"))

    if not yes and not click.confirm(f"Delete set {set_id} ({len(entries)} round(s))?"):
        return
    removed = await store.entries.delete_set(set_id)
    echo_success(f"Deleted {removed} entr{'y' if removed == 1 else 'ies'} from set {set_id}")

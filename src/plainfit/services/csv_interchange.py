"""CSV export and import of fitness entries.

The file has a fixed header and one row per entry. Optional fields that are
empty are written as ``N/A``. Dates are UTC, formatted ``%Y-%m-%d %H:%M:%S``,
so files move safely between timezones but drop sub-second precision.

Import replaces every existing entry. The whole file is parsed and every
exercise name resolved before the database is touched; any problem aborts the
import and leaves the stored entries as they were.
"""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, TYPE_CHECKING

from ..db.errors import CsvImportError, StorageIOError
from ..models.entry import FitnessEntry
from ..models.exercise_type import ExerciseType

if TYPE_CHECKING:
    from ..db.store import FitnessStore

logger = logging.getLogger(__name__)

COLUMNS = [
    "id",
    "exercise_name",
    "exercise_type",
    "duration",
    "date",
    "set_id",
    "reps",
    "distance",
    "distance_unit",
    "weight",
    "weight_unit",
    "description",
]

MISSING = "N/A"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def export_filename(now: datetime | None = None) -> str:
    """Default file name for an export, e.g. ``plainfit_export_20240105_101500.csv``."""
    now = now or datetime.now()
    return f"plainfit_export_{now.strftime('%Y%m%d_%H%M%S')}.csv"


def _optional(value) -> str:
    return MISSING if value is None else str(value)


def format_date(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime(DATE_FORMAT)


def parse_date(value: str) -> datetime:
    return datetime.strptime(value, DATE_FORMAT).replace(tzinfo=timezone.utc)


async def export_csv(store: "FitnessStore", stream: IO[str]) -> int:
    """Write every entry to ``stream`` ordered by date ascending.

    Returns:
        Number of entry rows written
    """
    types_by_id = {t.id: t for t in await store.exercise_types.list_all()}
    entries = await store.entries.list_all()

    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(COLUMNS)
    for entry in entries:
        exercise_type = types_by_id.get(entry.exercise_type_id)
        writer.writerow(
            [
                entry.id,
                exercise_type.name if exercise_type else MISSING,
                exercise_type.type if exercise_type else MISSING,
                entry.duration,
                format_date(entry.date),
                entry.set_id,
                entry.reps,
                _optional(entry.distance),
                _optional(entry.distance_unit),
                _optional(entry.weight),
                _optional(entry.weight_unit),
                _optional(entry.description),
            ]
        )
    return len(entries)


async def export_csv_file(store: "FitnessStore", path: Path) -> Path:
    """Export to a file. A directory gets a timestamped file name.

    Returns:
        The path written
    """
    path = Path(path)
    if path.is_dir():
        path = path / export_filename()
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            count = await export_csv(store, f)
    except OSError as e:
        raise StorageIOError(f"Cannot write {path}: {e}") from e
    logger.info("Exported %d entries to %s", count, path)
    return path


def _parse_int(value: str, column: str, line: int) -> int:
    try:
        return int(value)
    except ValueError:
        raise CsvImportError(f"{column} is not an integer: {value!r}", line) from None


def _parse_float(value: str, column: str, line: int) -> float | None:
    if value == MISSING or value == "":
        return None
    try:
        return float(value)
    except ValueError:
        raise CsvImportError(f"{column} is not a number: {value!r}", line) from None


def _parse_text(value: str) -> str | None:
    if value == MISSING or value == "":
        return None
    return value


async def _parse_rows(store: "FitnessStore", stream: IO[str]) -> list[FitnessEntry]:
    reader = csv.reader(stream)
    try:
        header = [column.strip() for column in next(reader)]
    except StopIteration:
        raise CsvImportError("File is empty", 1) from None

    if len(header) != len(COLUMNS) or set(header) != set(COLUMNS):
        missing = sorted(set(COLUMNS) - set(header))
        unexpected = sorted(set(header) - set(COLUMNS))
        raise CsvImportError(
            f"Header does not match (missing: {missing}, unexpected: {unexpected})", 1
        )
    index = {column: position for position, column in enumerate(header)}

    type_cache: dict[tuple[str, str], ExerciseType] = {}
    entries = []
    for row in reader:
        line = reader.line_num
        if not any(cell.strip() for cell in row):
            continue
        if len(row) != len(COLUMNS):
            raise CsvImportError(f"Expected {len(COLUMNS)} fields, got {len(row)}", line)

        def cell(column: str) -> str:
            return row[index[column]].strip()

        key = (cell("exercise_name"), cell("exercise_type"))
        exercise_type = type_cache.get(key)
        if exercise_type is None:
            exercise_type = await store.exercise_types.get_by_name(*key)
            if exercise_type is None:
                raise CsvImportError(f"Unknown exercise type {key[0]!r}", line)
            type_cache[key] = exercise_type

        try:
            date = parse_date(cell("date"))
        except ValueError:
            raise CsvImportError(f"date is not {DATE_FORMAT}: {cell('date')!r}", line) from None

        entries.append(
            FitnessEntry(
                exercise_type_id=exercise_type.id,
                date=date,
                set_id=_parse_int(cell("set_id"), "set_id", line),
                duration=_parse_int(cell("duration"), "duration", line),
                reps=_parse_int(cell("reps"), "reps", line),
                distance=_parse_float(cell("distance"), "distance", line),
                distance_unit=_parse_text(cell("distance_unit")),
                weight=_parse_float(cell("weight"), "weight", line),
                weight_unit=_parse_text(cell("weight_unit")),
                description=_parse_text(row[index["description"]]),
            )
        )
    return entries


async def import_csv(store: "FitnessStore", stream: IO[str]) -> int:
    """Replace all entries with the rows of a CSV export.

    Returns:
        Number of entries imported

    Raises:
        CsvImportError: On a header mismatch, a malformed value or an unknown
            exercise type; nothing is changed in that case
    """
    try:
        entries = await _parse_rows(store, stream)
    except CsvImportError as e:
        logger.error("CSV import aborted: %s", e)
        raise
    except csv.Error as e:
        logger.error("CSV import aborted: %s", e)
        raise CsvImportError(str(e)) from e

    return await store.entries.replace_all(entries)


async def import_csv_file(store: "FitnessStore", path: Path) -> int:
    """Import a CSV file, replacing all entries."""
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            count = await import_csv(store, f)
    except OSError as e:
        raise StorageIOError(f"Cannot read {path}: {e}") from e
    logger.info("Imported %d entries from %s", count, path)
    return count

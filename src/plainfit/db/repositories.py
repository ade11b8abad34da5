"""Data access layer for plainfit."""

import logging
from collections.abc import Iterable
from datetime import date, datetime, tzinfo
from pathlib import Path

import aiosqlite

from ..models.category import Category
from ..models.entry import FitnessEntry
from ..models.exercise_type import ExerciseType, parse_kinds
from ..utils.dates import day_bounds, from_storage, to_storage
from .engine import connect, get_db_path
from .errors import (
    DuplicateNameError,
    ForeignKeyViolationError,
    NotFoundError,
    StoreError,
)

logger = logging.getLogger(__name__)


def _translate_integrity_error(
    error: aiosqlite.IntegrityError, table: str, name: str | None = None
) -> StoreError:
    """Map a SQLite constraint failure onto a typed store error."""
    message = str(error)
    logger.warning("Constraint failure on %s: %s", table, message)
    if "UNIQUE" in message and name is not None:
        return DuplicateNameError(table, name)
    if "FOREIGN KEY" in message:
        return ForeignKeyViolationError(f"{table}: {message}")
    return StoreError(f"{table}: {message}")


class CategoryRepository:
    """Repository for categories."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, category: Category) -> Category:
        """Create a new category.

        Raises:
            DuplicateNameError: If the name is taken
        """
        async with connect(self.db_path) as db:
            try:
                await self._insert(db, category)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                raise _translate_integrity_error(e, "categories", category.name) from e
            return category

    async def _insert(self, db: aiosqlite.Connection, category: Category) -> Category:
        data = category.to_dict()
        cursor = await db.execute(
            "INSERT INTO categories (name, icon, color) VALUES (?, ?, ?)",
            (data["name"], data["icon"], data["color"]),
        )
        category.id = cursor.lastrowid
        return category

    async def get(self, category_id: int) -> Category | None:
        """Get a category by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM categories WHERE id = ?", (category_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_category(row)

    async def get_by_name(self, name: str) -> Category | None:
        """Get a category by its unique name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM categories WHERE name = ?", (name,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_category(row)

    async def list_all(self) -> list[Category]:
        """List all categories ordered by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM categories ORDER BY name")
            rows = await cursor.fetchall()
            return [self._row_to_category(row) for row in rows]

    async def count(self) -> int:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM categories")
            (count,) = await cursor.fetchone()
            return count

    async def update(self, category: Category) -> Category:
        """Replace an existing category row."""
        if category.id is None:
            raise ValueError("Category must have an ID to update")

        data = category.to_dict()
        async with connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    "UPDATE categories SET name = ?, icon = ?, color = ? WHERE id = ?",
                    (data["name"], data["icon"], data["color"], category.id),
                )
                await db.commit()
            except aiosqlite.IntegrityError as e:
                raise _translate_integrity_error(e, "categories", category.name) from e
            if cursor.rowcount == 0:
                raise NotFoundError("categories", category.id)
            return category

    async def delete(self, category_id: int) -> None:
        """Delete a category and its exercise type links."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM categories WHERE id = ?", (category_id,)
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("categories", category_id)

    def _row_to_category(self, row: aiosqlite.Row) -> Category:
        """Convert a database row to a Category."""
        return Category(
            id=row["id"],
            name=row["name"],
            icon=row["icon"],
            color=row["color"],
        )


class ExerciseTypeRepository:
    """Repository for exercise types and their category links."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(
        self, exercise_type: ExerciseType, category_ids: Iterable[int] = ()
    ) -> ExerciseType:
        """Create an exercise type, optionally linked to categories."""
        async with connect(self.db_path) as db:
            try:
                await self._insert(db, exercise_type, category_ids)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                exercise_type.id = None
                raise _translate_integrity_error(e, "exercise_types") from e
            return exercise_type

    async def _insert(
        self, db: aiosqlite.Connection, exercise_type: ExerciseType, category_ids: Iterable[int] = ()
    ) -> ExerciseType:
        data = exercise_type.to_dict()
        cursor = await db.execute(
            "INSERT INTO exercise_types (name, type, icon, color) VALUES (?, ?, ?, ?)",
            (data["name"], data["type"], data["icon"], data["color"]),
        )
        exercise_type.id = cursor.lastrowid
        for category_id in category_ids:
            await self._link(db, exercise_type.id, category_id)
        return exercise_type

    async def get(self, type_id: int) -> ExerciseType | None:
        """Get an exercise type by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM exercise_types WHERE id = ?", (type_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_exercise_type(row)

    async def get_by_name(self, name: str, type_: str | None = None) -> ExerciseType | None:
        """Get an exercise type by name.

        When several types share a name, one whose composite type string
        matches ``type_`` wins, then the oldest.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT * FROM exercise_types WHERE name = ?
                ORDER BY (type = ?) DESC, id
                LIMIT 1
                """,
                (name, type_ or ""),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_exercise_type(row)

    async def list_all(self) -> list[ExerciseType]:
        """List all exercise types ordered by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT * FROM exercise_types ORDER BY name, id")
            rows = await cursor.fetchall()
            return [self._row_to_exercise_type(row) for row in rows]

    async def update(
        self, exercise_type: ExerciseType, category_ids: Iterable[int] | None = None
    ) -> ExerciseType:
        """Replace an existing exercise type row.

        When ``category_ids`` is given the category links are replaced in the
        same transaction, so a bad category id leaves the row untouched.

        Raises:
            NotFoundError: If the exercise type does not exist
            ForeignKeyViolationError: If a category does not exist
        """
        if exercise_type.id is None:
            raise ValueError("Exercise type must have an ID to update")

        data = exercise_type.to_dict()
        async with connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    """
                    UPDATE exercise_types SET name = ?, type = ?, icon = ?, color = ?
                    WHERE id = ?
                    """,
                    (data["name"], data["type"], data["icon"], data["color"], exercise_type.id),
                )
                if cursor.rowcount == 0:
                    await db.rollback()
                    raise NotFoundError("exercise_types", exercise_type.id)
                if category_ids is not None:
                    await self._replace_links(db, exercise_type.id, category_ids)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                raise _translate_integrity_error(e, "exercise_types") from e
            return exercise_type

    async def delete(self, type_id: int) -> None:
        """Delete an exercise type, its category links and its entries."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM exercise_types WHERE id = ?", (type_id,)
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("exercise_types", type_id)

    async def link_category(self, type_id: int, category_id: int) -> None:
        """Add an exercise type to a category. Linking twice is a no-op."""
        async with connect(self.db_path) as db:
            try:
                await db.execute(
                    """
                    INSERT OR IGNORE INTO exercise_type_categories
                    (exercise_type_id, category_id) VALUES (?, ?)
                    """,
                    (type_id, category_id),
                )
                await db.commit()
            except aiosqlite.IntegrityError as e:
                raise _translate_integrity_error(e, "exercise_type_categories") from e

    async def unlink_category(self, type_id: int, category_id: int) -> bool:
        """Remove an exercise type from a category."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                DELETE FROM exercise_type_categories
                WHERE exercise_type_id = ? AND category_id = ?
                """,
                (type_id, category_id),
            )
            await db.commit()
            return cursor.rowcount > 0

    async def set_categories(self, type_id: int, category_ids: Iterable[int]) -> None:
        """Replace all category links of an exercise type."""
        async with connect(self.db_path) as db:
            try:
                await self._replace_links(db, type_id, category_ids)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                raise _translate_integrity_error(e, "exercise_type_categories") from e

    async def _replace_links(
        self, db: aiosqlite.Connection, type_id: int, category_ids: Iterable[int]
    ) -> None:
        await db.execute(
            "DELETE FROM exercise_type_categories WHERE exercise_type_id = ?",
            (type_id,),
        )
        for category_id in category_ids:
            await self._link(db, type_id, category_id)

    async def _link(self, db: aiosqlite.Connection, type_id: int, category_id: int) -> None:
        await db.execute(
            """
            INSERT OR IGNORE INTO exercise_type_categories
            (exercise_type_id, category_id) VALUES (?, ?)
            """,
            (type_id, category_id),
        )

    async def categories_for(self, type_id: int) -> list[Category]:
        """Categories an exercise type belongs to, ordered by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT c.* FROM categories c
                INNER JOIN exercise_type_categories etc ON c.id = etc.category_id
                WHERE etc.exercise_type_id = ?
                ORDER BY c.name
                """,
                (type_id,),
            )
            rows = await cursor.fetchall()
            return [
                Category(id=row["id"], name=row["name"], icon=row["icon"], color=row["color"])
                for row in rows
            ]

    async def for_category(self, category_id: int) -> list[ExerciseType]:
        """Exercise types in a category, ordered by name."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT et.* FROM exercise_types et
                INNER JOIN exercise_type_categories etc ON et.id = etc.exercise_type_id
                WHERE etc.category_id = ?
                ORDER BY et.name, et.id
                """,
                (category_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_exercise_type(row) for row in rows]

    def _row_to_exercise_type(self, row: aiosqlite.Row) -> ExerciseType:
        """Convert a database row to an ExerciseType."""
        return ExerciseType(
            id=row["id"],
            name=row["name"],
            kinds=parse_kinds(row["type"]),
            icon=row["icon"],
            color=row["color"],
        )


_ENTRY_COLUMNS = (
    "exercise_type_id, duration, date, set_id, reps, "
    "distance, distance_unit, weight, weight_unit, description"
)


class FitnessEntryRepository:
    """Repository for fitness entries and the sets they form."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def _insert(self, db: aiosqlite.Connection, entry: FitnessEntry) -> FitnessEntry:
        cursor = await db.execute(
            f"INSERT INTO fitness_entries ({_ENTRY_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            self._entry_params(entry),
        )
        entry.id = cursor.lastrowid
        return entry

    async def create(self, entry: FitnessEntry) -> FitnessEntry:
        """Create a single entry.

        Raises:
            ForeignKeyViolationError: If the exercise type does not exist
        """
        async with connect(self.db_path) as db:
            try:
                await self._insert(db, entry)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                raise _translate_integrity_error(e, "fitness_entries") from e
            return entry

    async def create_many(self, entries: Iterable[FitnessEntry]) -> list[FitnessEntry]:
        """Create several entries in one transaction (all or nothing)."""
        entries = list(entries)
        async with connect(self.db_path) as db:
            try:
                for entry in entries:
                    await self._insert(db, entry)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                for entry in entries:
                    entry.id = None
                raise _translate_integrity_error(e, "fitness_entries") from e
            return entries

    async def get(self, entry_id: int) -> FitnessEntry | None:
        """Get an entry by ID."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM fitness_entries WHERE id = ?", (entry_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_entry(row)

    async def list_all(self, descending: bool = False) -> list[FitnessEntry]:
        """List every entry by date."""
        order = "DESC" if descending else "ASC"
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                f"SELECT * FROM fitness_entries ORDER BY date {order}, id {order}"
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def count(self) -> int:
        async with connect(self.db_path) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM fitness_entries")
            (count,) = await cursor.fetchone()
            return count

    async def update(self, entry: FitnessEntry) -> FitnessEntry:
        """Replace an existing entry row."""
        if entry.id is None:
            raise ValueError("Entry must have an ID to update")

        async with connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    """
                    UPDATE fitness_entries SET
                        exercise_type_id = ?, duration = ?, date = ?, set_id = ?, reps = ?,
                        distance = ?, distance_unit = ?, weight = ?, weight_unit = ?,
                        description = ?
                    WHERE id = ?
                    """,
                    (*self._entry_params(entry), entry.id),
                )
                await db.commit()
            except aiosqlite.IntegrityError as e:
                raise _translate_integrity_error(e, "fitness_entries") from e
            if cursor.rowcount == 0:
                raise NotFoundError("fitness_entries", entry.id)
            return entry

    async def delete(self, entry_id: int) -> None:
        """Delete a single entry."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM fitness_entries WHERE id = ?", (entry_id,)
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise NotFoundError("fitness_entries", entry_id)

    async def generate_set_id(self) -> int:
        """Next free set id: one more than the largest in use.

        Not guarded against concurrent writers; plainfit assumes one.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT COALESCE(MAX(set_id), 0) + 1 FROM fitness_entries"
            )
            (set_id,) = await cursor.fetchone()
            return set_id

    async def for_range(
        self, start: datetime, end: datetime, descending: bool = False
    ) -> list[FitnessEntry]:
        """Entries with ``start <= date < end``."""
        order = "DESC" if descending else "ASC"
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                f"""
                SELECT * FROM fitness_entries
                WHERE date >= ? AND date < ?
                ORDER BY date {order}, id {order}
                """,
                (to_storage(start), to_storage(end)),
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def for_day(
        self, day: date | datetime, tz: tzinfo | None = None
    ) -> list[FitnessEntry]:
        """Entries logged on a calendar day, newest first."""
        start, end = day_bounds(day, tz)
        return await self.for_range(start, end, descending=True)

    async def by_set(self, set_id: int) -> list[FitnessEntry]:
        """All entries sharing a set id, in insertion order."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT * FROM fitness_entries WHERE set_id = ? ORDER BY id", (set_id,)
            )
            rows = await cursor.fetchall()
            return [self._row_to_entry(row) for row in rows]

    async def delete_set(self, set_id: int) -> int:
        """Delete every entry in a set. Returns the number removed."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                "DELETE FROM fitness_entries WHERE set_id = ?", (set_id,)
            )
            await db.commit()
            return cursor.rowcount

    async def replace_set(
        self, set_id: int, entries: Iterable[FitnessEntry]
    ) -> list[FitnessEntry]:
        """Swap a set's rows for ``entries`` in one transaction.

        Editing a set never updates rows in place: the old rows are deleted
        and the current ones reinserted under the same set id.
        """
        entries = list(entries)
        async with connect(self.db_path) as db:
            try:
                await db.execute(
                    "DELETE FROM fitness_entries WHERE set_id = ?", (set_id,)
                )
                for entry in entries:
                    entry.set_id = set_id
                    await self._insert(db, entry)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                raise _translate_integrity_error(e, "fitness_entries") from e
            return entries

    async def replace_all(self, entries: Iterable[FitnessEntry]) -> int:
        """Delete every entry and insert ``entries`` in one transaction."""
        entries = list(entries)
        async with connect(self.db_path) as db:
            try:
                await db.execute("DELETE FROM fitness_entries")
                for entry in entries:
                    await self._insert(db, entry)
                await db.commit()
            except aiosqlite.IntegrityError as e:
                await db.rollback()
                raise _translate_integrity_error(e, "fitness_entries") from e
            return len(entries)

    async def delete_all(self) -> int:
        async with connect(self.db_path) as db:
            cursor = await db.execute("DELETE FROM fitness_entries")
            await db.commit()
            return cursor.rowcount

    async def exercise_type_for_set(self, set_id: int) -> ExerciseType | None:
        """Exercise type of a set, taken from any one of its entries."""
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT et.* FROM exercise_types et
                INNER JOIN fitness_entries fe ON fe.exercise_type_id = et.id
                WHERE fe.set_id = ?
                ORDER BY fe.id
                LIMIT 1
                """,
                (set_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return ExerciseType(
                id=row["id"],
                name=row["name"],
                kinds=parse_kinds(row["type"]),
                icon=row["icon"],
                color=row["color"],
            )

    async def with_exercise_types(
        self, start: datetime, end: datetime
    ) -> list[tuple[FitnessEntry, ExerciseType, Category | None]]:
        """Entries in ``[start, end)`` joined to their exercise type and first category.

        The first category is the alphabetically first one the exercise type
        belongs to; types without a category yield ``None``.
        """
        async with connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT fe.*,
                       et.name AS et_name, et.type AS et_type,
                       et.icon AS et_icon, et.color AS et_color,
                       c.id AS c_id, c.name AS c_name,
                       c.icon AS c_icon, c.color AS c_color
                FROM fitness_entries fe
                INNER JOIN exercise_types et ON et.id = fe.exercise_type_id
                LEFT JOIN categories c ON c.id = (
                    SELECT etc.category_id FROM exercise_type_categories etc
                    INNER JOIN categories first_c ON first_c.id = etc.category_id
                    WHERE etc.exercise_type_id = et.id
                    ORDER BY first_c.name
                    LIMIT 1
                )
                WHERE fe.date >= ? AND fe.date < ?
                ORDER BY fe.date, fe.id
                """,
                (to_storage(start), to_storage(end)),
            )
            rows = await cursor.fetchall()

        results = []
        for row in rows:
            exercise_type = ExerciseType(
                id=row["exercise_type_id"],
                name=row["et_name"],
                kinds=parse_kinds(row["et_type"]),
                icon=row["et_icon"],
                color=row["et_color"],
            )
            category = None
            if row["c_id"] is not None:
                category = Category(
                    id=row["c_id"], name=row["c_name"], icon=row["c_icon"], color=row["c_color"]
                )
            results.append((self._row_to_entry(row), exercise_type, category))
        return results

    def _entry_params(self, entry: FitnessEntry) -> tuple:
        return (
            entry.exercise_type_id,
            entry.duration,
            to_storage(entry.date),
            entry.set_id,
            entry.reps,
            entry.distance,
            entry.distance_unit,
            entry.weight,
            entry.weight_unit,
            entry.description,
        )

    def _row_to_entry(self, row: aiosqlite.Row) -> FitnessEntry:
        """Convert a database row to a FitnessEntry."""
        return FitnessEntry(
            id=row["id"],
            exercise_type_id=row["exercise_type_id"],
            duration=row["duration"],
            date=from_storage(row["date"]),
            set_id=row["set_id"],
            reps=row["reps"],
            distance=row["distance"],
            distance_unit=row["distance_unit"],
            weight=row["weight"],
            weight_unit=row["weight_unit"],
            description=row["description"],
        )

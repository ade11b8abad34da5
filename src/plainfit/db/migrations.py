"""Ordered schema migrations.

Each step moves the schema from ``version - 1`` to ``version``. Steps run in a
single transaction with foreign keys disabled so tables can be rebuilt.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import aiosqlite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Migration:
    """A single schema step."""

    version: int
    description: str
    apply: Callable[[aiosqlite.Connection], Awaitable[None]]


async def _base_schema(db: aiosqlite.Connection) -> None:
    await db.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS exercise_types (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            type TEXT NOT NULL
        )
    """)

    # Early layout: entries carry copies of the exercise name and type, and
    # link to categories directly.
    await db.execute("""
        CREATE TABLE IF NOT EXISTS fitness_entries (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            exercise_type_id INTEGER REFERENCES exercise_types(id),
            exercise_name TEXT NOT NULL,
            exercise_type TEXT NOT NULL,
            duration INTEGER NOT NULL DEFAULT 0,
            date TEXT NOT NULL,
            set_id INTEGER NOT NULL,
            reps INTEGER NOT NULL DEFAULT 0,
            distance REAL,
            distance_unit TEXT,
            weight REAL,
            weight_unit TEXT
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS exercise_type_categories (
            exercise_type_id INTEGER NOT NULL,
            category_id INTEGER NOT NULL,
            PRIMARY KEY (exercise_type_id, category_id),
            FOREIGN KEY (exercise_type_id) REFERENCES exercise_types(id) ON DELETE CASCADE,
            FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
        )
    """)

    await db.execute("""
        CREATE TABLE IF NOT EXISTS entry_categories (
            entry_id INTEGER NOT NULL,
            category_id INTEGER NOT NULL,
            PRIMARY KEY (entry_id, category_id),
            FOREIGN KEY (entry_id) REFERENCES fitness_entries(id) ON DELETE CASCADE,
            FOREIGN KEY (category_id) REFERENCES categories(id) ON DELETE CASCADE
        )
    """)


async def _add_icons_and_description(db: aiosqlite.Connection) -> None:
    await db.execute("ALTER TABLE categories ADD COLUMN icon TEXT NOT NULL DEFAULT 'figure.run'")
    await db.execute("ALTER TABLE categories ADD COLUMN color TEXT NOT NULL DEFAULT '#007AFF'")
    await db.execute("ALTER TABLE exercise_types ADD COLUMN icon TEXT")
    await db.execute("ALTER TABLE exercise_types ADD COLUMN color TEXT")
    await db.execute("ALTER TABLE fitness_entries ADD COLUMN description TEXT")


async def _normalize_entries(db: aiosqlite.Connection) -> None:
    await db.execute("DROP TABLE IF EXISTS entry_categories")

    await db.execute("""
        CREATE TABLE fitness_entries_new (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            exercise_type_id INTEGER NOT NULL
                REFERENCES exercise_types(id) ON DELETE CASCADE,
            duration INTEGER NOT NULL DEFAULT 0,
            date TEXT NOT NULL,
            set_id INTEGER NOT NULL,
            reps INTEGER NOT NULL DEFAULT 0,
            distance REAL,
            distance_unit TEXT,
            weight REAL,
            weight_unit TEXT,
            description TEXT
        )
    """)

    # Entries written before the id column was filled are matched by name
    await db.execute("""
        INSERT INTO fitness_entries_new
        (id, exercise_type_id, duration, date, set_id, reps,
         distance, distance_unit, weight, weight_unit, description)
        SELECT * FROM (
            SELECT fe.id,
                   COALESCE(
                       fe.exercise_type_id,
                       (SELECT et.id FROM exercise_types et
                        WHERE et.name = fe.exercise_name
                        ORDER BY et.id LIMIT 1)
                   ) AS resolved_type_id,
                   fe.duration, fe.date, fe.set_id, fe.reps,
                   fe.distance, fe.distance_unit, fe.weight, fe.weight_unit, fe.description
            FROM fitness_entries fe
        )
        WHERE resolved_type_id IN (SELECT id FROM exercise_types)
    """)

    cursor = await db.execute(
        "SELECT (SELECT COUNT(*) FROM fitness_entries) - (SELECT COUNT(*) FROM fitness_entries_new)"
    )
    (dropped,) = await cursor.fetchone()
    if dropped:
        logger.warning("Dropped %d entries with no matching exercise type", dropped)

    await db.execute("DROP TABLE fitness_entries")
    await db.execute("ALTER TABLE fitness_entries_new RENAME TO fitness_entries")

    await db.execute("CREATE INDEX IF NOT EXISTS idx_fitness_entries_date ON fitness_entries(date)")
    await db.execute("CREATE INDEX IF NOT EXISTS idx_fitness_entries_set ON fitness_entries(set_id)")
    await db.execute("""
        CREATE INDEX IF NOT EXISTS idx_exercise_type_categories_category
        ON exercise_type_categories(category_id)
    """)


MIGRATIONS: list[Migration] = [
    Migration(1, "base schema", _base_schema),
    Migration(2, "icons, colors and entry descriptions", _add_icons_and_description),
    Migration(3, "derive entry categories through exercise types", _normalize_entries),
]

SCHEMA_VERSION = MIGRATIONS[-1].version

# Tables every supported version must contain
REQUIRED_TABLES = frozenset(
    {"categories", "exercise_types", "fitness_entries", "exercise_type_categories"}
)

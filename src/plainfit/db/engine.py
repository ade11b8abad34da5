"""Database engine setup and initialization."""

import logging
import sqlite3
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite

from ..config import get_data_dir
from .errors import SchemaVersionError, StorageIOError
from .migrations import MIGRATIONS, REQUIRED_TABLES, SCHEMA_VERSION

logger = logging.getLogger(__name__)

DB_FILENAME = "plainfit.db"


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    return get_data_dir(data_dir) / DB_FILENAME


@asynccontextmanager
async def connect(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    """Open a connection with row access by name and foreign keys enforced."""
    try:
        async with aiosqlite.connect(db_path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA foreign_keys = ON")
            yield db
    except sqlite3.OperationalError as e:
        if "unable to open" in str(e):
            raise StorageIOError(f"Cannot open database {db_path}: {e}") from e
        raise


async def _read_version(db: aiosqlite.Connection) -> int:
    cursor = await db.execute("SELECT MAX(version) FROM schema_version")
    row = await cursor.fetchone()
    return row[0] or 0


async def init_db(db_path: Path | None = None) -> int:
    """Create or upgrade the database schema.

    Safe to call on every start. Returns the schema version after upgrading.

    Raises:
        SchemaVersionError: If the file was written by a newer plainfit
    """
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Table rebuilds need foreign keys off; PRAGMA is ignored inside a transaction
        await db.execute("PRAGMA foreign_keys = OFF")
        await db.execute(
            "CREATE TABLE IF NOT EXISTS schema_version (version INTEGER NOT NULL)"
        )
        await db.commit()

        current = await _read_version(db)
        if current > SCHEMA_VERSION:
            raise SchemaVersionError(
                f"Database {db_path} has schema version {current}, "
                f"this plainfit understands up to {SCHEMA_VERSION}"
            )

        for migration in MIGRATIONS:
            if migration.version <= current:
                continue
            await db.execute("BEGIN")
            try:
                await migration.apply(db)
                cursor = await db.execute("PRAGMA foreign_key_check")
                violations = await cursor.fetchall()
                if violations:
                    raise SchemaVersionError(
                        f"Migration {migration.version} left {len(violations)} "
                        "foreign key violations"
                    )
                await db.execute("DELETE FROM schema_version")
                await db.execute(
                    "INSERT INTO schema_version (version) VALUES (?)", (migration.version,)
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            logger.info(
                "Applied schema migration %d (%s)", migration.version, migration.description
            )
            current = migration.version

        return current


async def get_schema_version(db_path: Path) -> int:
    """Read the schema version, 0 for a database that was never initialized."""
    async with aiosqlite.connect(db_path) as db:
        cursor = await db.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
        )
        if await cursor.fetchone() is None:
            return 0
        return await _read_version(db)


async def check_schema(db_path: Path) -> int:
    """Validate that a file is a plainfit database this version can open.

    Opens the file read-only and never modifies it.

    Returns:
        The file's schema version

    Raises:
        StorageIOError: If the file does not exist
        SchemaVersionError: If the file is not a compatible plainfit database
    """
    db_path = Path(db_path)
    if not db_path.is_file():
        raise StorageIOError(f"Database file not found: {db_path}")

    uri = f"{db_path.resolve().as_uri()}?mode=ro"
    try:
        async with aiosqlite.connect(uri, uri=True) as db:
            cursor = await db.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            tables = {row[0] for row in await cursor.fetchall()}
            if "schema_version" not in tables:
                raise SchemaVersionError(f"{db_path} has no schema version")
            version = await _read_version(db)
    except sqlite3.DatabaseError as e:
        raise SchemaVersionError(f"{db_path} is not a plainfit database: {e}") from e

    if version < 1 or version > SCHEMA_VERSION:
        raise SchemaVersionError(
            f"{db_path} has schema version {version}, expected 1 to {SCHEMA_VERSION}"
        )

    missing = REQUIRED_TABLES - tables
    if missing:
        raise SchemaVersionError(
            f"{db_path} is missing tables: {', '.join(sorted(missing))}"
        )
    return version

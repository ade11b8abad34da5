"""Whole-file backup and restore of the database.

Both directions copy to a temporary file beside the target and rename it into
place, so an interrupted copy never leaves a half-written database behind.
"""

import logging
import os
import shutil
import tempfile
from datetime import datetime
from pathlib import Path

from ..db.engine import check_schema, init_db
from ..db.errors import StorageIOError

logger = logging.getLogger(__name__)

ROLLBACK_SUFFIX = ".bak"


def backup_filename(now: datetime | None = None) -> str:
    """Default file name for a backup, e.g. ``plainfit_backup_20240105_101500.db``."""
    now = now or datetime.now()
    return f"plainfit_backup_{now.strftime('%Y%m%d_%H%M%S')}.db"


def _atomic_copy(source: Path, destination: Path) -> None:
    """Copy ``source`` to ``destination`` through a temp file and a rename."""
    fd, temp_name = tempfile.mkstemp(
        prefix=f".{destination.name}.", suffix=".tmp", dir=destination.parent
    )
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        shutil.copyfile(source, temp_path)
        os.replace(temp_path, destination)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise


def backup_database(db_path: Path, destination: Path) -> Path:
    """Copy the live database to ``destination``.

    ``destination`` may be an existing directory, in which case the backup
    gets a timestamped name inside it.

    Returns:
        Path of the backup file
    """
    db_path = Path(db_path)
    destination = Path(destination)
    if not db_path.is_file():
        raise StorageIOError(f"Database file not found: {db_path}")
    if destination.is_dir():
        destination = destination / backup_filename()

    try:
        _atomic_copy(db_path, destination)
    except OSError as e:
        raise StorageIOError(f"Cannot write backup {destination}: {e}") from e

    logger.info("Backed up %s to %s", db_path, destination)
    return destination


async def restore_database(db_path: Path, source: Path) -> Path | None:
    """Replace the live database with a backup.

    The backup is validated before anything is touched. The current database
    is kept as ``<name>.bak`` so a bad restore can be undone by hand, then the
    restored file is migrated to the current schema.

    Returns:
        Path of the rollback copy, or None if there was no live database

    Raises:
        StorageIOError: If a file cannot be read or written
        SchemaVersionError: If ``source`` is not a compatible database
    """
    db_path = Path(db_path)
    source = Path(source)
    version = await check_schema(source)
    logger.info("Restoring %s (schema version %d)", source, version)

    rollback_path = None
    try:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        if db_path.exists():
            rollback_path = db_path.with_name(db_path.name + ROLLBACK_SUFFIX)
            shutil.copyfile(db_path, rollback_path)
        # Journal files belong to the database being replaced
        for suffix in ("-wal", "-shm", "-journal"):
            db_path.with_name(db_path.name + suffix).unlink(missing_ok=True)
        _atomic_copy(source, db_path)
    except OSError as e:
        logger.error("Restore from %s failed: %s", source, e)
        raise StorageIOError(f"Cannot restore {source}: {e}") from e

    await init_db(db_path)
    return rollback_path

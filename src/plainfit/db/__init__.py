"""Database layer for plainfit."""

from .engine import check_schema, connect, get_db_path, get_schema_version, init_db
from .errors import (
    CsvImportError,
    DuplicateNameError,
    ForeignKeyViolationError,
    NotFoundError,
    SchemaVersionError,
    StorageIOError,
    StoreError,
)
from .migrations import SCHEMA_VERSION
from .repositories import (
    CategoryRepository,
    ExerciseTypeRepository,
    FitnessEntryRepository,
)
from .store import FitnessStore

__all__ = [
    "CategoryRepository",
    "check_schema",
    "connect",
    "CsvImportError",
    "DuplicateNameError",
    "ExerciseTypeRepository",
    "FitnessEntryRepository",
    "FitnessStore",
    "ForeignKeyViolationError",
    "get_db_path",
    "get_schema_version",
    "init_db",
    "NotFoundError",
    "SCHEMA_VERSION",
    "SchemaVersionError",
    "StorageIOError",
    "StoreError",
]

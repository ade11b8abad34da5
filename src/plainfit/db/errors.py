"""Typed errors raised by the storage layer."""


class StoreError(Exception):
    """Base class for storage failures."""


class DuplicateNameError(StoreError):
    """A unique name is already taken."""

    def __init__(self, table: str, name: str):
        self.table = table
        self.name = name
        super().__init__(f"{table}: name {name!r} already exists")


class ForeignKeyViolationError(StoreError):
    """A row references a record that does not exist."""


class NotFoundError(StoreError):
    """No record exists with the requested id."""

    def __init__(self, table: str, record_id: int):
        self.table = table
        self.record_id = record_id
        super().__init__(f"{table}: no record with id {record_id}")


class StorageIOError(StoreError):
    """The database file could not be read, written or replaced."""


class SchemaVersionError(StoreError):
    """The database schema is incompatible with this version of plainfit."""


class CsvImportError(StoreError):
    """A CSV file could not be imported; no data was changed."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)

"""Services built on top of the storage layer."""

from .backup import backup_database, restore_database
from .calendar import month_activity, month_bounds, weeks_for_month
from .csv_interchange import export_csv, export_csv_file, import_csv, import_csv_file

__all__ = [
    "backup_database",
    "export_csv",
    "export_csv_file",
    "import_csv",
    "import_csv_file",
    "month_activity",
    "month_bounds",
    "restore_database",
    "weeks_for_month",
]

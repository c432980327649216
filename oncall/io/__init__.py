"""I/O utilities for CSV import/export."""

from .export_csv import export_assignments_csv, export_persons_csv
from .import_csv import import_persons_csv, import_preferences_csv, import_shifts_csv, import_vacations_csv

__all__ = [
    "import_persons_csv",
    "import_preferences_csv",
    "import_vacations_csv",
    "import_shifts_csv",
    "export_assignments_csv",
    "export_persons_csv",
]

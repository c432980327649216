"""Domain models and data access layer."""

from .loader import load_month_data
from .models import Base, GenerationReport, Person, Shift, ShiftPreference, Vacation
from .repositories import (
    PersonRepository,
    PreferenceRepository,
    ReportRepository,
    ShiftRepository,
    VacationRepository,
)

__all__ = [
    "Base",
    "Person",
    "ShiftPreference",
    "Vacation",
    "Shift",
    "GenerationReport",
    "PersonRepository",
    "PreferenceRepository",
    "VacationRepository",
    "ShiftRepository",
    "ReportRepository",
    "load_month_data",
]

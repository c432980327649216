"""Roster data types consumed and produced by the shift-assignment engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional

from oncall.dates import format_month, month_days


class PreferenceKind(str, Enum):
    WANT = "WANT"
    AVOID = "AVOID"
    LOCK = "LOCK"


class SearchOutcome(str, Enum):
    SOLVED = "solved"
    INFEASIBLE = "infeasible"
    BUDGET_EXCEEDED = "budget_exceeded"


@dataclass(frozen=True)
class Person:
    """A person on the on-call roster."""

    person_id: int
    name: str = ""
    group: Optional[str] = None
    monthly_cap: Optional[int] = None  # None = use the configured default
    lifetime_shifts: int = 0  # shifts held outside the target month


@dataclass(frozen=True)
class Preference:
    person_id: int
    date: date
    kind: PreferenceKind
    weight: int = 0


@dataclass(frozen=True)
class Vacation:
    person_id: int
    date: date


@dataclass(frozen=True)
class Assignment:
    """One day's on-call pair."""

    date: date
    person_a: int
    person_b: int
    fixed: bool = False

    def people(self) -> tuple:
        return (self.person_a, self.person_b)


@dataclass
class MonthData:
    """Everything one generation run reads, loaded once at the start."""

    year: int
    month: int
    persons: List[Person] = field(default_factory=list)
    preferences: List[Preference] = field(default_factory=list)
    vacations: List[Vacation] = field(default_factory=list)
    fixed_assignments: List[Assignment] = field(default_factory=list)

    @property
    def month_id(self) -> str:
        return format_month(self.year, self.month)

    @property
    def days(self) -> List[date]:
        return month_days(self.year, self.month)


@dataclass
class SearchResult:
    """Outcome of one backtracking run. Failed runs carry no assignments."""

    outcome: SearchOutcome
    attempts: int
    assignments: List[Assignment] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is SearchOutcome.SOLVED

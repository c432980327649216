"""Vacation requests."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from oncall.domain.models import Vacation
from oncall.domain.repositories import PersonRepository, ShiftRepository, VacationRepository


def add_vacation(
    session: Session, person_id: int, day: date, status: str = "APPROVED", commit: bool = True
) -> Vacation:
    """
    Record a vacation day.

    With ``commit=False`` the row is only flushed, so bulk imports can stage
    every row and commit once.

    Raises:
        ValueError: If the person is unknown, already on vacation that day,
            or already holds a shift on that date
    """
    if PersonRepository.get_by_id(session, person_id) is None:
        raise ValueError(f"Unknown person {person_id}")
    if VacationRepository.get(session, person_id, day) is not None:
        raise ValueError(f"Vacation already exists for person {person_id} on {day}")
    if ShiftRepository.get_by_person(session, person_id, day) is not None:
        raise ValueError(f"Person {person_id} already has a shift on {day}")

    vacation = Vacation(person_id=person_id, date=day, status=status.upper())
    return VacationRepository.create(session, vacation, commit=commit)


def remove_vacation(session: Session, person_id: int, day: date) -> int:
    return VacationRepository.delete(session, person_id, day)

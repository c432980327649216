"""Load one month of persisted data into the engine's roster types."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from oncall.roster import Assignment, MonthData, Person, Preference, PreferenceKind, Vacation

from .repositories import PersonRepository, PreferenceRepository, ShiftRepository, VacationRepository

logger = logging.getLogger(__name__)


def load_month_data(session: Session, year: int, month: int) -> MonthData:
    """
    Read everything a generation run needs, once.

    Args:
        session: Database session
        year: Target year
        month: Target month (1-12)

    Returns:
        MonthData with people (and their shift history outside the month),
        the month's preferences, approved vacations and existing shifts as
        fixed assignments
    """
    history = ShiftRepository.count_outside_month(session, year, month)

    persons = [
        Person(
            person_id=p.person_id,
            name=p.name,
            group=p.group,
            monthly_cap=p.monthly_cap,
            lifetime_shifts=history.get(p.person_id, 0),
        )
        for p in PersonRepository.get_all(session)
    ]

    preferences = [
        Preference(
            person_id=p.person_id,
            date=p.date,
            kind=PreferenceKind(p.kind.upper()),
            weight=p.points,
        )
        for p in PreferenceRepository.get_by_month(session, year, month)
    ]

    vacations = [
        Vacation(person_id=v.person_id, date=v.date)
        for v in VacationRepository.get_by_month(session, year, month, approved_only=True)
    ]

    fixed = [
        Assignment(date=s.date, person_a=s.slot1_id, person_b=s.slot2_id, fixed=True)
        for s in ShiftRepository.get_by_month(session, year, month)
    ]

    data = MonthData(
        year=year,
        month=month,
        persons=persons,
        preferences=preferences,
        vacations=vacations,
        fixed_assignments=fixed,
    )
    logger.info(
        "Loaded %s: %d people, %d preferences, %d vacations, %d existing shifts",
        data.month_id,
        len(persons),
        len(preferences),
        len(vacations),
        len(fixed),
    )
    return data

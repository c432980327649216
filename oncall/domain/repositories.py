"""Repository classes for data access."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from oncall.dates import month_bounds

from .models import GenerationReport, Person, Shift, ShiftPreference, Vacation


class PersonRepository:
    """Repository for roster data access."""

    @staticmethod
    def get_all(session: Session) -> List[Person]:
        """Get all people, in id order."""
        return session.query(Person).order_by(Person.person_id).all()

    @staticmethod
    def get_by_id(session: Session, person_id: int) -> Optional[Person]:
        """Get person by ID."""
        return session.query(Person).filter(Person.person_id == person_id).first()

    @staticmethod
    def get_by_group(session: Session, group: str) -> List[Person]:
        """Get all people in a group."""
        return session.query(Person).filter(Person.group == group.upper()).order_by(Person.person_id).all()

    @staticmethod
    def create(session: Session, person: Person) -> Person:
        """Create a new person."""
        session.add(person)
        session.commit()
        session.refresh(person)
        return person

    @staticmethod
    def bulk_create(session: Session, people: List[Person]) -> None:
        """Create multiple people."""
        session.add_all(people)
        session.commit()


class PreferenceRepository:
    """Repository for shift preference data access."""

    @staticmethod
    def get_by_month(session: Session, year: int, month: int, person_id: int | None = None) -> List[ShiftPreference]:
        """Get preferences of a month, optionally for one person."""
        first, last = month_bounds(year, month)
        query = session.query(ShiftPreference).filter(ShiftPreference.date.between(first, last))
        if person_id is not None:
            query = query.filter(ShiftPreference.person_id == person_id)
        return query.order_by(ShiftPreference.date, ShiftPreference.person_id).all()

    @staticmethod
    def get(session: Session, person_id: int, day: date) -> Optional[ShiftPreference]:
        return (
            session.query(ShiftPreference)
            .filter(ShiftPreference.person_id == person_id, ShiftPreference.date == day)
            .first()
        )

    @staticmethod
    def upsert(
        session: Session, person_id: int, day: date, kind: str, points: int, commit: bool = True
    ) -> ShiftPreference:
        """Create or replace the preference of a person on a date. With commit=False the row is only flushed."""
        pref = PreferenceRepository.get(session, person_id, day)
        if pref is None:
            pref = ShiftPreference(person_id=person_id, date=day, kind=kind, points=points)
            session.add(pref)
        else:
            pref.kind = kind
            pref.points = points
        if commit:
            session.commit()
            session.refresh(pref)
        else:
            session.flush()
        return pref

    @staticmethod
    def delete(session: Session, person_id: int, day: date, commit: bool = True) -> int:
        """Delete the preference of a person on a date. Returns number of deleted rows."""
        count = (
            session.query(ShiftPreference)
            .filter(ShiftPreference.person_id == person_id, ShiftPreference.date == day)
            .delete(synchronize_session=False)
        )
        if commit:
            session.commit()
        return count


class VacationRepository:
    """Repository for vacation data access."""

    @staticmethod
    def get_by_month(
        session: Session, year: int, month: int, approved_only: bool = True
    ) -> List[Vacation]:
        """Get vacations of a month (approved ones only by default)."""
        first, last = month_bounds(year, month)
        query = session.query(Vacation).filter(Vacation.date.between(first, last))
        if approved_only:
            query = query.filter(Vacation.status == "APPROVED")
        return query.order_by(Vacation.date, Vacation.person_id).all()

    @staticmethod
    def get(session: Session, person_id: int, day: date) -> Optional[Vacation]:
        return session.query(Vacation).filter(Vacation.person_id == person_id, Vacation.date == day).first()

    @staticmethod
    def create(session: Session, vacation: Vacation, commit: bool = True) -> Vacation:
        """Create a new vacation. With commit=False the row is only flushed."""
        session.add(vacation)
        if commit:
            session.commit()
            session.refresh(vacation)
        else:
            session.flush()
        return vacation

    @staticmethod
    def delete(session: Session, person_id: int, day: date) -> int:
        count = (
            session.query(Vacation)
            .filter(Vacation.person_id == person_id, Vacation.date == day)
            .delete(synchronize_session=False)
        )
        session.commit()
        return count


class ShiftRepository:
    """Repository for shift data access."""

    @staticmethod
    def get_by_month(session: Session, year: int, month: int) -> List[Shift]:
        """Get all shifts of a month, in date order."""
        first, last = month_bounds(year, month)
        return session.query(Shift).filter(Shift.date.between(first, last)).order_by(Shift.date).all()

    @staticmethod
    def get_by_date(session: Session, day: date) -> Optional[Shift]:
        return session.query(Shift).filter(Shift.date == day).first()

    @staticmethod
    def get_by_person(session: Session, person_id: int, day: date) -> Optional[Shift]:
        """Get the shift a person holds on a date, if any."""
        return (
            session.query(Shift)
            .filter(Shift.date == day, or_(Shift.slot1_id == person_id, Shift.slot2_id == person_id))
            .first()
        )

    @staticmethod
    def _apply(session: Session, day: date, slot1_id: int, slot2_id: int, forced: bool, forced_reason: str | None) -> Shift:
        shift = ShiftRepository.get_by_date(session, day)
        if shift is None:
            shift = Shift(date=day)
            session.add(shift)
        shift.slot1_id = slot1_id
        shift.slot2_id = slot2_id
        shift.forced = forced
        shift.forced_reason = forced_reason
        return shift

    @staticmethod
    def upsert(
        session: Session,
        day: date,
        slot1_id: int,
        slot2_id: int,
        forced: bool = False,
        forced_reason: str | None = None,
    ) -> Shift:
        """Create or replace the shift of a date."""
        shift = ShiftRepository._apply(session, day, slot1_id, slot2_id, forced, forced_reason)
        session.commit()
        session.refresh(shift)
        return shift

    @staticmethod
    def bulk_upsert(session: Session, rows: List[Dict]) -> int:
        """Upsert many shifts in one transaction. Rows need date, slot1_id, slot2_id."""
        for row in rows:
            ShiftRepository._apply(
                session,
                row["date"],
                row["slot1_id"],
                row["slot2_id"],
                row.get("forced", False),
                row.get("forced_reason"),
            )
        session.commit()
        return len(rows)

    @staticmethod
    def delete_by_month(session: Session, year: int, month: int) -> int:
        """Delete all shifts of a month. Returns number of deleted rows."""
        first, last = month_bounds(year, month)
        count = (
            session.query(Shift)
            .filter(Shift.date.between(first, last))
            .delete(synchronize_session=False)
        )
        session.commit()
        return count

    @staticmethod
    def count_outside_month(session: Session, year: int, month: int) -> Dict[int, int]:
        """Shifts held per person on dates outside the month (equity history)."""
        first, last = month_bounds(year, month)
        counts: Dict[int, int] = {}
        for column in (Shift.slot1_id, Shift.slot2_id):
            rows = (
                session.query(column, func.count(Shift.id))
                .filter(or_(Shift.date < first, Shift.date > last))
                .group_by(column)
                .all()
            )
            for person_id, count in rows:
                counts[person_id] = counts.get(person_id, 0) + count
        return counts


class ReportRepository:
    """Repository for generation report data access."""

    @staticmethod
    def get_all(session: Session) -> List[GenerationReport]:
        """Get all reports, newest first."""
        return session.query(GenerationReport).order_by(GenerationReport.created_at.desc(), GenerationReport.id.desc()).all()

    @staticmethod
    def get_by_month(session: Session, month: str) -> List[GenerationReport]:
        return (
            session.query(GenerationReport)
            .filter(GenerationReport.month == month)
            .order_by(GenerationReport.created_at.desc(), GenerationReport.id.desc())
            .all()
        )

    @staticmethod
    def get_by_id(session: Session, report_id: int) -> Optional[GenerationReport]:
        return session.query(GenerationReport).filter(GenerationReport.id == report_id).first()

    @staticmethod
    def create(session: Session, report: GenerationReport) -> GenerationReport:
        """Create a new report."""
        session.add(report)
        session.commit()
        session.refresh(report)
        return report

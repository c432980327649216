"""Preference bookkeeping: point bounds, monthly budgets and the lock limit."""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from oncall.config import SchedulerConfig
from oncall.domain.models import ShiftPreference
from oncall.domain.repositories import PersonRepository, PreferenceRepository
from oncall.errors import PreferenceBudgetError
from oncall.roster import PreferenceKind


def points_used(session: Session, person_id: int, day: date, kind: PreferenceKind) -> int:
    """Points a person already spent on ``kind`` this month, ignoring ``day`` itself."""
    prefs = PreferenceRepository.get_by_month(session, day.year, day.month, person_id=person_id)
    return sum(p.points for p in prefs if p.date != day and p.kind == kind.value)


def budget_for(kind: PreferenceKind, cfg: SchedulerConfig) -> int:
    if kind is PreferenceKind.WANT:
        return cfg.want_points_budget
    if kind is PreferenceKind.AVOID:
        return cfg.avoid_points_budget
    return 0


def add_preference(
    session: Session,
    person_id: int,
    day: date,
    kind: PreferenceKind | str,
    points: int,
    cfg: SchedulerConfig | None = None,
    admin: bool | None = None,
    commit: bool = True,
) -> Optional[ShiftPreference]:
    """
    Set a person's preference for a date, replacing any previous one.

    WANT and AVOID spend points from independent monthly budgets. A LOCK
    carries no points and is limited per month (people with the ADMIN role
    are exempt). Zero points on WANT/AVOID clears the preference.

    Args:
        session: Database session
        person_id: Person setting the preference
        day: Date of the preference
        kind: WANT, AVOID or LOCK
        points: Strength (0..max_preference_points)
        cfg: SchedulerConfig
        admin: Skip the lock limit; None takes it from the person's role
        commit: Commit the change; False only flushes it so a caller can
            stage several edits in one transaction

    Returns:
        The stored preference, or None if it was cleared

    Raises:
        ValueError: If the person does not exist
        PreferenceBudgetError: On out-of-range points, exhausted budget or
            a second lock in the month
    """
    cfg = cfg or SchedulerConfig()
    kind = PreferenceKind(kind.upper()) if isinstance(kind, str) else kind

    person = PersonRepository.get_by_id(session, person_id)
    if person is None:
        raise ValueError(f"Unknown person {person_id}")
    if admin is None:
        admin = person.is_admin

    if not 0 <= points <= cfg.max_preference_points:
        raise PreferenceBudgetError(f"Points must be between 0 and {cfg.max_preference_points}, got {points}")

    if kind is PreferenceKind.LOCK:
        if not admin:
            existing = PreferenceRepository.get_by_month(session, day.year, day.month, person_id=person_id)
            locks = [p for p in existing if p.kind == PreferenceKind.LOCK.value and p.date != day]
            if len(locks) >= cfg.max_locks_per_month:
                raise PreferenceBudgetError(
                    f"Person {person_id} may lock only {cfg.max_locks_per_month} day(s) per month; "
                    f"remove the existing lock first"
                )
        return PreferenceRepository.upsert(session, person_id, day, kind.value, 0, commit=commit)

    budget = budget_for(kind, cfg)
    used = points_used(session, person_id, day, kind)
    if used + points > budget:
        raise PreferenceBudgetError(
            f"{kind.value} budget of {budget} points exceeded for person {person_id}: "
            f"{budget - used} points left"
        )

    if points == 0:
        PreferenceRepository.delete(session, person_id, day, commit=commit)
        return None

    return PreferenceRepository.upsert(session, person_id, day, kind.value, points, commit=commit)

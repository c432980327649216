"""Manual shift edits outside of generation runs."""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Tuple

from sqlalchemy.orm import Session

from oncall.config import SchedulerConfig
from oncall.dates import parse_month
from oncall.domain.loader import load_month_data
from oncall.domain.models import Shift
from oncall.domain.repositories import ShiftRepository
from oncall.errors import ShiftConflictError
from oncall.roster import Assignment

from .constraints import Violation, find_violations

logger = logging.getLogger(__name__)


def check_shift(
    session: Session, day: date, slot1_id: int, slot2_id: int, cfg: SchedulerConfig
) -> List[Violation]:
    """
    Hard-rule violations the month would have with this pair on ``day``.

    Only violations on ``day`` or involving one of the two people are
    returned; problems elsewhere in the month are not this edit's concern.
    """
    month_data = load_month_data(session, day.year, day.month)
    others = [a for a in month_data.fixed_assignments if a.date != day]
    candidate = Assignment(date=day, person_a=slot1_id, person_b=slot2_id)

    people = {slot1_id, slot2_id}
    return [
        v
        for v in find_violations(others + [candidate], month_data, cfg)
        if v.date == day or v.person_id in people
    ]


def assign_shift(
    session: Session,
    day: date,
    slot1_id: int,
    slot2_id: int,
    cfg: SchedulerConfig | None = None,
    forced: bool = False,
    reason: str | None = None,
) -> Tuple[Shift, List[Violation]]:
    """
    Set the pair on call for a date.

    Args:
        session: Database session
        day: Date of the shift
        slot1_id: First person
        slot2_id: Second person
        cfg: SchedulerConfig
        forced: Store the shift even if it breaks hard rules
        reason: Why the shift was forced

    Returns:
        (stored shift, violations that were overridden)

    Raises:
        ShiftConflictError: If the shift breaks hard rules and is not forced
    """
    cfg = cfg or SchedulerConfig()
    violations = check_shift(session, day, slot1_id, slot2_id, cfg)

    if violations and not forced:
        raise ShiftConflictError(
            f"Shift on {day} breaks {len(violations)} rule(s): " + "; ".join(str(v) for v in violations),
            violations,
        )
    if violations:
        logger.warning("Forcing shift on %s despite %d violation(s): %s", day, len(violations), reason)

    shift = ShiftRepository.upsert(session, day, slot1_id, slot2_id, forced=forced, forced_reason=reason)
    return shift, violations


def reset_month(session: Session, month: str) -> int:
    """Delete every shift of a month. Returns number of deleted shifts."""
    year, month_num = parse_month(month)
    deleted = ShiftRepository.delete_by_month(session, year, month_num)
    logger.info("Deleted %d shifts for %s", deleted, month)
    return deleted

"""Orchestrator - loads a month, runs the scheduler and persists the result."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from sqlalchemy.orm import Session

from oncall.config import SchedulerConfig
from oncall.dates import format_month, parse_month
from oncall.domain.loader import load_month_data
from oncall.domain.models import GenerationReport
from oncall.domain.repositories import ReportRepository, ShiftRepository
from oncall.errors import InfeasibleScheduleError
from oncall.roster import Assignment, SearchResult
from oncall.services.constraints import find_violations

from .backtracking import BacktrackingScheduler
from .base import BaseScheduler

logger = logging.getLogger(__name__)


class Orchestrator:
    """
    Orchestrator runs one generation for one month.

    It reads the month once, hands it to the scheduler, and on success
    upserts every day's shift and writes a generation report. A failed
    search persists nothing.
    """

    def __init__(self, cfg: SchedulerConfig | None = None, scheduler: BaseScheduler | None = None):
        """
        Initialize orchestrator.

        Args:
            cfg: SchedulerConfig (defaults if omitted)
            scheduler: Scheduler to run (default: BacktrackingScheduler)
        """
        self.cfg = cfg or SchedulerConfig()
        self.scheduler = scheduler or BacktrackingScheduler(self.cfg)

    def build_schedule(self, session: Session, year: int, month: int) -> SearchResult:
        """
        Build a schedule for a month without persisting it.

        Args:
            session: Database session
            year: Target year
            month: Target month (1-12)

        Returns:
            SearchResult from the scheduler
        """
        month_data = load_month_data(session, year, month)
        logger.info("Orchestrator: running %s scheduler for %s", self.scheduler.get_name(), month_data.month_id)
        result = self.scheduler.make_schedule(month_data)

        if result.ok:
            # Forced fixed shifts are kept as-is; report what they break
            for violation in find_violations(result.assignments, month_data, self.cfg, require_complete=True):
                logger.warning("Schedule for %s: %s", month_data.month_id, violation)
        return result

    def persist(
        self,
        session: Session,
        month_id: str,
        result: SearchResult,
        initiator_id: int | None = None,
    ) -> GenerationReport:
        """Upsert the generated shifts and record a generation report."""
        rows = [
            {"date": a.date, "slot1_id": a.person_a, "slot2_id": a.person_b}
            for a in result.assignments
            if not a.fixed
        ]
        ShiftRepository.bulk_upsert(session, rows)
        logger.info("Persisted %d new shifts for %s", len(rows), month_id)

        report = GenerationReport(
            month=month_id,
            created_by=initiator_id,
            data={
                "month": month_id,
                "shifts": [_assignment_payload(a) for a in result.assignments],
                "generated_at": datetime.now(timezone.utc).isoformat(),
                "attempts": result.attempts,
                "initiator_id": initiator_id,
            },
        )
        return ReportRepository.create(session, report)


def _assignment_payload(assignment: Assignment) -> dict:
    return {
        "date": assignment.date.isoformat(),
        "slot1_id": assignment.person_a,
        "slot2_id": assignment.person_b,
        "fixed": assignment.fixed,
    }


def generate_month_schedule(
    session: Session,
    month: str,
    cfg: SchedulerConfig | None = None,
    persist: bool = True,
    initiator_id: int | None = None,
) -> List[Assignment]:
    """
    Convenience function to generate (and by default persist) a month.

    Args:
        session: Database session
        month: Month identifier in YYYY-MM format
        cfg: SchedulerConfig
        persist: If True, upsert shifts and write a generation report
        initiator_id: Person who requested the run (stored on the report)

    Returns:
        Assignments for every day of the month, in date order

    Raises:
        InfeasibleScheduleError: If no valid schedule was found
        MalformedInputError: If persisted data breaks the engine's input contract
    """
    year, month_num = parse_month(month)
    month_id = format_month(year, month_num)
    orchestrator = Orchestrator(cfg)
    result = orchestrator.build_schedule(session, year, month_num)

    if not result.ok:
        raise InfeasibleScheduleError(month_id, result.outcome, result.attempts)

    if persist:
        report = orchestrator.persist(session, month_id, result, initiator_id)
        logger.info("Generation report %s stored for %s", report.id, month_id)

    return result.assignments

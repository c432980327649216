"""CSV export utilities."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from oncall.dates import parse_month
from oncall.domain.repositories import PersonRepository, ShiftRepository

logger = logging.getLogger(__name__)

SHIFT_COLUMNS = ["date", "weekday", "slot1_id", "slot1_name", "slot2_id", "slot2_name", "forced", "forced_reason"]
PERSON_COLUMNS = ["person_id", "name", "email", "role", "group", "monthly_cap"]


def export_assignments_csv(session: Session, csv_path: str | Path, month: str) -> int:
    """
    Export a month's shifts to CSV.

    Returns:
        Number of shifts exported
    """
    year, month_num = parse_month(month)
    names = {p.person_id: p.name for p in PersonRepository.get_all(session)}

    rows = [
        {
            "date": s.date.isoformat(),
            "weekday": s.date.strftime("%A"),
            "slot1_id": s.slot1_id,
            "slot1_name": names.get(s.slot1_id, ""),
            "slot2_id": s.slot2_id,
            "slot2_name": names.get(s.slot2_id, ""),
            "forced": bool(s.forced),
            "forced_reason": s.forced_reason,
        }
        for s in ShiftRepository.get_by_month(session, year, month_num)
    ]
    pd.DataFrame(rows, columns=SHIFT_COLUMNS).to_csv(csv_path, index=False)

    logger.info("Exported %d shifts for %s to %s", len(rows), month, csv_path)
    return len(rows)


def export_persons_csv(session: Session, csv_path: str | Path) -> int:
    """Export the roster to CSV. Returns number of people exported."""
    rows = [
        {
            "person_id": p.person_id,
            "name": p.name,
            "email": p.email,
            "role": p.role,
            "group": p.group,
            "monthly_cap": p.monthly_cap,
        }
        for p in PersonRepository.get_all(session)
    ]
    pd.DataFrame(rows, columns=PERSON_COLUMNS).to_csv(csv_path, index=False)

    logger.info("Exported %d people to %s", len(rows), csv_path)
    return len(rows)

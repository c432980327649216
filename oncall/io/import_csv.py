"""CSV import utilities to load data into database."""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd
from sqlalchemy.orm import Session

from oncall.config import SchedulerConfig
from oncall.dates import parse_month
from oncall.domain.models import Person
from oncall.domain.repositories import ShiftRepository
from oncall.services.preferences import add_preference
from oncall.services.vacations import add_vacation

logger = logging.getLogger(__name__)


def _read(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    # Normalize column names
    df.columns = df.columns.str.lower().str.strip()
    if "date" in df.columns:
        df["date"] = pd.to_datetime(df["date"]).dt.date
    return df


def _filter_month(df: pd.DataFrame, month: str | None) -> pd.DataFrame:
    if month is None:
        return df
    year, month_num = parse_month(month)
    mask = df["date"].map(lambda d: d.year == year and d.month == month_num)
    return df[mask].copy()


def _optional_str(value) -> str | None:
    if pd.isna(value) or str(value).strip() == "":
        return None
    return str(value).strip()


def import_persons_csv(session: Session, csv_path: str | Path) -> int:
    """
    Import the roster from CSV into database.

    Expected columns: person_id, name, and optionally email, role, group,
    monthly_cap (empty cap = use the configured default).

    Returns:
        Number of people imported
    """
    df = _read(csv_path)

    people = []
    for _, row in df.iterrows():
        group = _optional_str(row.get("group"))
        role = _optional_str(row.get("role")) or "USER"
        people.append(
            Person(
                person_id=int(row["person_id"]),
                name=str(row["name"]),
                email=_optional_str(row.get("email")),
                role=role.upper(),
                group=group.upper() if group else None,
                monthly_cap=int(row["monthly_cap"]) if pd.notna(row.get("monthly_cap")) else None,
            )
        )

    # Bulk insert
    session.add_all(people)
    session.commit()

    logger.info("Imported %d people from %s", len(people), csv_path)
    return len(people)


def import_preferences_csv(
    session: Session,
    csv_path: str | Path,
    month: str | None = None,
    cfg: SchedulerConfig | None = None,
) -> int:
    """
    Import preferences (person_id, date, kind, points) from CSV.

    Rows go through the same bounds and budget checks as interactive edits;
    the per-month lock limit is not applied to bulk imports. All rows are
    committed together: a rejected row rolls back the whole file.

    Returns:
        Number of preferences stored
    """
    df = _filter_month(_read(csv_path), month)
    if "points" not in df.columns:
        df["points"] = 0

    stored = 0
    try:
        for _, row in df.iterrows():
            points = int(row["points"]) if pd.notna(row["points"]) else 0
            pref = add_preference(
                session,
                int(row["person_id"]),
                row["date"],
                str(row["kind"]),
                points,
                cfg=cfg,
                admin=True,
                commit=False,
            )
            if pref is not None:
                stored += 1
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Imported %d preferences from %s", stored, csv_path)
    return stored


def import_vacations_csv(session: Session, csv_path: str | Path, month: str | None = None) -> int:
    """
    Import vacations (person_id, date, optional status) from CSV.

    Rows get the same checks as single requests (known person, no duplicate,
    no shift that day) and are committed together.

    Returns:
        Number of vacations imported
    """
    df = _filter_month(_read(csv_path), month)

    count = 0
    try:
        for _, row in df.iterrows():
            status = _optional_str(row.get("status")) or "APPROVED"
            add_vacation(session, int(row["person_id"]), row["date"], status=status, commit=False)
            count += 1
        session.commit()
    except Exception:
        session.rollback()
        raise

    logger.info("Imported %d vacations from %s", count, csv_path)
    return count


def import_shifts_csv(session: Session, csv_path: str | Path, month: str | None = None) -> int:
    """
    Import existing shifts (date, slot1_id, slot2_id) from CSV.

    Imported shifts become fixed assignments for the next generation run.

    Returns:
        Number of shifts upserted
    """
    df = _filter_month(_read(csv_path), month)

    rows = []
    for _, row in df.iterrows():
        forced = str(row.get("forced", "FALSE")).upper() in ["TRUE", "T", "1", "YES"]
        rows.append(
            {
                "date": row["date"],
                "slot1_id": int(row["slot1_id"]),
                "slot2_id": int(row["slot2_id"]),
                "forced": forced,
                "forced_reason": _optional_str(row.get("forced_reason")),
            }
        )

    count = ShiftRepository.bulk_upsert(session, rows)
    logger.info("Imported %d shifts from %s", count, csv_path)
    return count

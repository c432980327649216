"""Calendar helpers for monthly rosters."""

from __future__ import annotations

import calendar
from datetime import date
from typing import List, Tuple

import pandas as pd


THURSDAY = 3
FRIDAY = 4
SATURDAY = 5
SUNDAY = 6


def parse_month(month: str) -> Tuple[int, int]:
    """
    Parse a month identifier.

    Args:
        month: Month in YYYY-MM format (e.g., "2024-03")

    Returns:
        (year, month) tuple

    Raises:
        ValueError: If the identifier is malformed
    """
    try:
        year_str, month_str = month.strip().split("-")
        year, month_num = int(year_str), int(month_str)
    except (AttributeError, ValueError):
        raise ValueError(f"Month must be in YYYY-MM format, got {month!r}") from None
    if not 1 <= month_num <= 12:
        raise ValueError(f"Month must be in YYYY-MM format, got {month!r}")
    return year, month_num


def format_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def month_days(year: int, month: int) -> List[date]:
    """All calendar days of the month, in order."""
    start = pd.Timestamp(year=year, month=month, day=1)
    return [ts.date() for ts in pd.date_range(start, periods=days_in_month(year, month), freq="D")]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def in_month(day: date, year: int, month: int) -> bool:
    return day.year == year and day.month == month


def is_thursday(day: date) -> bool:
    return day.weekday() == THURSDAY


def is_friday(day: date) -> bool:
    return day.weekday() == FRIDAY


def is_weekend(day: date) -> bool:
    return day.weekday() in (SATURDAY, SUNDAY)


def iso_week_key(day: date) -> Tuple[int, int]:
    """
    ISO (year, week) of a day.

    Saturday and Sunday of the same weekend always share a key; the ISO year
    keeps early-January weekends distinct from late-December ones.
    """
    iso = day.isocalendar()
    return iso[0], iso[1]


def days_apart(a: date, b: date) -> int:
    return abs((a - b).days)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of the month."""
    return date(year, month, 1), date(year, month, days_in_month(year, month))

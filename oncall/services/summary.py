"""Per-person statistics and text summaries of a month's schedule."""

from __future__ import annotations

from typing import Iterable, List

import pandas as pd

from oncall.dates import is_friday, is_thursday, is_weekend, iso_week_key
from oncall.roster import Assignment, Person


STAT_COLUMNS = ["person_id", "name", "total", "thursday", "friday", "weekend_days", "weekend_weeks"]


def assignments_frame(assignments: Iterable[Assignment]) -> pd.DataFrame:
    """One row per (date, person) slot."""
    rows = []
    for a in assignments:
        for slot, person_id in enumerate(a.people(), start=1):
            rows.append({"date": a.date, "slot": slot, "person_id": person_id, "fixed": a.fixed})
    return pd.DataFrame(rows, columns=["date", "slot", "person_id", "fixed"])


def person_month_stats(assignments: Iterable[Assignment], persons: List[Person]) -> pd.DataFrame:
    """
    Count each person's shifts in the month.

    Every person of the roster gets a row, including those with no shift.
    """
    slots = assignments_frame(assignments)
    if not slots.empty:
        slots["thursday"] = slots["date"].map(is_thursday)
        slots["friday"] = slots["date"].map(is_friday)
        slots["weekend_day"] = slots["date"].map(is_weekend)
        slots["weekend_week"] = [
            iso_week_key(d) if w else None for d, w in zip(slots["date"], slots["weekend_day"])
        ]

    rows = []
    for person in persons:
        mine = slots[slots["person_id"] == person.person_id] if not slots.empty else slots
        rows.append(
            {
                "person_id": person.person_id,
                "name": person.name,
                "total": len(mine),
                "thursday": int(mine["thursday"].sum()) if not mine.empty else 0,
                "friday": int(mine["friday"].sum()) if not mine.empty else 0,
                "weekend_days": int(mine["weekend_day"].sum()) if not mine.empty else 0,
                "weekend_weeks": int(mine["weekend_week"].dropna().nunique()) if not mine.empty else 0,
            }
        )
    return pd.DataFrame(rows, columns=STAT_COLUMNS)


def summarize_schedule(assignments: Iterable[Assignment], persons: List[Person]) -> str:
    assignments = sorted(assignments, key=lambda a: a.date)
    if not assignments:
        return "No assignments."

    names = {p.person_id: p.name or str(p.person_id) for p in persons}
    calendar_df = pd.DataFrame(
        [
            {
                "date": a.date.isoformat(),
                "day": a.date.strftime("%a"),
                "slot1": names.get(a.person_a, a.person_a),
                "slot2": names.get(a.person_b, a.person_b),
                "fixed": "yes" if a.fixed else "",
            }
            for a in assignments
        ]
    )
    stats = person_month_stats(assignments, persons).sort_values(["total", "person_id"], ascending=[False, True])

    lines = ["Shifts per day:"]
    lines.append(calendar_df.to_string(index=False))
    lines.append("")
    lines.append("Shifts per person (month):")
    lines.append(stats.to_string(index=False))
    return "\n".join(lines)

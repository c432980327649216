"""In-memory per-person search state, rebuilt once per generation run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Set, Tuple

from oncall.config import SchedulerConfig
from oncall.dates import in_month, is_friday, is_thursday, is_weekend, iso_week_key
from oncall.roster import MonthData, Person, Preference, PreferenceKind


@dataclass
class PersonState:
    """
    Mutable view of one person during a search.

    ``assigned`` holds the dates this person works in the target month: fixed
    assignments are seeded at construction, open days are pushed and popped
    by the search through :meth:`assign` / :meth:`unassign`.
    """

    person: Person
    cap: int
    assigned: List[date] = field(default_factory=list)
    preferences: Dict[date, Preference] = field(default_factory=dict)
    vacations: Set[date] = field(default_factory=set)

    @property
    def person_id(self) -> int:
        return self.person.person_id

    @property
    def group(self) -> Optional[str]:
        return self.person.group

    @property
    def total_shifts(self) -> int:
        return self.person.lifetime_shifts + len(self.assigned)

    def preference_on(self, day: date) -> Optional[Preference]:
        return self.preferences.get(day)

    def is_unavailable(self, day: date) -> bool:
        if day in self.vacations:
            return True
        pref = self.preferences.get(day)
        return pref is not None and pref.kind is PreferenceKind.LOCK

    def thursdays(self) -> int:
        return sum(1 for d in self.assigned if is_thursday(d))

    def fridays(self) -> int:
        return sum(1 for d in self.assigned if is_friday(d))

    def weekend_weeks(self) -> Set[Tuple[int, int]]:
        return {iso_week_key(d) for d in self.assigned if is_weekend(d)}

    def assign(self, day: date) -> None:
        self.assigned.append(day)

    def unassign(self, day: date) -> None:
        # Undo always pops the most recent push for this day.
        if not self.assigned or self.assigned[-1] != day:
            raise RuntimeError(
                f"Unbalanced undo for person {self.person_id}: expected {day}, "
                f"last assigned {self.assigned[-1] if self.assigned else None}"
            )
        self.assigned.pop()


def build_person_states(month_data: MonthData, cfg: SchedulerConfig) -> List[PersonState]:
    """
    Build fresh states for every person, in roster order.

    Preferences and vacations are restricted to the target month, and the
    dates of fixed assignments are pre-loaded so caps and rest separation
    are enforced against them.
    """
    year, month = month_data.year, month_data.month
    states: Dict[int, PersonState] = {}
    for person in month_data.persons:
        states[person.person_id] = PersonState(person=person, cap=cfg.effective_cap(person.monthly_cap))

    for pref in month_data.preferences:
        if pref.person_id in states and in_month(pref.date, year, month):
            states[pref.person_id].preferences[pref.date] = pref

    for vac in month_data.vacations:
        if vac.person_id in states and in_month(vac.date, year, month):
            states[vac.person_id].vacations.add(vac.date)

    for fixed in sorted(month_data.fixed_assignments, key=lambda a: a.date):
        for person_id in fixed.people():
            states[person_id].assigned.append(fixed.date)

    return list(states.values())

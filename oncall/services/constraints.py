"""Hard constraint checks for on-call assignments."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from oncall.config import SchedulerConfig
from oncall.dates import days_apart, in_month, is_friday, is_thursday, is_weekend, iso_week_key
from oncall.errors import MalformedInputError
from oncall.roster import Assignment, MonthData, Person, PreferenceKind

if TYPE_CHECKING:
    from oncall.engine.state import PersonState


def is_admissible(state: "PersonState", day: date, cfg: SchedulerConfig) -> bool:
    """
    Check if a person can take a shift on ``day`` given what they already hold.

    Checks run cheapest first:
    1. Vacation or LOCK preference on the day
    2. Monthly cap reached
    3. Another shift within the rest-separation window
    4. Thursday / Friday monthly limits
    5. Weekend limit (distinct ISO weeks with a Saturday or Sunday shift)

    Args:
        state: Person's current search state
        day: Candidate date
        cfg: SchedulerConfig

    Returns:
        True if the person can be assigned, False otherwise
    """
    if state.is_unavailable(day):
        return False

    if len(state.assigned) >= state.cap:
        return False

    if any(days_apart(held, day) <= cfg.rest_separation_days for held in state.assigned):
        return False

    if is_thursday(day) and state.thursdays() >= cfg.max_thursdays:
        return False

    if is_friday(day) and state.fridays() >= cfg.max_fridays:
        return False

    if is_weekend(day):
        weeks = state.weekend_weeks()
        if iso_week_key(day) not in weeks and len(weeks) >= cfg.max_weekend_weeks:
            return False

    return True


def is_pair_admissible(a: Person | "PersonState", b: Person | "PersonState", cfg: SchedulerConfig) -> bool:
    """
    Check group compatibility of two people sharing a day.

    People in the same group cannot work together unless the group is the
    default one; configured exclusive groups never meet, whichever slot each
    person is in.
    """
    group_a, group_b = a.group, b.group
    if group_a is not None and group_a == group_b and group_a != cfg.default_group:
        return False
    if cfg.groups_exclusive(group_a, group_b):
        return False
    return True


@dataclass(frozen=True)
class Violation:
    """A broken hard rule found in a (partial or complete) month."""

    code: str
    message: str
    date: Optional[date] = None
    person_id: Optional[int] = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"


def find_violations(
    assignments: Iterable[Assignment],
    month_data: MonthData,
    cfg: SchedulerConfig,
    require_complete: bool = False,
) -> List[Violation]:
    """
    Re-check a month of assignments against every hard rule.

    Args:
        assignments: Assignments to check (fixed ones included)
        month_data: Roster, preferences and vacations of the month
        cfg: SchedulerConfig
        require_complete: Also report days of the month without an assignment

    Returns:
        List of violations (empty if the month is valid)
    """
    assignments = sorted(assignments, key=lambda a: a.date)
    persons: Dict[int, Person] = {p.person_id: p for p in month_data.persons}
    locks = {
        (p.person_id, p.date) for p in month_data.preferences if p.kind is PreferenceKind.LOCK
    }
    vacations = {(v.person_id, v.date) for v in month_data.vacations}

    violations: List[Violation] = []
    dates_by_person: Dict[int, List[date]] = defaultdict(list)
    seen_days = set()

    # 1. Per-day checks
    for assign in assignments:
        day = assign.date
        if day in seen_days:
            violations.append(Violation("DUPLICATE_DAY", f"More than one assignment on {day}", day))
        seen_days.add(day)

        if assign.person_a == assign.person_b:
            violations.append(
                Violation("SAME_PERSON", f"Person {assign.person_a} holds both slots on {day}", day, assign.person_a)
            )

        unknown = [pid for pid in assign.people() if pid not in persons]
        for pid in unknown:
            violations.append(Violation("UNKNOWN_PERSON", f"Unknown person {pid} on {day}", day, pid))
        if unknown:
            continue

        a, b = persons[assign.person_a], persons[assign.person_b]
        if a.group is not None and a.group == b.group and a.group != cfg.default_group:
            violations.append(
                Violation("GROUP_CONFLICT", f"People from group {a.group} cannot work together on {day}", day)
            )
        if cfg.groups_exclusive(a.group, b.group):
            violations.append(
                Violation("EXCLUSIVE_GROUPS", f"Groups {a.group} and {b.group} cannot share {day}", day)
            )

        for pid in set(assign.people()):
            if (pid, day) in vacations or (pid, day) in locks:
                violations.append(Violation("UNAVAILABLE", f"Person {pid} is not available on {day}", day, pid))
            dates_by_person[pid].append(day)

    # 2. Per-person checks
    for pid, days in dates_by_person.items():
        person = persons[pid]
        cap = cfg.effective_cap(person.monthly_cap)
        if len(days) > cap:
            violations.append(
                Violation("MONTHLY_CAP", f"Person {pid} holds {len(days)} shifts, cap is {cap}", person_id=pid)
            )

        for earlier, later in zip(days, days[1:]):
            if earlier != later and days_apart(earlier, later) <= cfg.rest_separation_days:
                violations.append(
                    Violation(
                        "SEPARATION",
                        f"Person {pid} needs {cfg.rest_separation_days} rest days between {earlier} and {later}",
                        later,
                        pid,
                    )
                )

        thursdays = sum(1 for d in days if is_thursday(d))
        if thursdays > cfg.max_thursdays:
            violations.append(
                Violation("THURSDAY_LIMIT", f"Person {pid} holds {thursdays} Thursdays", person_id=pid)
            )
        fridays = sum(1 for d in days if is_friday(d))
        if fridays > cfg.max_fridays:
            violations.append(Violation("FRIDAY_LIMIT", f"Person {pid} holds {fridays} Fridays", person_id=pid))
        weekends = {iso_week_key(d) for d in days if is_weekend(d)}
        if len(weekends) > cfg.max_weekend_weeks:
            violations.append(
                Violation("WEEKEND_LIMIT", f"Person {pid} works {len(weekends)} weekends", person_id=pid)
            )

    # 3. Coverage
    if require_complete:
        for day in month_data.days:
            if day not in seen_days:
                violations.append(Violation("UNCOVERED_DAY", f"No assignment on {day}", day))

    return violations


def validate_schedule(
    assignments: Iterable[Assignment],
    month_data: MonthData,
    cfg: SchedulerConfig,
    require_complete: bool = True,
) -> None:
    """
    Validate a month of assignments against all hard constraints.

    Raises:
        ValueError: If any constraint is violated
    """
    violations = find_violations(assignments, month_data, cfg, require_complete=require_complete)
    if violations:
        details = "; ".join(str(v) for v in violations)
        raise ValueError(f"{len(violations)} constraint violation(s) in {month_data.month_id}: {details}")


def validate_month_data(month_data: MonthData, cfg: SchedulerConfig) -> None:
    """
    Fail fast on input the engine cannot search over.

    Raises:
        MalformedInputError: On duplicate or unknown people, negative caps,
            fixed assignments or preferences outside the month, or
            out-of-range preference weights
    """
    year, month = month_data.year, month_data.month
    ids = [p.person_id for p in month_data.persons]
    if len(ids) != len(set(ids)):
        raise MalformedInputError(f"Duplicate person ids in roster for {month_data.month_id}")
    known = set(ids)

    for person in month_data.persons:
        if person.monthly_cap is not None and person.monthly_cap < 0:
            raise MalformedInputError(f"Person {person.person_id} has a negative monthly cap ({person.monthly_cap})")
        if person.lifetime_shifts < 0:
            raise MalformedInputError(f"Person {person.person_id} has a negative shift count")

    fixed_days = set()
    for fixed in month_data.fixed_assignments:
        if not in_month(fixed.date, year, month):
            raise MalformedInputError(f"Fixed assignment on {fixed.date} is outside {month_data.month_id}")
        if fixed.date in fixed_days:
            raise MalformedInputError(f"More than one fixed assignment on {fixed.date}")
        fixed_days.add(fixed.date)
        if fixed.person_a == fixed.person_b:
            raise MalformedInputError(f"Fixed assignment on {fixed.date} uses person {fixed.person_a} twice")
        for pid in fixed.people():
            if pid not in known:
                raise MalformedInputError(f"Fixed assignment on {fixed.date} references unknown person {pid}")

    for pref in month_data.preferences:
        if pref.person_id not in known:
            raise MalformedInputError(f"Preference on {pref.date} references unknown person {pref.person_id}")
        if not in_month(pref.date, year, month):
            raise MalformedInputError(f"Preference on {pref.date} is outside {month_data.month_id}")
        if not 0 <= pref.weight <= cfg.max_preference_points:
            raise MalformedInputError(
                f"Preference weight {pref.weight} for person {pref.person_id} is outside 0-{cfg.max_preference_points}"
            )
        if pref.kind is PreferenceKind.LOCK and pref.weight != 0:
            raise MalformedInputError(f"LOCK preference for person {pref.person_id} on {pref.date} must weigh 0")

    for vac in month_data.vacations:
        if vac.person_id not in known:
            raise MalformedInputError(f"Vacation on {vac.date} references unknown person {vac.person_id}")

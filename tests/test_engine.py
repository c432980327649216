"""Tests for the backtracking scheduler."""

from collections import Counter
from dataclasses import replace
from datetime import date

import pytest

from oncall.config import SchedulerConfig
from oncall.engine import AttemptCounter, BacktrackingScheduler, BacktrackingSearch
from oncall.errors import MalformedInputError
from oncall.roster import (
    Assignment,
    MonthData,
    Person,
    Preference,
    PreferenceKind,
    SearchOutcome,
)
from oncall.services.constraints import validate_schedule


def relaxed_config(**overrides):
    """Rules loose enough for tiny rosters: no rest days, no weekday limits."""
    values = dict(
        rest_separation_days=0,
        max_thursdays=5,
        max_fridays=5,
        max_weekend_weeks=6,
        default_monthly_cap=31,
    )
    values.update(overrides)
    return SchedulerConfig(**values)


def march(persons, **kwargs):
    return MonthData(year=2024, month=3, persons=persons, **kwargs)


def by_date(result):
    return {a.date: a for a in result.assignments}


def shifts_per_person(result):
    return Counter(pid for a in result.assignments for pid in a.people())


class TestAttemptCounter:
    def test_trips_past_ceiling(self):
        counter = AttemptCounter(2)
        assert counter.tick()
        assert counter.tick()
        assert not counter.exhausted
        assert not counter.tick()
        assert counter.exhausted
        assert counter.count == 3


class TestBacktrackingScheduler:
    def test_full_month_default_rules(self, roster, cfg):
        month = march(roster)
        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.outcome is SearchOutcome.SOLVED
        assert len(result.assignments) == 31
        assert [a.date for a in result.assignments] == month.days
        # No dead ends: one step per day plus the final one
        assert result.attempts == 32
        validate_schedule(result.assignments, month, cfg)

        counts = shifts_per_person(result)
        assert max(counts.values()) - min(counts.values()) <= 1

    def test_four_people_share_february_evenly(self):
        """Four people, 28-day month, caps of 14: everyone works 14 days."""
        cfg = relaxed_config(max_thursdays=4, max_fridays=4, max_weekend_weeks=5)
        persons = [Person(i, monthly_cap=14) for i in range(1, 5)]
        month = MonthData(year=2026, month=2, persons=persons)

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert len(result.assignments) == 28
        assert shifts_per_person(result) == {1: 14, 2: 14, 3: 14, 4: 14}
        assert all(a.person_a != a.person_b for a in result.assignments)
        validate_schedule(result.assignments, month, cfg)

    def test_february_default_rules(self, roster, cfg):
        month = MonthData(year=2026, month=2, persons=roster)
        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert len(result.assignments) == 28
        validate_schedule(result.assignments, month, cfg)

    def test_lock_excludes_person(self, roster, cfg):
        day = date(2024, 3, 10)
        month = march(roster, preferences=[Preference(3, day, PreferenceKind.LOCK, 0)])

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert 3 not in by_date(result)[day].people()
        validate_schedule(result.assignments, month, cfg)

    def test_want_assigned_ahead_of_equity(self, roster, cfg):
        day = date(2024, 3, 15)
        month = march(roster, preferences=[Preference(5, day, PreferenceKind.WANT, 20)])

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert 5 in by_date(result)[day].people()
        validate_schedule(result.assignments, month, cfg)

    def test_avoid_ranks_last(self, roster, cfg):
        first = date(2024, 3, 1)
        month = march(roster, preferences=[Preference(1, first, PreferenceKind.AVOID, 1)])

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert 1 not in by_date(result)[first].people()

    def test_avoid_never_blocks(self):
        """Two people who avoid every day still cover a month they alone can staff."""
        cfg = relaxed_config()
        persons = [Person(1), Person(2)]
        month = MonthData(year=2026, month=2, persons=persons)
        month.preferences = [
            Preference(pid, day, PreferenceKind.AVOID, 20) for pid in (1, 2) for day in month.days
        ]

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert all(set(a.people()) == {1, 2} for a in result.assignments)

    def test_lifetime_history_lowers_priority(self, roster, cfg):
        persons = [replace(roster[0], lifetime_shifts=1)] + roster[1:]
        result = BacktrackingScheduler(cfg).make_schedule(march(persons))

        assert result.ok
        assert set(by_date(result)[date(2024, 3, 1)].people()) == {2, 3}

    def test_fixed_assignment_preserved(self, roster, cfg):
        fixed_day = date(2024, 3, 5)
        month = march(roster, fixed_assignments=[Assignment(fixed_day, 1, 2, fixed=True)])

        result = BacktrackingScheduler(cfg).make_schedule(month)

        assert result.ok
        assert by_date(result)[fixed_day] == Assignment(fixed_day, 1, 2, fixed=True)
        assert sum(1 for a in result.assignments if a.fixed) == 1

        # Rest separation holds against the fixed day
        for offset in (3, 4, 6, 7):
            neighbour = by_date(result)[date(2024, 3, offset)]
            assert not {1, 2} & set(neighbour.people())
        validate_schedule(result.assignments, month, cfg)

    def test_zero_cap_person_never_assigned(self, roster, cfg):
        persons = roster + [Person(17, name="Off roster", monthly_cap=0)]
        result = BacktrackingScheduler(cfg).make_schedule(march(persons))

        assert result.ok
        assert 17 not in shifts_per_person(result)

    def test_default_group_pairs_allowed(self, roster, cfg):
        persons = [replace(p, group="STANDARD") for p in roster]
        result = BacktrackingScheduler(cfg).make_schedule(march(persons))

        assert result.ok
        assert len(result.assignments) == 31

    def test_backtracks_out_of_dead_end(self):
        """
        Person 1 may work once and person 3 is locked on day 2: the first two
        pairs tried on day 1 leave nobody to pair on day 2.
        """
        cfg = relaxed_config(default_monthly_cap=28, max_thursdays=4, max_fridays=4, max_weekend_weeks=5)
        persons = [Person(1, monthly_cap=1), Person(2), Person(3)]
        month = MonthData(
            year=2026,
            month=2,
            persons=persons,
            preferences=[Preference(3, date(2026, 2, 2), PreferenceKind.LOCK, 0)],
        )

        search = BacktrackingSearch(month, cfg)
        result = search.run()

        assert result.ok
        assert result.attempts == 31
        days = by_date(result)
        assert set(days[date(2026, 2, 1)].people()) == {2, 3}
        assert set(days[date(2026, 2, 2)].people()) == {1, 2}
        assert search.states[0].assigned == [date(2026, 2, 2)]
        validate_schedule(result.assignments, month, cfg)


class TestFailures:
    def test_same_group_pair_infeasible(self, cfg):
        persons = [Person(1, group="MAMA"), Person(2, group="MAMA")]
        result = BacktrackingScheduler(cfg).make_schedule(march(persons))

        assert result.outcome is SearchOutcome.INFEASIBLE
        assert result.assignments == []
        assert not result.ok

    def test_exclusive_groups_infeasible(self, cfg):
        persons = [Person(1, group="URGENCIAS"), Person(2, group="MAMA")]
        result = BacktrackingScheduler(cfg).make_schedule(march(persons))

        assert result.outcome is SearchOutcome.INFEASIBLE

    def test_all_but_two_locked(self, cfg):
        persons = [Person(i) for i in range(1, 7)]
        month = march(persons)
        month.preferences = [
            Preference(pid, day, PreferenceKind.LOCK, 0) for pid in range(3, 7) for day in month.days
        ]

        result = BacktrackingScheduler(cfg).make_schedule(month)

        # Persons 1 and 2 cannot work two days in a row
        assert result.outcome is SearchOutcome.INFEASIBLE
        assert result.assignments == []

    def test_budget_exceeded_restores_state(self, roster):
        cfg = SchedulerConfig(max_attempts=5)
        fixed = Assignment(date(2024, 3, 20), 1, 2, fixed=True)
        search = BacktrackingSearch(march(roster, fixed_assignments=[fixed]), cfg)

        result = search.run()

        assert result.outcome is SearchOutcome.BUDGET_EXCEEDED
        assert result.attempts == 6
        assert result.assignments == []
        for state in search.states:
            expected = [fixed.date] if state.person_id in (1, 2) else []
            assert state.assigned == expected

    @pytest.mark.parametrize(
        "month_data",
        [
            march([Person(1), Person(2)], fixed_assignments=[Assignment(date(2024, 3, 5), 1, 9)]),
            march([Person(1, monthly_cap=-2), Person(2)]),
        ],
    )
    def test_malformed_input_fails_fast(self, month_data, cfg):
        with pytest.raises(MalformedInputError):
            BacktrackingScheduler(cfg).make_schedule(month_data)


class TestDeterminism:
    def test_same_seed_same_schedule(self, roster):
        cfg = SchedulerConfig(random_seed=7)
        month = march(roster)

        first = BacktrackingScheduler(cfg).make_schedule(month)
        second = BacktrackingScheduler(cfg).make_schedule(month)

        assert first.outcome == second.outcome
        assert first.assignments == second.assignments

    def test_runs_do_not_share_state(self, roster, cfg):
        scheduler = BacktrackingScheduler(cfg)
        first = scheduler.make_schedule(march(roster))
        second = scheduler.make_schedule(march(roster))

        assert first.assignments == second.assignments
        assert first.attempts == second.attempts

"""Tests for orchestrator and the database-backed generation flow."""

from datetime import date, datetime, timedelta

import pytest

from oncall.config import SchedulerConfig
from oncall.domain.loader import load_month_data
from oncall.domain.models import GenerationReport, Person, Shift, Vacation
from oncall.domain.repositories import PersonRepository, ReportRepository, ShiftRepository, VacationRepository
from oncall.engine.orchestrator import Orchestrator, generate_month_schedule
from oncall.errors import InfeasibleScheduleError
from oncall.roster import PreferenceKind, SearchOutcome
from oncall.services.constraints import validate_schedule
from oncall.services.preferences import add_preference


@pytest.fixture
def staffed_db(db_session):
    """Database with sixteen people and no shifts."""
    PersonRepository.bulk_create(
        db_session, [Person(person_id=i, name=f"Doctor {i:02d}") for i in range(1, 17)]
    )
    return db_session


def test_generate_and_persist(staffed_db, cfg):
    assignments = generate_month_schedule(staffed_db, "2024-03", cfg, initiator_id=1)

    assert len(assignments) == 31
    shifts = ShiftRepository.get_by_month(staffed_db, 2024, 3)
    assert len(shifts) == 31
    assert [(s.date, s.slot1_id, s.slot2_id) for s in shifts] == [
        (a.date, a.person_a, a.person_b) for a in assignments
    ]

    reports = ReportRepository.get_by_month(staffed_db, "2024-03")
    assert len(reports) == 1
    report = reports[0]
    assert report.created_by == 1
    assert report.data["month"] == "2024-03"
    assert len(report.data["shifts"]) == 31
    assert report.data["shifts"][0] == {
        "date": "2024-03-01",
        "slot1_id": assignments[0].person_a,
        "slot2_id": assignments[0].person_b,
        "fixed": False,
    }
    assert report.data["attempts"] == 32

    # Timestamps are timezone-aware UTC
    generated_at = datetime.fromisoformat(report.data["generated_at"])
    assert generated_at.utcoffset() == timedelta(0)
    assert report.created_at is not None


def test_generated_month_passes_validation(staffed_db, cfg):
    generate_month_schedule(staffed_db, "2024-03", cfg)

    month_data = load_month_data(staffed_db, 2024, 3)
    validate_schedule(month_data.fixed_assignments, month_data, cfg)


def test_dry_run_persists_nothing(staffed_db, cfg):
    assignments = generate_month_schedule(staffed_db, "2024-03", cfg, persist=False)

    assert len(assignments) == 31
    assert staffed_db.query(Shift).count() == 0
    assert staffed_db.query(GenerationReport).count() == 0


def test_existing_shift_kept(staffed_db, cfg):
    fixed_day = date(2024, 3, 5)
    ShiftRepository.upsert(staffed_db, fixed_day, 1, 2, forced=True, forced_reason="agreed swap")

    assignments = generate_month_schedule(staffed_db, "2024-03", cfg)

    fixed = [a for a in assignments if a.fixed]
    assert [(a.date, a.person_a, a.person_b) for a in fixed] == [(fixed_day, 1, 2)]

    shift = ShiftRepository.get_by_date(staffed_db, fixed_day)
    assert (shift.slot1_id, shift.slot2_id) == (1, 2)
    assert shift.forced
    assert shift.forced_reason == "agreed swap"
    assert staffed_db.query(Shift).count() == 31

    report = ReportRepository.get_all(staffed_db)[0]
    assert [s["date"] for s in report.data["shifts"] if s["fixed"]] == ["2024-03-05"]


def test_preferences_reach_the_engine(staffed_db, cfg):
    add_preference(staffed_db, 3, date(2024, 3, 10), PreferenceKind.LOCK, 0, cfg)
    add_preference(staffed_db, 5, date(2024, 3, 15), PreferenceKind.WANT, 20, cfg)

    assignments = generate_month_schedule(staffed_db, "2024-03", cfg)
    by_day = {a.date: a for a in assignments}

    assert 3 not in by_day[date(2024, 3, 10)].people()
    assert 5 in by_day[date(2024, 3, 15)].people()


def test_infeasible_month_persists_nothing(db_session, cfg):
    PersonRepository.bulk_create(
        db_session,
        [Person(person_id=1, name="Ana", group="MAMA"), Person(person_id=2, name="Bea", group="MAMA")],
    )

    with pytest.raises(InfeasibleScheduleError, match="Could not generate a valid schedule") as exc:
        generate_month_schedule(db_session, "2024-03", cfg)

    assert exc.value.outcome is SearchOutcome.INFEASIBLE
    assert exc.value.month == "2024-03"
    assert db_session.query(Shift).count() == 0
    assert db_session.query(GenerationReport).count() == 0


def test_budget_exceeded_is_a_failure(staffed_db):
    cfg = SchedulerConfig(max_attempts=10)

    with pytest.raises(InfeasibleScheduleError) as exc:
        generate_month_schedule(staffed_db, "2024-03", cfg)

    assert exc.value.outcome is SearchOutcome.BUDGET_EXCEEDED
    assert staffed_db.query(Shift).count() == 0


def test_orchestrator_build_does_not_persist(staffed_db, cfg):
    result = Orchestrator(cfg).build_schedule(staffed_db, 2024, 3)

    assert result.ok
    assert staffed_db.query(Shift).count() == 0


class TestLoader:
    def test_history_outside_month(self, staffed_db):
        ShiftRepository.upsert(staffed_db, date(2024, 2, 27), 1, 2)
        ShiftRepository.upsert(staffed_db, date(2024, 4, 2), 1, 3)
        ShiftRepository.upsert(staffed_db, date(2024, 3, 3), 4, 5)

        month_data = load_month_data(staffed_db, 2024, 3)
        history = {p.person_id: p.lifetime_shifts for p in month_data.persons}

        assert history[1] == 2
        assert history[2] == 1
        assert history[3] == 1
        assert history[4] == 0
        assert [(a.date, a.fixed) for a in month_data.fixed_assignments] == [(date(2024, 3, 3), True)]

    def test_only_approved_vacations(self, staffed_db):
        VacationRepository.create(staffed_db, Vacation(person_id=3, date=date(2024, 3, 2), status="PENDING"))
        VacationRepository.create(staffed_db, Vacation(person_id=4, date=date(2024, 3, 2), status="APPROVED"))
        VacationRepository.create(staffed_db, Vacation(person_id=5, date=date(2024, 4, 2), status="APPROVED"))

        month_data = load_month_data(staffed_db, 2024, 3)

        assert [(v.person_id, v.date) for v in month_data.vacations] == [(4, date(2024, 3, 2))]

    def test_person_fields_carried(self, db_session):
        PersonRepository.create(
            db_session, Person(person_id=7, name="Gema", group="URGENCIAS", monthly_cap=3)
        )
        person = load_month_data(db_session, 2024, 3).persons[0]

        assert person.person_id == 7
        assert person.group == "URGENCIAS"
        assert person.monthly_cap == 3
        assert person.lifetime_shifts == 0

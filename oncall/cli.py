"""Command-line interface for the on-call roster."""

from __future__ import annotations

import argparse
import logging

from oncall.io.config import load_run_config
from oncall.dates import parse_month
from oncall.domain.db import DEFAULT_DB_URL, get_session, init_database, reset_database
from oncall.domain.loader import load_month_data
from oncall.domain.repositories import ReportRepository
from oncall.engine.orchestrator import generate_month_schedule
from oncall.errors import InfeasibleScheduleError
from oncall.io.export_csv import export_assignments_csv, export_persons_csv
from oncall.io.import_csv import import_persons_csv, import_preferences_csv, import_shifts_csv, import_vacations_csv
from oncall.services.constraints import find_violations
from oncall.services.shifts import reset_month
from oncall.services.summary import summarize_schedule


def _cmd_init_db(args: argparse.Namespace) -> None:
    """Initialize the database."""
    if args.reset:
        reset_database(args.db)
    else:
        init_database(args.db)
    print(f"[OK] Database initialized: {args.db}")


def _cmd_import_csv(args: argparse.Namespace) -> None:
    """Import CSV data into database."""
    session = get_session(args.db)

    try:
        cfg = load_run_config(args.config)

        if args.persons:
            count = import_persons_csv(session, args.persons)
            print(f"[OK] Imported {count} people")

        if args.preferences:
            count = import_preferences_csv(session, args.preferences, month=args.month, cfg=cfg)
            print(f"[OK] Imported {count} preferences")

        if args.vacations:
            count = import_vacations_csv(session, args.vacations, month=args.month)
            print(f"[OK] Imported {count} vacations")

        if args.shifts:
            count = import_shifts_csv(session, args.shifts, month=args.month)
            print(f"[OK] Imported {count} shifts")

        print("[OK] CSV import complete")

    except Exception as e:
        session.rollback()
        print(f"[ERROR] Import failed: {e}")
        raise
    finally:
        session.close()


def _cmd_generate(args: argparse.Namespace) -> None:
    """Generate the schedule for a month."""
    session = get_session(args.db)

    try:
        cfg = load_run_config(args.config)
        assignments = generate_month_schedule(
            session, args.month, cfg, persist=not args.dry_run, initiator_id=args.by
        )

        if args.out and not args.dry_run:
            export_assignments_csv(session, args.out, args.month)

        year, month = parse_month(args.month)
        print(summarize_schedule(assignments, load_month_data(session, year, month).persons))
        print(f"[OK] Generated {len(assignments)} assignments for {args.month}")

    except InfeasibleScheduleError as e:
        session.rollback()
        print(f"[ERROR] {e}")
        raise SystemExit(2)
    except Exception as e:
        session.rollback()
        print(f"[ERROR] Generation failed: {e}")
        raise
    finally:
        session.close()


def _cmd_reset(args: argparse.Namespace) -> None:
    """Delete every shift of a month."""
    session = get_session(args.db)
    try:
        deleted = reset_month(session, args.month)
        print(f"[OK] Deleted {deleted} shifts for {args.month}")
    finally:
        session.close()


def _cmd_validate(args: argparse.Namespace) -> None:
    """Validate the persisted shifts of a month."""
    session = get_session(args.db)

    try:
        cfg = load_run_config(args.config)
        year, month = parse_month(args.month)
        month_data = load_month_data(session, year, month)

        violations = find_violations(
            month_data.fixed_assignments, month_data, cfg, require_complete=args.complete
        )
        if violations:
            for v in violations:
                print(f"[WARN] {v}")
            print(f"[ERROR] Validation failed for {args.month}: {len(violations)} violation(s)")
            raise SystemExit(1)

        print(f"[OK] Validation passed for {args.month}")
    finally:
        session.close()


def _cmd_export(args: argparse.Namespace) -> None:
    """Export data from database to CSV."""
    session = get_session(args.db)

    try:
        if args.assignments:
            if not args.month:
                raise SystemExit("--month is required to export assignments")
            count = export_assignments_csv(session, args.assignments, args.month)
            print(f"[OK] Exported {count} shifts to {args.assignments}")

        if args.persons:
            count = export_persons_csv(session, args.persons)
            print(f"[OK] Exported {count} people to {args.persons}")
    finally:
        session.close()


def _cmd_summarize(args: argparse.Namespace) -> None:
    """Print a month's calendar and per-person counts."""
    session = get_session(args.db)
    try:
        year, month = parse_month(args.month)
        month_data = load_month_data(session, year, month)
        print(summarize_schedule(month_data.fixed_assignments, month_data.persons))
    finally:
        session.close()


def _cmd_reports(args: argparse.Namespace) -> None:
    """List generation reports."""
    session = get_session(args.db)
    try:
        reports = ReportRepository.get_by_month(session, args.month) if args.month else ReportRepository.get_all(session)
        if not reports:
            print("No reports.")
        for r in reports:
            shifts = len(r.data.get("shifts", []))
            print(f"#{r.id}  {r.month}  {r.created_at:%Y-%m-%d %H:%M}  by={r.created_by}  shifts={shifts}")
    finally:
        session.close()


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="oncall",
        description="Hospital on-call roster generator (two people per day)",
    )

    # Global options
    parser.add_argument("--db", default=DEFAULT_DB_URL, help=f"Database URL (default: {DEFAULT_DB_URL})")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    # init-db command
    init = sub.add_parser("init-db", help="Initialize database")
    init.add_argument("--reset", action="store_true", help="Drop and recreate all tables")
    init.set_defaults(func=_cmd_init_db)

    # import-csv command
    imp = sub.add_parser("import-csv", help="Import CSV data into database")
    imp.add_argument("--persons", help="Path to people CSV")
    imp.add_argument("--preferences", help="Path to preferences CSV")
    imp.add_argument("--vacations", help="Path to vacations CSV")
    imp.add_argument("--shifts", help="Path to existing shifts CSV")
    imp.add_argument("--month", help="Only import rows of this month (YYYY-MM)")
    imp.add_argument("--config", help="Path to config YAML (default: ./oncall_config.yaml if present)")
    imp.set_defaults(func=_cmd_import_csv)

    # generate command
    gen = sub.add_parser("generate", help="Generate the schedule for a month")
    gen.add_argument("--month", required=True, help="Month (e.g., 2026-03)")
    gen.add_argument("--config", help="Path to config YAML (default: ./oncall_config.yaml if present)")
    gen.add_argument("--out", help="Optional: export shifts to CSV")
    gen.add_argument("--by", type=int, help="Id of the person requesting the run")
    gen.add_argument("--dry-run", action="store_true", help="Do not persist anything")
    gen.set_defaults(func=_cmd_generate)

    # reset command
    rst = sub.add_parser("reset", help="Delete all shifts of a month")
    rst.add_argument("--month", required=True, help="Month (e.g., 2026-03)")
    rst.set_defaults(func=_cmd_reset)

    # validate command
    val = sub.add_parser("validate", help="Validate the shifts of a month")
    val.add_argument("--month", required=True, help="Month to validate")
    val.add_argument("--config", help="Path to config YAML (default: ./oncall_config.yaml if present)")
    val.add_argument("--complete", action="store_true", help="Also require every day to be covered")
    val.set_defaults(func=_cmd_validate)

    # export command
    exp = sub.add_parser("export", help="Export data from database to CSV")
    exp.add_argument("--assignments", help="Path to export shifts CSV")
    exp.add_argument("--persons", help="Path to export people CSV")
    exp.add_argument("--month", help="Month of the shifts to export")
    exp.set_defaults(func=_cmd_export)

    # summarize command
    summ = sub.add_parser("summarize", help="Summarize the shifts of a month")
    summ.add_argument("--month", required=True)
    summ.set_defaults(func=_cmd_summarize)

    # reports command
    rep = sub.add_parser("reports", help="List generation reports")
    rep.add_argument("--month", help="Only reports of this month")
    rep.set_defaults(func=_cmd_reports)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    args.func(args)


if __name__ == "__main__":
    main()

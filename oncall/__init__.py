"""On-call roster generation for hospital duty shifts (two people per day).

Modules:
- config: load and validate configuration (YAML or JSON)
- dates: calendar helpers (month days, weekday classes, ISO weeks)
- roster: engine input/output types
- domain: SQLAlchemy models, repositories and the month loader
- services: hard constraints, scoring, preferences, vacations, manual shifts
- engine: backtracking scheduler and orchestrator
- io: CSV import/export
- cli: command-line interface entrypoints
"""

__version__ = "1.0.0"

__all__ = [
    "config",
    "dates",
    "roster",
    "errors",
    "domain",
    "services",
    "engine",
    "io",
    "cli",
]

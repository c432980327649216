"""Shift-assignment engine: search state, backtracking scheduler and orchestrator."""

from .backtracking import AttemptCounter, BacktrackingScheduler, BacktrackingSearch
from .base import BaseScheduler
from .orchestrator import Orchestrator, generate_month_schedule
from .state import PersonState, build_person_states

__all__ = [
    "AttemptCounter",
    "BaseScheduler",
    "BacktrackingScheduler",
    "BacktrackingSearch",
    "Orchestrator",
    "generate_month_schedule",
    "PersonState",
    "build_person_states",
]

"""Services for scheduling logic."""

from .constraints import (
    Violation,
    find_violations,
    is_admissible,
    is_pair_admissible,
    validate_month_data,
    validate_schedule,
)
from .preferences import add_preference
from .scoring import calculate_person_score, rank_candidates
from .shifts import assign_shift, check_shift, reset_month
from .summary import person_month_stats, summarize_schedule
from .vacations import add_vacation, remove_vacation

__all__ = [
    "Violation",
    "find_violations",
    "is_admissible",
    "is_pair_admissible",
    "validate_month_data",
    "validate_schedule",
    "add_preference",
    "calculate_person_score",
    "rank_candidates",
    "assign_shift",
    "check_shift",
    "reset_month",
    "person_month_stats",
    "summarize_schedule",
    "add_vacation",
    "remove_vacation",
]

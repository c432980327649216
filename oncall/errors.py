"""Exceptions raised by the on-call scheduler."""

from __future__ import annotations


class MalformedInputError(ValueError):
    """Month data violates the engine's input contract (caller bug)."""


class PreferenceBudgetError(ValueError):
    """A preference would exceed its bound, monthly budget or lock limit."""


class ShiftConflictError(ValueError):
    """A manual shift edit breaks one or more hard constraints."""

    def __init__(self, message: str, violations=None):
        super().__init__(message)
        self.violations = list(violations or [])


class InfeasibleScheduleError(RuntimeError):
    """No complete schedule satisfying all constraints could be generated."""

    def __init__(self, month: str, outcome, attempts: int):
        super().__init__(
            f"Could not generate a valid schedule satisfying all constraints for {month} "
            f"({outcome.value}, {attempts} attempts)"
        )
        self.month = month
        self.outcome = outcome
        self.attempts = attempts

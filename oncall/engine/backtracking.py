"""Depth-first backtracking search over the days of a month."""

from __future__ import annotations

import logging
import random
from datetime import date
from typing import Dict, List, Optional

from oncall.config import SchedulerConfig
from oncall.roster import Assignment, MonthData, SearchOutcome, SearchResult
from oncall.services.constraints import is_admissible, is_pair_admissible, validate_month_data
from oncall.services.scoring import rank_candidates

from .base import BaseScheduler
from .state import PersonState, build_person_states

logger = logging.getLogger(__name__)


class AttemptCounter:
    """Counts recursive steps of one run and trips once past the ceiling."""

    def __init__(self, ceiling: int):
        self.ceiling = ceiling
        self.count = 0

    def tick(self) -> bool:
        """Record one step. Returns False once the ceiling is exceeded."""
        self.count += 1
        return self.count <= self.ceiling

    @property
    def exhausted(self) -> bool:
        return self.count > self.ceiling


class BacktrackingSearch:
    """
    One generation run.

    Owns the person states, fixed-day map and attempt counter of the run, so
    independent runs never share mutable state. Every tentative assignment is
    undone on the failure path of the frame that made it.
    """

    def __init__(self, month_data: MonthData, cfg: SchedulerConfig):
        self.month_data = month_data
        self.cfg = cfg
        self.days: List[date] = month_data.days
        self.states: List[PersonState] = build_person_states(month_data, cfg)
        self.fixed: Dict[date, Assignment] = {a.date: a for a in month_data.fixed_assignments}
        self.counter = AttemptCounter(cfg.max_attempts)
        self.rng: Optional[random.Random] = (
            random.Random(cfg.random_seed) if cfg.random_seed is not None else None
        )

    def run(self) -> SearchResult:
        assignments = self._backtrack(0)
        if assignments is not None:
            return SearchResult(SearchOutcome.SOLVED, self.counter.count, assignments)
        if self.counter.exhausted:
            return SearchResult(SearchOutcome.BUDGET_EXCEEDED, self.counter.count)
        return SearchResult(SearchOutcome.INFEASIBLE, self.counter.count)

    def _backtrack(self, index: int) -> Optional[List[Assignment]]:
        if not self.counter.tick():
            return None
        if index == len(self.days):
            return []

        day = self.days[index]

        # Fixed day: accepted as-is, its dates are already in the states
        fixed = self.fixed.get(day)
        if fixed is not None:
            rest = self._backtrack(index + 1)
            if rest is None:
                return None
            return [Assignment(day, fixed.person_a, fixed.person_b, fixed=True)] + rest

        candidates = [s for s in self.states if is_admissible(s, day, self.cfg)]
        ranked = rank_candidates(candidates, day, self.cfg.weights, self.rng)

        for i, first in enumerate(ranked):
            for second in ranked[i + 1:]:
                if not is_pair_admissible(first, second, self.cfg):
                    continue

                first.assign(day)
                second.assign(day)

                rest = self._backtrack(index + 1)
                if rest is not None:
                    return [Assignment(day, first.person_id, second.person_id)] + rest

                second.unassign(day)
                first.unassign(day)

                if self.counter.exhausted:
                    return None

        logger.debug("No workable pair on %s (%d admissible candidates)", day, len(ranked))
        return None


class BacktrackingScheduler(BaseScheduler):
    """
    Fills every open day with the first feasible pair under score ordering,
    backtracking to earlier days when a later day cannot be covered.
    """

    name = "backtracking"

    def make_schedule(self, month_data: MonthData) -> SearchResult:
        validate_month_data(month_data, self.cfg)

        logger.info(
            "Searching %s: %d people, %d fixed days, attempt ceiling %d",
            month_data.month_id,
            len(month_data.persons),
            len(month_data.fixed_assignments),
            self.cfg.max_attempts,
        )
        result = BacktrackingSearch(month_data, self.cfg).run()

        if result.outcome is SearchOutcome.BUDGET_EXCEEDED:
            logger.warning(
                "Search for %s aborted after %d attempts (ceiling %d)",
                month_data.month_id,
                result.attempts,
                self.cfg.max_attempts,
            )
        elif result.outcome is SearchOutcome.INFEASIBLE:
            logger.warning(
                "No feasible schedule for %s (search exhausted after %d attempts)",
                month_data.month_id,
                result.attempts,
            )
        else:
            logger.info(
                "Found schedule for %s: %d assignments in %d attempts",
                month_data.month_id,
                len(result.assignments),
                result.attempts,
            )
        return result

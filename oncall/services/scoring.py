"""Scoring functions for ranking on-call candidates."""

from __future__ import annotations

import random
from datetime import date
from typing import TYPE_CHECKING, List, Optional, Sequence

from oncall.config import ScoringWeights
from oncall.roster import PreferenceKind

if TYPE_CHECKING:
    from oncall.engine.state import PersonState


def calculate_person_score(state: "PersonState", day: date, weights: ScoringWeights) -> int:
    """
    Calculate how desirable it is to put a person on call on ``day``.

    Higher score = better candidate. The score only orders candidates; it never
    excludes anyone.

    Args:
        state: Person's current search state
        day: Date being filled
        weights: Scoring weights from config

    Returns:
        Integer score
    """
    score = 0
    pref = state.preference_on(day)

    # 1. Declared wish to work dominates
    if pref is not None and pref.kind is PreferenceKind.WANT:
        score += weights.want_bonus + pref.weight

    # 2. Equity: fewer total shifts (history + this month) first
    score -= weights.equity_per_shift * calculate_equity_load(state)

    # 3. Declared wish to avoid sinks the person to the bottom
    if pref is not None and pref.kind is PreferenceKind.AVOID:
        score -= weights.avoid_penalty + pref.weight

    return score


def calculate_equity_load(state: "PersonState") -> int:
    """Shifts counted for equity: lifetime shifts plus those held this run."""
    return state.total_shifts


def rank_candidates(
    states: Sequence["PersonState"],
    day: date,
    weights: ScoringWeights,
    rng: Optional[random.Random] = None,
) -> List["PersonState"]:
    """
    Order candidates by descending score.

    Ties keep roster order; with an ``rng`` the candidates are shuffled first,
    so ties break randomly but reproducibly for a given seed.
    """
    ordered = list(states)
    if rng is not None:
        rng.shuffle(ordered)
    return sorted(ordered, key=lambda s: calculate_person_score(s, day, weights), reverse=True)

"""Scheduler configuration: rule knobs, scoring weights and the YAML/JSON loader."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import yaml


@dataclass
class ScoringWeights:
    """Weights used to rank admissible candidates for a day."""

    want_bonus: int = 1000
    avoid_penalty: int = 1000
    equity_per_shift: int = 10


@dataclass
class SchedulerConfig:
    """
    Business rules for monthly on-call generation.

    Defaults mirror the hospital's rules: two full rest days between shifts,
    at most one Thursday, one Friday and two weekends per person per month.
    """

    default_monthly_cap: int = 7
    rest_separation_days: int = 2
    max_thursdays: int = 1
    max_fridays: int = 1
    max_weekend_weeks: int = 2

    # Preference budgets (points per person per month)
    want_points_budget: int = 20
    avoid_points_budget: int = 20
    max_preference_points: int = 20
    max_locks_per_month: int = 1

    # Groups
    default_group: str = "STANDARD"
    exclusive_group_pairs: List[Tuple[str, str]] = field(
        default_factory=lambda: [("MAMA", "URGENCIAS")]
    )

    # Search
    max_attempts: int = 100_000
    random_seed: Optional[int] = None

    weights: ScoringWeights = field(default_factory=ScoringWeights)

    def __post_init__(self) -> None:
        self.exclusive_group_pairs = [tuple(pair) for pair in self.exclusive_group_pairs]
        for pair in self.exclusive_group_pairs:
            if len(pair) != 2:
                raise ValueError(f"exclusive_group_pairs entries must have two groups, got {list(pair)}")

        non_negative = [
            "default_monthly_cap",
            "rest_separation_days",
            "max_thursdays",
            "max_fridays",
            "max_weekend_weeks",
            "want_points_budget",
            "avoid_points_budget",
            "max_preference_points",
            "max_locks_per_month",
        ]
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {self.max_attempts}")

    def effective_cap(self, monthly_cap: Optional[int]) -> int:
        """Return the person's cap, falling back to the system default."""
        return self.default_monthly_cap if monthly_cap is None else monthly_cap

    def groups_exclusive(self, group_a: Optional[str], group_b: Optional[str]) -> bool:
        """True if the two groups form a configured mutually-exclusive pair."""
        if group_a is None or group_b is None:
            return False
        return any({group_a, group_b} == set(pair) for pair in self.exclusive_group_pairs)


def _from_dict(raw: Dict) -> SchedulerConfig:
    known = {f.name for f in fields(SchedulerConfig)}
    unknown = set(raw) - known
    if unknown:
        raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")

    data = dict(raw)
    weights = data.pop("weights", None) or {}
    weight_keys = {f.name for f in fields(ScoringWeights)}
    unknown_weights = set(weights) - weight_keys
    if unknown_weights:
        raise ValueError(f"Unknown scoring weight keys: {sorted(unknown_weights)}")

    return SchedulerConfig(weights=ScoringWeights(**weights), **data)


def load_config(path: str | Path | None = None) -> SchedulerConfig:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Path to a .yaml/.yml or .json file. None returns the defaults.

    Returns:
        SchedulerConfig

    Raises:
        ValueError: If the file has unknown keys or invalid values
    """
    if path is None:
        return SchedulerConfig()

    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        raw = json.loads(text)
    else:
        raw = yaml.safe_load(text)

    if raw is None:
        return SchedulerConfig()
    if not isinstance(raw, dict):
        raise ValueError(f"Configuration root must be a mapping: {path}")
    return _from_dict(raw)

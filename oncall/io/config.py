"""Configuration lookup for command-line runs."""

from __future__ import annotations

import logging
from pathlib import Path

from oncall.config import SchedulerConfig, ScoringWeights, load_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "oncall_config.yaml"


def load_run_config(path: str | Path | None = None, search_dir: str | Path = ".") -> SchedulerConfig:
    """
    Load the rules for one CLI run.

    An explicit ``path`` wins; otherwise ``oncall_config.yaml`` in
    ``search_dir`` is used when present, and the built-in defaults when not.
    """
    if path is None:
        candidate = Path(search_dir) / DEFAULT_CONFIG_FILE
        if not candidate.is_file():
            logger.debug("No %s in %s, using default rules", DEFAULT_CONFIG_FILE, search_dir)
            return SchedulerConfig()
        path = candidate

    logger.info("Loading rules from %s", path)
    return load_config(path)


__all__ = ["load_config", "load_run_config", "SchedulerConfig", "ScoringWeights", "DEFAULT_CONFIG_FILE"]

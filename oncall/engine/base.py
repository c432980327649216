"""Base scheduler interface that all month schedulers must implement."""

from __future__ import annotations

from abc import ABC, abstractmethod

from oncall.config import SchedulerConfig
from oncall.roster import MonthData, SearchResult


class BaseScheduler(ABC):
    """
    Abstract base class for monthly on-call schedulers.

    A scheduler turns one month of read-only roster data into either a
    complete list of assignments or an explicit failure. It never touches
    persistence; the orchestrator does.
    """

    name: str = "base"

    def __init__(self, cfg: SchedulerConfig | None = None):
        self.cfg = cfg or SchedulerConfig()

    @abstractmethod
    def make_schedule(self, month_data: MonthData) -> SearchResult:
        """
        Generate assignments for every day of the month.

        Args:
            month_data: Roster, preferences, vacations and fixed assignments

        Returns:
            SearchResult; on failure ``assignments`` is empty

        Raises:
            MalformedInputError: If the month data breaks the input contract
        """
        pass

    def get_name(self) -> str:
        return self.name

"""Clock capability injected into every date computation."""

from datetime import date, timedelta
from typing import Protocol


class Clock(Protocol):
    """Source of the current calendar date."""

    def now(self) -> date:
        """Return today's date."""


class SystemClock:
    """Clock backed by the local system date."""

    def now(self) -> date:
        return date.today()


class FixedClock:
    """Clock pinned to a given date, for tests and CLI overrides."""

    def __init__(self, today: date):
        self.today = today

    def now(self) -> date:
        return self.today

    def advance(self, days: int) -> None:
        """Move the pinned date forward by a number of days."""
        self.today = self.today + timedelta(days=days)

"""
Injectable clock.

Domain and service code never call ``date.today()`` directly: "today"
decides whether an order date lies in the future, how far ahead a shipment
may be scheduled, which shipments count as delayed and how far back the
recent-records window reaches.  Services receive a Clock instead, so tests
can pin the calendar.
"""

from abc import ABC, abstractmethod
from datetime import UTC, date, datetime, timedelta

#: Default instant of DeterministicClock (a Saturday, mid-day UTC).
DEFAULT_FIXED_TIME = datetime(2024, 6, 15, 12, 0, tzinfo=UTC)


class Clock(ABC):
    """Source of the current instant and business date."""

    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware current instant."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    """Wall-clock time.  Business dates follow the operator's local calendar."""

    def now(self) -> datetime:
        return datetime.now(UTC)

    def today(self) -> date:
        return date.today()


class DeterministicClock(Clock):
    """
    Clock frozen at a fixed instant until explicitly moved.

    Repeated calls return the same value, so date arithmetic in tests is
    exact.
    """

    def __init__(self, fixed_time: datetime | None = None):
        self._now = fixed_time or DEFAULT_FIXED_TIME

    def now(self) -> datetime:
        return self._now

    def advance_days(self, days: int = 1) -> None:
        """Move the clock ``days`` calendar days forward (negative moves back)."""
        self._now += timedelta(days=days)

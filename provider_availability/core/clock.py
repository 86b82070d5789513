"""
Clock abstraction used by services to read "now" and today's business date.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from provider_availability.utils.date_utils import to_business_date, to_utc


class Clock(ABC):
    """Source of the current UTC time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as an aware UTC datetime."""

    def today(self) -> date:
        """Return today's business date."""
        return to_business_date(self.now())


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Clock pinned to a given instant; used by tests and replay tooling."""

    def __init__(self, instant: Optional[datetime] = None):
        self._instant = to_utc(instant) if instant else datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = to_utc(instant)

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward by a timedelta built from kwargs."""
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant


system_clock = SystemClock()

__all__ = ["Clock", "SystemClock", "FixedClock", "system_clock"]

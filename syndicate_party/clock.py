"""Injectable wall-clock sources for audit timestamps."""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """Anything that can tell the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system time (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock that returns a fixed instant until advanced.

    Parameters
    ----------
    instant : datetime
        Initial time returned by :meth:`now`.
    """

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, **kwargs: float) -> datetime:
        """Move the clock forward by ``timedelta(**kwargs)``."""
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant


SYSTEM_CLOCK = SystemClock()

"""
Time provider abstraction for deterministic testing

Deadlines are the only place the tender core looks at a clock, so the clock
is injected. Production uses the system clock, tests freeze and advance it.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        """Return current UTC time from system clock"""
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Allows tests to freeze time and move it past tender deadlines.
    """

    __test__ = False  # not a pytest test class

    def __init__(self, initial_time: datetime | None = None) -> None:
        """
        Initialize with optional fixed time

        Args:
            initial_time: Starting time (defaults to Unix epoch)
        """
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        """Return current test time"""
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        """Set current time to specific value"""
        self._current_time = dt

    def advance_seconds(self, seconds: int) -> None:
        """Advance time by specified seconds"""
        self._current_time += timedelta(seconds=seconds)

    def advance_days(self, days: int) -> None:
        """Advance time by specified days"""
        self._current_time += timedelta(days=days)


def deadline_after(start: datetime, units: int, unit: timedelta = timedelta(days=1)) -> datetime:
    """
    Deadline that lies a number of deadline units after start

    Example:
        >>> deadline_after(datetime(2025, 1, 15, tzinfo=timezone.utc), 7)
        datetime.datetime(2025, 1, 22, 0, 0, tzinfo=datetime.timezone.utc)
    """
    return start + units * unit


def offer_period_open(deadline: datetime, now: datetime) -> bool:
    """Offers are accepted up to and including the deadline instant"""
    return now <= deadline

"""Wall-clock abstractions."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
import threading


class Clock(ABC):
    """Source of the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        pass


class SystemClock(Clock):
    """Real wall-clock time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock(Clock):
    """Clock that only moves when told to.

    Can be moved backwards to simulate clock skew.
    """

    def __init__(self, start: datetime = None):
        self._now = start or datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._lock = threading.Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def set(self, value: datetime) -> None:
        if value.tzinfo is None:
            raise ValueError("ManualClock requires timezone-aware datetimes")
        with self._lock:
            self._now = value

    def advance(self, seconds: float) -> datetime:
        with self._lock:
            self._now = self._now + timedelta(seconds=seconds)
            return self._now

"""Clock abstractions so time-dependent guards can be driven from tests."""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol


def as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class Clock(Protocol):  # Source of the current instant
    def now(self) -> datetime: ...


class SystemClock:  # Wall clock in UTC
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock:  # Clock that only moves when told to
    def __init__(self, start: Optional[datetime] = None) -> None:
        self._now = as_utc(start) if start else datetime.now(timezone.utc)

    def now(self) -> datetime:
        return self._now

    def set(self, value: datetime) -> None:
        self._now = as_utc(value)

    def advance(self, **delta: float) -> datetime:
        """Move the clock forward by ``timedelta(**delta)`` and return the new instant."""

        self._now = self._now + timedelta(**delta)
        return self._now


__all__ = ["Clock", "ManualClock", "SystemClock", "as_utc"]

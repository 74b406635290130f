"""Injectable sources of "now"."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol

from .ledger import DayKey, DayLike


class Clock(Protocol):
    """Anything that can tell the current local date and time."""

    def now(self) -> datetime:  # pragma: no cover - interface
        ...


class SystemClock:
    """Wall clock in the process' local timezone."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """A clock frozen at a given instant, movable by hand. Used in tests and replays."""

    def __init__(self, instant: datetime):
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, *, days: int = 0, hours: int = 0, minutes: int = 0) -> None:
        self._instant += timedelta(days=days, hours=hours, minutes=minutes)

    def set(self, instant: datetime) -> None:
        self._instant = instant


def today_key(clock: Clock) -> DayKey:
    return DayKey.of(clock.now())


def is_today(day: DayLike, clock: Clock) -> bool:
    """True when ``day`` falls on the clock's current calendar day."""

    return DayKey.of(day) == today_key(clock)


__all__ = ["Clock", "FixedClock", "SystemClock", "is_today", "today_key"]

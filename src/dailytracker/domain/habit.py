"""Habit aggregate as seen by the streak engine."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import date, datetime
from typing import Any, Mapping, Optional

from .ledger import CompletionLedger, HabitStatus

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


@dataclass(frozen=True, slots=True)
class ReminderDays:
    """Which weekdays a habit wants a reminder on."""

    monday: bool = True
    tuesday: bool = True
    wednesday: bool = True
    thursday: bool = True
    friday: bool = True
    saturday: bool = True
    sunday: bool = True

    @classmethod
    def every_day(cls) -> "ReminderDays":
        return cls()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> Optional["ReminderDays"]:
        """Build from a stored mapping; missing weekdays default to enabled."""

        if raw is None:
            return None
        return cls(**{name: bool(raw.get(name, True)) for name in WEEKDAY_NAMES})

    def to_dict(self) -> dict[str, bool]:
        return {name: getattr(self, name) for name in WEEKDAY_NAMES}

    def enabled_on(self, day: date) -> bool:
        return getattr(self, WEEKDAY_NAMES[day.weekday()])

    def enabled_names(self) -> list[str]:
        return [name for name in WEEKDAY_NAMES if getattr(self, name)]


@dataclass(slots=True)
class HabitState:
    """Snapshot of one habit together with its completion ledger.

    ``status`` describes today only. ``streak`` is a cache of what the streak
    calculator returns for ``completion_history`` and the current date.
    """

    id: str
    owner_id: str
    name: str
    description: str = ""
    status: HabitStatus = HabitStatus.UNTRACKED
    streak: int = 0
    longest_streak: int = 0
    last_completed: Optional[datetime] = None
    reminder_time: Optional[str] = None
    reminder_days: Optional[ReminderDays] = None
    completion_history: CompletionLedger = field(default_factory=CompletionLedger)

    def snapshot(self) -> "HabitState":
        """Independent copy; aggregators read snapshots, never live objects."""

        return replace(self, completion_history=self.completion_history.copy())


@dataclass(slots=True)
class HabitUpdate:
    """Fields changed by one status mutation, ready to be persisted.

    ``None`` means "leave unchanged".
    """

    completion_history: CompletionLedger
    streak: int
    longest_streak: Optional[int] = None
    status: Optional[HabitStatus] = None
    last_completed: Optional[datetime] = None

    def changed_fields(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def apply_to(self, habit: HabitState) -> HabitState:
        for name, value in self.changed_fields().items():
            setattr(habit, name, value)
        return habit


__all__ = ["HabitState", "HabitUpdate", "ReminderDays", "WEEKDAY_NAMES"]

"""Domain types and collaborator protocols."""

from .clock import Clock, FixedClock, SystemClock, is_today, today_key
from .habit import HabitState, HabitUpdate, ReminderDays, WEEKDAY_NAMES
from .ledger import CompletionLedger, DayKey, HabitStatus, as_ledger
from .repositories import HabitRepository, ItemCountRepository, ReminderNotifier

__all__ = [
    "Clock",
    "CompletionLedger",
    "DayKey",
    "FixedClock",
    "HabitRepository",
    "HabitState",
    "HabitStatus",
    "HabitUpdate",
    "ItemCountRepository",
    "ReminderDays",
    "ReminderNotifier",
    "SystemClock",
    "WEEKDAY_NAMES",
    "as_ledger",
    "is_today",
    "today_key",
]

"""Collaborator protocols the core calls into."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol

from .habit import HabitState


class HabitRepository(Protocol):
    """Persistence collaborator for habits and their ledgers."""

    def load_habit(self, habit_id: str) -> Optional[HabitState]:
        """Return the habit or ``None`` when the id does not resolve."""
        ...

    def save_habit_fields(self, habit_id: str, fields: Mapping[str, Any]) -> None:
        """Persist a partial update; ``completion_history`` replaces the whole ledger."""
        ...

    def load_habits_for_owner(self, owner_id: str) -> list[HabitState]:
        """Return every habit of an owner, ordered by name."""
        ...

    def create(self, habit: HabitState) -> HabitState:
        ...

    def delete(self, habit_id: str) -> None:
        ...


class ItemCountRepository(Protocol):
    """Counts of the non-habit item types over an inclusive date range."""

    def count_goals(self, owner_id: str, start: date, end: date) -> tuple[int, int]:
        """Return ``(total, completed)`` goals."""
        ...

    def count_good_deeds(self, owner_id: str, start: date, end: date) -> int:
        ...

    def count_reflections(self, owner_id: str, start: date, end: date) -> int:
        ...


class ReminderNotifier(Protocol):
    """Schedules and cancels reminders for a habit."""

    def schedule(self, habit: HabitState) -> None:
        ...

    def cancel(self, habit_id: str) -> None:
        ...


__all__ = ["HabitRepository", "ItemCountRepository", "ReminderNotifier"]

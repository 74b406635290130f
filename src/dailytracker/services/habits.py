"""Habit status mutation and lifecycle services."""

from __future__ import annotations

import logging
import re
import threading
import uuid
from typing import Any, Optional

from ..domain.clock import Clock, SystemClock, is_today, today_key
from ..domain.habit import HabitState, HabitUpdate, ReminderDays
from ..domain.ledger import DayKey, DayLike, HabitStatus
from ..domain.repositories import HabitRepository, ReminderNotifier
from ..errors import HabitNotFoundError
from .streaks import DEFAULT_WALK_LIMIT, calculate_streak

logger = logging.getLogger(__name__)

_REMINDER_TIME = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_EDITABLE_FIELDS = frozenset({"name", "description", "reminder_time", "reminder_days"})
_REMINDER_FIELDS = frozenset({"reminder_time", "reminder_days"})


def set_status(
    habit: Optional[HabitState],
    day: DayLike,
    new_status: HabitStatus | str,
    *,
    clock: Clock,
    walk_limit: int = DEFAULT_WALK_LIMIT,
) -> Optional[HabitUpdate]:
    """Compute the fields that change when ``day`` is marked ``new_status``.

    The habit itself is left untouched; callers persist the returned update and
    then apply it. Streaks are always recomputed against the clock's "now", not
    the edited day. ``status`` and ``last_completed`` only move when the edited
    day is today. Returns ``None`` when there is no habit or ledger to edit.
    """

    if habit is None or habit.completion_history is None:
        return None

    status = HabitStatus.parse(new_status)
    key = DayKey.of(day)
    now = clock.now()
    editing_today = is_today(key, clock)

    ledger = habit.completion_history.copy()
    ledger.set(key, status)
    update = HabitUpdate(completion_history=ledger, streak=habit.streak)

    if status is HabitStatus.COMPLETED:
        update.streak = calculate_streak(ledger, now, walk_limit=walk_limit)
        if editing_today:
            update.last_completed = now
            update.status = HabitStatus.COMPLETED
    elif status is HabitStatus.FAILED and editing_today:
        # failing today breaks the streak outright
        update.streak = 0
        update.status = HabitStatus.FAILED
    else:
        update.streak = calculate_streak(ledger, now, walk_limit=walk_limit)
        if editing_today:
            update.status = status

    if update.streak > habit.longest_streak:
        update.longest_streak = update.streak
    return update


def validate_reminder_time(value: Optional[str]) -> Optional[str]:
    """Return a normalized ``HH:MM`` reminder time, or ``None`` for blank values."""

    if value is None or not value.strip():
        return None
    value = value.strip()
    if not _REMINDER_TIME.match(value):
        raise ValueError(f"Reminder time must be HH:MM (24h), got {value!r}")
    return value


class HabitService:
    """Loads habits, applies status changes and keeps reminders in sync."""

    def __init__(
        self,
        repository: HabitRepository,
        *,
        clock: Clock | None = None,
        notifier: ReminderNotifier | None = None,
        walk_limit: int = DEFAULT_WALK_LIMIT,
    ):
        self.repository = repository
        self.clock = clock or SystemClock()
        self.notifier = notifier
        self.walk_limit = walk_limit
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, habit_id: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(habit_id, threading.Lock())

    def _require(self, habit_id: str) -> HabitState:
        habit = self.repository.load_habit(habit_id)
        if habit is None:
            raise HabitNotFoundError(habit_id)
        return habit

    # Lifecycle
    def add_habit(
        self,
        owner_id: str,
        name: str,
        *,
        description: str = "",
        reminder_time: Optional[str] = None,
        reminder_days: Optional[ReminderDays] = None,
    ) -> HabitState:
        """Create an untracked habit with an empty ledger."""

        if not name or not name.strip():
            raise ValueError("Habit name is required")
        habit = HabitState(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            name=name.strip(),
            description=(description or "").strip(),
            reminder_time=validate_reminder_time(reminder_time),
            reminder_days=reminder_days or ReminderDays.every_day(),
        )
        habit = self.repository.create(habit)
        logger.info("Habit created", extra={"habit_id": habit.id, "owner_id": owner_id})

        if habit.reminder_time and self.notifier is not None:
            self.notifier.schedule(habit)
        return habit

    def update_habit(self, habit_id: str, **changes: Any) -> HabitState:
        """Apply display or reminder changes.

        Reminders are only rescheduled when ``reminder_time`` or
        ``reminder_days`` is part of ``changes``.
        """

        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update habit fields: {sorted(unknown)}")
        if "reminder_time" in changes:
            changes["reminder_time"] = validate_reminder_time(changes["reminder_time"])

        with self._lock_for(habit_id):
            habit = self._require(habit_id)
            self.repository.save_habit_fields(habit_id, changes)
            for name, value in changes.items():
                setattr(habit, name, value)

        if _REMINDER_FIELDS & changes.keys() and self.notifier is not None:
            self.notifier.cancel(habit_id)
            if habit.reminder_time:
                self.notifier.schedule(habit)
        return habit

    def delete_habit(self, habit_id: str) -> None:
        with self._lock_for(habit_id):
            self._require(habit_id)
            if self.notifier is not None:
                self.notifier.cancel(habit_id)
            self.repository.delete(habit_id)
        with self._locks_guard:
            self._locks.pop(habit_id, None)
        logger.info("Habit deleted", extra={"habit_id": habit_id})

    # Status tracking
    def set_status_for_date(
        self, habit_id: str, status: HabitStatus | str, day: DayLike
    ) -> HabitState:
        """Mark ``day`` for a habit and persist the recomputed streak fields."""

        status = HabitStatus.parse(status)
        key = DayKey.of(day)
        with self._lock_for(habit_id):
            habit = self._require(habit_id)
            update = set_status(habit, key, status, clock=self.clock, walk_limit=self.walk_limit)
            self.repository.save_habit_fields(habit_id, update.changed_fields())
            update.apply_to(habit)

        logger.info(
            "Habit status updated",
            extra={
                "habit_id": habit_id,
                "day": str(key),
                "status": status.value,
                "streak": habit.streak,
                "longest_streak": habit.longest_streak,
            },
        )
        return habit

    def set_status_today(self, habit_id: str, status: HabitStatus | str) -> HabitState:
        return self.set_status_for_date(habit_id, status, self.clock.now())

    def refresh(self, habit_id: str) -> HabitState:
        """Re-derive the cached streak and today's status from the ledger.

        Used after a calendar day rolls over, when the cached ``streak`` may
        still describe yesterday.
        """

        with self._lock_for(habit_id):
            habit = self._require(habit_id)
            today_status = habit.completion_history.get(today_key(self.clock))
            if today_status is HabitStatus.FAILED:
                streak = 0
            else:
                streak = calculate_streak(
                    habit.completion_history, self.clock.now(), walk_limit=self.walk_limit
                )
            fields = {
                "streak": streak,
                "status": today_status,
                "longest_streak": max(streak, habit.longest_streak),
            }
            changed = {name: value for name, value in fields.items() if getattr(habit, name) != value}
            if changed:
                self.repository.save_habit_fields(habit_id, changed)
                for name, value in changed.items():
                    setattr(habit, name, value)
                logger.debug("Habit refreshed", extra={"habit_id": habit_id, "changed": sorted(changed)})
        return habit

    # Queries
    def list_habits(self, owner_id: str) -> list[HabitState]:
        return self.repository.load_habits_for_owner(owner_id)

    def active_habits_for_today(self, owner_id: str) -> list[HabitState]:
        """Habits whose reminder days include today's weekday."""

        today = self.clock.now().date()
        return [
            habit
            for habit in self.repository.load_habits_for_owner(owner_id)
            if habit.reminder_days is None or habit.reminder_days.enabled_on(today)
        ]


__all__ = ["HabitService", "set_status", "validate_reminder_time"]

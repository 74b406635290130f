"""Habit reminder scheduling on APScheduler."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler as APScheduler
from apscheduler.triggers.cron import CronTrigger

from ..domain.habit import HabitState, ReminderDays

logger = logging.getLogger(__name__)

DeliverFn = Callable[[str, str], None]

_CRON_DAY_NAMES = {
    "monday": "mon",
    "tuesday": "tue",
    "wednesday": "wed",
    "thursday": "thu",
    "friday": "fri",
    "saturday": "sat",
    "sunday": "sun",
}


def job_id_for(habit_id: str) -> str:
    return f"reminder-{habit_id}"


def cron_days(reminder_days: Optional[ReminderDays]) -> str:
    """Comma-separated cron weekday list; empty when no day is enabled."""

    days = reminder_days or ReminderDays.every_day()
    return ",".join(_CRON_DAY_NAMES[name] for name in days.enabled_names())


def log_delivery(habit_id: str, name: str) -> None:
    """Default delivery: record that a reminder fired."""

    logger.info("Reminder due: %s", name, extra={"habit_id": habit_id})


class ReminderScheduler:
    """One cron job per habit, firing at ``reminder_time`` on enabled weekdays."""

    def __init__(self, *, deliver: DeliverFn = log_delivery, scheduler: APScheduler | None = None):
        self.deliver = deliver
        self.scheduler = scheduler or APScheduler()

    def start(self) -> None:
        if self.scheduler.running:
            logger.warning("Reminder scheduler already running")
            return
        self.scheduler.start()
        logger.info("Reminder scheduler started")

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            logger.info("Reminder scheduler stopped")

    def schedule(self, habit: HabitState) -> None:
        """Add or replace the reminder job for ``habit``."""

        if not habit.reminder_time:
            logger.debug("No reminder time for habit %s", habit.id)
            return
        days = cron_days(habit.reminder_days)
        if not days:
            logger.debug("No reminder days enabled for habit %s", habit.id)
            return

        hour, minute = (int(part) for part in habit.reminder_time.split(":"))
        self.scheduler.add_job(
            func=self.deliver,
            trigger=CronTrigger(day_of_week=days, hour=hour, minute=minute),
            args=(habit.id, habit.name),
            id=job_id_for(habit.id),
            name=f"Reminder: {habit.name}",
            replace_existing=True,
        )
        logger.info(
            "Scheduled reminder",
            extra={"habit_id": habit.id, "time": habit.reminder_time, "days": days},
        )

    def cancel(self, habit_id: str) -> None:
        if self.scheduler.get_job(job_id_for(habit_id)) is None:
            return
        self.scheduler.remove_job(job_id_for(habit_id))
        logger.info("Cancelled reminder", extra={"habit_id": habit_id})

    def reschedule_all(self, habits: list[HabitState]) -> None:
        for habit in habits:
            self.cancel(habit.id)
            self.schedule(habit)


__all__ = ["ReminderScheduler", "cron_days", "job_id_for", "log_delivery"]

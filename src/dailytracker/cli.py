"""Command line interface for DailyTracker."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, Optional

import click

from .context import AppContext, create_app_context
from .domain.clock import today_key
from .domain.ledger import DayKey, HabitStatus
from .domain.repositories import ReminderNotifier
from .errors import HabitNotFoundError, InvalidDayKeyError, InvalidStatusError
from .logging_config import get_logger, setup_logging
from .services.export_csv import export_ledger_csv
from .services.range_stats import (
    day_of_week_stats,
    extract_streak_runs,
    monthly_stats,
    range_completion_rate,
)
from .services.reminders import ReminderScheduler
from .services.reports import export_weekday_png
from .services.review import review_summary
from .services.streaks import longest_run_length

logger = get_logger("cli")


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, sort_keys=False, default=str))


def _app(ctx: click.Context, notifier: Optional[ReminderNotifier] = None) -> AppContext:
    if ctx.obj is None:
        app = create_app_context(notifier=notifier)
        setup_logging(app.config)
        logger.debug("Using database %s", app.config.DATABASE_URL)
        ctx.obj = app
    elif notifier is not None:
        ctx.obj.habit_service.notifier = notifier
    return ctx.obj


def _day(value: str | None) -> DayKey | None:
    if value is None:
        return None
    try:
        return DayKey.parse(value)
    except InvalidDayKeyError as exc:
        raise click.BadParameter(str(exc)) from exc


def _habit_summary(habit) -> dict[str, Any]:
    return {
        "id": habit.id,
        "name": habit.name,
        "status": habit.status.value,
        "streak": habit.streak,
        "longestStreak": habit.longest_streak,
        "lastCompleted": habit.last_completed.isoformat() if habit.last_completed else None,
    }


@click.group()
@click.pass_context
def main(ctx: click.Context) -> None:
    """Track habits, streaks and period statistics."""


@main.command("add-habit")
@click.argument("owner")
@click.argument("name")
@click.option("--description", default="", help="Optional description")
@click.option("--reminder", "reminder_time", default=None, help="Daily reminder time, HH:MM")
@click.pass_context
def add_habit(ctx: click.Context, owner: str, name: str, description: str, reminder_time: str | None) -> None:
    """Create a new habit for OWNER."""

    app = _app(ctx)
    try:
        habit = app.habit_service.add_habit(
            owner, name, description=description, reminder_time=reminder_time
        )
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(_habit_summary(habit))


@main.command("set-status")
@click.argument("habit_id")
@click.argument("status", type=click.Choice([s.value for s in HabitStatus], case_sensitive=False))
@click.option("--date", "day", default=None, help="Day to mark (YYYY-MM-DD), defaults to today")
@click.pass_context
def set_status(ctx: click.Context, habit_id: str, status: str, day: str | None) -> None:
    """Mark HABIT_ID as completed, failed or untracked for a day."""

    app = _app(ctx)
    key = _day(day) or today_key(app.clock)
    try:
        habit = app.habit_service.set_status_for_date(habit_id, status, key)
    except (HabitNotFoundError, InvalidStatusError) as exc:
        raise click.ClickException(str(exc)) from exc
    _echo_json(_habit_summary(habit))


@main.command("stats")
@click.argument("owner")
@click.option(
    "--period",
    type=click.Choice(["today", "week", "month"]),
    default="today",
    show_default=True,
)
@click.pass_context
def stats(ctx: click.Context, owner: str, period: str) -> None:
    """Print the summary record for OWNER over a period."""

    app = _app(ctx)
    _echo_json(app.stats_service.stats_for(period, owner).to_dict())


@main.command("review")
@click.argument("owner")
@click.option("--days", type=click.IntRange(min=1), default=7, show_default=True)
@click.pass_context
def review(ctx: click.Context, owner: str, days: int) -> None:
    """Review OWNER's habits over the trailing DAYS days."""

    app = _app(ctx)
    habits = app.habit_service.list_habits(owner)
    _echo_json(review_summary(habits, today=app.clock.now(), days=days).to_dict())


@main.command("report")
@click.argument("habit_id")
@click.option("--start", default=None, help="Range start (YYYY-MM-DD) for the completion rate")
@click.option("--end", default=None, help="Range end (YYYY-MM-DD), defaults to today")
@click.option("--chart", type=click.Path(dir_okay=False, path_type=Path), default=None)
@click.pass_context
def report(ctx: click.Context, habit_id: str, start: str | None, end: str | None, chart: Path | None) -> None:
    """Weekday/monthly breakdowns and streak runs for one habit."""

    app = _app(ctx)
    habit = app.habit_repo.load_habit(habit_id)
    if habit is None:
        raise click.ClickException(str(HabitNotFoundError(habit_id)))

    ledger = habit.completion_history
    weekday = day_of_week_stats(ledger)
    payload: dict[str, Any] = {
        "habit": _habit_summary(habit),
        "weekdays": {name: bucket.to_dict() for name, bucket in weekday.items()},
        "months": {name: bucket.to_dict() for name, bucket in monthly_stats(ledger).items()},
        "runs": [run.to_dict() for run in extract_streak_runs(ledger)],
        "longestRun": longest_run_length(ledger),
    }
    range_start = _day(start)
    if range_start is not None:
        range_end = _day(end) or today_key(app.clock)
        payload["rangeRate"] = round(range_completion_rate(ledger, range_start, range_end), 2)
    if chart is not None:
        payload["chart"] = str(export_weekday_png(weekday, output_path=chart))
    _echo_json(payload)


@main.command("refresh")
@click.argument("owner")
@click.pass_context
def refresh(ctx: click.Context, owner: str) -> None:
    """Re-derive cached streaks for every habit of OWNER (run after midnight)."""

    app = _app(ctx)
    habits = [app.habit_service.refresh(h.id) for h in app.habit_service.list_habits(owner)]
    _echo_json([_habit_summary(h) for h in habits])


@main.command("export")
@click.argument("owner")
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.pass_context
def export(ctx: click.Context, owner: str, output: Path) -> None:
    """Write OWNER's completion ledgers to a CSV file."""

    app = _app(ctx)
    path = export_ledger_csv(habits=app.habit_service.list_habits(owner), output_path=output)
    click.echo(f"Export written: {path}")


@main.command("reminders")
@click.argument("owner")
@click.option(
    "--run-for",
    type=click.FloatRange(min=0),
    default=None,
    help="Stop after this many seconds instead of waiting for Ctrl+C",
)
@click.pass_context
def reminders(ctx: click.Context, owner: str, run_for: float | None) -> None:
    """Run the reminder scheduler for OWNER's habits in the foreground."""

    scheduler = ReminderScheduler()
    app = _app(ctx, notifier=scheduler)
    scheduler.reschedule_all(app.habit_service.list_habits(owner))
    scheduler.start()
    try:
        _echo_json({"owner": owner, "scheduled": sorted(job.id for job in scheduler.scheduler.get_jobs())})
        deadline = None if run_for is None else time.monotonic() + run_for
        while deadline is None or time.monotonic() < deadline:
            time.sleep(0.5)
    except KeyboardInterrupt:
        logger.info("Reminder loop interrupted")
    finally:
        scheduler.stop()


__all__ = ["main"]

"""Read-only statistics over a habit's ledger and explicit date ranges.

Two iteration strategies live here on purpose:

* bucket stats (day-of-week, monthly) look only at ledger entries that exist,
* range rates walk every calendar day between ``start`` and ``end`` so that
  untracked gaps are visited and excluded from the denominator.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Union

from ..domain.habit import HabitState
from ..domain.ledger import CompletionLedger, DayKey, DayLike, HabitStatus, as_ledger

LedgerLike = Optional[Union[CompletionLedger, Mapping[object, object]]]

DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def percent(numerator: float, denominator: float) -> float:
    """``numerator / denominator * 100``; zero denominators give 0."""

    if not denominator:
        return 0.0
    return numerator / denominator * 100


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rounded_percent(numerator: float, denominator: float) -> int:
    """Percentage rounded half-up to a whole number."""

    return round_half_up(percent(numerator, denominator))


@dataclass(slots=True)
class CompletionBucket:
    """Completed vs tracked counts for one bucket (weekday, month, ...)."""

    completed: int = 0
    total: int = 0

    @property
    def rate(self) -> int:
        return rounded_percent(self.completed, self.total)

    def record(self, status: HabitStatus) -> None:
        if not status.is_tracked:
            return
        self.total += 1
        if status is HabitStatus.COMPLETED:
            self.completed += 1

    def to_dict(self) -> dict[str, int]:
        return {"completed": self.completed, "total": self.total, "rate": self.rate}


@dataclass(frozen=True, slots=True)
class StreakRun:
    """A maximal run of consecutive completed days."""

    start_date: date
    end_date: date
    length: int

    def to_dict(self) -> dict[str, object]:
        return {
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "length": self.length,
        }


def day_of_week_stats(ledger: LedgerLike) -> dict[str, CompletionBucket]:
    """Completion counts per weekday name, Monday first, all seven present."""

    buckets = {name: CompletionBucket() for name in DAY_NAMES}
    for day, status in as_ledger(ledger).items():
        buckets[DAY_NAMES[day.day.weekday()]].record(status)
    return buckets


def monthly_stats(ledger: LedgerLike) -> dict[str, CompletionBucket]:
    """Completion counts keyed by ``"<MonthName> <Year>"``, oldest month first."""

    buckets: dict[str, CompletionBucket] = {}
    for day, status in as_ledger(ledger).items():
        label = f"{MONTH_NAMES[day.day.month - 1]} {day.day.year}"
        buckets.setdefault(label, CompletionBucket()).record(status)
    return buckets


def extract_streak_runs(ledger: LedgerLike) -> list[StreakRun]:
    """Partition completed days into runs of consecutive calendar days."""

    runs: list[StreakRun] = []
    start: DayKey | None = None
    previous: DayKey | None = None
    for day in as_ledger(ledger).completed_days():
        if previous is not None and day == previous.shift(1):
            previous = day
            continue
        if start is not None and previous is not None:
            runs.append(_run(start, previous))
        start = previous = day
    if start is not None and previous is not None:
        runs.append(_run(start, previous))
    return runs


def _run(start: DayKey, end: DayKey) -> StreakRun:
    return StreakRun(start_date=start.day, end_date=end.day, length=(end.day - start.day).days + 1)


def date_keys_between(start: DayLike, end: DayLike) -> list[DayKey]:
    """Every day key in ``[start, end]`` inclusive; empty when start is after end."""

    first, last = DayKey.of(start), DayKey.of(end)
    count = (last.day - first.day).days + 1
    return [DayKey(first.day + timedelta(days=offset)) for offset in range(max(count, 0))]


def range_completion_rate(ledger: LedgerLike, start: DayLike, end: DayLike) -> float:
    """Completed share of tracked days in ``[start, end]``, as a percentage."""

    ledger = as_ledger(ledger)
    tracked = completed = 0
    for day in date_keys_between(start, end):
        status = ledger.get(day)
        if status.is_tracked:
            tracked += 1
            if status is HabitStatus.COMPLETED:
                completed += 1
    return percent(completed, tracked)


def multi_habit_range_rate(habits: Iterable[HabitState], start: DayLike, end: DayLike) -> float:
    """Completed hits over ``habits x days`` in the range.

    Every habit counts as a daily target on every day of the range, whatever
    its reminder days say.
    """

    habits = list(habits)
    days = date_keys_between(start, end)
    hits = 0
    for habit in habits:
        ledger = as_ledger(habit.completion_history)
        hits += sum(1 for day in days if ledger.get(day) is HabitStatus.COMPLETED)
    return percent(hits, len(habits) * len(days))


__all__ = [
    "DAY_NAMES",
    "MONTH_NAMES",
    "CompletionBucket",
    "StreakRun",
    "date_keys_between",
    "day_of_week_stats",
    "extract_streak_runs",
    "monthly_stats",
    "multi_habit_range_rate",
    "percent",
    "range_completion_rate",
    "round_half_up",
    "rounded_percent",
]

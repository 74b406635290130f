"""Trailing-window review of all habits (last 7 / last 30 days)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Optional

from ..domain.habit import HabitState
from ..domain.ledger import DayKey, DayLike, HabitStatus, as_ledger
from .period_stats import count_habits_with_streak
from .range_stats import percent, round_half_up, rounded_percent

MIN_TRACKED_DAYS_FOR_BEST = 3


@dataclass(slots=True)
class ReviewSummary:
    total_habits: int = 0
    habits_with_streak: int = 0
    overall_rate: int = 0
    best_habit_id: Optional[str] = None
    average_streak: int = 0

    def to_dict(self) -> dict[str, object]:
        return {
            "totalHabits": self.total_habits,
            "habitsWithStreak": self.habits_with_streak,
            "overallRate": self.overall_rate,
            "bestHabitId": self.best_habit_id,
            "averageStreak": self.average_streak,
        }


def trailing_days(today: DayLike, days: int) -> list[date]:
    """The ``days`` calendar days ending at ``today``, oldest first."""

    end = DayKey.of(today).day
    return [end - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def review_summary(habits: Iterable[HabitState], *, today: DayLike, days: int = 7) -> ReviewSummary:
    habits = list(habits)
    if not habits:
        return ReviewSummary()

    window = trailing_days(today, days)
    tracked_total = completed_total = 0
    best_id: Optional[str] = None
    best_rate = 0.0

    for habit in habits:
        ledger = as_ledger(habit.completion_history)
        tracked = completed = 0
        for day in window:
            status = ledger.get(day)
            if status.is_tracked:
                tracked += 1
                if status is HabitStatus.COMPLETED:
                    completed += 1
        tracked_total += tracked
        completed_total += completed

        rate = percent(completed, tracked)
        if tracked >= MIN_TRACKED_DAYS_FOR_BEST and rate > best_rate:
            best_rate = rate
            best_id = habit.id

    return ReviewSummary(
        total_habits=len(habits),
        habits_with_streak=count_habits_with_streak(habits),
        overall_rate=rounded_percent(completed_total, tracked_total),
        best_habit_id=best_id,
        average_streak=round_half_up(sum(h.streak for h in habits) / len(habits)),
    )


__all__ = ["MIN_TRACKED_DAYS_FOR_BEST", "ReviewSummary", "review_summary", "trailing_days"]

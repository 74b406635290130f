"""Today / week / month summaries across habits, goals, good deeds and reflections."""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, Optional

from ..domain.clock import Clock, SystemClock
from ..domain.habit import HabitState
from ..domain.ledger import DayKey, DayLike, HabitStatus, as_ledger
from ..domain.repositories import HabitRepository, ItemCountRepository
from .range_stats import multi_habit_range_rate, round_half_up, rounded_percent

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class GoalStats:
    total: int = 0
    completed: int = 0
    rate: int = 0


@dataclass(slots=True)
class HabitStats:
    completed: int = 0
    rate: int = 0
    total_habits: int = 0


@dataclass(slots=True)
class PeriodStats:
    """Flat summary record for one period."""

    goals: GoalStats = field(default_factory=GoalStats)
    habits: HabitStats = field(default_factory=HabitStats)
    good_deeds: int = 0
    reflections: int = 0

    @classmethod
    def empty(cls) -> "PeriodStats":
        return cls()

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {
            "goals": {
                "total": self.goals.total,
                "completed": self.goals.completed,
                "rate": self.goals.rate,
            },
            "habits": {
                "completed": self.habits.completed,
                "rate": self.habits.rate,
                "totalHabits": self.habits.total_habits,
            },
            "goodDeeds": {"total": self.good_deeds},
            "reflections": {"total": self.reflections},
        }


@dataclass(frozen=True, slots=True)
class ItemCounts:
    """Pre-fetched counts of the non-habit items for a period."""

    total_goals: int = 0
    completed_goals: int = 0
    good_deeds: int = 0
    reflections: int = 0


def count_active_streaks(habits: Iterable[HabitState], today: DayLike) -> int:
    """Habits with a streak of at least 2 that were completed yesterday."""

    yesterday = DayKey.of(today).previous()
    return sum(
        1
        for habit in habits
        if habit.streak >= 2
        and as_ledger(habit.completion_history).get(yesterday) is HabitStatus.COMPLETED
    )


def count_habits_with_streak(habits: Iterable[HabitState]) -> int:
    """Coarse momentum figure: any habit with a non-zero streak."""

    return sum(1 for habit in habits if habit.streak > 0)


def today_completion_rate(habits: Iterable[HabitState], today: DayLike) -> int:
    habits = list(habits)
    key = DayKey.of(today)
    completed = sum(
        1 for habit in habits if as_ledger(habit.completion_history).get(key) is HabitStatus.COMPLETED
    )
    return rounded_percent(completed, len(habits))


def goal_completion_rate(total: int, completed: int) -> int:
    return rounded_percent(completed, total)


def aggregate_period(
    habits: Iterable[HabitState],
    counts: ItemCounts,
    *,
    today: DayLike,
    start: Optional[DayLike] = None,
    end: Optional[DayLike] = None,
) -> PeriodStats:
    """Combine habit ledgers and item counts into one :class:`PeriodStats`.

    Without a range the habit rate is today's completion rate; with one it is
    the multi-habit range rate over ``[start, end]``.
    """

    habits = list(habits)
    if start is None or end is None:
        habit_rate = today_completion_rate(habits, today)
    else:
        habit_rate = round_half_up(multi_habit_range_rate(habits, start, end))

    return PeriodStats(
        goals=GoalStats(
            total=counts.total_goals,
            completed=counts.completed_goals,
            rate=goal_completion_rate(counts.total_goals, counts.completed_goals),
        ),
        habits=HabitStats(
            completed=count_active_streaks(habits, today),
            rate=habit_rate,
            total_habits=len(habits),
        ),
        good_deeds=counts.good_deeds,
        reflections=counts.reflections,
    )


def week_bounds(reference: date, week_starts_on: int = 0) -> tuple[date, date]:
    """First and last day of the week containing ``reference`` (0 = Monday)."""

    offset = (reference.weekday() - week_starts_on) % 7
    start = reference - timedelta(days=offset)
    return start, start + timedelta(days=6)


def month_bounds(reference: date) -> tuple[date, date]:
    last_day = calendar.monthrange(reference.year, reference.month)[1]
    return reference.replace(day=1), reference.replace(day=last_day)


class PeriodStatsService:
    """Fetches period inputs from collaborators and aggregates them.

    Reporting degrades gracefully: any collaborator failure yields the
    all-zero record instead of an exception.
    """

    def __init__(
        self,
        habit_repository: HabitRepository,
        item_repository: ItemCountRepository,
        *,
        clock: Clock | None = None,
        week_starts_on: int = 0,
    ):
        self.habit_repository = habit_repository
        self.item_repository = item_repository
        self.clock = clock or SystemClock()
        self.week_starts_on = week_starts_on

    def _counts(self, owner_id: str, start: date, end: date) -> ItemCounts:
        total_goals, completed_goals = self.item_repository.count_goals(owner_id, start, end)
        return ItemCounts(
            total_goals=total_goals,
            completed_goals=completed_goals,
            good_deeds=self.item_repository.count_good_deeds(owner_id, start, end),
            reflections=self.item_repository.count_reflections(owner_id, start, end),
        )

    def _collect(self, period: str, owner_id: str, start: date, end: date, *, ranged: bool) -> PeriodStats:
        today = self.clock.now().date()
        try:
            counts = self._counts(owner_id, start, end)
            habits = [h.snapshot() for h in self.habit_repository.load_habits_for_owner(owner_id)]
        except Exception:
            logger.warning(
                "Falling back to empty %s stats", period, exc_info=True, extra={"owner_id": owner_id}
            )
            return PeriodStats.empty()

        if ranged:
            return aggregate_period(habits, counts, today=today, start=start, end=end)
        return aggregate_period(habits, counts, today=today)

    def today_stats(self, owner_id: str) -> PeriodStats:
        today = self.clock.now().date()
        return self._collect("today", owner_id, today, today, ranged=False)

    def weekly_stats(self, owner_id: str, reference: Optional[date] = None) -> PeriodStats:
        start, end = week_bounds(reference or self.clock.now().date(), self.week_starts_on)
        return self._collect("weekly", owner_id, start, end, ranged=True)

    def monthly_stats(self, owner_id: str, reference: Optional[date] = None) -> PeriodStats:
        start, end = month_bounds(reference or self.clock.now().date())
        return self._collect("monthly", owner_id, start, end, ranged=True)

    def stats_for(self, period: str, owner_id: str) -> PeriodStats:
        if period == "today":
            return self.today_stats(owner_id)
        if period == "week":
            return self.weekly_stats(owner_id)
        if period == "month":
            return self.monthly_stats(owner_id)
        raise ValueError(f"Unknown period: {period!r}")


__all__ = [
    "GoalStats",
    "HabitStats",
    "ItemCounts",
    "PeriodStats",
    "PeriodStatsService",
    "aggregate_period",
    "count_active_streaks",
    "count_habits_with_streak",
    "goal_completion_rate",
    "month_bounds",
    "today_completion_rate",
    "week_bounds",
]

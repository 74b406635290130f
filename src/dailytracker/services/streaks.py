"""Streak calculation over a completion ledger."""

from __future__ import annotations

from datetime import date

from ..domain.ledger import CompletionLedger, DayKey, DayLike, HabitStatus

DEFAULT_WALK_LIMIT = 366


def calculate_streak(
    ledger: CompletionLedger,
    reference: DayLike | None = None,
    *,
    walk_limit: int = DEFAULT_WALK_LIMIT,
) -> int:
    """Return the consecutive-completed-day count as of ``reference``.

    The walk is anchored on the reference day when it is completed and on the
    day before otherwise, so a streak stays alive until today gets tracked.
    At most ``walk_limit`` days before the anchor are inspected.
    """

    today = DayKey.of(reference if reference is not None else date.today())
    anchor = today if ledger.get(today) is HabitStatus.COMPLETED else today.previous()

    if ledger.get(anchor) is not HabitStatus.COMPLETED:
        return 0

    streak = 1
    cursor = anchor
    for _ in range(walk_limit):
        cursor = cursor.previous()
        if ledger.get(cursor) is not HabitStatus.COMPLETED:
            break
        streak += 1
    return streak


def longest_run_length(ledger: CompletionLedger) -> int:
    """Length of the longest run of consecutive completed days anywhere in history."""

    longest = 0
    run = 0
    last_day: DayKey | None = None
    for day in ledger.completed_days():
        if last_day is not None and day == last_day.shift(1):
            run += 1
        else:
            run = 1
        longest = max(longest, run)
        last_day = day
    return longest


def compute_streaks(
    ledger: CompletionLedger,
    *,
    today: DayLike | None = None,
    walk_limit: int = DEFAULT_WALK_LIMIT,
) -> tuple[int, int]:
    """Return (current_streak, longest_run) for a ledger."""

    current = calculate_streak(ledger, today, walk_limit=walk_limit)
    return current, max(current, longest_run_length(ledger))


__all__ = ["DEFAULT_WALK_LIMIT", "calculate_streak", "compute_streaks", "longest_run_length"]

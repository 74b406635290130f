"""Tests for current and longest streak calculations.

Covers:
- consecutive days ending today or yesterday
- gaps and failed days breaking the streak
- the walk limit
- longest runs anywhere in history
"""

from __future__ import annotations

from datetime import date, timedelta

from dailytracker.domain.ledger import CompletionLedger
from dailytracker.services.streaks import calculate_streak, compute_streaks, longest_run_length
from tests.conftest import TODAY, days_ago, ledger_of


class TestCurrentStreak:
    """Streak as of a reference day."""

    def test_empty_ledger_returns_zero(self):
        assert calculate_streak(CompletionLedger(), TODAY) == 0

    def test_single_entry_today_returns_one(self):
        assert calculate_streak(ledger_of([TODAY]), TODAY) == 1

    def test_consecutive_days_returns_count(self):
        ledger = ledger_of([days_ago(i) for i in range(7)])
        assert calculate_streak(ledger, TODAY) == 7

    def test_untracked_today_anchors_on_yesterday(self):
        ledger = ledger_of([days_ago(i) for i in range(1, 6)])
        assert calculate_streak(ledger, TODAY) == 5

    def test_failed_today_still_anchors_on_yesterday(self):
        ledger = ledger_of([days_ago(1), days_ago(2)], failed=[TODAY])
        assert calculate_streak(ledger, TODAY) == 2

    def test_yesterday_missing_and_today_missing_is_zero(self):
        ledger = ledger_of([days_ago(2), days_ago(3)])
        assert calculate_streak(ledger, TODAY) == 0

    def test_gap_breaks_streak(self):
        ledger = ledger_of([TODAY, days_ago(2)])
        assert calculate_streak(ledger, TODAY) == 1

    def test_failed_day_breaks_streak(self):
        ledger = ledger_of([TODAY, days_ago(1), days_ago(3)], failed=[days_ago(2)])
        assert calculate_streak(ledger, TODAY) == 2

    def test_reference_accepts_datetime_and_string(self):
        ledger = ledger_of([date(2024, 1, 1), date(2024, 1, 2)])
        assert calculate_streak(ledger, "2024-01-02") == 2
        assert calculate_streak(ledger, "2024-01-03") == 2
        assert calculate_streak(ledger, "2024-01-04") == 0

    def test_walk_is_capped(self):
        ledger = ledger_of([TODAY - timedelta(days=i) for i in range(400)])
        assert calculate_streak(ledger, TODAY) == 367
        assert calculate_streak(ledger, TODAY, walk_limit=9) == 10

    def test_pure_function_does_not_mutate(self):
        ledger = ledger_of([TODAY, days_ago(1)])
        before = ledger.to_dict()
        calculate_streak(ledger, TODAY)
        calculate_streak(ledger, TODAY)
        assert ledger.to_dict() == before


class TestLongestStreak:
    def test_no_entries_returns_zero(self):
        assert longest_run_length(CompletionLedger()) == 0

    def test_multiple_runs_returns_longest(self):
        days = [date(2024, 1, 1) + timedelta(days=i) for i in range(3)]
        days += [date(2024, 1, 10) + timedelta(days=i) for i in range(7)]
        days += [date(2024, 1, 20) + timedelta(days=i) for i in range(4)]
        assert longest_run_length(ledger_of(days)) == 7

    def test_failed_days_split_runs(self):
        start = date(2024, 1, 1)
        completed = [start + timedelta(days=i) for i in range(5) if i != 2]
        ledger = ledger_of(completed, failed=[start + timedelta(days=2)])
        assert longest_run_length(ledger) == 2

    def test_compute_streaks_returns_current_and_longest(self):
        old_run = [date(2024, 1, 1) + timedelta(days=i) for i in range(2)]
        current_run = [days_ago(i) for i in range(4)]
        assert compute_streaks(ledger_of(old_run + current_run), today=TODAY) == (4, 4)

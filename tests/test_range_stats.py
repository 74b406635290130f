"""Tests for weekday/monthly buckets, streak runs and range completion rates."""

from __future__ import annotations

import calendar
from datetime import date

from dailytracker.domain import CompletionLedger, HabitState
from dailytracker.services.range_stats import (
    date_keys_between,
    day_of_week_stats,
    extract_streak_runs,
    monthly_stats,
    multi_habit_range_rate,
    range_completion_rate,
    round_half_up,
    rounded_percent,
)
from tests.conftest import OWNER, ledger_of


class TestRounding:
    def test_half_rounds_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(66.5) == 67
        assert round_half_up(66.49) == 66

    def test_zero_denominator(self):
        assert rounded_percent(3, 0) == 0

    def test_two_thirds(self):
        assert rounded_percent(2, 3) == 67


class TestDayOfWeekStats:
    def test_all_weekdays_present_monday_first(self):
        stats = day_of_week_stats(CompletionLedger())

        assert list(stats) == [
            "Monday",
            "Tuesday",
            "Wednesday",
            "Thursday",
            "Friday",
            "Saturday",
            "Sunday",
        ]
        assert all(bucket.total == 0 and bucket.rate == 0 for bucket in stats.values())

    def test_buckets_by_weekday(self):
        # 2024-01-01 and 2024-01-08 are Mondays
        ledger = ledger_of([date(2024, 1, 1), date(2024, 1, 2)], failed=[date(2024, 1, 8)])

        stats = day_of_week_stats(ledger)

        assert stats["Monday"].to_dict() == {"completed": 1, "total": 2, "rate": 50}
        assert stats["Tuesday"].to_dict() == {"completed": 1, "total": 1, "rate": 100}
        assert stats["Sunday"].total == 0

    def test_corrupt_raw_entries_are_ignored(self):
        stats = day_of_week_stats({"2024-01-01": "completed", "2024-01-02": "bogus", "oops": "completed"})

        assert stats["Monday"].completed == 1
        assert stats["Tuesday"].total == 0


class TestMonthlyStats:
    def test_keys_are_chronological(self):
        ledger = ledger_of(
            [date(2024, 2, 1), date(2023, 12, 31), date(2024, 1, 15)],
            failed=[date(2024, 1, 16)],
        )

        stats = monthly_stats(ledger)

        assert list(stats) == ["December 2023", "January 2024", "February 2024"]
        assert stats["January 2024"].to_dict() == {"completed": 1, "total": 2, "rate": 50}

    def test_empty_ledger_has_no_months(self):
        assert monthly_stats(None) == {}


class TestBucketLabels:
    def test_labels_do_not_follow_locale(self, monkeypatch):
        german_days = ["Montag", "Dienstag", "Mittwoch", "Donnerstag", "Freitag", "Samstag", "Sonntag"]
        monkeypatch.setattr(calendar, "day_name", german_days)
        monkeypatch.setattr(calendar, "month_name", ["", "Januar"] + ["x"] * 11)
        ledger = ledger_of([date(2024, 1, 1)])

        assert "Monday" in day_of_week_stats(ledger)
        assert list(monthly_stats(ledger)) == ["January 2024"]


class TestStreakRuns:
    def test_runs_split_on_gaps(self):
        ledger = ledger_of([date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 4)])

        runs = extract_streak_runs(ledger)

        assert [run.to_dict() for run in runs] == [
            {"startDate": "2024-01-01", "endDate": "2024-01-02", "length": 2},
            {"startDate": "2024-01-04", "endDate": "2024-01-04", "length": 1},
        ]

    def test_failed_day_splits_run(self):
        ledger = ledger_of([date(2024, 1, 1), date(2024, 1, 3)], failed=[date(2024, 1, 2)])

        assert [run.length for run in extract_streak_runs(ledger)] == [1, 1]

    def test_run_crosses_month_boundary(self):
        ledger = ledger_of([date(2024, 1, 31), date(2024, 2, 1)])

        (run,) = extract_streak_runs(ledger)
        assert run.start_date == date(2024, 1, 31)
        assert run.length == 2

    def test_no_completed_days(self):
        assert extract_streak_runs(ledger_of(failed=[date(2024, 1, 1)])) == []


class TestRangeCompletionRate:
    def test_untracked_gaps_excluded(self):
        ledger = ledger_of([date(2024, 1, 1)], failed=[date(2024, 1, 2)])

        assert range_completion_rate(ledger, "2024-01-01", "2024-01-03") == 50.0

    def test_entries_outside_range_ignored(self):
        ledger = ledger_of([date(2023, 12, 31), date(2024, 1, 2)], failed=[date(2024, 1, 4)])

        assert range_completion_rate(ledger, date(2024, 1, 1), date(2024, 1, 3)) == 100.0

    def test_nothing_tracked_is_zero(self):
        assert range_completion_rate(CompletionLedger(), "2024-01-01", "2024-01-31") == 0.0

    def test_inverted_range_is_empty(self):
        assert date_keys_between("2024-01-05", "2024-01-01") == []
        assert range_completion_rate(ledger_of([date(2024, 1, 3)]), "2024-01-05", "2024-01-01") == 0.0

    def test_range_is_inclusive(self):
        keys = date_keys_between("2024-02-28", "2024-03-01")
        assert [str(k) for k in keys] == ["2024-02-28", "2024-02-29", "2024-03-01"]


class TestMultiHabitRangeRate:
    def test_counts_every_habit_every_day(self):
        habits = [
            HabitState(
                id="a",
                owner_id=OWNER,
                name="A",
                completion_history=ledger_of([date(2024, 1, 1), date(2024, 1, 2)]),
            ),
            HabitState(id="b", owner_id=OWNER, name="B"),
        ]

        assert multi_habit_range_rate(habits, "2024-01-01", "2024-01-02") == 50.0

    def test_no_habits_is_zero(self):
        assert multi_habit_range_rate([], "2024-01-01", "2024-01-07") == 0.0

"""Service module exports."""

from . import (
    export_csv,
    habits,
    period_stats,
    range_stats,
    reminders,
    reports,
    review,
    streaks,
)

__all__ = [
    "export_csv",
    "habits",
    "period_stats",
    "range_stats",
    "reminders",
    "reports",
    "review",
    "streaks",
]

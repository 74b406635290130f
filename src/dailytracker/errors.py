"""Exception taxonomy for the tracker core."""

from __future__ import annotations


class TrackerError(Exception):
    """Base class for all tracker errors."""


class HabitNotFoundError(TrackerError, LookupError):
    """Raised when a habit id does not resolve to a stored habit."""

    def __init__(self, habit_id: str):
        super().__init__(f"Habit {habit_id!r} not found")
        self.habit_id = habit_id


class InvalidDayKeyError(TrackerError, ValueError):
    """Raised for date keys that are not canonical ``YYYY-MM-DD`` calendar dates."""


class InvalidStatusError(TrackerError, ValueError):
    """Raised when a mutation is requested with a status outside the closed enum."""


class ConfigurationError(TrackerError, ValueError):
    """Raised for invalid configuration values."""


__all__ = [
    "ConfigurationError",
    "HabitNotFoundError",
    "InvalidDayKeyError",
    "InvalidStatusError",
    "TrackerError",
]

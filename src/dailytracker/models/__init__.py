"""SQLModel table exports."""

from .habit import Habit, HabitEntry
from .items import Goal, GoodDeed, Reflection

__all__ = [
    "Goal",
    "GoodDeed",
    "Habit",
    "HabitEntry",
    "Reflection",
]

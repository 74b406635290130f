"""Concrete repository implementations using SQLModel."""

from .habit import SQLModelHabitRepository
from .items import SQLModelItemRepository

__all__ = [
    "SQLModelHabitRepository",
    "SQLModelItemRepository",
]

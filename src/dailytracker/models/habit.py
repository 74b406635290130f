"""Habit tracking tables."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return uuid.uuid4().hex


class Habit(SQLModel, table=True):
    """A habit and its cached streak fields."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(default_factory=_new_id, primary_key=True, max_length=64)
    owner_id: str = Field(nullable=False, index=True, max_length=128)
    name: str = Field(nullable=False, max_length=80, index=True)
    description: str = Field(default="", max_length=255)
    status: str = Field(default="untracked", nullable=False, max_length=16)
    streak: int = Field(default=0, nullable=False)
    longest_streak: int = Field(default=0, nullable=False)
    # timezone-aware; the repository converts to and from local wall time
    last_completed: Optional[datetime] = Field(default=None)
    reminder_time: Optional[str] = Field(default=None, max_length=5)
    reminder_days: Optional[dict] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )


class HabitEntry(SQLModel, table=True):
    """Recorded outcome for a habit on one calendar day; no row means untracked."""

    __tablename__: ClassVar[str] = "habit_entry"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=64)
    occurred_on: date = Field(primary_key=True, index=True)
    status: str = Field(nullable=False, max_length=16)

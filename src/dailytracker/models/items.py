"""Goals, good deeds and reflections, counted per period for the dashboard."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Goal(SQLModel, table=True):
    __tablename__: ClassVar[str] = "goal"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(nullable=False, index=True, max_length=128)
    text: str = Field(nullable=False, max_length=500)
    completed: bool = Field(default=False, nullable=False)
    occurred_on: date = Field(default_factory=date.today, nullable=False, index=True)


class GoodDeed(SQLModel, table=True):
    __tablename__: ClassVar[str] = "good_deed"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(nullable=False, index=True, max_length=128)
    text: str = Field(nullable=False, max_length=500)
    occurred_on: date = Field(default_factory=date.today, nullable=False, index=True)


class Reflection(SQLModel, table=True):
    __tablename__: ClassVar[str] = "reflection"

    id: Optional[int] = Field(default=None, primary_key=True)
    owner_id: str = Field(nullable=False, index=True, max_length=128)
    text: str = Field(nullable=False, max_length=2000)
    occurred_on: date = Field(default_factory=date.today, nullable=False, index=True)

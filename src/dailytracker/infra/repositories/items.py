"""SQLModel counts for goals, good deeds and reflections."""

from __future__ import annotations

from datetime import date

from sqlmodel import func, select

from ...models.items import Goal, GoodDeed, Reflection
from ..database import SessionFactory


class SQLModelItemRepository:
    """Counts items per owner over an inclusive ``[start, end]`` date range."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def count_goals(self, owner_id: str, start: date, end: date) -> tuple[int, int]:
        with self.session_factory() as session:
            base = (
                select(func.count())
                .select_from(Goal)
                .where(Goal.owner_id == owner_id)
                .where(Goal.occurred_on >= start)
                .where(Goal.occurred_on <= end)
            )
            total = session.exec(base).one()
            completed = session.exec(base.where(Goal.completed == True)).one()  # noqa: E712
            return int(total), int(completed)

    def count_good_deeds(self, owner_id: str, start: date, end: date) -> int:
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(GoodDeed)
                .where(GoodDeed.owner_id == owner_id)
                .where(GoodDeed.occurred_on >= start)
                .where(GoodDeed.occurred_on <= end)
            )
            return int(session.exec(statement).one())

    def count_reflections(self, owner_id: str, start: date, end: date) -> int:
        with self.session_factory() as session:
            statement = (
                select(func.count())
                .select_from(Reflection)
                .where(Reflection.owner_id == owner_id)
                .where(Reflection.occurred_on >= start)
                .where(Reflection.occurred_on <= end)
            )
            return int(session.exec(statement).one())

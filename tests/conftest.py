"""Pytest configuration and shared fixtures for DailyTracker tests.

Provides a throwaway SQLite database per test, repository fixtures, a frozen
clock, and factories for habits and the other tracked item types.
"""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable

import pytest
from sqlmodel import Session, SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from dailytracker.models import Goal, GoodDeed, Habit, HabitEntry, Reflection  # noqa: F401
from dailytracker.domain import CompletionLedger, FixedClock, HabitState, HabitStatus
from dailytracker.infra.repositories import SQLModelHabitRepository, SQLModelItemRepository

# Friday
NOW = datetime(2024, 3, 15, 9, 30)
TODAY = NOW.date()
OWNER = "owner-1"


def days_ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def ledger_of(completed: Iterable[date] = (), failed: Iterable[date] = ()) -> CompletionLedger:
    ledger = CompletionLedger()
    for day in completed:
        ledger.set(day, HabitStatus.COMPLETED)
    for day in failed:
        ledger.set(day, HabitStatus.FAILED)
    return ledger


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine with all tables created
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """A session for seeding rows directly."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what the repositories expect."""

    @contextmanager
    def factory():
        session = Session(db_engine, expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def habit_repo(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def item_repo(session_factory) -> SQLModelItemRepository:
    return SQLModelItemRepository(session_factory)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def habit_factory(habit_repo):
    """Factory persisting habits through the repository.

    Returns:
        Callable: Function that creates and stores HabitState instances
    """

    counter = {"n": 0}

    def _create_habit(
        name: str = "Test Habit",
        *,
        owner_id: str = OWNER,
        completion_history: CompletionLedger | None = None,
        streak: int = 0,
        longest_streak: int = 0,
        **kwargs,
    ) -> HabitState:
        counter["n"] += 1
        habit = HabitState(
            id=f"habit-{counter['n']}",
            owner_id=owner_id,
            name=name,
            streak=streak,
            longest_streak=longest_streak,
            completion_history=completion_history or CompletionLedger(),
            **kwargs,
        )
        return habit_repo.create(habit)

    return _create_habit


@pytest.fixture
def item_factory(db_session):
    """Factory for goals, good deeds and reflections.

    ``kind`` is one of ``"goal"``, ``"deed"`` or ``"reflection"``.
    """

    models = {"goal": Goal, "deed": GoodDeed, "reflection": Reflection}

    def _create_item(kind: str, *, occurred_on: date = TODAY, owner_id: str = OWNER, **kwargs):
        row = models[kind](owner_id=owner_id, text=f"{kind} text", occurred_on=occurred_on, **kwargs)
        db_session.add(row)
        db_session.commit()
        db_session.refresh(row)
        return row

    return _create_item

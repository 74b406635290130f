"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import BaseConfig
from .domain.clock import Clock, SystemClock
from .domain.repositories import ReminderNotifier
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import SQLModelHabitRepository, SQLModelItemRepository
from .services.habits import HabitService
from .services.period_stats import PeriodStatsService


@dataclass
class AppContext:
    """Wired collaborators; build one per process, never as a module global."""

    config: BaseConfig
    session_factory: SessionFactory
    clock: Clock
    habit_repo: SQLModelHabitRepository
    item_repo: SQLModelItemRepository
    habit_service: HabitService
    stats_service: PeriodStatsService


def create_app_context(
    config: Optional[BaseConfig] = None,
    *,
    clock: Optional[Clock] = None,
    notifier: Optional[ReminderNotifier] = None,
) -> AppContext:
    """Create and initialize the application context."""

    config = config or BaseConfig()
    clock = clock or SystemClock()
    _, session_factory = bootstrap_database(config)

    habit_repo = SQLModelHabitRepository(session_factory)
    item_repo = SQLModelItemRepository(session_factory)

    return AppContext(
        config=config,
        session_factory=session_factory,
        clock=clock,
        habit_repo=habit_repo,
        item_repo=item_repo,
        habit_service=HabitService(
            habit_repo,
            clock=clock,
            notifier=notifier,
            walk_limit=config.STREAK_WALK_LIMIT,
        ),
        stats_service=PeriodStatsService(
            habit_repo,
            item_repo,
            clock=clock,
            week_starts_on=config.WEEK_STARTS_ON,
        ),
    )

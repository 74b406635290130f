"""SQLModel implementation of the habit persistence collaborator."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Iterable, Mapping, Optional

from sqlmodel import Session, col, select

from ...domain.habit import HabitState, ReminderDays
from ...domain.ledger import CompletionLedger, HabitStatus, as_ledger
from ...errors import HabitNotFoundError
from ...models.habit import Habit, HabitEntry
from ..database import SessionFactory

_SCALAR_FIELDS = frozenset(
    {
        "name",
        "description",
        "status",
        "streak",
        "longest_streak",
        "last_completed",
        "reminder_time",
        "reminder_days",
    }
)


def to_stored_datetime(value: datetime) -> datetime:
    """Attach the local timezone to naive local timestamps before writing."""

    return value if value.tzinfo is not None else value.astimezone()


def from_stored_datetime(value: Optional[datetime]) -> Optional[datetime]:
    """Return stored timestamps as naive local wall time, like ``SystemClock``."""

    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def _column_value(value: Any) -> Any:
    if isinstance(value, datetime):
        return to_stored_datetime(value)
    if isinstance(value, HabitStatus):
        return value.value
    if isinstance(value, ReminderDays):
        return value.to_dict()
    return value


def _to_state(row: Habit, entries: Iterable[HabitEntry]) -> HabitState:
    return HabitState(
        id=row.id,
        owner_id=row.owner_id,
        name=row.name,
        description=row.description or "",
        status=HabitStatus.coerce(row.status),
        streak=row.streak,
        longest_streak=row.longest_streak,
        last_completed=from_stored_datetime(row.last_completed),
        reminder_time=row.reminder_time,
        reminder_days=ReminderDays.from_dict(row.reminder_days),
        completion_history=CompletionLedger.from_raw({e.occurred_on: e.status for e in entries}),
    )


class SQLModelHabitRepository:
    """Stores habits in ``habit`` and their ledgers in ``habit_entry``."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def load_habit(self, habit_id: str) -> Optional[HabitState]:
        with self.session_factory() as session:
            row = session.get(Habit, habit_id)
            if row is None:
                return None
            entries = session.exec(select(HabitEntry).where(HabitEntry.habit_id == habit_id)).all()
            return _to_state(row, entries)

    def load_habits_for_owner(self, owner_id: str) -> list[HabitState]:
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(Habit).where(Habit.owner_id == owner_id).order_by(col(Habit.name))
                ).all()
            )
            if not rows:
                return []

            by_habit: dict[str, list[HabitEntry]] = defaultdict(list)
            entries = session.exec(
                select(HabitEntry).where(col(HabitEntry.habit_id).in_([r.id for r in rows]))
            ).all()
            for entry in entries:
                by_habit[entry.habit_id].append(entry)
            return [_to_state(row, by_habit[row.id]) for row in rows]

    def create(self, habit: HabitState) -> HabitState:
        with self.session_factory() as session:
            row = Habit(
                id=habit.id,
                owner_id=habit.owner_id,
                name=habit.name,
                description=habit.description,
                status=habit.status.value,
                streak=habit.streak,
                longest_streak=habit.longest_streak,
                last_completed=_column_value(habit.last_completed),
                reminder_time=habit.reminder_time,
                reminder_days=_column_value(habit.reminder_days),
            )
            session.add(row)
            self._sync_entries(session, habit.id, habit.completion_history)
            session.commit()
        return habit

    def save_habit_fields(self, habit_id: str, fields: Mapping[str, Any]) -> None:
        """Persist a partial update in a single transaction."""

        unknown = set(fields) - _SCALAR_FIELDS - {"completion_history"}
        if unknown:
            raise ValueError(f"Unknown habit fields: {sorted(unknown)}")

        with self.session_factory() as session:
            row = session.get(Habit, habit_id)
            if row is None:
                raise HabitNotFoundError(habit_id)
            for name in _SCALAR_FIELDS & fields.keys():
                setattr(row, name, _column_value(fields[name]))
            if "completion_history" in fields:
                self._sync_entries(session, habit_id, fields["completion_history"])
            row.updated_at = datetime.now(timezone.utc)
            session.add(row)
            session.commit()

    def delete(self, habit_id: str) -> None:
        with self.session_factory() as session:
            for entry in session.exec(select(HabitEntry).where(HabitEntry.habit_id == habit_id)).all():
                session.delete(entry)
            row = session.get(Habit, habit_id)
            if row is not None:
                session.delete(row)
            session.commit()

    @staticmethod
    def _sync_entries(session: Session, habit_id: str, ledger: CompletionLedger | Mapping) -> None:
        """Make ``habit_entry`` rows mirror the ledger exactly."""

        wanted = {day.day: status.value for day, status in as_ledger(ledger).items()}
        existing = {
            entry.occurred_on: entry
            for entry in session.exec(select(HabitEntry).where(HabitEntry.habit_id == habit_id)).all()
        }

        for occurred_on, entry in existing.items():
            if occurred_on not in wanted:
                session.delete(entry)
            elif entry.status != wanted[occurred_on]:
                entry.status = wanted[occurred_on]
                session.add(entry)

        for occurred_on, status in wanted.items():
            if occurred_on not in existing:
                session.add(HabitEntry(habit_id=habit_id, occurred_on=occurred_on, status=status))

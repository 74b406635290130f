"""Per-habit completion ledger keyed by calendar day."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterator, Mapping, Union

from ..errors import InvalidDayKeyError, InvalidStatusError

logger = logging.getLogger(__name__)

_DAY_KEY_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class HabitStatus(str, Enum):
    """Tri-state tracking status for a single day."""

    COMPLETED = "completed"
    FAILED = "failed"
    UNTRACKED = "untracked"

    @classmethod
    def parse(cls, value: "HabitStatus | str") -> "HabitStatus":
        """Strict conversion used on mutation paths."""

        if isinstance(value, HabitStatus):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise InvalidStatusError(f"Unknown habit status: {value!r}") from exc

    @classmethod
    def coerce(cls, value: object) -> "HabitStatus":
        """Lenient conversion for stored data; anything unknown is untracked."""

        if isinstance(value, HabitStatus):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.UNTRACKED

    @property
    def is_tracked(self) -> bool:
        return self is not HabitStatus.UNTRACKED


@dataclass(frozen=True, order=True)
class DayKey:
    """A calendar date with no time component, rendered as ``YYYY-MM-DD``."""

    day: date

    @classmethod
    def parse(cls, raw: str) -> "DayKey":
        text = raw.strip() if isinstance(raw, str) else raw
        if not isinstance(text, str) or not _DAY_KEY_PATTERN.match(text):
            raise InvalidDayKeyError(f"Expected YYYY-MM-DD day key, got {raw!r}")
        try:
            return cls(date.fromisoformat(text))
        except ValueError as exc:
            raise InvalidDayKeyError(f"Not a calendar date: {raw!r}") from exc

    @classmethod
    def of(cls, value: "DayLike") -> "DayKey":
        """Normalize a date, datetime, string or DayKey; time-of-day is dropped."""

        if isinstance(value, DayKey):
            return value
        if isinstance(value, datetime):
            return cls(value.date())
        if isinstance(value, date):
            return cls(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise InvalidDayKeyError(f"Cannot build a day key from {value!r}")

    def shift(self, days: int) -> "DayKey":
        return DayKey(self.day + timedelta(days=days))

    def previous(self) -> "DayKey":
        return self.shift(-1)

    def __str__(self) -> str:
        return self.day.isoformat()


DayLike = Union[DayKey, date, datetime, str]


class CompletionLedger:
    """Mapping from :class:`DayKey` to tracked status.

    Untracked days are represented by key absence, so iterating the ledger
    only ever yields days with a recorded outcome.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Mapping[DayLike, HabitStatus | str] | None = None):
        self._entries: dict[DayKey, HabitStatus] = {}
        for day, status in (entries or {}).items():
            self.set(day, HabitStatus.parse(status))

    @classmethod
    def from_raw(cls, raw: Mapping[object, object] | None, *, strict: bool = False) -> "CompletionLedger":
        """Build a ledger from stored data.

        Unknown status values are read as untracked. Malformed keys raise when
        ``strict`` is set and are skipped with a warning otherwise.
        """

        ledger = cls()
        for key, value in (raw or {}).items():
            try:
                day = DayKey.of(key)  # type: ignore[arg-type]
            except InvalidDayKeyError:
                if strict:
                    raise
                logger.warning("Skipping malformed ledger key", extra={"key": repr(key)})
                continue
            ledger.set(day, HabitStatus.coerce(value))
        return ledger

    def get(self, day: DayLike) -> HabitStatus:
        return self._entries.get(DayKey.of(day), HabitStatus.UNTRACKED)

    def set(self, day: DayLike, status: HabitStatus) -> None:
        key = DayKey.of(day)
        if status is HabitStatus.UNTRACKED:
            self._entries.pop(key, None)
        else:
            self._entries[key] = status

    def is_completed(self, day: DayLike) -> bool:
        return self.get(day) is HabitStatus.COMPLETED

    def items(self) -> list[tuple[DayKey, HabitStatus]]:
        """Tracked entries in chronological order."""

        return sorted(self._entries.items())

    def completed_days(self) -> list[DayKey]:
        return [day for day, status in self.items() if status is HabitStatus.COMPLETED]

    def copy(self) -> "CompletionLedger":
        clone = CompletionLedger()
        clone._entries = dict(self._entries)
        return clone

    def to_dict(self) -> dict[str, str]:
        return {str(day): status.value for day, status in self.items()}

    def __contains__(self, day: object) -> bool:
        try:
            return DayKey.of(day) in self._entries  # type: ignore[arg-type]
        except InvalidDayKeyError:
            return False

    def __iter__(self) -> Iterator[DayKey]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CompletionLedger):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"CompletionLedger({self.to_dict()!r})"


def as_ledger(value: "CompletionLedger | Mapping[object, object] | None") -> CompletionLedger:
    """Accept a ledger or a raw stored mapping, tolerating corrupt entries."""

    if isinstance(value, CompletionLedger):
        return value
    return CompletionLedger.from_raw(value, strict=False)


__all__ = ["CompletionLedger", "DayKey", "DayLike", "HabitStatus", "as_ledger"]

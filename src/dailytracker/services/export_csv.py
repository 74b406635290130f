"""CSV export of habit completion ledgers."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Iterable

from ..domain.habit import HabitState
from ..domain.ledger import as_ledger

HEADERS = ["habit_id", "name", "date", "status"]


def export_ledger_csv(*, habits: Iterable[HabitState], output_path: Path) -> Path:
    """Write one row per tracked day to ``output_path``.

    Rows are ordered by habit id, then date. Returns the path written.
    """

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=HEADERS, quoting=csv.QUOTE_MINIMAL)
        writer.writeheader()
        for habit in sorted(habits, key=lambda h: h.id):
            for day, status in as_ledger(habit.completion_history).items():
                writer.writerow(
                    {
                        "habit_id": habit.id,
                        "name": habit.name,
                        "date": str(day),
                        "status": status.value,
                    }
                )

    return output_path

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from ..table import fields
from ..table.coerce import is_yes, to_date_or_none, to_number_or_zero
from ..table.headers import NOT_FOUND

if TYPE_CHECKING:
    from ..table.context import ColumnMap

"""TaskRecord: logical view over one ledger row.

Every field is optional. A field whose column is absent from the header reads
as unset (None / False / 0) for every row.
"""

__all__ = [
    "TaskRecord",
]


def _cell(cells: Sequence[Any], index: int) -> Any:
    if index == NOT_FOUND or index >= len(cells):
        return None
    return cells[index]


@dataclass(frozen=True)
class TaskRecord:
    row_number: int  # 1-based sheet row
    status: str  # raw status text, "" when empty
    task_id: Any = None
    task_name: Any = None
    notes: Any = None
    due_date: date | datetime | None = None  # None when missing or unparseable
    priority: str = ""
    recurring: bool = False
    repeat_days: float = 0
    last_modified: Any = None
    email_notified: Any = None

    @property
    def status_key(self) -> str:
        return self.status.strip().lower()

    @property
    def is_terminal(self) -> bool:
        return self.status_key in fields.TERMINAL_STATUSES

    @property
    def is_complete(self) -> bool:
        return self.status_key == fields.COMPLETE_STATUS

    @property
    def is_open(self) -> bool:
        """Non-empty status that is not terminal."""
        return bool(self.status_key) and not self.is_terminal

    @classmethod
    def from_row(cls, row_number: int, cells: Sequence[Any], columns: ColumnMap) -> TaskRecord:
        status = _cell(cells, columns.status)
        priority = _cell(cells, columns.priority)
        return cls(
            row_number=row_number,
            status="" if status is None else str(status),
            task_id=_cell(cells, columns.task_id),
            task_name=_cell(cells, columns.task_name),
            notes=_cell(cells, columns.notes),
            due_date=to_date_or_none(_cell(cells, columns.due_date)),
            priority="" if priority is None else str(priority).strip(),
            recurring=is_yes(_cell(cells, columns.recurring)),
            repeat_days=to_number_or_zero(_cell(cells, columns.repeat_days)),
            last_modified=_cell(cells, columns.last_modified),
            email_notified=_cell(cells, columns.email_notified),
        )

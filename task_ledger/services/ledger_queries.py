from __future__ import annotations

from datetime import date, datetime

from ..models.table import Table
from ..models.task_record import TaskRecord
from ..table import fields
from ..table.context import build_table_context, resolve_columns

"""Read-only views over the active task table."""

__all__ = [
    "read_tasks",
    "open_tasks",
    "priority_rank",
]

_PRIORITY_RANKS = {"high": 0, "medium": 1, "low": 2}


def priority_rank(priority: str) -> int:
    return _PRIORITY_RANKS.get(priority.strip().lower(), 3)


def _due_sort_key(due: date | datetime | None) -> tuple[int, datetime]:
    if due is None:
        return (1, datetime.min)
    if not isinstance(due, datetime):
        due = datetime(due.year, due.month, due.day)
    return (0, due)


def read_tasks(table: Table, scan_rows: int = fields.DEFAULT_SCAN_ROWS) -> list[TaskRecord]:
    """Build a TaskRecord for every data row below the detected header."""
    ctx = build_table_context(table, scan_rows)
    columns = resolve_columns(ctx)
    return [
        TaskRecord.from_row(r, table.row(r), columns)
        for r in range(ctx.data_start, table.last_row + 1)
    ]


def open_tasks(table: Table, scan_rows: int = fields.DEFAULT_SCAN_ROWS) -> list[TaskRecord]:
    """Open tasks ordered by priority (high, medium, low, other) then due date.

    Rows with an empty status are not tasks yet and are left out. Tasks without
    a usable due date sort last within their priority.
    """
    tasks = [t for t in read_tasks(table, scan_rows) if t.is_open]
    return sorted(tasks, key=lambda t: (priority_rank(t.priority), _due_sort_key(t.due_date)))

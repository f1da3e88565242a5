from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ..models.table import Table
from . import fields
from .headers import NOT_FOUND, find_column, find_column_loose
from .locator import locate_header_row

"""Table context: the resolved binding between logical fields and columns.

A context is a snapshot of one table's header. It is rebuilt at the start of
every top-level operation because rows and columns may have moved since the
previous read.
"""

__all__ = [
    "TableContext",
    "ColumnMap",
    "build_table_context",
    "resolve_columns",
]


@dataclass(frozen=True)
class TableContext:
    header_row: int  # 1-based
    headers: tuple[Any, ...]  # raw labels as found in the sheet
    last_column: int
    col: Callable[..., int]  # col("Due Date", "Due") -> index or NOT_FOUND

    @property
    def data_start(self) -> int:
        return self.header_row + 1


def build_table_context(table: Table, scan_rows: int = fields.DEFAULT_SCAN_ROWS) -> TableContext:
    """Locate the header of ``table`` and bind a column resolver to it.

    Raises:
        HeaderNotFoundError: propagated from locate_header_row
    """
    header_row, headers = locate_header_row(table, scan_rows)
    labels = tuple(headers)

    def col(*candidates: str) -> int:
        return find_column(labels, candidates)

    return TableContext(
        header_row=header_row,
        headers=labels,
        last_column=table.last_column,
        col=col,
    )


@dataclass(frozen=True)
class ColumnMap:
    """0-based indices of every logical ledger field (NOT_FOUND when absent)."""
    task_name: int = NOT_FOUND
    notes: int = NOT_FOUND
    due_date: int = NOT_FOUND
    status: int = NOT_FOUND
    priority: int = NOT_FOUND
    recurring: int = NOT_FOUND
    repeat_days: int = NOT_FOUND
    task_id: int = NOT_FOUND
    last_modified: int = NOT_FOUND
    email_notified: int = NOT_FOUND

    def has(self, name: str) -> bool:
        return getattr(self, name) != NOT_FOUND


def resolve_columns(ctx: TableContext) -> ColumnMap:
    """Resolve every logical field against the context's header."""
    recurring = ctx.col(*fields.RECURRING)
    if recurring == NOT_FOUND:
        # tolerate typos such as "Recureing? "
        recurring = find_column_loose(ctx.headers, fields.RECURRING_STEM)
    return ColumnMap(
        task_name=ctx.col(*fields.TASK_NAME),
        notes=ctx.col(*fields.NOTES),
        due_date=ctx.col(*fields.DUE_DATE),
        status=ctx.col(*fields.STATUS),
        priority=ctx.col(*fields.PRIORITY),
        recurring=recurring,
        repeat_days=ctx.col(*fields.REPEAT_DAYS),
        task_id=ctx.col(*fields.TASK_ID),
        last_modified=ctx.col(*fields.LAST_MODIFIED),
        email_notified=ctx.col(*fields.EMAIL_NOTIFIED),
    )

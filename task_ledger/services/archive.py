from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import date, datetime, timedelta
from typing import Any

from ..models.archive_result import ArchiveResult, DecisionReason, RowAction, RowDecision
from ..models.table import Table
from ..models.task_record import TaskRecord
from ..table import fields
from ..table.context import ColumnMap, build_table_context, resolve_columns
from ..table.headers import NOT_FOUND

"""Archive & recurrence engine.

Moves every row with a terminal status (complete / cancelled / canceled /
postponed) from the source table to the archive table, stamping a trailing
"Date Archived" cell. Completed rows flagged as recurring are re-created in the
source table as a new "Open" occurrence, due N calendar days later.

Rows are read once, classified bottom-up, and the originals are deleted only
after every archive and regeneration append has been issued, highest position
first. A failure part way through therefore leaves extra copies behind, never
lost rows.
"""

__all__ = [
    "archive_completed_tasks",
    "ensure_archive_header",
    "advance_due_date",
    "next_due_date",
    "regeneration_reason",
]

logger = logging.getLogger(__name__)


def _new_task_id() -> str:
    return str(uuid.uuid4())


def ensure_archive_header(archive: Table, source_headers: tuple[Any, ...] | list[Any]) -> int:
    """Make sure the archive has its header row and return the Date Archived index.

    An empty archive gets the source headers plus "Date Archived". An existing
    header is frozen: only a missing "Date Archived" label is added after its
    last column.

    Returns:
        0-based index of the Date Archived column
    """
    if archive.last_row == 0 or archive.last_column == 0:
        header = list(source_headers) + [fields.DATE_ARCHIVED]
        archive.append_row(header)
        logger.info(f"archive sheet initialized sheet={archive.name} columns={len(header)}")
        return len(header) - 1

    header = archive.row(1)
    if fields.DATE_ARCHIVED not in header:
        archive.set_cell(1, len(header) + 1, fields.DATE_ARCHIVED)
        header = archive.row(1)
        logger.info(f"archive sheet: added '{fields.DATE_ARCHIVED}' column sheet={archive.name}")
    return header.index(fields.DATE_ARCHIVED)


def advance_due_date(due: date | datetime, days: float) -> date | datetime:
    """Move ``due`` forward by whole calendar days (fractions are dropped).

    Raises:
        OverflowError: If the result falls outside the datetime range
    """
    return due + timedelta(days=int(days))


def next_due_date(task: TaskRecord) -> date | datetime | None:
    """Due date of the next occurrence, or None when it cannot be computed."""
    if task.due_date is None or not task.repeat_days > 0:
        return None
    try:
        return advance_due_date(task.due_date, task.repeat_days)
    except OverflowError:
        return None


def regeneration_reason(task: TaskRecord) -> DecisionReason:
    """Decide whether an archived task spawns its next occurrence."""
    if not task.is_complete:
        return DecisionReason.NON_COMPLETE
    if not task.recurring:
        return DecisionReason.NOT_RECURRING
    if not task.repeat_days > 0:
        return DecisionReason.INVALID_INTERVAL
    if task.due_date is None:
        return DecisionReason.MISSING_DUE_DATE
    if next_due_date(task) is None:
        # interval too large to land on a representable date
        return DecisionReason.INVALID_INTERVAL
    return DecisionReason.REGENERATED


def _regenerated_row(
    cells: list[Any],
    task: TaskRecord,
    columns: ColumnMap,
    now: datetime,
    new_task_id: Callable[[], Any],
) -> list[Any]:
    row = list(cells)
    row[columns.status] = fields.OPEN_STATUS
    if columns.due_date != NOT_FOUND:
        row[columns.due_date] = next_due_date(task)
    if columns.task_id != NOT_FOUND:
        row[columns.task_id] = new_task_id()
    if columns.email_notified != NOT_FOUND:
        row[columns.email_notified] = None
    if columns.last_modified != NOT_FOUND:
        row[columns.last_modified] = now
    return row


_REASON_MESSAGES = {
    DecisionReason.NON_COMPLETE: "non-complete status archived (no recurrence)",
    DecisionReason.NOT_RECURRING: "not recurring; archived only",
    DecisionReason.INVALID_INTERVAL: "repeat interval invalid/zero; skipped re-create",
    DecisionReason.MISSING_DUE_DATE: "due date missing/invalid; skipped re-create",
}


def archive_completed_tasks(
    source: Table,
    archive: Table,
    *,
    now: datetime,
    new_task_id: Callable[[], Any] | None = None,
    scan_rows: int = fields.DEFAULT_SCAN_ROWS,
) -> ArchiveResult:
    """Archive terminal rows of ``source`` into ``archive`` and regenerate recurring ones.

    Args:
        source: Active task table (mutated: rows appended and deleted)
        archive: Archive table (mutated: header on first use, rows appended)
        now: Timestamp used for Date Archived and Last Modified
        new_task_id: Factory for the Task ID of regenerated rows (default: uuid4 string)
        scan_rows: Header scan window

    Returns:
        ArchiveResult with counts and one RowDecision per archived row

    Raises:
        HeaderNotFoundError: If the source has no recognizable header
    """
    make_id = new_task_id if new_task_id is not None else _new_task_id
    ctx = build_table_context(source, scan_rows)
    columns = resolve_columns(ctx)

    logger.debug(f"detected headers sheet={source.name} headers={list(ctx.headers)}")
    logger.debug(f"recurring column index={columns.recurring}")

    if columns.status == NOT_FOUND:
        logger.warning(f'sheet "{source.name}": missing "Status" column; aborting')
        return ArchiveResult()

    last_row = source.last_row
    if last_row < ctx.data_start:
        logger.info(f"archived 0 row(s) sheet={source.name} (no data rows)")
        return ArchiveResult()

    # One snapshot; nothing below re-reads the source
    snapshot = source.rows(ctx.data_start, last_row)
    date_archived_idx: int | None = None
    rows_to_delete: list[int] = []
    decisions: list[RowDecision] = []
    regenerated = 0

    for offset in range(len(snapshot) - 1, -1, -1):
        cells = snapshot[offset]
        sheet_row = ctx.data_start + offset
        task = TaskRecord.from_row(sheet_row, cells, columns)
        if not task.is_terminal:
            continue

        if date_archived_idx is None:
            date_archived_idx = ensure_archive_header(archive, ctx.headers)
        archive_copy = list(cells)
        while len(archive_copy) <= date_archived_idx:
            archive_copy.append(None)
        archive_copy[date_archived_idx] = now
        archive.append_row(archive_copy)

        if columns.recurring != NOT_FOUND:
            logger.debug(f"row {sheet_row}: recurring cell raw value = {cells[columns.recurring]!r}")
        logger.debug(
            f"row {sheet_row}: status={task.status_key} recurring={task.recurring} "
            f"repeat_days={task.repeat_days} due_date={task.due_date}"
        )

        reason = regeneration_reason(task)
        if reason is DecisionReason.REGENERATED:
            new_row = _regenerated_row(cells, task, columns, now, make_id)
            source.append_row(new_row)
            regenerated += 1
            action = RowAction.REGENERATED
            next_due = new_row[columns.due_date]
            logger.debug(f"row {sheet_row}: recurring task re-created for {next_due:%Y-%m-%d}")
        else:
            action = RowAction.ARCHIVED
            logger.debug(f"row {sheet_row}: {_REASON_MESSAGES[reason]}")

        decisions.append(
            RowDecision(
                row_number=sheet_row,
                status=task.status_key,
                action=action,
                reason=reason,
                sheet=source.name,
            )
        )
        rows_to_delete.append(sheet_row)

    # Highest position first so pending positions stay valid
    for r in sorted(rows_to_delete, reverse=True):
        source.delete_row(r)

    logger.info(f"archived {len(rows_to_delete)} row(s) sheet={source.name} regenerated={regenerated}")
    return ArchiveResult(archived=len(rows_to_delete), regenerated=regenerated, decisions=decisions)

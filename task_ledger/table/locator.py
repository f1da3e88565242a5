from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..errors import HeaderNotFoundError
from ..models.table import Table
from . import fields
from .headers import NOT_FOUND, find_column

"""Header row detection.

Ledgers often carry a title, instructions or blank rows above the real header,
so the header is searched for instead of assumed to be row 1.
"""

__all__ = [
    "is_header_row",
    "locate_header_row",
]

logger = logging.getLogger(__name__)


def is_header_row(cells: Sequence[Any]) -> bool:
    """A header row has a Status column plus a Due Date or Task column."""
    if find_column(cells, fields.STATUS) == NOT_FOUND:
        return False
    has_due = find_column(cells, fields.DUE_DATE) != NOT_FOUND
    has_task = find_column(cells, fields.TASK_NAME) != NOT_FOUND
    return has_due or has_task


def locate_header_row(table: Table, scan_rows: int = fields.DEFAULT_SCAN_ROWS) -> tuple[int, list[Any]]:
    """Find the first header-like row within the first ``scan_rows`` rows.

    Args:
        table: Table to scan
        scan_rows: Size of the scan window (rows 1..min(scan_rows, last_row))

    Returns:
        (1-based header row position, raw header labels)

    Raises:
        HeaderNotFoundError: If no row in the window qualifies
    """
    for r in range(1, min(scan_rows, table.last_row) + 1):
        cells = table.row(r)
        if is_header_row(cells):
            logger.debug(f"header row detected sheet={table.name} row={r}")
            return r, cells
    raise HeaderNotFoundError(
        f'sheet "{table.name}": no header row with a "Status" column '
        f"in the first {scan_rows} rows"
    )

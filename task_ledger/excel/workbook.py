from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path

from openpyxl import Workbook, load_workbook

from ..errors import DataSheetNotFoundError
from ..models.table import Table
from ..table import fields
from ..table.headers import NOT_FOUND, find_column

"""Workbook I/O for ledger files.

Every worksheet is read into a Table (values only, rows as lists). After the
engine has run, the touched tables are written back over their worksheets; all
other sheets of the workbook are left as they were.
"""

__all__ = [
    "read_workbook",
    "write_tables",
    "find_data_sheet",
    "get_or_create_table",
]


def read_workbook(path: Path) -> dict[str, Table]:
    """Read all worksheets of ``path`` keyed by sheet name (workbook order).

    Formula cells read as the result Excel cached on its last save, so a
    ``=B2+3`` due date is a date here. A formula that was never calculated
    reads as empty.
    """
    wb = load_workbook(path, data_only=True)
    try:
        tables: dict[str, Table] = {}
        for ws in wb.worksheets:
            tables[ws.title] = Table(ws.title, (list(r) for r in ws.iter_rows(values_only=True)))
        return tables
    finally:
        wb.close()


def write_tables(path: Path, tables: Iterable[Table]) -> None:
    """Replace the contents of each table's worksheet (created if missing) and save.

    Only the given sheets are rewritten, with plain values; formulas on every
    other sheet are kept.
    """
    wb: Workbook = load_workbook(path)
    for table in tables:
        if table.name in wb.sheetnames:
            ws = wb[table.name]
            if ws.max_row:
                ws.delete_rows(1, ws.max_row)
        else:
            ws = wb.create_sheet(table.name)
        # explicit coordinates: append() keeps counting from the pre-delete max row
        for r in range(1, table.last_row + 1):
            for c, value in enumerate(table.row(r), start=1):
                ws.cell(row=r, column=c, value=value)
    wb.save(path)
    wb.close()


def find_data_sheet(
    tables: Mapping[str, Table],
    sheet_name: str,
    archive_sheet_name: str | None = None,
) -> Table:
    """Return the configured task sheet, or the first sheet that looks like one.

    Fallback rule: at least two columns, and row 1 carries both a Status and a
    Due Date column. The archive sheet is never picked by the fallback.

    Raises:
        DataSheetNotFoundError: If neither rule finds a sheet
    """
    if sheet_name in tables:
        return tables[sheet_name]
    for name, table in tables.items():
        if name == archive_sheet_name or table.last_column < 2:
            continue
        headers = table.row(1)
        if (
            find_column(headers, fields.STATUS) != NOT_FOUND
            and find_column(headers, fields.DUE_DATE) != NOT_FOUND
        ):
            return table
    raise DataSheetNotFoundError(
        f'could not find the task sheet; set sheet_name to your tab (e.g. "{sheet_name}")'
    )


def get_or_create_table(tables: dict[str, Table], name: str) -> Table:
    if name not in tables:
        tables[name] = Table(name)
    return tables[name]

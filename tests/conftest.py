# Shared pytest fixtures
from __future__ import annotations

import logging
import re
import tempfile
import zipfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest
from openpyxl import Workbook

from task_ledger.logging.init import LOGGER_NAME, reset_logging

FIXED_NOW = datetime(2024, 3, 20, 9, 30, 0)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    """Give every test an unconfigured "task_ledger" logger (caplog needs propagation)."""
    def _reset() -> None:
        reset_logging()
        app_logger = logging.getLogger(LOGGER_NAME)
        for h in app_logger.handlers[:]:
            app_logger.removeHandler(h)
        app_logger.setLevel(logging.NOTSET)
        app_logger.propagate = True
    _reset()
    yield
    _reset()


@pytest.fixture()
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
sheet_name: Form_Responses
archive_sheet_name: Archive
header_scan_rows: 10
timezone: UTC
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "ledger.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def make_excel(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
    """Write raw rows to an .xlsx file, one sheet per key (None = empty cell)."""
    wb = Workbook()
    wb.remove(wb.active)
    for sheet, rows in sheets.items():
        ws = wb.create_sheet(sheet)
        for row in rows:
            ws.append(row)
    if not wb.sheetnames:
        wb.create_sheet("Sheet1")
    wb.save(path)
    return path


@pytest.fixture()
def make_ledger(temp_workdir: Path) -> Callable[..., Path]:
    def _make(name: str = "tasks.xlsx", sheets: dict[str, list[list[object]]] | None = None) -> Path:
        return make_excel(temp_workdir / "data" / name, sheets or {})
    return _make


def store_cached_result(path: Path, formula: str, value: str, sheet_xml: str = "xl/worksheets/sheet1.xml") -> None:
    """Store a computed result beside ``formula`` like Excel does when it saves.

    openpyxl writes formulas without results; ``formula`` is given without "=".
    """
    with zipfile.ZipFile(path) as zf:
        entries = {name: zf.read(name) for name in zf.namelist()}
    pattern = re.compile(rf"(<f>{re.escape(formula)}</f>)(<v\s*/>|<v>\s*</v>)?")
    xml, n = pattern.subn(lambda m: f"{m.group(1)}<v>{value}</v>", entries[sheet_xml].decode("utf-8"), count=1)
    assert n == 1, f"formula {formula!r} not found in {sheet_xml}"
    entries[sheet_xml] = xml.encode("utf-8")
    with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)


@pytest.fixture()
def cache_formula() -> Callable[..., None]:
    return store_cached_result

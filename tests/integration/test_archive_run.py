from __future__ import annotations

from datetime import datetime
from pathlib import Path

from openpyxl import load_workbook

from task_ledger.cli import main as cli_main
from task_ledger.config.loader import load_config
from task_ledger.services.orchestrator import process_all

"""End-to-end runs over real workbooks: archive, regenerate, re-run."""

HEADERS = [
    "Timestamp", "Task ID", "Task", "Notes", "Due Date", "Status", "Priority",
    "Recurring?", "Repeat Every", "Last Modified", "Email Notified",
]


def _rows(path: Path, sheet: str) -> list[list[object]]:
    wb = load_workbook(path)
    return [list(r) for r in wb[sheet].iter_rows(values_only=True)]


def _ledger_rows() -> list[list[object]]:
    stamp = datetime(2024, 2, 1, 8, 0)
    return [
        ["Team task tracker"],
        ["Fill in one row per task"],
        HEADERS,
        [stamp, "TASK-1", "one", None, datetime(2024, 3, 4), "Open", "High", None, None, None, None],
        [stamp, "TASK-2", "two", "weekly sync", datetime(2024, 3, 1), "Complete", "Medium", True, 14, stamp, stamp],
        [stamp, "TASK-3", "three", None, datetime(2024, 3, 8), "In Progress", "Low", None, None, None, None],
        [stamp, "TASK-4", "four", None, datetime(2024, 3, 2), "cancelled", "Low", "yes", 7, None, None],
        [stamp, "TASK-5", "five", None, None, "Open", None, None, None, None, None],
    ]


def test_full_run_then_idempotent_rerun(write_config: Path, make_ledger, now: datetime) -> None:
    path = make_ledger("tracker.xlsx", {"Form_Responses": _ledger_rows()})
    config = load_config(write_config)

    first = process_all(config, now=now)
    assert (first.success_files, first.failed_files) == (1, 0)
    assert first.total_archived_rows == 2
    assert first.total_regenerated_rows == 1

    source = _rows(path, "Form_Responses")
    assert source[:3] == [r + [None] * (11 - len(r)) for r in _ledger_rows()[:3]]
    assert [r[2] for r in source[3:]] == ["one", "three", "five", "two"]
    regenerated = source[-1]
    assert regenerated[1] not in (None, "TASK-2")
    assert regenerated[4] == datetime(2024, 3, 15)
    assert regenerated[5] == "Open"
    assert regenerated[3] == "weekly sync"
    assert regenerated[9] == now
    assert regenerated[10] is None

    archive = _rows(path, "Archive")
    assert archive[0] == HEADERS + ["Date Archived"]
    assert [(r[2], r[5], r[-1]) for r in archive[1:]] == [
        ("four", "cancelled", now),
        ("two", "Complete", now),
    ]

    second = process_all(config, now=datetime(2024, 3, 21, 9, 0))
    assert second.total_archived_rows == 0
    assert _rows(path, "Form_Responses") == source
    assert _rows(path, "Archive") == archive


def test_completing_a_regenerated_task_chains_the_recurrence(write_config: Path, make_ledger, now: datetime) -> None:
    path = make_ledger(
        "chain.xlsx",
        {"Form_Responses": [["Task", "Due", "Status", "Recurring", "Repeat (days)"], ["water plants", datetime(2024, 3, 1), "Complete", "x", 3]]},
    )
    config = load_config(write_config)
    process_all(config, now=now)

    wb = load_workbook(path)
    ws = wb["Form_Responses"]
    assert ws["B2"].value == datetime(2024, 3, 4)
    ws["C2"] = "complete"
    wb.save(path)

    process_all(config, now=now)
    assert _rows(path, "Form_Responses")[1] == ["water plants", datetime(2024, 3, 7), "Open", "x", 3]
    assert len(_rows(path, "Archive")) == 3


def test_existing_archive_without_date_column(write_config: Path, make_ledger, now: datetime) -> None:
    path = make_ledger(
        "legacy.xlsx",
        {
            "Form_Responses": [["Task", "Status", "Due Date"], ["new", "Complete", None]],
            "Archive": [["Task", "Status"], ["old", "Complete"]],
        },
    )
    process_all(load_config(write_config), now=now)
    assert _rows(path, "Archive") == [
        ["Task", "Status", "Date Archived"],
        ["old", "Complete", None],
        ["new", "Complete", now],
    ]


def test_cli_partial_failure_exit_code(write_config: Path, make_ledger, capsys) -> None:
    make_ledger("good.xlsx", {"Form_Responses": [["Task", "Status"], ["a", "Complete"]]})
    make_ledger("bad.xlsx", {"Form_Responses": [["no header here"]]})
    code = cli_main([])
    out = capsys.readouterr().out
    assert code == 2
    assert "ERROR bad.xlsx:" in out
    assert "SUMMARY files=2/2 success=1 failed=1 archived=1 regenerated=0" in out

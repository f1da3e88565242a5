from __future__ import annotations

from datetime import UTC, datetime

import pytest

from task_ledger.models.processing_result import ProcessingResult
from task_ledger.services.summary import render_summary_line


def _result(elapsed: float, success: int = 1, failed: int = 0, archived: int = 3, regenerated: int = 1):
    start = datetime(2024, 1, 1, tzinfo=UTC)
    return ProcessingResult(
        success_files=success,
        failed_files=failed,
        total_archived_rows=archived,
        total_regenerated_rows=regenerated,
        start_time=start,
        end_time=start,
        elapsed_seconds=elapsed,
    )


def test_render_summary_line_fields():
    line = render_summary_line(_result(2.0, success=2, failed=1))
    assert line == "SUMMARY files=3/3 success=2 failed=1 archived=3 regenerated=1 elapsed_sec=2"


@pytest.mark.parametrize(
    "elapsed,expected",
    [(0, "0"), (3.0, "3"), (0.84, "0.84"), (0.000123, "0.000123"), (1.23456, "1.235")],
)
def test_render_summary_elapsed_format(elapsed, expected):
    assert render_summary_line(_result(elapsed)).endswith(f"elapsed_sec={expected}")


def test_render_summary_no_files():
    line = render_summary_line(_result(0, success=0, archived=0, regenerated=0))
    assert line.startswith("SUMMARY files=0/0 success=0 failed=0 archived=0 regenerated=0")

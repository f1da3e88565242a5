from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.processing_result import FileStat, FileStatus

"""Progress display with tqdm (TTY only).

A single bar counts ledger workbooks and carries running archived/failed
tallies as its postfix. When stdout is not a terminal (cron, CI, pytest
capture) no bar is created so the labeled log lines stay clean.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


class ProgressTracker:
    """Per-workbook progress for one archive run.

    The tallies are kept whether or not a bar is shown.
    """

    def __init__(self, total_files: int, *, description: str = "Archiving ledgers") -> None:
        self.description = description
        self.archived_rows = 0
        self.failed_files = 0
        self.pbar: TqdmType[Any] | None = None
        if is_tty_enabled():
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="ledger",
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def start_file(self, file_path: Path) -> None:
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} ({file_path.name})")

    def record(self, stat: FileStat) -> None:
        """Count a finished workbook and advance the bar."""
        self.archived_rows += stat.archived_rows
        if stat.status is FileStatus.FAILED:
            self.failed_files += 1
        if self.pbar is None:
            return
        self.pbar.set_postfix(archived=self.archived_rows, failed=self.failed_files)
        self.pbar.update(1)
        self.pbar.set_description(self.description)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

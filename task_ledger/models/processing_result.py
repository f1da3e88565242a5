from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Processing result models: per-workbook stats and the run-level aggregate."""


class FileStatus(Enum):
    """Outcome of one ledger workbook: success | failed."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class FileStat:
    file_name: str
    status: FileStatus
    sheet_name: str | None  # selected task sheet (None when selection failed)
    archived_rows: int
    regenerated_rows: int
    elapsed_seconds: float
    error: str | None = None  # failure reason summary


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for the SUMMARY line."""
    success_files: int
    failed_files: int
    total_archived_rows: int
    total_regenerated_rows: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files

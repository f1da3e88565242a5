from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.archive_result import RowDecision

"""Decision log buffering.

One JSON line per archived row (file, sheet, row, status, action, reason).
Records are buffered for the whole run and written in a single flush to
``logs/archive-YYYYMMDD-HHMMSS.log`` (UTC stamp, decided on first access).
"""

__all__ = [
    "DecisionLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class DecisionLogBuffer:
    """In-memory buffer of RowDecision records. flush() appends JSON Lines."""

    def __init__(self, logs_dir: Path = LOGS_DIR) -> None:
        self._records: list[RowDecision] = []
        self._logs_dir = logs_dir
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._logs_dir / f"archive-{stamp}.log"
        return self._file_path

    def extend(self, records: list[RowDecision]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the file path, or None when nothing was buffered."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp

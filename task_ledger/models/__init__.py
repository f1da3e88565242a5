"""Domain models for the task ledger.

Table is the position-addressed worksheet every operation reads and mutates;
TaskRecord is the logical view over one of its rows.
"""

from .archive_result import ArchiveResult, DecisionReason, RowAction, RowDecision
from .processing_result import FileStat, FileStatus, ProcessingResult
from .table import Table
from .task_record import TaskRecord

__all__ = [
    # Worksheet and row views
    "Table",
    "TaskRecord",
    # Archive pass results
    "ArchiveResult",
    "DecisionReason",
    "RowAction",
    "RowDecision",
    # Run-level results
    "FileStat",
    "FileStatus",
    "ProcessingResult",
]

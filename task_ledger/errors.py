from __future__ import annotations

"""Fatal ledger errors.

Both are raised before any table is mutated, so a caller that sees one can
report it and stop without cleanup.
"""

__all__ = [
    "LedgerError",
    "HeaderNotFoundError",
    "DataSheetNotFoundError",
]


class LedgerError(Exception):
    """Base class for ledger failures that abort the whole operation."""


class HeaderNotFoundError(LedgerError):
    """Raised when no row in the scan window looks like the task header."""


class DataSheetNotFoundError(LedgerError):
    """Raised when no worksheet in the workbook looks like a task table."""

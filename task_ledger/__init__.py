"""Task ledger: header-tolerant archive & recurrence engine for spreadsheet task lists."""

__version__ = "0.1.0"

from __future__ import annotations

"""Logical ledger fields and the header spellings accepted for each."""

TASK_NAME = ("Task", "Task Name")
NOTES = ("Notes", "Note")
DUE_DATE = ("Due Date", "Due")
STATUS = ("Status",)
PRIORITY = ("Priority",)
RECURRING = ("Recurring?", "Recurring")
RECURRING_STEM = "recur"
REPEAT_DAYS = ("Repeat Every", "Repeat (days)", "Repeat Days", "Frequency (days)")
TASK_ID = ("Task ID", "TaskID")
LAST_MODIFIED = ("Last Modified", "Updated", "Modified")
EMAIL_NOTIFIED = ("Email Notified", "Notified")

# Archive-only column appended after the source headers
DATE_ARCHIVED = "Date Archived"

TERMINAL_STATUSES = frozenset({"complete", "cancelled", "canceled", "postponed"})
COMPLETE_STATUS = "complete"
# Status written on a regenerated occurrence
OPEN_STATUS = "Open"

DEFAULT_SCAN_ROWS = 10

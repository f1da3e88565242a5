from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum

"""Results of one archive & recurrence pass."""

__all__ = [
    "RowAction",
    "DecisionReason",
    "RowDecision",
    "ArchiveResult",
]


class RowAction(Enum):
    ARCHIVED = "archived"
    REGENERATED = "archived_and_regenerated"


class DecisionReason(Enum):
    """Why an archived row was, or was not, regenerated."""
    REGENERATED = "regenerated"
    NON_COMPLETE = "non_complete"  # cancelled / canceled / postponed
    NOT_RECURRING = "not_recurring"
    INVALID_INTERVAL = "invalid_interval"
    MISSING_DUE_DATE = "missing_due_date"


@dataclass(frozen=True)
class RowDecision:
    row_number: int  # sheet row at the time of the scan
    status: str
    action: RowAction
    reason: DecisionReason
    sheet: str = ""
    file: str = ""

    def to_json_line(self) -> str:
        return json.dumps(
            {
                "file": self.file,
                "sheet": self.sheet,
                "row": self.row_number,
                "status": self.status,
                "action": self.action.value,
                "reason": self.reason.value,
            },
            ensure_ascii=False,
        )


@dataclass(frozen=True)
class ArchiveResult:
    archived: int = 0
    regenerated: int = 0
    decisions: list[RowDecision] = field(default_factory=list)

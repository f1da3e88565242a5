from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Any

import pandas as pd

"""Best-effort cell coercion.

Cells hold whatever the sheet author typed. Nothing here raises: values that
cannot be read as the wanted type become "absent" (None), zero or False.
"""

__all__ = [
    "YES_TOKENS",
    "is_yes",
    "to_number_or_zero",
    "to_date_or_none",
    "cell_text",
]

YES_TOKENS = frozenset({"yes", "y", "true", "1", "x", "✓", "checked"})

# Leading numeric prefix, so "14 days" reads as 14
_NUMBER_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def cell_text(value: Any) -> str:
    """Render a cell as text the way a spreadsheet shows it (1.0 -> "1")."""
    if value is None or value is False:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_yes(value: Any) -> bool:
    """True for a checked checkbox or an affirmative token."""
    if value is True:
        return True
    return cell_text(value).strip().lower() in YES_TOKENS


def to_number_or_zero(value: Any) -> float:
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else 0
    match = _NUMBER_PREFIX.match(cell_text(value).strip())
    if match is None:
        return 0
    number = float(match.group(0))
    return number if math.isfinite(number) else 0


def to_date_or_none(value: Any) -> date | datetime | None:
    """Return a date/datetime for date cells or parseable text, else None."""
    if value is pd.NaT:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, (datetime, date)):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = pd.to_datetime(value.strip(), errors="coerce")
    if pd.isna(parsed):
        return None
    result = parsed.to_pydatetime()
    # Excel cells cannot hold an offset
    return result.replace(tzinfo=None) if result.tzinfo is not None else result

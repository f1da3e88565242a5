from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

"""Header normalization and column lookup.

Labels authored by hand drift ("Due Date", "due-date", "Due Date:"), so every
comparison goes through normalize_header(). Synonyms are never guessed; callers
pass the accepted spellings explicitly as candidate lists.
"""

__all__ = [
    "NOT_FOUND",
    "normalize_header",
    "build_header_map",
    "find_column",
    "find_column_loose",
]

# Returned by the lookups when no header matches (0-based indices otherwise)
NOT_FOUND = -1

_SEPARATORS = re.compile(r"[\s\-_/\\?.:;,()\[\]{}]+")
_WHITESPACE = re.compile(r"\s+")


def normalize_header(label: Any) -> str:
    """Canonicalize a header label for comparison.

    >>> normalize_header(" DUE_DATE ")
    'duedate'
    >>> normalize_header("Repeat (days)")
    'repeatdays'
    >>> normalize_header(None)
    ''
    """
    text = "" if label is None else str(label)
    text = _SEPARATORS.sub(" ", text.lower()).strip()
    return _WHITESPACE.sub("", text)


def build_header_map(headers: Sequence[Any]) -> dict[str, int]:
    """Map normalized label -> column index. Later duplicates win."""
    return {normalize_header(h): i for i, h in enumerate(headers)}


def find_column(headers: Sequence[Any], candidates: Sequence[str]) -> int:
    """Return the index of the first candidate present in ``headers``.

    Args:
        headers: Raw header labels of one row
        candidates: Accepted spellings, in priority order

    Returns:
        0-based column index, or NOT_FOUND
    """
    header_map = build_header_map(headers)
    for candidate in candidates:
        key = normalize_header(candidate)
        if key in header_map:
            return header_map[key]
    return NOT_FOUND


def find_column_loose(headers: Sequence[Any], stem: str) -> int:
    """Return the first header (physical order) containing ``stem``.

    Fallback for columns that tend to be misspelled, e.g. "Recureing? ".
    First physical match wins; there is no best-match scoring.
    """
    key = normalize_header(stem)
    for i, header in enumerate(headers):
        normalized = normalize_header(header)
        if normalized.startswith(key) or key in normalized:
            return i
    return NOT_FOUND

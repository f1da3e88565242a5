from __future__ import annotations

import pytest

from task_ledger.table.headers import (
    NOT_FOUND,
    build_header_map,
    find_column,
    find_column_loose,
    normalize_header,
)


@pytest.mark.parametrize(
    "label",
    ["Due Date", "due-date", " DUE_DATE ", "Due Date:", "due.date", "Due   Date", "(Due) [Date]"],
)
def test_normalize_header_spelling_drift(label):
    assert normalize_header(label) == "duedate"


def test_normalize_header_non_string_and_empty():
    assert normalize_header(None) == ""
    assert normalize_header("") == ""
    assert normalize_header(42) == "42"
    assert normalize_header("  ?? ") == ""


def test_normalize_header_keeps_other_characters():
    # '#' and '&' are not separators
    assert normalize_header("Task #") == "task#"
    assert normalize_header("R&D") == "r&d"


def test_build_header_map_last_duplicate_wins():
    header_map = build_header_map(["Status", "Task", "status"])
    assert header_map["status"] == 2
    assert header_map["task"] == 1


def test_find_column_is_case_whitespace_punctuation_insensitive():
    for headers in (["Task", "Due Date"], ["Task", "due-date"], ["Task", " DUE_DATE "]):
        assert find_column(headers, ["Due Date"]) == 1


def test_find_column_candidate_order_is_priority():
    headers = ["Due", "Task", "Due Date"]
    assert find_column(headers, ["Due Date", "Due"]) == 2
    assert find_column(headers, ["Due", "Due Date"]) == 0


def test_find_column_not_found_is_sentinel():
    assert find_column(["Task", "Status"], ["Priority"]) == NOT_FOUND
    assert find_column([], ["Status"]) == NOT_FOUND
    assert find_column(["Status"], []) == NOT_FOUND


def test_find_column_exact_only_no_synonyms():
    # "Deadline" is a synonym, not a spelling variant
    assert find_column(["Deadline"], ["Due Date", "Due"]) == NOT_FOUND


def test_find_column_loose_contains_and_prefix():
    headers = ["Task", "Status", "Recureing? ", "Repeat Every"]
    assert find_column_loose(headers, "recur") == 2
    assert find_column_loose(["Is it recurring"], "recur") == 0


def test_find_column_loose_first_physical_match_wins():
    headers = ["Task", "Recurrence notes", "Recurring?"]
    assert find_column_loose(headers, "recur") == 1


def test_find_column_loose_not_found():
    assert find_column_loose(["Task", "Status"], "recur") == NOT_FOUND

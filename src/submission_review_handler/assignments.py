"""Reviewer assignments read from the Review Tracker.

The tracker has a "Submission ID" column and one checkbox column per reviewer, headed
"Reviewer: <email>". Read with unformatted values, a ticked checkbox comes back as the boolean
True; only that counts as an assignment (the strings "TRUE" or "x" do not).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence

from .submission_schema import normalize_cell, normalize_row

SUBMISSION_ID_HEADER = "Submission ID"
REVIEWER_HEADER_PREFIX = "Reviewer:"
REVIEWER_HEADER_RE = re.compile(
    r"^reviewer:\s*(?P<email>[^\s@]+@[^\s@]+\.[^\s@]+)\s*$", re.IGNORECASE
)


@dataclass(frozen=True)
class ReviewerColumn:
    index: int
    email: str


@dataclass(frozen=True)
class Assignment:
    submission_id: str
    reviewer_email: str


@dataclass(frozen=True)
class ReviewTask:
    submission_id: str
    folder_id: str
    folder_url: str
    document_id: str
    document_url: str


def reviewer_header(email: str) -> str:
    return f"{REVIEWER_HEADER_PREFIX} {email.strip()}"


def find_submission_id_column(header: Sequence[Any]) -> int:
    for idx, h in enumerate(normalize_row(header)):
        if h == SUBMISSION_ID_HEADER:
            return idx
    raise ValueError(f"Header row has no {SUBMISSION_ID_HEADER!r} column")


def find_reviewer_columns(header: Sequence[Any]) -> list[ReviewerColumn]:
    cols = []
    for idx, h in enumerate(normalize_row(header)):
        m = REVIEWER_HEADER_RE.match(h)
        if m:
            cols.append(ReviewerColumn(index=idx, email=m.group("email")))
    return cols


def extract_assignments(values: Sequence[Sequence[Any]]) -> list[Assignment]:
    """(submission_id, reviewer) pairs in row order, then column order."""
    if not values:
        return []

    header = values[0]
    id_col = find_submission_id_column(header)
    reviewer_cols = find_reviewer_columns(header)

    out: list[Assignment] = []
    for row in values[1:]:
        if id_col >= len(row):
            continue
        submission_id = normalize_cell(row[id_col])
        if not submission_id:
            continue
        for col in reviewer_cols:
            if col.index < len(row) and row[col.index] is True:
                out.append(Assignment(submission_id, col.email))
    return out


def duplicate_submission_rows(values: Sequence[Sequence[Any]]) -> dict[str, list[int]]:
    """submission_id -> sheet row numbers, for ids that appear on more than one row."""
    if not values:
        return {}

    id_col = find_submission_id_column(values[0])
    rows: dict[str, list[int]] = {}
    for row_num, row in enumerate(values[1:], start=2):
        submission_id = normalize_cell(row[id_col]) if id_col < len(row) else ""
        if submission_id:
            rows.setdefault(submission_id, []).append(row_num)
    return {sid: nums for sid, nums in rows.items() if len(nums) > 1}


def group_tasks_by_reviewer(
    pairs: Iterable[tuple[str, ReviewTask]],
) -> dict[str, list[ReviewTask]]:
    """email -> tasks, reviewers in first-seen order."""
    grouped: dict[str, list[ReviewTask]] = {}
    for email, task in pairs:
        grouped.setdefault(email, []).append(task)
    return grouped

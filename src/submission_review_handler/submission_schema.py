from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

SUBMISSION_ID_PREFIX = "SUB"
SUBMISSION_ID_WIDTH = 5

_SUBMISSION_ID_RE = re.compile(rf"^{SUBMISSION_ID_PREFIX}(\d+)$")


def normalize_cell(v: Any, *, keep_bool: bool = False) -> Any:
    """Coerce to string and trim whitespace; None becomes empty string."""
    if v is None:
        return ""
    if keep_bool and isinstance(v, bool):
        return v
    return str(v).strip()


def normalize_row(row: Sequence[Any], *, keep_bool: bool = False) -> list[Any]:
    """Normalize all values in a row (trim-by-default)."""
    return [normalize_cell(v, keep_bool=keep_bool) for v in row]


def format_submission_id(number: int) -> str:
    """1 -> 'SUB00001'. Numbers wider than the padding are kept whole."""
    if number < 1:
        raise ValueError(f"Submission number must be >= 1, got {number}")
    return f"{SUBMISSION_ID_PREFIX}{number:0{SUBMISSION_ID_WIDTH}d}"


def parse_submission_number(name: str) -> Optional[int]:
    """'SUB00005' -> 5, 'SUB000123' -> 123. Anything else -> None."""
    m = _SUBMISSION_ID_RE.match((name or "").strip())
    if not m:
        return None
    return int(m.group(1))


@dataclass(frozen=True)
class Submission:
    submission_id: str
    row_num: int
    title: str = ""
    group: str = ""
    fields: dict[str, str] = field(default_factory=dict)


def find_header_index(header: Sequence[Any], name: str) -> int:
    """0-based index of an exact (trimmed) header; ValueError if absent."""
    wanted = name.strip()
    for idx, h in enumerate(normalize_row(header)):
        if h == wanted:
            return idx
    raise ValueError(f"Header not found: {name!r}")


def is_blank_row(row: Sequence[Any]) -> bool:
    return not any(normalize_row(row))


def parse_submission_row(
    header: Sequence[Any],
    row: Sequence[Any],
    *,
    row_num: int,
    title_column: Optional[str] = None,
    group_column: Optional[str] = None,
    ignore_columns: Sequence[str] = (),
) -> Submission:
    """Parse one sheet row. The submission id is positional: sheet row 2 is SUB00001."""
    h = normalize_row(header)
    r = normalize_row(row)
    r += [""] * (len(h) - len(r))

    title_idx = find_header_index(h, title_column) if title_column else None
    group_idx = find_header_index(h, group_column) if group_column else None
    ignored = {c.strip() for c in ignore_columns}

    return Submission(
        submission_id=format_submission_id(row_num - 1),  # header is row 1
        row_num=row_num,
        title=r[title_idx] if title_idx is not None else "",
        group=r[group_idx] if group_idx is not None else "",
        fields={name: r[i] for i, name in enumerate(h) if name and name not in ignored},
    )


def parse_submission_rows(
    values: Sequence[Sequence[Any]],
    *,
    title_column: Optional[str] = None,
    group_column: Optional[str] = None,
    ignore_columns: Sequence[str] = (),
) -> list[Submission]:
    """Parse a full sheet (header row first). Blank rows keep their position but are not returned."""
    if not values:
        return []

    header = values[0]
    return [
        parse_submission_row(
            header,
            row,
            row_num=row_num,
            title_column=title_column,
            group_column=group_column,
            ignore_columns=ignore_columns,
        )
        for row_num, row in enumerate(values[1:], start=2)
        if not is_blank_row(row)
    ]

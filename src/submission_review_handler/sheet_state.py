from __future__ import annotations

from .submission_schema import normalize_cell


def ensure_column(sheet, header: str) -> int:
    """Return the 1-based column of `header` in row 1, appending it after the last header if missing."""
    existing = [normalize_cell(v) for v in sheet.row_values(1)]
    if header in existing:
        return existing.index(header) + 1

    col = len(existing) + 1
    if sheet.col_count < col:
        sheet.resize(cols=col)
    sheet.update_cell(1, col, header)
    return col


def iter_rows_missing(sheet, col: int):
    """Yield (row_num, row_values) for data rows whose `col` cell is empty."""
    values = sheet.get_all_values()
    if len(values) <= 1:
        return
    for idx, row in enumerate(values[1:], start=2):  # header is row 1
        while len(row) < col:
            row.append("")
        if (row[col - 1] or "").strip():
            continue
        yield idx, row


def write_cell(sheet, row_num: int, col: int, value: str) -> None:
    sheet.update_cell(row_num, col, value)

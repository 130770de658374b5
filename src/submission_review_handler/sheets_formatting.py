from __future__ import annotations

from typing import Any


def apply_header_formatting(ws: Any) -> None:
    """Bold, shaded header row that stays frozen while scrolling."""
    ws.format(
        "1:1",
        {
            "textFormat": {"bold": True},
            "backgroundColor": {"red": 0.9, "green": 0.9, "blue": 0.9},
        },
    )
    ws.freeze(rows=1)


def checkbox_validation_request(
    sheet_id: int, *, start_row: int, end_row: int, start_col: int, end_col: int
) -> dict[str, Any]:
    """`setDataValidation` request turning a 0-based, end-exclusive grid range into checkboxes."""
    return {
        "setDataValidation": {
            "range": {
                "sheetId": sheet_id,
                "startRowIndex": start_row,
                "endRowIndex": end_row,
                "startColumnIndex": start_col,
                "endColumnIndex": end_col,
            },
            "rule": {"condition": {"type": "BOOLEAN"}, "strict": True},
        }
    }

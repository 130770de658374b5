from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from .assignments import SUBMISSION_ID_HEADER, reviewer_header
from .drive_ops import find_or_create_spreadsheet, folder_url, list_child_folders
from .sheets_formatting import apply_header_formatting, checkbox_validation_request
from .submission_schema import normalize_cell, parse_submission_number, parse_submission_rows

log = logging.getLogger(__name__)

TRACKER_HEADERS = [SUBMISSION_ID_HEADER, "Title", "Folder"]


@dataclass(frozen=True)
class SubmissionFolder:
    submission_id: str
    number: int
    folder_id: str


def collect_submission_folders(drive, root_folder_id: str) -> list[SubmissionFolder]:
    """Submission folders directly under the root or one group folder below it, by number."""
    found: list[SubmissionFolder] = []
    for child in list_child_folders(drive, root_folder_id):
        number = parse_submission_number(child["name"])
        if number is not None:
            found.append(SubmissionFolder(child["name"], number, child["id"]))
            continue
        for grandchild in list_child_folders(drive, child["id"]):
            number = parse_submission_number(grandchild["name"])
            if number is not None:
                found.append(
                    SubmissionFolder(grandchild["name"], number, grandchild["id"])
                )

    found.sort(key=lambda f: (f.number, f.submission_id))
    return found


def build_tracker_rows(
    folders: Sequence[SubmissionFolder],
    *,
    titles: dict[str, str],
    existing_ids: set[str],
    reviewer_count: int,
) -> list[list[Any]]:
    """One row per folder not already tracked; reviewer checkboxes start unchecked."""
    rows: list[list[Any]] = []
    seen = set(existing_ids)
    for f in folders:
        if f.submission_id in seen:
            if f.submission_id not in existing_ids:
                log.warning(
                    "Duplicate submission folder skipped: submission_id=%s folder_id=%s",
                    f.submission_id,
                    f.folder_id,
                )
            continue
        seen.add(f.submission_id)
        rows.append(
            [f.submission_id, titles.get(f.submission_id, ""), folder_url(f.folder_id)]
            + [False] * reviewer_count
        )
    return rows


def _load_titles(
    g, submission_sheet_id: str, worksheet_name: Optional[str], title_column: str
) -> dict[str, str]:
    ss = g.gspread.open_by_key(submission_sheet_id)
    sheet = ss.worksheet(worksheet_name) if worksheet_name else ss.sheet1
    subs = parse_submission_rows(sheet.get_all_values(), title_column=title_column)
    return {s.submission_id: s.title for s in subs}


def build_review_tracker(
    *,
    g,
    root_folder_id: str,
    reviewers: Sequence[str],
    tracker_name: str = "Review Tracker",
    submission_sheet_id: Optional[str] = None,
    worksheet_name: Optional[str] = None,
    title_column: Optional[str] = None,
) -> str:
    """Find or create the Review Tracker in the root folder and bring it up to date.

    Re-running only appends missing reviewer columns and submission rows, so existing
    checkbox state is kept.
    """
    tracker_id, created = find_or_create_spreadsheet(
        g.drive, parent_folder_id=root_folder_id, name=tracker_name
    )
    ws = g.gspread.open_by_key(tracker_id).sheet1

    log.info(
        "Review tracker: tracker_id=%s created=%s reviewers=%s",
        tracker_id,
        created,
        len(reviewers),
    )

    header = [normalize_cell(v) for v in ws.row_values(1)]
    if created or not header:
        header = list(TRACKER_HEADERS)
        ws.update(range_name="A1", values=[header])
        apply_header_formatting(ws)

    new_reviewer_headers = [
        reviewer_header(email)
        for email in dict.fromkeys(r.strip() for r in reviewers if r.strip())
        if reviewer_header(email) not in header
    ]
    if new_reviewer_headers:
        header = header + new_reviewer_headers
        if ws.col_count < len(header):
            ws.resize(cols=len(header))
        ws.update(range_name="A1", values=[header])
        log.info("Added reviewer columns: %s", new_reviewer_headers)

    id_column = ws.col_values(1)
    existing_ids = {normalize_cell(v) for v in id_column[1:] if normalize_cell(v)}

    titles: dict[str, str] = {}
    if submission_sheet_id:
        titles = _load_titles(
            g, submission_sheet_id, worksheet_name, title_column or "Title"
        )

    folders = collect_submission_folders(g.drive, root_folder_id)
    rows = build_tracker_rows(
        folders,
        titles=titles,
        existing_ids=existing_ids,
        reviewer_count=len(header) - len(TRACKER_HEADERS),
    )
    if rows:
        ws.append_rows(rows, value_input_option="USER_ENTERED")

    total_rows = max(len(id_column), 1) + len(rows)
    if len(header) > len(TRACKER_HEADERS) and total_rows > 1:
        ws.spreadsheet.batch_update(
            {
                "requests": [
                    checkbox_validation_request(
                        ws.id,
                        start_row=1,
                        end_row=total_rows,
                        start_col=len(TRACKER_HEADERS),
                        end_col=len(header),
                    )
                ]
            }
        )

    log.info(
        "Finished review tracker: tracker_id=%s rows_added=%s total_submissions=%s",
        tracker_id,
        len(rows),
        total_rows - 1,
    )
    return tracker_id

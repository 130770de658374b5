from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from .docs_ops import DEFAULT_IMAGE_PATTERN, document_is_empty, write_summary_document
from .drive_ops import (
    DOCUMENT_MIME,
    create_document,
    document_url,
    ensure_subfolder,
    find_file_in_folder,
    folder_url,
)
from .sheet_state import ensure_column, iter_rows_missing, write_cell
from .submission_schema import is_blank_row, parse_submission_row

log = logging.getLogger(__name__)

FOLDER_LINK_HEADER = "Folder Link"
SUMMARY_DOC_HEADER = "Summary Doc"
UNGROUPED_FOLDER_NAME = "Ungrouped"


@dataclass
class SyncReport:
    created_folders: list[str] = field(default_factory=list)
    created_documents: list[str] = field(default_factory=list)
    refilled_documents: list[str] = field(default_factory=list)
    skipped: list[int] = field(default_factory=list)
    failed: list[int] = field(default_factory=list)


def summary_document_name(submission_id: str, suffix: str) -> str:
    return f"{submission_id} {suffix}".strip()


def sync_submission_folders(
    *,
    g,
    submission_sheet_id: str,
    worksheet_name: Optional[str],
    root_folder_id: str,
    title_column: Optional[str] = None,
    group_column: Optional[str] = None,
    image_pattern: str = DEFAULT_IMAGE_PATTERN,
    summary_suffix: str = "Summary",
) -> SyncReport:
    """Create a folder and summary document for every submission row not yet linked.

    A row is done once its Folder Link cell is written, which happens last. A failed row is
    logged and left unlinked so the next run picks it up. Existing folders and documents are
    reused; a document left empty by an earlier failed write is filled in.
    """
    ss = g.gspread.open_by_key(submission_sheet_id)
    sheet = ss.worksheet(worksheet_name) if worksheet_name else ss.sheet1

    link_col = ensure_column(sheet, FOLDER_LINK_HEADER)
    doc_col = ensure_column(sheet, SUMMARY_DOC_HEADER)
    header = sheet.row_values(1)
    report = SyncReport()

    log.info(
        "Starting folder sync: sheet_id=%s worksheet=%s root_folder_id=%s link_col=%s doc_col=%s",
        submission_sheet_id,
        worksheet_name,
        root_folder_id,
        link_col,
        doc_col,
    )

    for row_num, row in iter_rows_missing(sheet, link_col):
        if is_blank_row(row):
            report.skipped.append(row_num)
            continue

        log.info("Processing row %s", row_num)
        try:
            sub = parse_submission_row(
                header,
                row,
                row_num=row_num,
                title_column=title_column,
                group_column=group_column,
                ignore_columns=(FOLDER_LINK_HEADER, SUMMARY_DOC_HEADER),
            )

            parent_id = root_folder_id
            if group_column:
                group_name = sub.group or UNGROUPED_FOLDER_NAME
                parent_id, _ = ensure_subfolder(g.drive, root_folder_id, group_name)

            folder_id, folder_created = ensure_subfolder(
                g.drive, parent_id, sub.submission_id
            )
            if folder_created:
                report.created_folders.append(sub.submission_id)

            log.info(
                "Row %s folder: submission_id=%s folder_id=%s created=%s",
                row_num,
                sub.submission_id,
                folder_id,
                folder_created,
            )

            doc_name = summary_document_name(sub.submission_id, summary_suffix)
            existing = find_file_in_folder(
                g.drive, folder_id, doc_name, mime_type=DOCUMENT_MIME
            )
            if existing:
                doc_id = existing["id"]
                if document_is_empty(g.docs, doc_id):
                    write_summary_document(
                        g.docs, doc_id, sub, image_pattern=image_pattern
                    )
                    report.refilled_documents.append(sub.submission_id)
                    log.info(
                        "Row %s summary was empty, filled: document_id=%s",
                        row_num,
                        doc_id,
                    )
                else:
                    log.info("Row %s summary exists: document_id=%s", row_num, doc_id)
            else:
                doc_id = create_document(
                    g.drive, parent_folder_id=folder_id, name=doc_name
                )
                write_summary_document(
                    g.docs, doc_id, sub, image_pattern=image_pattern
                )
                report.created_documents.append(sub.submission_id)
                log.info("Row %s summary created: document_id=%s", row_num, doc_id)

            write_cell(sheet, row_num, doc_col, document_url(doc_id))
            # Folder link last: it marks the row as synced
            write_cell(sheet, row_num, link_col, folder_url(folder_id))

        except Exception:
            report.failed.append(row_num)
            log.exception("Row %s failed to sync", row_num)

    log.info(
        "Finished folder sync: folders_created=%s documents_created=%s documents_refilled=%s "
        "skipped=%s failed=%s",
        len(report.created_folders),
        len(report.created_documents),
        len(report.refilled_documents),
        len(report.skipped),
        len(report.failed),
    )
    return report

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence

from gspread.utils import ValueRenderOption

from .assignments import (
    Assignment,
    ReviewTask,
    duplicate_submission_rows,
    extract_assignments,
    group_tasks_by_reviewer,
)
from .drive_ops import (
    DOCUMENT_MIME,
    AmbiguousFolderError,
    FolderNotFoundError,
    document_url,
    find_file_in_folder,
    find_folders_by_name,
    folder_url,
    grant_reader_access,
)
from .mail_ops import build_task_message, send_message

log = logging.getLogger(__name__)


@dataclass
class NotifyReport:
    assignments: list[Assignment] = field(default_factory=list)
    granted: list[Assignment] = field(default_factory=list)
    skipped: list[Assignment] = field(default_factory=list)
    ambiguous: list[str] = field(default_factory=list)
    notified: list[str] = field(default_factory=list)


def task_document_name(submission_id: str, suffix: str) -> str:
    return f"{submission_id} {suffix}".strip()


def resolve_submission_folders(
    drive, submission_ids: Sequence[str], *, strict: bool, report: NotifyReport
) -> dict[str, dict]:
    """submission_id -> folder. Exact name match, first match wins.

    In strict mode a missing or ambiguous folder raises before anything is shared or sent.
    """
    resolved: dict[str, dict] = {}
    for submission_id in dict.fromkeys(submission_ids):
        matches = find_folders_by_name(drive, submission_id)
        if not matches:
            if strict:
                raise FolderNotFoundError(f"No folder named {submission_id!r}")
            log.warning("No folder for submission: submission_id=%s", submission_id)
            continue

        if len(matches) > 1:
            ids = [m["id"] for m in matches]
            report.ambiguous.append(submission_id)
            if strict:
                raise AmbiguousFolderError(submission_id, ids)
            log.warning(
                "Ambiguous folder name, using first match: submission_id=%s folder_ids=%s",
                submission_id,
                ids,
            )

        resolved[submission_id] = matches[0]
    return resolved


def notify_reviewers(
    *,
    g,
    tracker_sheet_id: str,
    worksheet_name: Optional[str] = None,
    task_document_suffix: str = "Summary",
    subject: str = "Submissions assigned to you for review",
    sender: str = "me",
    strict: bool = False,
    dry_run: bool = False,
) -> NotifyReport:
    """Share each assigned submission folder with its reviewer and mail every reviewer their tasks.

    Access is granted read-only and silently; the single notification per reviewer is our own
    e-mail. `dry_run` skips sending only. With `strict` any failure aborts the run, otherwise the
    affected assignment is logged and skipped.
    """
    ss = g.gspread.open_by_key(tracker_sheet_id)
    ws = ss.worksheet(worksheet_name) if worksheet_name else ss.sheet1
    values = ws.get_all_values(value_render_option=ValueRenderOption.unformatted)

    for submission_id, rows in duplicate_submission_rows(values).items():
        log.warning(
            "Submission listed on several tracker rows, merging: submission_id=%s rows=%s",
            submission_id,
            rows,
        )
    # A reviewer ticked on two rows of the same submission gets one task.
    report = NotifyReport(assignments=list(dict.fromkeys(extract_assignments(values))))
    log.info(
        "Starting reviewer notification: tracker_id=%s assignments=%s strict=%s dry_run=%s",
        tracker_sheet_id,
        len(report.assignments),
        strict,
        dry_run,
    )

    folders = resolve_submission_folders(
        g.drive,
        [a.submission_id for a in report.assignments],
        strict=strict,
        report=report,
    )

    pairs: list[tuple[str, ReviewTask]] = []
    for a in report.assignments:
        folder = folders.get(a.submission_id)
        if folder is None:
            report.skipped.append(a)
            continue

        try:
            if grant_reader_access(g.drive, folder["id"], a.reviewer_email):
                report.granted.append(a)
                log.info(
                    "Granted access: submission_id=%s reviewer=%s folder_id=%s",
                    a.submission_id,
                    a.reviewer_email,
                    folder["id"],
                )

            doc_name = task_document_name(a.submission_id, task_document_suffix)
            doc = find_file_in_folder(
                g.drive, folder["id"], doc_name, mime_type=DOCUMENT_MIME
            )
            if doc is None:
                raise FileNotFoundError(
                    f"No document {doc_name!r} in folder {folder['id']}"
                )

            pairs.append(
                (
                    a.reviewer_email,
                    ReviewTask(
                        submission_id=a.submission_id,
                        folder_id=folder["id"],
                        folder_url=folder_url(folder["id"]),
                        document_id=doc["id"],
                        document_url=document_url(doc["id"]),
                    ),
                )
            )
        except Exception:
            if strict:
                raise
            report.skipped.append(a)
            log.exception(
                "Assignment failed: submission_id=%s reviewer=%s",
                a.submission_id,
                a.reviewer_email,
            )

    for email, tasks in group_tasks_by_reviewer(pairs).items():
        if dry_run:
            log.info(
                "Dry run, not sending: reviewer=%s tasks=%s",
                email,
                [t.submission_id for t in tasks],
            )
            continue

        try:
            body = build_task_message(
                to=email, sender=sender, subject=subject, tasks=tasks
            )
            send_message(g.gmail, body)
            report.notified.append(email)
            log.info("Notified reviewer: reviewer=%s tasks=%s", email, len(tasks))
        except Exception:
            if strict:
                raise
            log.exception("Failed to notify reviewer: reviewer=%s", email)

    log.info(
        "Finished reviewer notification: granted=%s skipped=%s ambiguous=%s notified=%s",
        len(report.granted),
        len(report.skipped),
        len(report.ambiguous),
        len(report.notified),
    )
    return report

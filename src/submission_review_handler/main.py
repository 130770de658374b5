from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .config import Settings, settings
from .folder_sync import sync_submission_folders
from .google_clients import GoogleAPI
from .review_tracker import build_review_tracker
from .reviewer_workflow import notify_reviewers


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="submission-review-handler",
        description="Submission folders, Review Tracker and reviewer notifications",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser(
        "sync", help="Create submission folders and summary documents"
    )

    tracker = subparsers.add_parser("tracker", help="Build or update the Review Tracker")
    tracker.add_argument(
        "--reviewer",
        action="append",
        default=None,
        help="Reviewer e-mail (repeatable; defaults to REVIEWERS)",
    )

    notify = subparsers.add_parser(
        "notify", help="Grant reviewers access and send their task lists"
    )
    notify.add_argument("--tracker-id", default=None, help="Defaults to TRACKER_SHEET_ID")
    notify.add_argument("--strict", action="store_true", default=None)
    notify.add_argument("--dry-run", action="store_true", default=None)

    return parser


def run(args: argparse.Namespace, cfg: Settings, g) -> int:
    if args.command == "sync":
        report = sync_submission_folders(
            g=g,
            submission_sheet_id=cfg.submission_sheet_id,
            worksheet_name=cfg.submission_worksheet,
            root_folder_id=cfg.submissions_root_folder_id,
            title_column=cfg.title_column,
            group_column=cfg.group_column,
            image_pattern=cfg.image_column_pattern,
            summary_suffix=cfg.summary_document_suffix,
        )
        return 1 if report.failed else 0

    if args.command == "tracker":
        build_review_tracker(
            g=g,
            root_folder_id=cfg.submissions_root_folder_id,
            reviewers=args.reviewer or cfg.reviewers,
            tracker_name=cfg.tracker_name,
            submission_sheet_id=cfg.submission_sheet_id or None,
            worksheet_name=cfg.submission_worksheet,
            title_column=cfg.title_column,
        )
        return 0

    if args.command == "notify":
        notify_reviewers(
            g=g,
            tracker_sheet_id=args.tracker_id or cfg.tracker_sheet_id,
            task_document_suffix=cfg.summary_document_suffix,
            subject=cfg.notification_subject,
            sender=cfg.notification_sender,
            strict=cfg.strict if args.strict is None else args.strict,
            dry_run=cfg.dry_run if args.dry_run is None else args.dry_run,
        )
        return 0

    return 2


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    g = GoogleAPI.from_settings(settings)
    return run(args, settings, g)


if __name__ == "__main__":
    sys.exit(main())

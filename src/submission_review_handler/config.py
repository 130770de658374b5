"""Configuration for the submission review jobs."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes")


class Settings(BaseModel):
    """Application settings."""

    # Service account key; optionally impersonate a Workspace user (needed for Gmail)
    google_credentials_path: Path = Path(
        os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json")
    )
    google_delegated_user: Optional[str] = os.getenv("GOOGLE_DELEGATED_USER") or None

    # Master submission sheet
    submission_sheet_id: str = os.getenv("SUBMISSION_SHEET_ID", "")
    submission_worksheet: str = os.getenv("SUBMISSION_WORKSHEET", "Form Responses 1")
    title_column: str = os.getenv("TITLE_COLUMN", "Project Title")
    group_column: Optional[str] = os.getenv("GROUP_COLUMN") or None
    image_column_pattern: str = os.getenv(
        "IMAGE_COLUMN_PATTERN", r"(?i)\b(image|photo|picture|screenshot)s?\b"
    )

    # Drive layout
    submissions_root_folder_id: str = os.getenv("SUBMISSIONS_ROOT_FOLDER_ID", "")
    summary_document_suffix: str = os.getenv("SUMMARY_DOCUMENT_SUFFIX", "Summary")

    # Review Tracker
    tracker_name: str = os.getenv("TRACKER_NAME", "Review Tracker")
    tracker_sheet_id: str = os.getenv("TRACKER_SHEET_ID", "")
    reviewers: list[str] = [
        r.strip() for r in os.getenv("REVIEWERS", "").split(",") if r.strip()
    ]

    # Reviewer notification
    notification_subject: str = os.getenv(
        "NOTIFICATION_SUBJECT", "Submissions assigned to you for review"
    )
    notification_sender: str = os.getenv("NOTIFICATION_SENDER", "me")
    strict: bool = _env_bool("STRICT")
    dry_run: bool = _env_bool("DRY_RUN")

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()

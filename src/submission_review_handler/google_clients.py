"""Authenticated Google Workspace clients."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import gspread
from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from .config import Settings

log = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/documents",
    "https://www.googleapis.com/auth/gmail.send",
]


def load_credentials(settings: Settings) -> Credentials:
    path = settings.google_credentials_path
    if not path.exists():
        raise FileNotFoundError(
            f"Service account key not found at {path}. "
            "Set GOOGLE_CREDENTIALS_PATH or download a key from Google Cloud Console."
        )
    creds = Credentials.from_service_account_file(str(path), scopes=SCOPES)
    if settings.google_delegated_user:
        log.debug("Using delegated credentials: subject=%s", settings.google_delegated_user)
        creds = creds.with_subject(settings.google_delegated_user)
    return creds


@dataclass
class GoogleAPI:
    """The services each job needs, built from one set of credentials."""

    gspread: Any
    drive: Any
    docs: Any
    gmail: Any

    @classmethod
    def from_settings(cls, settings: Settings) -> "GoogleAPI":
        creds = load_credentials(settings)
        return cls(
            gspread=gspread.authorize(creds),
            drive=build("drive", "v3", credentials=creds, cache_discovery=False),
            docs=build("docs", "v1", credentials=creds, cache_discovery=False),
            gmail=build("gmail", "v1", credentials=creds, cache_discovery=False),
        )

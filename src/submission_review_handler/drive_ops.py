from __future__ import annotations

import logging
import re
from typing import Optional

log = logging.getLogger(__name__)

_DRIVE_LINK_RE = re.compile(
    r"^https?://(?:"
    r"drive\.google\.com/(?:file/d/|drive/folders/|(?:open|uc)\?(?:[^#]*&)?id=)"
    r"|docs\.google\.com/[a-z]+/d/"
    r")(?P<id>[-\w]{25,})"
)
_BARE_DRIVE_ID_RE = re.compile(r"^(?P<id>[-\w]{25,})$")

FOLDER_MIME = "application/vnd.google-apps.folder"
DOCUMENT_MIME = "application/vnd.google-apps.document"
SPREADSHEET_MIME = "application/vnd.google-apps.spreadsheet"


class FolderLookupError(LookupError):
    """A submission folder could not be resolved to exactly one Drive folder."""


class FolderNotFoundError(FolderLookupError):
    pass


class AmbiguousFolderError(FolderLookupError):
    def __init__(self, name: str, folder_ids: list[str]):
        self.name = name
        self.folder_ids = folder_ids
        super().__init__(
            f"{len(folder_ids)} folders named {name!r}: {', '.join(folder_ids)}"
        )


def extract_drive_file_id(url_or_id: str) -> Optional[str]:
    """Return the id of a Drive link or a bare id, else None.

    Accepted links: ``drive.google.com/file/d/<id>``, ``drive.google.com/drive/folders/<id>``,
    ``drive.google.com/open?id=<id>``, ``drive.google.com/uc?...id=<id>`` and
    ``docs.google.com/<kind>/d/<id>``. Other URLs are not Drive files, whatever they contain.
    """
    value = (url_or_id or "").strip()
    if not value:
        return None
    m = _DRIVE_LINK_RE.search(value) or _BARE_DRIVE_ID_RE.match(value)
    return m.group("id") if m else None


def folder_url(folder_id: str) -> str:
    return f"https://drive.google.com/drive/folders/{folder_id}"


def document_url(document_id: str) -> str:
    return f"https://docs.google.com/document/d/{document_id}/edit"


def spreadsheet_url(spreadsheet_id: str) -> str:
    return f"https://docs.google.com/spreadsheets/d/{spreadsheet_id}/edit"


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


def _list_files(drive, q: str, fields: str = "files(id,name,mimeType)") -> list[dict]:
    """Run a files.list query across all pages."""
    out: list[dict] = []
    page_token = None
    while True:
        resp = (
            drive.files()
            .list(
                q=q,
                spaces="drive",
                fields=f"nextPageToken,{fields}",
                pageSize=1000,
                pageToken=page_token,
                supportsAllDrives=True,
                includeItemsFromAllDrives=True,
            )
            .execute()
        )
        out.extend(resp.get("files", []))
        page_token = resp.get("nextPageToken")
        if not page_token:
            return out


def find_folders_by_name(
    drive, name: str, *, parent_folder_id: Optional[str] = None
) -> list[dict]:
    """All non-trashed folders named exactly `name`, in API order."""
    q = f"mimeType='{FOLDER_MIME}' and name='{_escape(name)}' and trashed=false"
    if parent_folder_id:
        q += f" and '{parent_folder_id}' in parents"
    # Drive name matching is case-insensitive for some locales; keep exact matches only.
    return [f for f in _list_files(drive, q) if f.get("name") == name]


def list_child_folders(drive, parent_folder_id: str) -> list[dict]:
    q = (
        f"mimeType='{FOLDER_MIME}' "
        f"and '{parent_folder_id}' in parents "
        "and trashed=false"
    )
    return _list_files(drive, q)


def ensure_subfolder(drive, parent_folder_id: str, folder_name: str) -> tuple[str, bool]:
    """Return (folder_id, created) for (parent/folder_name). Create if missing."""
    existing = find_folders_by_name(
        drive, folder_name, parent_folder_id=parent_folder_id
    )
    if existing:
        if len(existing) > 1:
            log.warning(
                "Multiple folders named %s under %s; using first: ids=%s",
                folder_name,
                parent_folder_id,
                [f["id"] for f in existing],
            )
        return existing[0]["id"], False

    created = (
        drive.files()
        .create(
            body={
                "name": folder_name,
                "mimeType": FOLDER_MIME,
                "parents": [parent_folder_id],
            },
            fields="id",
            supportsAllDrives=True,
        )
        .execute()
    )
    log.info("Created folder: name=%s parent=%s id=%s", folder_name, parent_folder_id, created["id"])
    return created["id"], True


def find_file_in_folder(
    drive, folder_id: str, name: str, *, mime_type: Optional[str] = None
) -> Optional[dict]:
    """First non-trashed file named exactly `name` directly inside `folder_id`."""
    q = f"name='{_escape(name)}' and '{folder_id}' in parents and trashed=false"
    if mime_type:
        q += f" and mimeType='{mime_type}'"
    for f in _list_files(drive, q):
        if f.get("name") == name:
            return f
    return None


def _create_file(drive, *, parent_folder_id: str, name: str, mime_type: str) -> str:
    created = (
        drive.files()
        .create(
            body={"name": name, "mimeType": mime_type, "parents": [parent_folder_id]},
            fields="id",
            supportsAllDrives=True,
        )
        .execute()
    )
    return created["id"]


def create_document(drive, *, parent_folder_id: str, name: str) -> str:
    """Create an empty Google Doc inside a folder and return its id."""
    return _create_file(
        drive, parent_folder_id=parent_folder_id, name=name, mime_type=DOCUMENT_MIME
    )


def find_or_create_spreadsheet(
    drive, *, parent_folder_id: str, name: str
) -> tuple[str, bool]:
    """Find or create a Google Sheet named `name` in the given folder. Returns (id, created)."""
    existing = find_file_in_folder(
        drive, parent_folder_id, name, mime_type=SPREADSHEET_MIME
    )
    if existing:
        return existing["id"], False
    return (
        _create_file(
            drive,
            parent_folder_id=parent_folder_id,
            name=name,
            mime_type=SPREADSHEET_MIME,
        ),
        True,
    )


def list_permissions(drive, file_id: str) -> list[dict]:
    permissions: list[dict] = []
    page_token = None
    while True:
        resp = (
            drive.permissions()
            .list(
                fileId=file_id,
                fields="nextPageToken,permissions(id,type,role,emailAddress)",
                pageSize=100,
                pageToken=page_token,
                supportsAllDrives=True,
            )
            .execute()
        )
        permissions.extend(resp.get("permissions") or [])
        page_token = resp.get("nextPageToken")
        if not page_token:
            return permissions


def grant_reader_access(drive, file_id: str, email: str) -> bool:
    """Give `email` read access to a file or folder without Drive's own notification e-mail.

    Returns False if the user already holds any role on it.
    """
    wanted = email.strip().lower()
    for p in list_permissions(drive, file_id):
        if (p.get("emailAddress") or "").lower() == wanted:
            log.debug(
                "Access already present: file_id=%s email=%s role=%s",
                file_id,
                email,
                p.get("role"),
            )
            return False

    drive.permissions().create(
        fileId=file_id,
        body={"type": "user", "role": "reader", "emailAddress": email},
        sendNotificationEmail=False,
        fields="id",
        supportsAllDrives=True,
    ).execute()
    return True

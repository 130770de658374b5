"""Summary documents for submissions.

A summary is built as one Docs API `batchUpdate`: a heading with the submission id and title,
followed by a `Label: value` paragraph per non-empty field. Columns whose header matches the
image pattern and hold Drive links are rendered as inline images instead of text.

Docs indices count UTF-16 code units, and every request is applied in order, so the builder
tracks a running insertion index starting at 1 (the start of the body).
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .drive_ops import extract_drive_file_id
from .submission_schema import Submission

log = logging.getLogger(__name__)

DEFAULT_IMAGE_PATTERN = r"(?i)\b(image|photo|picture|screenshot)s?\b"
IMAGE_WIDTH_PT = 400


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def is_image_column(header: str, pattern: str) -> bool:
    return bool(pattern) and re.search(pattern, header or "") is not None


def drive_image_uri(file_id: str) -> str:
    return f"https://drive.google.com/uc?export=view&id={file_id}"


def _image_file_ids(value: str) -> list[str]:
    """Form upload cells hold one or more comma-separated Drive links."""
    ids = []
    for part in (value or "").split(","):
        file_id = extract_drive_file_id(part.strip())
        if file_id:
            ids.append(file_id)
    return ids


class _RequestBuilder:
    def __init__(self) -> None:
        self.index = 1
        self.requests: list[dict[str, Any]] = []
        self.styles: list[dict[str, Any]] = []

    def text(self, text: str, *, bold: bool = False, style: str = "") -> None:
        start = self.index
        self.requests.append(
            {"insertText": {"location": {"index": start}, "text": text}}
        )
        self.index += _utf16_len(text)
        if bold:
            self.styles.append(
                {
                    "updateTextStyle": {
                        "range": {"startIndex": start, "endIndex": self.index},
                        "textStyle": {"bold": True},
                        "fields": "bold",
                    }
                }
            )
        if style:
            self.styles.append(
                {
                    "updateParagraphStyle": {
                        "range": {"startIndex": start, "endIndex": self.index},
                        "paragraphStyle": {"namedStyleType": style},
                        "fields": "namedStyleType",
                    }
                }
            )

    def image(self, uri: str) -> None:
        self.requests.append(
            {
                "insertInlineImage": {
                    "location": {"index": self.index},
                    "uri": uri,
                    "objectSize": {
                        "width": {"magnitude": IMAGE_WIDTH_PT, "unit": "PT"}
                    },
                }
            }
        )
        self.index += 1
        self.text("\n")


def build_summary_requests(
    submission: Submission, *, image_pattern: str = DEFAULT_IMAGE_PATTERN
) -> list[dict[str, Any]]:
    b = _RequestBuilder()

    heading = submission.submission_id
    if submission.title:
        heading += f": {submission.title}"
    b.text(f"{heading}\n", style="HEADING_1")

    for label, value in submission.fields.items():
        if not value:
            continue

        image_ids = _image_file_ids(value) if is_image_column(label, image_pattern) else []
        if image_ids:
            b.text(f"{label}\n", bold=True)
            for file_id in image_ids:
                b.image(drive_image_uri(file_id))
            continue

        b.text(f"{label}: ", bold=True)
        b.text(f"{value}\n")

    # Style ranges apply after all text is in place.
    return b.requests + b.styles


def document_is_empty(docs, document_id: str) -> bool:
    """True if the body holds no text besides newlines and no inline objects.

    A freshly created document has a single paragraph containing only "\\n".
    """
    doc = docs.documents().get(documentId=document_id).execute()
    for block in (doc.get("body") or {}).get("content") or []:
        if "table" in block:
            return False
        for element in (block.get("paragraph") or {}).get("elements") or []:
            if "inlineObjectElement" in element:
                return False
            text = (element.get("textRun") or {}).get("content") or ""
            if text.strip():
                return False
    return True


def write_summary_document(
    docs,
    document_id: str,
    submission: Submission,
    *,
    image_pattern: str = DEFAULT_IMAGE_PATTERN,
) -> None:
    requests = build_summary_requests(submission, image_pattern=image_pattern)
    log.debug(
        "Writing summary document: document_id=%s submission_id=%s requests=%s",
        document_id,
        submission.submission_id,
        len(requests),
    )
    docs.documents().batchUpdate(
        documentId=document_id, body={"requests": requests}
    ).execute()

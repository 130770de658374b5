from __future__ import annotations

import base64
import html
import logging
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Sequence

from .assignments import ReviewTask

log = logging.getLogger(__name__)


def _task_text(tasks: Sequence[ReviewTask]) -> str:
    lines = ["You have been assigned the following submissions to review:", ""]
    for t in tasks:
        lines.append(f"- {t.submission_id}: {t.document_url}")
        lines.append(f"  Folder: {t.folder_url}")
    return "\n".join(lines) + "\n"


def _task_html(tasks: Sequence[ReviewTask]) -> str:
    items = "".join(
        f'<li><a href="{html.escape(t.document_url)}">{html.escape(t.submission_id)}</a>'
        f' (<a href="{html.escape(t.folder_url)}">folder</a>)</li>'
        for t in tasks
    )
    return (
        "<p>You have been assigned the following submissions to review:</p>"
        f"<ul>{items}</ul>"
    )


def build_task_message(
    *, to: str, sender: str, subject: str, tasks: Sequence[ReviewTask]
) -> dict:
    """Gmail API `users.messages.send` body with plain-text and HTML task lists."""
    msg = MIMEMultipart("alternative")
    msg["To"] = to
    if sender and sender != "me":
        msg["From"] = sender
    msg["Subject"] = subject
    msg.attach(MIMEText(_task_text(tasks), "plain", "utf-8"))
    msg.attach(MIMEText(_task_html(tasks), "html", "utf-8"))
    raw = base64.urlsafe_b64encode(msg.as_bytes()).decode("ascii")
    return {"raw": raw}


def send_message(gmail, body: dict, *, user_id: str = "me") -> str:
    sent = gmail.users().messages().send(userId=user_id, body=body).execute()
    log.debug("Sent message: id=%s", sent.get("id"))
    return sent.get("id", "")

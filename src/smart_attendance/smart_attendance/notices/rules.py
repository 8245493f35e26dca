"""Notice and attachment rules shared by the API and the local fallback."""
from __future__ import annotations

import base64
import mimetypes
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping

from ..common.validators import require_non_empty
from ..core.constants import MAX_ATTACHMENTS_BYTES
from ..core.exceptions import ValidationError
from .model import Attachment, Notice

PDF_MIME = "application/pdf"


def _is_pdf(attachment: Attachment) -> bool:
    if attachment.data.startswith("data:"):
        return attachment.data.startswith(f"data:{PDF_MIME}")
    return attachment.name.lower().endswith(".pdf")


def validate_attachments(raw: Any) -> tuple[Attachment, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise ValidationError("Attachments must be a list")

    out: list[Attachment] = []
    total = 0
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("Attachment must be an object")
        try:
            att = Attachment.from_dict(item)
        except (TypeError, ValueError):
            raise ValidationError("Attachment size must be a number")
        require_non_empty(att.name, "Attachment name")
        if not _is_pdf(att):
            raise ValidationError(f'Only PDF files are allowed: "{att.name}"')
        total += att.size
        if total > MAX_ATTACHMENTS_BYTES:
            raise ValidationError("Total attachment size limit (5MB) exceeded")
        out.append(att)
    return tuple(out)


def build_attachment(path: str | Path) -> Attachment:
    """Read a file into the inline attachment shape (base64 data URL)."""
    path = Path(path)
    raw = path.read_bytes()
    mime = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    data = f"data:{mime};base64,{base64.b64encode(raw).decode('ascii')}"
    return Attachment(name=path.name, data=data, size=len(raw))


def build_notice(payload: Mapping[str, Any], *, now_ms: int) -> Notice:
    return Notice(
        notice_id=str(payload.get("id") or f"notice-{now_ms}"),
        teacher_id=require_non_empty(payload.get("teacherId"), "Teacher ID"),
        teacher_name=require_non_empty(payload.get("teacherName"), "Teacher name"),
        title=require_non_empty(payload.get("title"), "Title"),
        content=str(payload.get("content") or ""),
        attachments=validate_attachments(payload.get("attachments")),
        timestamp=int(payload.get("timestamp") or now_ms),
    )


def apply_notice_changes(notice: Notice, changes: Mapping[str, Any]) -> Notice:
    updates: dict[str, Any] = {}
    if "title" in changes:
        updates["title"] = require_non_empty(changes["title"], "Title")
    if "content" in changes:
        updates["content"] = str(changes["content"] or "")
    if "teacherName" in changes:
        updates["teacher_name"] = require_non_empty(changes["teacherName"], "Teacher name")
    if "attachments" in changes:
        updates["attachments"] = validate_attachments(changes["attachments"])
    if changes.get("timestamp"):
        updates["timestamp"] = int(changes["timestamp"])
    return replace(notice, **updates)


def newest_first(notices: Iterable[Notice]) -> list[Notice]:
    return sorted(notices, key=lambda n: n.timestamp, reverse=True)

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class Attachment:
    name: str
    data: str
    size: int

    def to_dict(self) -> dict:
        return {"name": self.name, "data": self.data, "size": self.size}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Attachment":
        return cls(name=str(data.get("name") or ""), data=str(data.get("data") or ""), size=int(data.get("size") or 0))


@dataclass(frozen=True)
class Notice:
    """Domain entity: a notice a teacher posts for enrolled students."""

    notice_id: str
    teacher_id: str
    teacher_name: str
    title: str
    content: str = ""
    attachments: tuple[Attachment, ...] = ()
    timestamp: int = 0

    def visible_to(self, teacher_ids) -> bool:
        return self.teacher_id in set(teacher_ids or ())

    def to_dict(self) -> dict:
        return {
            "id": self.notice_id,
            "teacherId": self.teacher_id,
            "teacherName": self.teacher_name,
            "title": self.title,
            "content": self.content,
            "attachments": [a.to_dict() for a in self.attachments],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Notice":
        return cls(
            notice_id=str(data["id"]),
            teacher_id=str(data.get("teacherId") or ""),
            teacher_name=str(data.get("teacherName") or ""),
            title=str(data.get("title") or ""),
            content=str(data.get("content") or ""),
            attachments=tuple(Attachment.from_dict(a) for a in data.get("attachments") or ()),
            timestamp=int(data.get("timestamp") or 0),
        )

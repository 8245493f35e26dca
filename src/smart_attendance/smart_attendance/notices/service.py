from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_millis
from ..core.exceptions import DuplicateError, NotFoundError
from ..users.repository import UserRepository
from .model import Notice
from .repository import NoticeRepository
from .rules import apply_notice_changes, build_notice


class NoticeService:
    def __init__(self, notices: NoticeRepository, users: UserRepository):
        self._notices = notices
        self._users = users

    def list_notices(self, *, teacher_id: Optional[str] = None, student_id: Optional[str] = None) -> Sequence[Notice]:
        if teacher_id:
            return self._notices.list_notices(teacher_ids=[teacher_id])
        if student_id:
            student = self._users.get_by_id(student_id)
            if not student or not student.teacher_ids:
                return []
            return self._notices.list_notices(teacher_ids=list(student.teacher_ids))
        return self._notices.list_notices()

    def create_notice(self, payload: Mapping[str, Any]) -> Notice:
        notice = build_notice(payload, now_ms=now_millis())
        if self._notices.get_by_id(notice.notice_id):
            raise DuplicateError("Notice with this ID already exists")
        self._notices.create(notice)
        return notice

    def update_notice(self, notice_id: str, changes: Mapping[str, Any]) -> Notice:
        current = self._notices.get_by_id(notice_id)
        if not current:
            raise NotFoundError("Notice not found")
        updated = apply_notice_changes(current, changes)
        if not self._notices.update(updated):
            raise NotFoundError("Notice not found")
        return updated

    def delete_notice(self, notice_id: str) -> None:
        if not self._notices.delete_by_id(notice_id):
            raise NotFoundError("Notice not found")

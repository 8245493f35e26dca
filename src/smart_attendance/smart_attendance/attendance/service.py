from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_millis
from ..core.exceptions import DuplicateError
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceSummary
from .repository import AttendanceRepository
from .rules import DUPLICATE_MESSAGE, ID_EXISTS_MESSAGE, build_record, summarize_records

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(self, attendance: AttendanceRepository, users: Optional[UserRepository] = None):
        self._attendance = attendance
        self._users = users

    def _student_name(self, student_id: Any) -> Optional[str]:
        if not self._users or not student_id:
            return None
        student = self._users.get_by_id(str(student_id))
        return student.name if student else None

    def mark(self, payload: Mapping[str, Any]) -> AttendanceRecord:
        name = None if payload.get("studentName") else self._student_name(payload.get("studentId"))
        record = build_record(payload, now_ms=now_millis(), student_name=name)

        if self._attendance.get_by_id(record.record_id):
            raise DuplicateError(ID_EXISTS_MESSAGE)

        if self._attendance.find_for_day(student_id=record.student_id, subject=record.subject, date=record.date):
            raise DuplicateError(DUPLICATE_MESSAGE)

        self._attendance.create(record)
        logger.info(
            "attendance %s: %s %s %s",
            record.status.value.lower(),
            record.student_id,
            record.subject,
            record.date,
        )
        return record

    def list_records(
        self,
        *,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.search(
            student_id=student_id or None,
            start_date=start_date or None,
            end_date=end_date or None,
            subject=subject or None,
        )

    def student_summary(self, student_id: str) -> AttendanceSummary:
        return summarize_records(self._attendance.search(student_id=student_id))

"""Attendance payload and query rules shared by the API and the local fallback."""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional
from uuid import uuid4

from ..common.datetime_utils import date_from_millis
from ..common.validators import require_iso_date, require_non_empty
from ..core.constants import GOOD_ATTENDANCE_PCT, WARNING_ATTENDANCE_PCT
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord, AttendanceSummary

ALL_SUBJECTS = "All"
DUPLICATE_MESSAGE = "Attendance already marked for this subject today."
ID_EXISTS_MESSAGE = "Attendance with this ID already exists"


def new_record_id(now_ms: int) -> str:
    return f"att-{now_ms}-{uuid4().hex[:6]}"


def parse_status(value: Any) -> AttendanceStatus:
    if value in (None, ""):
        return AttendanceStatus.PRESENT
    try:
        return AttendanceStatus(str(value).strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid attendance status: {value}")


def subject_filter(subject: Optional[str]) -> Optional[str]:
    if not subject or subject == ALL_SUBJECTS:
        return None
    return subject


def build_record(payload: Mapping[str, Any], *, now_ms: int, student_name: Optional[str] = None) -> AttendanceRecord:
    try:
        timestamp = int(payload.get("timestamp") or now_ms)
    except (TypeError, ValueError):
        raise ValidationError("Timestamp must be epoch milliseconds")

    raw_date = payload.get("date")
    day = require_iso_date(raw_date) if raw_date else date_from_millis(timestamp)

    return AttendanceRecord(
        record_id=str(payload.get("id") or new_record_id(now_ms)),
        student_id=require_non_empty(payload.get("studentId"), "Student ID"),
        student_name=require_non_empty(payload.get("studentName") or student_name, "Student name"),
        teacher_id=require_non_empty(payload.get("teacherId"), "Teacher ID"),
        subject=require_non_empty(payload.get("subject"), "Subject"),
        timestamp=timestamp,
        date=day,
        status=parse_status(payload.get("status")),
    )


def matches(
    record: AttendanceRecord,
    *,
    student_id: Optional[str] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    subject: Optional[str] = None,
) -> bool:
    if student_id and record.student_id != student_id:
        return False
    subject = subject_filter(subject)
    if subject and record.subject != subject:
        return False
    if start_date and record.date < start_date:
        return False
    if end_date and record.date > end_date:
        return False
    return True


def newest_first(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def standing_for(percentage: int) -> str:
    if percentage >= GOOD_ATTENDANCE_PCT:
        return "good"
    if percentage >= WARNING_ATTENDANCE_PCT:
        return "warning"
    return "critical"


def summarize_records(records: Iterable[AttendanceRecord]) -> AttendanceSummary:
    items = list(records)
    present = sum(1 for r in items if r.status == AttendanceStatus.PRESENT)
    absent = sum(1 for r in items if r.status == AttendanceStatus.ABSENT)
    total = len(items)
    percentage = round(present * 100 / total) if total else 0
    return AttendanceSummary(total=total, present=present, absent=absent, percentage=percentage, standing=standing_for(percentage))

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student marked for one subject on one day."""

    record_id: str
    student_id: str
    student_name: str
    teacher_id: str
    subject: str
    timestamp: int
    date: str
    status: AttendanceStatus = AttendanceStatus.PRESENT

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.student_id, self.subject, self.date)

    def to_dict(self) -> dict:
        return {
            "id": self.record_id,
            "studentId": self.student_id,
            "studentName": self.student_name,
            "teacherId": self.teacher_id,
            "subject": self.subject,
            "timestamp": self.timestamp,
            "date": self.date,
            "status": self.status.value,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AttendanceRecord":
        return cls(
            record_id=str(data["id"]),
            student_id=str(data["studentId"]),
            student_name=str(data.get("studentName") or ""),
            teacher_id=str(data.get("teacherId") or ""),
            subject=str(data["subject"]),
            timestamp=int(data.get("timestamp") or 0),
            date=str(data["date"]),
            status=AttendanceStatus(data.get("status") or AttendanceStatus.PRESENT.value),
        )


@dataclass(frozen=True)
class AttendanceSummary:
    """Read-model used by dashboards and reports."""

    total: int
    present: int
    absent: int
    percentage: int
    standing: str

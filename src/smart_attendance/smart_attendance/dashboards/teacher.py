from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional

from ..attendance.rules import summarize_records
from ..capture.marking import AttendanceMarker
from ..client.client import DataClient
from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..notices.model import Attachment, Notice
from ..notices.rules import build_attachment
from ..reports.service import ReportData, attendance_report_data, marks_report_data
from ..users.model import CIEMarks, MarksConfig, User
from ..users.rules import sort_students


MARK_FIELDS = ("cie1", "cie2", "assignment")


class TeacherDashboard:
    """Class roster, daily attendance, CIE marks and notices of one teacher."""

    def __init__(self, client: DataClient, teacher: User, *, marks_config: Optional[MarksConfig] = None):
        self._client = client
        self.teacher = teacher
        self.marks_config = marks_config or MarksConfig()
        self._students: list[User] = []

    # Roster
    def load_students(self) -> list[User]:
        self._students = [s for s in self._client.list_students() if self.teacher.teaches(s)]
        return list(self._students)

    def students(self, *, search: str = "", sort_key: str = "name", descending: bool = False) -> list[User]:
        result = self._students
        if search:
            needle = search.lower()
            result = [s for s in result if needle in s.name.lower() or needle in s.user_id.lower()]
        return sort_students(result, sort_key, descending=descending)

    def today_stats(self) -> dict[str, int]:
        today = now_local().strftime("%Y-%m-%d")
        roster = {s.user_id for s in self._students}
        records = [r for r in self._client.list_attendance(start_date=today, end_date=today) if r.student_id in roster]
        summary = summarize_records(records)
        return {"present": summary.present, "absent": summary.absent, "total": len(roster)}

    def save_student(self, payload: Mapping[str, Any], *, editing_id: Optional[str] = None) -> User:
        if editing_id:
            changes = {k: payload[k] for k in ("name", "email", "password") if k in payload}
            updated = self._client.update_user(editing_id, changes)
            self._students = [updated if s.user_id == editing_id else s for s in self._students]
            return updated

        student = self._client.create_user(
            {**payload, "role": Role.STUDENT.value, "teacherIds": [self.teacher.user_id]}
        )
        self._students.append(student)
        return student

    def delete_student(self, student_id: str) -> None:
        self._client.delete_user(student_id)
        self._students = [s for s in self._students if s.user_id != student_id]

    # CIE marks
    def set_mark(self, student_id: str, field_name: str, value: Any) -> CIEMarks:
        """Edit one mark locally; values are clamped into ``[0, max]``."""
        if field_name not in MARK_FIELDS:
            raise ValidationError(f"Unknown mark field: {field_name}")
        try:
            number = int(value)
        except (TypeError, ValueError):
            number = 0
        number = min(max(0, number), self.marks_config.limit_for(field_name))
        return self._edit_marks(student_id, **{field_name: number})

    def toggle_assignment(self, student_id: str) -> CIEMarks:
        student = self._find(student_id)
        return self._edit_marks(student_id, assignment_submitted=not student.marks.assignment_submitted)

    def save_marks(self, student_id: str) -> User:
        student = self._find(student_id)
        return self._client.update_user(student_id, {"cie": self.marks_config.clamp(student.marks).to_dict()})

    def _find(self, student_id: str) -> User:
        for s in self._students:
            if s.user_id == student_id:
                return s
        raise KeyError(student_id)

    def _edit_marks(self, student_id: str, **changes: Any) -> CIEMarks:
        student = self._find(student_id)
        marks = replace(student.marks, **changes)
        self._students = [replace(s, cie=marks) if s.user_id == student_id else s for s in self._students]
        return marks

    # Attendance
    def marker(self, subject: str) -> AttendanceMarker:
        return AttendanceMarker(self._client, self.teacher, self._students, subject)

    def attendance_report(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> ReportData:
        roster = {s.user_id for s in self._students}
        records = [
            r
            for r in self._client.list_attendance(start_date=start_date, end_date=end_date, subject=subject)
            if r.student_id in roster or r.teacher_id == self.teacher.user_id
        ]
        return attendance_report_data(records, start_date=start_date, end_date=end_date, subject=subject)

    def marks_report(self, *, sort_key: str = "name", descending: bool = False) -> ReportData:
        return marks_report_data(
            self._students,
            teacher_label=self.teacher.name,
            config=self.marks_config,
            sort_key=sort_key,
            descending=descending,
        )

    # Notices
    def notices(self) -> list[Notice]:
        return self._client.list_notices(teacher_id=self.teacher.user_id)

    def post_notice(
        self,
        title: str,
        content: str = "",
        attachments: Iterable[Attachment | str | Path] = (),
        *,
        notice_id: Optional[str] = None,
    ) -> Notice:
        files = [a if isinstance(a, Attachment) else build_attachment(a) for a in attachments]
        payload = {
            "title": title,
            "content": content,
            "teacherName": self.teacher.name,
            "attachments": [a.to_dict() for a in files],
        }
        if notice_id:
            return self._client.update_notice(notice_id, payload)
        return self._client.create_notice({**payload, "teacherId": self.teacher.user_id})

    def delete_notice(self, notice_id: str) -> None:
        self._client.delete_notice(notice_id)

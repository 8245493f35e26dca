from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.rules import newest_first, subject_filter, summarize_records
from ..common.datetime_utils import millis_to_datetime, now_local
from ..core.enums import Role
from ..users.model import MarksConfig, User
from ..users.repository import UserRepository
from ..users.rules import sort_students


@dataclass(frozen=True)
class ReportData:
    """Tabular report ready for CSV/PDF export."""

    title: str
    columns: list[tuple[str, str]]
    rows: list[dict]
    header_lines: list[str] = field(default_factory=list)
    summary: list[dict] = field(default_factory=list)


ATTENDANCE_COLUMNS = [
    ("date", "Date"),
    ("student_name", "Student"),
    ("subject", "Subject"),
    ("status", "Status"),
    ("time", "Time"),
]

MARKS_COLUMNS = [
    ("name", "Name"),
    ("id", "ID"),
    ("email", "Email"),
    ("cie1", "CIE 1"),
    ("cie2", "CIE 2"),
    ("assignment", "Asgn"),
    ("status", "Status"),
]


def attendance_report_data(
    records: Iterable[AttendanceRecord],
    *,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    subject: Optional[str] = None,
) -> ReportData:
    rows: list[dict] = []
    by_student: dict[str, list[AttendanceRecord]] = {}
    for r in newest_first(records):
        rows.append(
            {
                "date": r.date,
                "student_id": r.student_id,
                "student_name": r.student_name,
                "subject": r.subject,
                "status": r.status.value,
                "time": millis_to_datetime(r.timestamp).strftime("%H:%M:%S"),
            }
        )
        by_student.setdefault(r.student_id, []).append(r)

    summary = []
    for student_id, items in by_student.items():
        s = summarize_records(items)
        summary.append(
            {
                "student_id": student_id,
                "student_name": items[0].student_name,
                "present": s.present,
                "absent": s.absent,
                "total": s.total,
                "percentage": s.percentage,
            }
        )
    summary.sort(key=lambda x: x["student_name"].lower())

    return ReportData(
        title="Attendance Report",
        columns=ATTENDANCE_COLUMNS,
        rows=rows,
        header_lines=[
            f"Period: {start_date or 'start'} to {end_date or 'today'}",
            f"Subject: {subject_filter(subject) or 'All'}",
        ],
        summary=summary,
    )


def marks_report_data(
    roster: Iterable[User],
    *,
    teacher_label: str,
    config: Optional[MarksConfig] = None,
    sort_key: str = "name",
    descending: bool = False,
) -> ReportData:
    config = config or MarksConfig()
    rows = []
    for s in sort_students(roster, sort_key, descending=descending):
        marks = s.marks
        rows.append(
            {
                "name": s.name,
                "id": s.user_id,
                "email": s.email,
                "cie1": marks.cie1,
                "cie2": marks.cie2,
                "assignment": marks.assignment,
                "status": "Submitted" if marks.assignment_submitted else "Pending",
            }
        )

    return ReportData(
        title="Student Marks Report",
        columns=MARKS_COLUMNS,
        rows=rows,
        header_lines=[
            f"Generated on: {now_local().strftime('%Y-%m-%d')}",
            f"Teacher: {teacher_label}",
            f"Configuration: CIE 1 (Max {config.max_cie1}), CIE 2 (Max {config.max_cie2}), "
            f"Assignment (Max {config.max_assignment})",
        ],
    )


class ReportService:
    def __init__(self, attendance: AttendanceRepository, users: UserRepository):
        self._attendance = attendance
        self._users = users

    def _roster(self, teacher_id: str) -> list[User]:
        return [s for s in self._users.list_users(Role.STUDENT) if teacher_id in s.teacher_ids]

    def attendance_report(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
        teacher_id: Optional[str] = None,
    ) -> ReportData:
        records = list(
            self._attendance.search(start_date=start_date, end_date=end_date, subject=subject_filter(subject))
        )
        if teacher_id:
            # The teacher's own students plus anything the teacher marked.
            roster = {s.user_id for s in self._roster(teacher_id)}
            records = [r for r in records if r.student_id in roster or r.teacher_id == teacher_id]
        return attendance_report_data(records, start_date=start_date, end_date=end_date, subject=subject)

    def marks_report(
        self,
        *,
        teacher_id: str,
        teacher_name: str = "",
        config: Optional[MarksConfig] = None,
        sort_key: str = "name",
        descending: bool = False,
    ) -> ReportData:
        return marks_report_data(
            self._roster(teacher_id),
            teacher_label=teacher_name or teacher_id,
            config=config,
            sort_key=sort_key,
            descending=descending,
        )

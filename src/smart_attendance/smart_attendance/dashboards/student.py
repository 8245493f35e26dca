from __future__ import annotations

from itertools import groupby
from typing import Optional

from ..attendance.model import AttendanceRecord, AttendanceSummary
from ..attendance.rules import parse_status, summarize_records
from ..client.client import DataClient
from ..notices.model import Notice
from ..users.model import User


class StudentDashboard:
    """Read-only view of a student's own attendance, marks and notices."""

    def __init__(self, client: DataClient, student: User):
        self._client = client
        self.student = student
        self._records: list[AttendanceRecord] = []

    def load(self) -> list[AttendanceRecord]:
        self._records = self._client.student_attendance(self.student.user_id)
        return list(self._records)

    def summary(self) -> AttendanceSummary:
        return summarize_records(self._records)

    def grouped(
        self, *, by: str = "date", descending: bool = True, status: Optional[str] = None
    ) -> list[tuple[str, list[AttendanceRecord]]]:
        """Records grouped by date or subject; items in each group newest first."""
        if by not in ("date", "subject"):
            raise ValueError(f"cannot group by {by}")
        records = self._records
        if status and status.upper() != "ALL":
            wanted = parse_status(status)
            records = [r for r in records if r.status == wanted]

        def key(r: AttendanceRecord) -> str:
            return r.date if by == "date" else r.subject

        ordered = sorted(records, key=key, reverse=descending)
        return [
            (title, sorted(items, key=lambda r: r.timestamp, reverse=True))
            for title, items in groupby(ordered, key=key)
        ]

    def notices(self) -> list[Notice]:
        return self._client.list_notices(student_id=self.student.user_id)

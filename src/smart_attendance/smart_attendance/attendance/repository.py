from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_for_day(self, *, student_id: str, subject: str, date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, record: AttendanceRecord) -> None:
        """Insert; raises DuplicateError when the id or (student, subject, date) exists."""

        raise NotImplementedError

    def search(
        self,
        *,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Matching records, newest first."""

        raise NotImplementedError

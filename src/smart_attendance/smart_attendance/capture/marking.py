from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord
from ..client.client import DataClient
from ..client.errors import ApplicationError, ClientError, ConnectivityError
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus
from ..users.model import User

logger = logging.getLogger(__name__)


class OutcomeKind(str, Enum):
    SUCCESS = "success"
    DUPLICATE = "duplicate"
    NETWORK = "network"
    NOT_IN_ROSTER = "not_in_roster"
    INVALID = "invalid"
    ERROR = "error"


@dataclass(frozen=True)
class ScanOutcome:
    kind: OutcomeKind
    message: str
    student_id: str = ""
    record: Optional[AttendanceRecord] = None

    @property
    def ok(self) -> bool:
        return self.kind == OutcomeKind.SUCCESS


class AttendanceMarker:
    """Turns scanned payloads and manual entries into attendance records
    for one teacher and the subject currently selected."""

    def __init__(self, client: DataClient, teacher: User, roster: Optional[Iterable[User]] = None, subject: str = ""):
        self._client = client
        self.teacher = teacher
        self.subject = subject
        self._roster: dict[str, User] = {}
        if roster is None:
            self.refresh_roster()
        else:
            self.set_roster(roster)

    @property
    def roster(self) -> list[User]:
        return list(self._roster.values())

    def set_roster(self, students: Iterable[User]) -> None:
        self._roster = {s.user_id: s for s in students if self.teacher.teaches(s)}

    def refresh_roster(self) -> None:
        self.set_roster(self._client.list_students())

    def handle_scan(self, payload: Optional[str]) -> ScanOutcome:
        student_id = (payload or "").strip()
        if not student_id:
            return ScanOutcome(OutcomeKind.INVALID, "Empty QR code")
        return self._mark(student_id, AttendanceStatus.PRESENT, now_local())

    def mark_manual(
        self,
        student_id: str,
        status: AttendanceStatus | str = AttendanceStatus.PRESENT,
        date: Optional[str] = None,
        time: Optional[str] = None,
    ) -> ScanOutcome:
        try:
            status = AttendanceStatus(str(getattr(status, "value", status)).upper())
        except ValueError:
            return ScanOutcome(OutcomeKind.INVALID, f"Invalid attendance status: {status}", student_id)

        when = now_local()
        try:
            if date:
                when = datetime.strptime(f"{date} {time or when.strftime('%H:%M')}", "%Y-%m-%d %H:%M")
            elif time:
                when = datetime.combine(when.date(), datetime.strptime(time, "%H:%M").time())
        except ValueError:
            return ScanOutcome(OutcomeKind.INVALID, "Date must be YYYY-MM-DD and time HH:MM", student_id)

        return self._mark(student_id, status, when)

    def _mark(self, student_id: str, status: AttendanceStatus, when: datetime) -> ScanOutcome:
        student = self._roster.get(student_id)
        if student is None:
            return ScanOutcome(OutcomeKind.NOT_IN_ROSTER, "Student not found in your class list", student_id)
        if not self.subject:
            return ScanOutcome(OutcomeKind.INVALID, "Select a subject first", student_id)

        try:
            record = self._client.mark_attendance(
                {
                    "studentId": student.user_id,
                    "studentName": student.name,
                    "teacherId": self.teacher.user_id,
                    "subject": self.subject,
                    "timestamp": int(when.timestamp() * 1000),
                    "date": when.strftime("%Y-%m-%d"),
                    "status": status.value,
                }
            )
        except ConnectivityError as e:
            logger.warning("attendance for %s not saved: %s", student_id, e)
            return ScanOutcome(OutcomeKind.NETWORK, "Network Error: Unable to connect to the server.", student_id)
        except ApplicationError as e:
            if e.code == "duplicate":
                message = f"Duplicate: {student.name} is already marked for {self.subject}."
                return ScanOutcome(OutcomeKind.DUPLICATE, message, student_id)
            if e.code == "validation":
                return ScanOutcome(OutcomeKind.INVALID, e.message, student_id)
            return ScanOutcome(OutcomeKind.ERROR, e.message, student_id)
        except ClientError as e:
            return ScanOutcome(OutcomeKind.ERROR, str(e), student_id)

        verb = "present" if status == AttendanceStatus.PRESENT else "absent"
        return ScanOutcome(OutcomeKind.SUCCESS, f"Marked {student.name} {verb} for {self.subject}", student_id, record)

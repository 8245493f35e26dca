from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, unique_violation
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .rules import DUPLICATE_MESSAGE, ID_EXISTS_MESSAGE, subject_filter

_COLUMNS = "id, student_id, student_name, teacher_id, subject, ts, att_date, status"


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=r["id"],
        student_id=r["student_id"],
        student_name=r["student_name"],
        teacher_id=r["teacher_id"],
        subject=r["subject"],
        timestamp=int(r["ts"]),
        date=str(r["att_date"]),
        status=AttendanceStatus(r["status"]),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def find_for_day(self, *, student_id: str, subject: str, date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE student_id=%s AND subject=%s AND att_date=%s",
                (student_id, subject, date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create(self, record: AttendanceRecord) -> None:
        # The compound unique key makes this a conditional insert.
        with unique_violation(DUPLICATE_MESSAGE, primary_message=ID_EXISTS_MESSAGE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO attendance({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        record.record_id,
                        record.student_id,
                        record.student_name,
                        record.teacher_id,
                        record.subject,
                        record.timestamp,
                        record.date,
                        record.status.value,
                    ),
                )

    def search(
        self,
        *,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        where: list[str] = []
        params: list[Any] = []
        if student_id:
            where.append("student_id=%s")
            params.append(student_id)
        subject = subject_filter(subject)
        if subject:
            where.append("subject=%s")
            params.append(subject)
        if start_date:
            where.append("att_date>=%s")
            params.append(start_date)
        if end_date:
            where.append("att_date<=%s")
            params.append(end_date)

        sql = f"SELECT {_COLUMNS} FROM attendance"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY ts DESC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_row_to_record(r) for r in fetchall(cur)]

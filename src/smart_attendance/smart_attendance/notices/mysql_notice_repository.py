from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, placeholders, to_json, unique_violation
from .model import Attachment, Notice
from .repository import NoticeRepository

_COLUMNS = "id, teacher_id, teacher_name, title, content, attachments, ts"


def _row_to_notice(r: Dict[str, Any]) -> Notice:
    return Notice(
        notice_id=r["id"],
        teacher_id=r["teacher_id"],
        teacher_name=r["teacher_name"],
        title=r["title"],
        content=r.get("content") or "",
        attachments=tuple(Attachment.from_dict(a) for a in from_json(r.get("attachments"), [])),
        timestamp=int(r["ts"]),
    )


class MySQLNoticeRepository(NoticeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, notice_id: str) -> Optional[Notice]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notices WHERE id=%s", (notice_id,))
            r = fetchone(cur)
            return _row_to_notice(r) if r else None

    def list_notices(self, *, teacher_ids: Optional[Sequence[str]] = None) -> Sequence[Notice]:
        with db_cursor(self._conn_factory) as (_, cur):
            if teacher_ids is None:
                cur.execute(f"SELECT {_COLUMNS} FROM notices ORDER BY ts DESC")
            elif not teacher_ids:
                return []
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM notices WHERE teacher_id IN ({placeholders(len(teacher_ids))}) ORDER BY ts DESC",
                    tuple(teacher_ids),
                )
            return [_row_to_notice(r) for r in fetchall(cur)]

    def create(self, notice: Notice) -> None:
        with unique_violation("Notice with this ID already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO notices({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s)",
                    (
                        notice.notice_id,
                        notice.teacher_id,
                        notice.teacher_name,
                        notice.title,
                        notice.content,
                        to_json([a.to_dict() for a in notice.attachments]),
                        notice.timestamp,
                    ),
                )

    def update(self, notice: Notice) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE notices
                SET teacher_name=%s, title=%s, content=%s, attachments=%s, ts=%s
                WHERE id=%s
                """,
                (
                    notice.teacher_name,
                    notice.title,
                    notice.content,
                    to_json([a.to_dict() for a in notice.attachments]),
                    notice.timestamp,
                    notice.notice_id,
                ),
            )
            cur.execute("SELECT 1 AS found FROM notices WHERE id=%s", (notice.notice_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, notice_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM notices WHERE id=%s", (notice_id,))
            return cur.rowcount > 0

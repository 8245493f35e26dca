from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, from_json, to_json, unique_violation
from .model import CIEMarks, User
from .repository import UserRepository

_COLUMNS = "id, name, email, password_hash, role, subjects, teacher_ids, cie, created_at"


def _row_to_user(row: Dict[str, Any]) -> User:
    cie = from_json(row.get("cie"))
    return User(
        user_id=row["id"],
        name=row["name"],
        email=row["email"],
        role=Role(row["role"]),
        password_hash=row["password_hash"],
        subjects=tuple(from_json(row.get("subjects"), [])),
        teacher_ids=tuple(from_json(row.get("teacher_ids"), [])),
        cie=CIEMarks.from_dict(cie) if cie is not None else None,
        created_at=int(row["created_at"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_users(self, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role:
                cur.execute(f"SELECT {_COLUMNS} FROM users WHERE role=%s ORDER BY created_at", (role.value,))
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create(self, user: User) -> None:
        with unique_violation("User with this ID or email already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"""
                    INSERT INTO users({_COLUMNS})
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        user.user_id,
                        user.name,
                        user.email,
                        user.password_hash,
                        user.role.value,
                        to_json(list(user.subjects)),
                        to_json(list(user.teacher_ids)),
                        to_json(user.cie.to_dict() if user.cie else None),
                        user.created_at,
                    ),
                )

    def update(self, user: User) -> bool:
        with unique_violation("User with this email already exists"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    UPDATE users
                    SET name=%s, email=%s, password_hash=%s, role=%s, subjects=%s, teacher_ids=%s, cie=%s
                    WHERE id=%s
                    """,
                    (
                        user.name,
                        user.email,
                        user.password_hash,
                        user.role.value,
                        to_json(list(user.subjects)),
                        to_json(list(user.teacher_ids)),
                        to_json(user.cie.to_dict() if user.cie else None),
                        user.user_id,
                    ),
                )
                # rowcount is 0 when nothing changed, so match on existence instead
                cur.execute("SELECT 1 AS found FROM users WHERE id=%s", (user.user_id,))
                return fetchone(cur) is not None

    def delete_by_id(self, user_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE id=%s", (user_id,))
            return cur.rowcount > 0

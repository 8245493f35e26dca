from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from mysql.connector import errorcode
from mysql.connector.errors import IntegrityError

from ..core.exceptions import DuplicateError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


@contextmanager
def unique_violation(message: str, *, primary_message: Optional[str] = None):
    """Turn a duplicate-key insert into a DuplicateError with ``message``.

    ``primary_message`` is used instead when the clashing key is the primary key.
    """
    try:
        yield
    except IntegrityError as e:
        if e.errno == errorcode.ER_DUP_ENTRY:
            if primary_message and "PRIMARY" in (e.msg or ""):
                raise DuplicateError(primary_message) from e
            raise DuplicateError(message) from e
        raise


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def to_json(value: Any) -> Optional[str]:
    if value is None:
        return None
    return json.dumps(value, ensure_ascii=False)


def from_json(value: Any, default: Any = None) -> Any:
    """Decode a JSON text column; drivers may hand back str, bytes or None."""
    if value is None or value == "":
        return default
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value)
    return value


def placeholders(count: int) -> str:
    return ",".join(["%s"] * count)

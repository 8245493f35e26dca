from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import SystemSettings
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, settings_id: str) -> Optional[SystemSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT school_name, academic_year, system_notification FROM settings WHERE id=%s",
                (settings_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            return SystemSettings(
                school_name=r["school_name"],
                academic_year=r["academic_year"],
                system_notification=r.get("system_notification") or "",
            )

    def upsert(self, settings_id: str, settings: SystemSettings) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO settings(id, school_name, academic_year, system_notification)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    school_name=VALUES(school_name),
                    academic_year=VALUES(academic_year),
                    system_notification=VALUES(system_notification)
                """,
                (settings_id, settings.school_name, settings.academic_year, settings.system_notification),
            )

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .notices.mysql_notice_repository import MySQLNoticeRepository
from .notices.repository import NoticeRepository
from .notices.service import NoticeService
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


class StoreProbe(Protocol):
    def ping(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Container:
    conn: Optional[StoreProbe]

    users_repo: UserRepository
    attendance_repo: AttendanceRepository
    notices_repo: NoticeRepository
    settings_repo: SettingsRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    notice_service: NoticeService
    settings_service: SettingsService
    report_service: ReportService

    def store_state(self) -> str:
        if self.conn is None:
            return "unknown"
        return "connected" if self.conn.ping() else "disconnected"


def assemble_container(
    *,
    conn: Optional[StoreProbe],
    users_repo: UserRepository,
    attendance_repo: AttendanceRepository,
    notices_repo: NoticeRepository,
    settings_repo: SettingsRepository,
) -> Container:
    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        notices_repo=notices_repo,
        settings_repo=settings_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
        attendance_service=AttendanceService(attendance_repo, users_repo),
        notice_service=NoticeService(notices_repo, users_repo),
        settings_service=SettingsService(settings_repo),
        report_service=ReportService(attendance_repo, users_repo),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble_container(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        notices_repo=MySQLNoticeRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
    )

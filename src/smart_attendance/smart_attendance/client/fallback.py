from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Callable, Optional

from ..attendance.service import AttendanceService
from ..core.constants import DEFAULT_FALLBACK_LATENCY
from ..core.exceptions import DomainError
from ..notices.service import NoticeService
from ..settings.service import SettingsService
from ..users.rules import admin_user
from ..users.service import AuthService, UserService
from .errors import ApplicationError
from .local_repositories import (
    LocalAttendanceRepository,
    LocalNoticeRepository,
    LocalSettingsRepository,
    LocalUserRepository,
)
from .local_storage import LocalStorage

logger = logging.getLogger(__name__)


def _operation(fn: Callable) -> Callable:
    """Simulate network latency and translate domain errors like the API does."""

    @wraps(fn)
    def wrapper(self: "LocalBackend", *args, **kwargs):
        if self.latency:
            self._sleep(self.latency)
        try:
            return fn(self, *args, **kwargs)
        except DomainError as e:
            raise ApplicationError(str(e), status=e.status_code, code=e.code) from e

    return wrapper


class LocalBackend:
    """Offline stand-in for the REST API backed by :class:`LocalStorage`.

    Same operations, same wire dicts and the same error codes as
    :class:`RemoteBackend`.
    """

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        *,
        latency: float = DEFAULT_FALLBACK_LATENCY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.storage = storage if storage is not None else LocalStorage()
        self.latency = latency
        self._sleep = sleep

        users = LocalUserRepository(self.storage, seed=admin_user())
        self._auth = AuthService(users)
        self._users = UserService(users)
        self._attendance = AttendanceService(LocalAttendanceRepository(self.storage), users)
        self._notices = NoticeService(LocalNoticeRepository(self.storage), users)
        self._settings = SettingsService(LocalSettingsRepository(self.storage))

    # Auth
    @_operation
    def login(self, email: str, password: str, role: str) -> dict:
        return self._auth.login(email, password, role).to_dict()

    @_operation
    def forgot_password(self, email: str) -> dict:
        return {"message": self._auth.forgot_password(email)}

    # Users
    @_operation
    def list_users(self, role: Optional[str] = None) -> list[dict]:
        return [u.to_dict() for u in self._users.list_users(role)]

    @_operation
    def create_user(self, user: dict) -> dict:
        return self._users.create_user(user).to_dict()

    @_operation
    def update_user(self, user_id: str, changes: dict) -> dict:
        return self._users.update_user(user_id, changes).to_dict()

    @_operation
    def delete_user(self, user_id: str) -> dict:
        self._users.delete_user(user_id)
        return {"message": "User deleted successfully"}

    # Attendance
    @_operation
    def mark_attendance(self, record: dict) -> dict:
        return self._attendance.mark(record).to_dict()

    @_operation
    def list_attendance(
        self,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> list[dict]:
        records = self._attendance.list_records(
            student_id=student_id, start_date=start_date, end_date=end_date, subject=subject
        )
        return [r.to_dict() for r in records]

    # Notices
    @_operation
    def list_notices(self, teacher_id: Optional[str] = None, student_id: Optional[str] = None) -> list[dict]:
        return [n.to_dict() for n in self._notices.list_notices(teacher_id=teacher_id, student_id=student_id)]

    @_operation
    def create_notice(self, notice: dict) -> dict:
        return self._notices.create_notice(notice).to_dict()

    @_operation
    def update_notice(self, notice_id: str, changes: dict) -> dict:
        return self._notices.update_notice(notice_id, changes).to_dict()

    @_operation
    def delete_notice(self, notice_id: str) -> dict:
        self._notices.delete_notice(notice_id)
        return {"message": "Notice deleted"}

    # Settings
    @_operation
    def get_settings(self) -> dict:
        return self._settings.get_settings().to_dict()

    @_operation
    def save_settings(self, settings: dict) -> dict:
        return self._settings.save_settings(settings).to_dict()

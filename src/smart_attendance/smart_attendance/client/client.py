from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, TypeVar

from ..attendance.model import AttendanceRecord
from ..core.enums import AttendanceStatus, ConnectionMode, Role
from ..notices.model import Notice
from ..settings.model import SystemSettings
from ..users.model import User
from .errors import ConnectivityError
from .fallback import LocalBackend
from .local_storage import LocalStorage
from .remote import RemoteBackend

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _value(v: Any) -> Any:
    return v.value if isinstance(v, (Role, AttendanceStatus, ConnectionMode)) else v


class DataClient:
    """Single entry point used by dashboards and the capture workflow.

    In ``AUTO`` mode every operation goes to the REST API first and is
    re-run against the local store only when the API is unreachable.
    Rejections from the API (validation, duplicate, ...) are never retried
    locally.
    """

    def __init__(
        self,
        remote: Optional[RemoteBackend] = None,
        local: Optional[LocalBackend] = None,
        *,
        mode: ConnectionMode = ConnectionMode.AUTO,
    ):
        mode = ConnectionMode(mode)
        if mode != ConnectionMode.LOCAL and remote is None:
            raise ValueError(f"{mode.value} mode needs a remote backend")
        if mode != ConnectionMode.REMOTE and local is None:
            local = LocalBackend()
        self._remote = remote
        self._local = local
        self._mode = mode
        self._active: Optional[ConnectionMode] = None

    @classmethod
    def from_settings(cls, settings: Any) -> "DataClient":
        """Build a client from a ``config.*`` settings module."""
        remote = RemoteBackend(
            getattr(settings, "API_URL"),
            timeout=getattr(settings, "REQUEST_TIMEOUT_SECONDS", None),
        )
        local = LocalBackend(
            LocalStorage(getattr(settings, "LOCAL_STORAGE_PATH", None)),
            latency=float(getattr(settings, "FALLBACK_LATENCY_SECONDS", 0.6)),
        )
        return cls(remote, local, mode=ConnectionMode(getattr(settings, "CLIENT_MODE", "auto")))

    @property
    def mode(self) -> ConnectionMode:
        return self._mode

    @property
    def active_mode(self) -> Optional[ConnectionMode]:
        """Backend that served the last call (``REMOTE`` or ``LOCAL``)."""
        return self._active

    def check_connection(self) -> bool:
        if self._remote is None:
            return False
        return self._remote.ping()

    def _call(self, op: str, *args, **kwargs):
        if self._mode == ConnectionMode.LOCAL:
            result = getattr(self._local, op)(*args, **kwargs)
            self._active = ConnectionMode.LOCAL
            return result

        try:
            result = getattr(self._remote, op)(*args, **kwargs)
        except ConnectivityError as e:
            if self._mode == ConnectionMode.REMOTE:
                raise
            logger.warning("API unreachable, %s served from local storage: %s", op, e)
            result = getattr(self._local, op)(*args, **kwargs)
            self._active = ConnectionMode.LOCAL
            return result

        self._active = ConnectionMode.REMOTE
        return result

    def _many(self, build: Callable[[Mapping], T], rows) -> list[T]:
        return [build(r) for r in rows or []]

    # Auth
    def login(self, email: str, password: str, role: Role | str) -> User:
        return User.from_dict(self._call("login", email, password, _value(role)))

    def forgot_password(self, email: str) -> str:
        return self._call("forgot_password", email)["message"]

    # Users
    def list_users(self, role: Optional[Role | str] = None) -> list[User]:
        return self._many(User.from_dict, self._call("list_users", _value(role)))

    def list_students(self) -> list[User]:
        return self.list_users(Role.STUDENT)

    def list_teachers(self) -> list[User]:
        return self.list_users(Role.TEACHER)

    def create_user(self, user: Mapping[str, Any]) -> User:
        return User.from_dict(self._call("create_user", dict(user)))

    def update_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        return User.from_dict(self._call("update_user", user_id, dict(changes)))

    def delete_user(self, user_id: str) -> None:
        self._call("delete_user", user_id)

    # Attendance
    def mark_attendance(self, record: Mapping[str, Any]) -> AttendanceRecord:
        payload = {k: _value(v) for k, v in record.items()}
        return AttendanceRecord.from_dict(self._call("mark_attendance", payload))

    def list_attendance(
        self,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> list[AttendanceRecord]:
        rows = self._call(
            "list_attendance", student_id=student_id, start_date=start_date, end_date=end_date, subject=subject
        )
        return self._many(AttendanceRecord.from_dict, rows)

    def student_attendance(self, student_id: str) -> list[AttendanceRecord]:
        return self.list_attendance(student_id=student_id)

    # Notices
    def list_notices(self, teacher_id: Optional[str] = None, student_id: Optional[str] = None) -> list[Notice]:
        return self._many(Notice.from_dict, self._call("list_notices", teacher_id=teacher_id, student_id=student_id))

    def create_notice(self, notice: Mapping[str, Any]) -> Notice:
        return Notice.from_dict(self._call("create_notice", dict(notice)))

    def update_notice(self, notice_id: str, changes: Mapping[str, Any]) -> Notice:
        return Notice.from_dict(self._call("update_notice", notice_id, dict(changes)))

    def delete_notice(self, notice_id: str) -> None:
        self._call("delete_notice", notice_id)

    # Settings
    def get_settings(self) -> SystemSettings:
        return SystemSettings.from_dict(self._call("get_settings"))

    def save_settings(self, settings: Mapping[str, Any] | SystemSettings) -> SystemSettings:
        if isinstance(settings, SystemSettings):
            settings = settings.to_dict()
        return SystemSettings.from_dict(self._call("save_settings", dict(settings)))

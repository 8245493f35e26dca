from __future__ import annotations

import json as jsonlib
from typing import Optional, Sequence
from urllib.parse import urlsplit

import pytest
import requests
from werkzeug.security import generate_password_hash

from smart_attendance.attendance.model import AttendanceRecord
from smart_attendance.attendance.rules import matches, newest_first
from smart_attendance.client.fallback import LocalBackend
from smart_attendance.client.local_storage import LocalStorage
from smart_attendance.client.remote import RemoteBackend
from smart_attendance.container import assemble_container
from smart_attendance.core.enums import Role
from smart_attendance.core.exceptions import DuplicateError
from smart_attendance.main import create_app
from smart_attendance.notices.model import Notice
from smart_attendance.settings.model import SystemSettings
from smart_attendance.users.model import CIEMarks, User

PASSWORD = "secret123"
BASE_URL = "http://testserver/api"


class InMemoryUsers:
    def __init__(self, users: Sequence[User] = ()):
        self.users: dict[str, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        for u in self.users.values():
            if u.email.lower() == (email or "").lower():
                return u
        return None

    def list_users(self, role: Optional[Role] = None) -> Sequence[User]:
        return [u for u in self.users.values() if role is None or u.role == role]

    def create(self, user: User) -> None:
        self.users[user.user_id] = user

    def update(self, user: User) -> bool:
        if user.user_id not in self.users:
            return False
        self.users[user.user_id] = user
        return True

    def delete_by_id(self, user_id: str) -> bool:
        return self.users.pop(user_id, None) is not None


class InMemoryAttendance:
    """Enforces the id and (student, subject, date) keys like the MySQL table does."""

    def __init__(self):
        self.records: list[AttendanceRecord] = []

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        for r in self.records:
            if r.record_id == record_id:
                return r
        return None

    def find_for_day(self, *, student_id: str, subject: str, date: str) -> Optional[AttendanceRecord]:
        for r in self.records:
            if r.key == (student_id, subject, date):
                return r
        return None

    def create(self, record: AttendanceRecord) -> None:
        if any(r.record_id == record.record_id for r in self.records):
            raise DuplicateError("Attendance with this ID already exists")
        if any(r.key == record.key for r in self.records):
            raise DuplicateError("Attendance already marked for this subject today.")
        self.records.append(record)

    def search(self, *, student_id=None, start_date=None, end_date=None, subject=None):
        found = [
            r
            for r in self.records
            if matches(r, student_id=student_id, start_date=start_date, end_date=end_date, subject=subject)
        ]
        return newest_first(found)


class InMemoryNotices:
    def __init__(self):
        self.notices: dict[str, Notice] = {}

    def get_by_id(self, notice_id: str) -> Optional[Notice]:
        return self.notices.get(notice_id)

    def list_notices(self, *, teacher_ids=None):
        items = [n for n in self.notices.values() if teacher_ids is None or n.teacher_id in teacher_ids]
        return sorted(items, key=lambda n: n.timestamp, reverse=True)

    def create(self, notice: Notice) -> None:
        self.notices[notice.notice_id] = notice

    def update(self, notice: Notice) -> bool:
        if notice.notice_id not in self.notices:
            return False
        self.notices[notice.notice_id] = notice
        return True

    def delete_by_id(self, notice_id: str) -> bool:
        return self.notices.pop(notice_id, None) is not None


class InMemorySettings:
    def __init__(self):
        self.rows: dict[str, SystemSettings] = {}

    def get(self, settings_id: str) -> Optional[SystemSettings]:
        return self.rows.get(settings_id)

    def upsert(self, settings_id: str, settings: SystemSettings) -> None:
        self.rows[settings_id] = settings


class UpProbe:
    def ping(self) -> bool:
        return True


def make_user(user_id: str, name: str, role: Role, *, email: Optional[str] = None, **extra) -> User:
    return User(
        user_id=user_id,
        name=name,
        email=email or f"{user_id.lower()}@school.edu",
        role=role,
        password_hash=generate_password_hash(PASSWORD),
        created_at=extra.pop("created_at", 1_700_000_000_000),
        **extra,
    )


@pytest.fixture
def teacher() -> User:
    return make_user("TC1", "Alice Teacher", Role.TEACHER, subjects=("Mathematics", "Physics"))


@pytest.fixture
def students() -> list[User]:
    return [
        make_user("STU1", "Bob Student", Role.STUDENT, teacher_ids=("TC1",), cie=CIEMarks(cie1=15, cie2=12, assignment=8)),
        make_user("STU2", "Carol Student", Role.STUDENT, teacher_ids=("TC1",), cie=CIEMarks(cie1=18, cie2=9)),
        make_user("STU3", "Dan Elsewhere", Role.STUDENT, teacher_ids=("TC9",), cie=CIEMarks()),
    ]


@pytest.fixture
def users_repo(teacher, students) -> InMemoryUsers:
    return InMemoryUsers([teacher, *students])


@pytest.fixture
def container(users_repo):
    return assemble_container(
        conn=UpProbe(),
        users_repo=users_repo,
        attendance_repo=InMemoryAttendance(),
        notices_repo=InMemoryNotices(),
        settings_repo=InMemorySettings(),
    )


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def api(app):
    return app.test_client()


class FakeResponse:
    def __init__(self, status_code: int, body: bytes):
        self.status_code = status_code
        self.content = body
        self.text = body.decode("utf-8", errors="replace")

    def json(self):
        return jsonlib.loads(self.text)


class FlaskSession:
    """``requests.Session`` look-alike that dispatches to a Flask test client."""

    def __init__(self, test_client):
        self._client = test_client
        self.calls: list[tuple[str, str]] = []

    def request(self, method, url, params=None, json=None, timeout=None):
        parts = urlsplit(url)
        self.calls.append((method, parts.path))
        kwargs = {"method": method, "query_string": params or {}}
        if json is not None:
            kwargs["json"] = json
        resp = self._client.open(parts.path, **kwargs)
        return FakeResponse(resp.status_code, resp.get_data())


class FailingSession:
    """Every request fails before reaching a server."""

    def __init__(self, exc: type[Exception] = requests.exceptions.ConnectionError):
        self._exc = exc
        self.calls = 0

    def request(self, method, url, **kwargs):
        self.calls += 1
        raise self._exc(f"connection refused: {url}")


@pytest.fixture
def remote(api) -> RemoteBackend:
    return RemoteBackend(BASE_URL, session=FlaskSession(api))


@pytest.fixture
def offline_remote() -> RemoteBackend:
    return RemoteBackend(BASE_URL, session=FailingSession())


@pytest.fixture
def local() -> LocalBackend:
    return LocalBackend(LocalStorage(), latency=0.0)

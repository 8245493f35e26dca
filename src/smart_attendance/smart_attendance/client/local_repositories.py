"""Repositories over :class:`LocalStorage` with the same contracts as the MySQL ones.

Every lookup is a linear scan over the list stored under one key.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..attendance.rules import matches, newest_first
from ..core.constants import (
    STORAGE_KEY_ATTENDANCE,
    STORAGE_KEY_NOTICES,
    STORAGE_KEY_SETTINGS,
    STORAGE_KEY_USERS,
)
from ..core.enums import Role
from ..notices.model import Notice
from ..notices.rules import newest_first as notices_newest_first
from ..settings.model import SystemSettings
from ..users.model import User
from .local_storage import LocalStorage


class LocalUserRepository:
    def __init__(self, storage: LocalStorage, *, seed: Optional[User] = None):
        self._storage = storage
        self._seed = seed

    def _rows(self) -> list[dict]:
        rows = list(self._storage.get_item(STORAGE_KEY_USERS) or [])
        # The bootstrap admin is always part of the list.
        if self._seed and not any(r.get("id") == self._seed.user_id for r in rows):
            rows.insert(0, self._seed.to_storage_dict())
        return rows

    def _save(self, rows: list[dict]) -> None:
        self._storage.set_item(STORAGE_KEY_USERS, rows)

    def get_by_id(self, user_id: str) -> Optional[User]:
        for row in self._rows():
            if row.get("id") == user_id:
                return User.from_dict(row)
        return None

    def get_by_email(self, email: str) -> Optional[User]:
        email = (email or "").lower()
        for row in self._rows():
            if str(row.get("email") or "").lower() == email:
                return User.from_dict(row)
        return None

    def list_users(self, role: Optional[Role] = None) -> Sequence[User]:
        users = [User.from_dict(r) for r in self._rows()]
        if role:
            users = [u for u in users if u.role == role]
        return users

    def create(self, user: User) -> None:
        rows = self._rows()
        rows.append(user.to_storage_dict())
        self._save(rows)

    def update(self, user: User) -> bool:
        rows = self._rows()
        for i, row in enumerate(rows):
            if row.get("id") == user.user_id:
                rows[i] = user.to_storage_dict()
                self._save(rows)
                return True
        return False

    def delete_by_id(self, user_id: str) -> bool:
        rows = self._rows()
        kept = [r for r in rows if r.get("id") != user_id]
        if len(kept) == len(rows):
            return False
        self._save(kept)
        return True


class LocalAttendanceRepository:
    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def _records(self) -> list[AttendanceRecord]:
        return [AttendanceRecord.from_dict(r) for r in self._storage.get_item(STORAGE_KEY_ATTENDANCE) or []]

    def get_by_id(self, record_id: str) -> Optional[AttendanceRecord]:
        for r in self._records():
            if r.record_id == record_id:
                return r
        return None

    def find_for_day(self, *, student_id: str, subject: str, date: str) -> Optional[AttendanceRecord]:
        for r in self._records():
            if r.key == (student_id, subject, date):
                return r
        return None

    def create(self, record: AttendanceRecord) -> None:
        rows = list(self._storage.get_item(STORAGE_KEY_ATTENDANCE) or [])
        rows.append(record.to_dict())
        self._storage.set_item(STORAGE_KEY_ATTENDANCE, rows)

    def search(
        self,
        *,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        found = [
            r
            for r in self._records()
            if matches(r, student_id=student_id, start_date=start_date, end_date=end_date, subject=subject)
        ]
        return newest_first(found)


class LocalNoticeRepository:
    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def _rows(self) -> list[dict]:
        return list(self._storage.get_item(STORAGE_KEY_NOTICES) or [])

    def get_by_id(self, notice_id: str) -> Optional[Notice]:
        for row in self._rows():
            if row.get("id") == notice_id:
                return Notice.from_dict(row)
        return None

    def list_notices(self, *, teacher_ids: Optional[Sequence[str]] = None) -> Sequence[Notice]:
        notices = [Notice.from_dict(r) for r in self._rows()]
        if teacher_ids is not None:
            notices = [n for n in notices if n.visible_to(teacher_ids)]
        return notices_newest_first(notices)

    def create(self, notice: Notice) -> None:
        rows = self._rows()
        rows.append(notice.to_dict())
        self._storage.set_item(STORAGE_KEY_NOTICES, rows)

    def update(self, notice: Notice) -> bool:
        rows = self._rows()
        for i, row in enumerate(rows):
            if row.get("id") == notice.notice_id:
                rows[i] = notice.to_dict()
                self._storage.set_item(STORAGE_KEY_NOTICES, rows)
                return True
        return False

    def delete_by_id(self, notice_id: str) -> bool:
        rows = self._rows()
        kept = [r for r in rows if r.get("id") != notice_id]
        if len(kept) == len(rows):
            return False
        self._storage.set_item(STORAGE_KEY_NOTICES, kept)
        return True


class LocalSettingsRepository:
    """Single settings document; ``settings_id`` is accepted for parity."""

    def __init__(self, storage: LocalStorage):
        self._storage = storage

    def get(self, settings_id: str) -> Optional[SystemSettings]:
        data = self._storage.get_item(STORAGE_KEY_SETTINGS)
        return SystemSettings.from_dict(data) if isinstance(data, dict) else None

    def upsert(self, settings_id: str, settings: SystemSettings) -> None:
        self._storage.set_item(STORAGE_KEY_SETTINGS, settings.to_dict())

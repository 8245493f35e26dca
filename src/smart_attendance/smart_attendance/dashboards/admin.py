from __future__ import annotations

import re
from typing import Any, Mapping, Optional

from ..client.client import DataClient
from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..reports.service import ReportData, attendance_report_data
from ..settings.model import SystemSettings
from ..users.model import User

USER_ORDERS = ("newest", "oldest", "name")

_TEACHER_ID = re.compile(r"^TC(\d+)$")


def next_teacher_id(users: list[User]) -> str:
    """``TC<n+1>`` where ``n`` is the highest numbered teacher id so far."""
    numbers = [0]
    for u in users:
        if u.role != Role.TEACHER:
            continue
        m = _TEACHER_ID.match(u.user_id)
        if m:
            numbers.append(int(m.group(1)))
    return f"TC{max(numbers) + 1}"


class AdminDashboard:
    """User directory, school settings and global attendance reports."""

    def __init__(self, client: DataClient):
        self._client = client

    def is_connected(self) -> bool:
        return self._client.check_connection()

    def users(self, *, search: str = "", role: Optional[Role | str] = None, order: str = "newest") -> list[User]:
        result = [u for u in self._client.list_users() if u.role != Role.ADMIN]

        if search:
            needle = search.lower()
            result = [
                u for u in result if needle in u.name.lower() or needle in u.email.lower() or needle in u.user_id.lower()
            ]
        if role:
            result = [u for u in result if u.role == Role(role)]

        if order == "newest":
            result.sort(key=lambda u: u.created_at, reverse=True)
        elif order == "oldest":
            result.sort(key=lambda u: u.created_at)
        elif order == "name":
            result.sort(key=lambda u: u.name.lower())
        return result

    def suggest_teacher_id(self) -> str:
        return next_teacher_id(self._client.list_teachers())

    def save_user(self, payload: Mapping[str, Any], *, editing_id: Optional[str] = None) -> User:
        if editing_id:
            changes = {k: v for k, v in payload.items() if k != "id"}
            return self._client.update_user(editing_id, changes)
        if str(payload.get("role") or "").upper() == Role.TEACHER.value and not payload.get("id"):
            payload = {**payload, "id": self.suggest_teacher_id()}
        return self._client.create_user(payload)

    def delete_user(self, user_id: str) -> None:
        self._client.delete_user(user_id)

    def attendance_report(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> ReportData:
        records = self._client.list_attendance(start_date=start_date, end_date=end_date, subject=subject)
        return attendance_report_data(records, start_date=start_date, end_date=end_date, subject=subject)

    def directory_report(self, role: Optional[Role] = None) -> ReportData:
        users = self.users(role=role, order="name")
        title = f"{role.value.title()} Directory" if role else "User Directory"
        return ReportData(
            title=title,
            columns=[("id", "ID"), ("name", "Name"), ("email", "Email"), ("role", "Role")],
            rows=[{"id": u.user_id, "name": u.name, "email": u.email, "role": u.role.value} for u in users],
            header_lines=[f"Generated on: {now_local().strftime('%Y-%m-%d')}", f"Total: {len(users)}"],
        )

    def settings(self) -> SystemSettings:
        return self._client.get_settings()

    def save_settings(self, changes: Mapping[str, Any]) -> SystemSettings:
        current = self._client.get_settings()
        return self._client.save_settings(current.merged(changes))

from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..core.constants import CONNECTION_PROBE_TIMEOUT
from .errors import ApplicationError, ClientError, ConnectivityError

logger = logging.getLogger(__name__)


def _clean(params: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in params.items() if v not in (None, "")}


class RemoteBackend:
    """Talks to the REST API over HTTP and returns wire dicts."""

    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def _request(self, method: str, path: str, *, params: Optional[dict] = None, payload: Any = None, timeout=None):
        url = f"{self._base_url}{path}"
        try:
            response = self._session.request(
                method,
                url,
                params=_clean(params or {}),
                json=payload,
                timeout=timeout if timeout is not None else self._timeout,
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            raise ConnectivityError(f"Cannot reach {url}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ClientError(str(e)) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.status_code >= 400:
            message = body.get("message") if isinstance(body, dict) else None
            code = body.get("code") if isinstance(body, dict) else None
            raise ApplicationError(
                message or response.text or f"HTTP {response.status_code}",
                status=response.status_code,
                code=code or ("server_error" if response.status_code >= 500 else "error"),
            )
        return body

    def ping(self, timeout: float = CONNECTION_PROBE_TIMEOUT) -> bool:
        try:
            self._request("GET", "/health", timeout=timeout)
        except ClientError as e:
            logger.debug("health probe failed: %s", e)
            return False
        return True

    # Auth
    def login(self, email: str, password: str, role: str) -> dict:
        return self._request("POST", "/login", payload={"email": email, "password": password, "role": role})

    def forgot_password(self, email: str) -> dict:
        return self._request("POST", "/forgot-password", payload={"email": email})

    # Users
    def list_users(self, role: Optional[str] = None) -> list[dict]:
        return self._request("GET", "/users", params={"role": role})

    def create_user(self, user: dict) -> dict:
        return self._request("POST", "/users", payload=user)

    def update_user(self, user_id: str, changes: dict) -> dict:
        return self._request("PUT", f"/users/{quote(user_id, safe='')}", payload=changes)

    def delete_user(self, user_id: str) -> dict:
        return self._request("DELETE", f"/users/{quote(user_id, safe='')}")

    # Attendance
    def mark_attendance(self, record: dict) -> dict:
        return self._request("POST", "/attendance", payload=record)

    def list_attendance(
        self,
        student_id: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        subject: Optional[str] = None,
    ) -> list[dict]:
        params = {"studentId": student_id, "startDate": start_date, "endDate": end_date, "subject": subject}
        return self._request("GET", "/attendance", params=params)

    # Notices
    def list_notices(self, teacher_id: Optional[str] = None, student_id: Optional[str] = None) -> list[dict]:
        return self._request("GET", "/notices", params={"teacherId": teacher_id, "studentId": student_id})

    def create_notice(self, notice: dict) -> dict:
        return self._request("POST", "/notices", payload=notice)

    def update_notice(self, notice_id: str, changes: dict) -> dict:
        return self._request("PUT", f"/notices/{quote(notice_id, safe='')}", payload=changes)

    def delete_notice(self, notice_id: str) -> dict:
        return self._request("DELETE", f"/notices/{quote(notice_id, safe='')}")

    # Settings
    def get_settings(self) -> dict:
        return self._request("GET", "/settings")

    def save_settings(self, settings: dict) -> dict:
        return self._request("POST", "/settings", payload=settings)

from __future__ import annotations

import pytest
import requests

from smart_attendance.client import ApplicationError, ConnectivityError, DataClient
from smart_attendance.client.remote import RemoteBackend
from smart_attendance.core.constants import ADMIN_ID
from smart_attendance.core.enums import ConnectionMode, Role
from smart_attendance.users.model import User

from conftest import BASE_URL, PASSWORD, FailingSession


def test_auto_mode_uses_remote_when_reachable(remote, local):
    client = DataClient(remote, local)

    users = client.list_users()

    assert client.active_mode == ConnectionMode.REMOTE
    assert all(isinstance(u, User) for u in users)
    assert {"TC1", "STU1", ADMIN_ID} <= {u.user_id for u in users}


def test_network_failure_falls_back_to_local_store_with_seeded_admin(offline_remote, local):
    client = DataClient(offline_remote, local)

    users = client.list_users()

    assert client.active_mode == ConnectionMode.LOCAL
    assert [u.user_id for u in users] == [ADMIN_ID]
    assert users[0].role == Role.ADMIN


def test_timeouts_also_fall_back(local):
    client = DataClient(RemoteBackend(BASE_URL, session=FailingSession(requests.exceptions.Timeout)), local)

    assert client.get_settings().school_name == "Smart Attendance"
    assert client.active_mode == ConnectionMode.LOCAL


def test_application_errors_are_not_retried_locally(remote, local):
    client = DataClient(remote, local)

    with pytest.raises(ApplicationError) as exc:
        client.delete_user("NOPE")

    assert exc.value.status == 404
    assert exc.value.code == "not_found"
    assert client.active_mode is None


def test_remote_mode_never_falls_back(offline_remote, local):
    client = DataClient(offline_remote, local, mode=ConnectionMode.REMOTE)

    with pytest.raises(ConnectivityError):
        client.list_users()


def test_local_mode_never_touches_network(local):
    session = FailingSession()
    client = DataClient(RemoteBackend(BASE_URL, session=session), local, mode=ConnectionMode.LOCAL)

    client.list_users()
    client.get_settings()

    assert session.calls == 0
    assert client.active_mode == ConnectionMode.LOCAL


def test_check_connection_never_raises(remote, offline_remote, local):
    assert DataClient(remote, local).check_connection() is True
    assert DataClient(offline_remote, local).check_connection() is False


def test_remote_login_and_failed_login(remote, local):
    client = DataClient(remote, local)

    assert client.login("tc1@school.edu", PASSWORD, Role.TEACHER).user_id == "TC1"
    with pytest.raises(ApplicationError) as exc:
        client.login("tc1@school.edu", "wrong", Role.TEACHER)
    assert exc.value.code == "authentication"


def test_remote_duplicate_attendance(remote, local):
    client = DataClient(remote, local)
    record = {"studentId": "STU1", "teacherId": "TC1", "subject": "Mathematics", "date": "2024-05-01"}

    created = client.mark_attendance(record)
    assert created.student_id == "STU1"

    with pytest.raises(ApplicationError) as exc:
        client.mark_attendance(record)
    assert exc.value.code == "duplicate"
    assert len(client.student_attendance("STU1")) == 1


def test_remote_notice_and_settings_round_trip(remote, local):
    client = DataClient(remote, local)

    client.create_notice({"id": "n1", "teacherId": "TC1", "teacherName": "Alice", "title": "Hi"})
    assert [n.notice_id for n in client.list_notices(student_id="STU2")] == ["n1"]

    saved = client.save_settings({"academicYear": "2025-2026"})
    assert client.get_settings() == saved


def test_fallback_writes_are_kept_locally(offline_remote, local):
    client = DataClient(offline_remote, local)

    client.create_user({"id": "TC2", "name": "Ben", "email": "ben@school.edu", "password": "abcdef", "role": "TEACHER"})

    assert [t.user_id for t in client.list_teachers()] == ["TC2"]
    with pytest.raises(ApplicationError) as exc:
        client.create_user({"id": "TC3", "name": "B", "email": "BEN@school.edu", "password": "abcdef", "role": "TEACHER"})
    assert exc.value.code == "duplicate"


def test_from_settings_builds_configured_client():
    import config.testing as settings

    client = DataClient.from_settings(settings)

    assert client.mode == ConnectionMode.AUTO
    assert client.active_mode is None


def test_remote_modes_need_a_remote_backend():
    with pytest.raises(ValueError):
        DataClient(None, mode=ConnectionMode.AUTO)
    assert DataClient(None, mode=ConnectionMode.LOCAL).list_users()[0].user_id == ADMIN_ID

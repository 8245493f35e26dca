from __future__ import annotations

import json
import os
import subprocess
import sys

import pytest

from smart_attendance.client import ApplicationError
from smart_attendance.client.fallback import LocalBackend
from smart_attendance.client.local_storage import LocalStorage
from smart_attendance.core.constants import (
    ADMIN_EMAIL,
    ADMIN_ID,
    ADMIN_PASSWORD,
    STORAGE_KEY_ATTENDANCE,
    STORAGE_KEY_USERS,
)


def _student(user_id="STU1", email="stu1@school.edu"):
    return {
        "id": user_id,
        "name": "Bob",
        "email": email,
        "password": "abcdef",
        "role": "STUDENT",
        "teacherIds": ["TC1"],
    }


def test_seeded_admin_can_log_in(local):
    user = local.login(ADMIN_EMAIL.upper(), ADMIN_PASSWORD, "ADMIN")

    assert user["id"] == ADMIN_ID
    assert "passwordHash" not in user


def test_failed_login_uses_authentication_code(local):
    with pytest.raises(ApplicationError) as exc:
        local.login(ADMIN_EMAIL, ADMIN_PASSWORD, "TEACHER")

    assert (exc.value.status, exc.value.code) == (401, "authentication")


def test_email_uniqueness(local):
    local.create_user(_student())

    with pytest.raises(ApplicationError) as exc:
        local.create_user(_student(user_id="STU2", email="STU1@school.edu"))

    assert exc.value.code == "duplicate"
    assert [u["id"] for u in local.list_users("STUDENT")] == ["STU1"]


def test_one_attendance_per_student_subject_day(local):
    local.create_user(_student())
    record = {"studentId": "STU1", "teacherId": "TC1", "subject": "Mathematics", "date": "2024-05-01"}

    assert local.mark_attendance(record)["studentName"] == "Bob"
    with pytest.raises(ApplicationError) as exc:
        local.mark_attendance({**record, "id": "att-2"})

    assert exc.value.code == "duplicate"
    assert len(local.list_attendance(student_id="STU1")) == 1


def test_attendance_ids_are_unique(local):
    local.create_user(_student())
    local.create_user(_student(user_id="STU2", email="stu2@school.edu"))
    record = {"id": "att-1", "teacherId": "TC1", "subject": "Mathematics", "date": "2024-05-01"}

    local.mark_attendance({**record, "studentId": "STU1"})
    with pytest.raises(ApplicationError) as exc:
        local.mark_attendance({**record, "studentId": "STU2"})

    assert exc.value.code == "duplicate"
    assert str(exc.value) == "Attendance with this ID already exists"
    assert [r["id"] for r in local.list_attendance()] == ["att-1"]


def test_update_and_delete_missing_ids_are_not_found(local):
    for call in (
        lambda: local.update_user("NOPE", {"name": "x"}),
        lambda: local.delete_user("NOPE"),
        lambda: local.update_notice("NOPE", {"title": "x"}),
        lambda: local.delete_notice("NOPE"),
    ):
        with pytest.raises(ApplicationError) as exc:
            call()
        assert exc.value.code == "not_found"

    assert [u["id"] for u in local.list_users()] == [ADMIN_ID]


def test_notice_visibility(local):
    local.create_user(_student())
    local.create_notice({"id": "n1", "teacherId": "TC1", "teacherName": "Alice", "title": "A", "timestamp": 1})
    local.create_notice({"id": "n2", "teacherId": "TC9", "teacherName": "Zed", "title": "B", "timestamp": 2})

    assert [n["id"] for n in local.list_notices(student_id="STU1")] == ["n1"]
    assert [n["id"] for n in local.list_notices()] == ["n2", "n1"]


def test_settings_round_trip(local):
    saved = local.save_settings({"schoolName": "Hill School"})

    assert local.get_settings() == saved
    assert saved["academicYear"] == "2024-2025"


def test_state_persists_to_json_file(tmp_path):
    path = tmp_path / "store" / "local.json"
    first = LocalBackend(LocalStorage(path), latency=0.0)
    first.create_user(_student())
    first.mark_attendance({"studentId": "STU1", "teacherId": "TC1", "subject": "Physics"})

    data = json.loads(path.read_text(encoding="utf-8"))
    assert {u["id"] for u in data[STORAGE_KEY_USERS]} == {ADMIN_ID, "STU1"}
    assert len(data[STORAGE_KEY_ATTENDANCE]) == 1
    assert all("password" not in u for u in data[STORAGE_KEY_USERS])

    second = LocalBackend(LocalStorage(path), latency=0.0)
    assert second.login("stu1@school.edu", "abcdef", "STUDENT")["id"] == "STU1"


def test_every_operation_waits_the_simulated_latency():
    pauses = []
    backend = LocalBackend(LocalStorage(), latency=0.6, sleep=pauses.append)

    backend.list_users()
    backend.get_settings()

    assert pauses == [0.6, 0.6]


def test_corrupt_storage_file_starts_empty(tmp_path):
    path = tmp_path / "local.json"
    path.write_text("{not json", encoding="utf-8")

    storage = LocalStorage(path)

    assert storage.keys() == []
    storage.set_item("k", [1])
    assert LocalStorage(path).get_item("k") == [1]


def test_offline_client_does_not_load_the_database_driver():
    code = (
        "import sys\n"
        "from smart_attendance.client import DataClient\n"
        "from smart_attendance.dashboards import AdminDashboard\n"
        "DataClient(mode='local')\n"
        "print(sorted(m for m in sys.modules if m.startswith('mysql')))\n"
    )
    env = {**os.environ, "PYTHONPATH": os.pathsep.join(sys.path)}

    result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True, env=env, check=True)

    assert result.stdout.strip() == "[]"

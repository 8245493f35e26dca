from __future__ import annotations

from datetime import datetime

import pytest

from smart_attendance.attendance.rules import DUPLICATE_MESSAGE, ID_EXISTS_MESSAGE, standing_for, summarize_records
from smart_attendance.attendance.service import AttendanceService
from smart_attendance.core.enums import AttendanceStatus
from smart_attendance.core.exceptions import DuplicateError, ValidationError

from conftest import InMemoryAttendance


def _ms(*args) -> int:
    return int(datetime(*args).timestamp() * 1000)


@pytest.fixture
def service(users_repo):
    return AttendanceService(InMemoryAttendance(), users_repo)


def _mark(service, **overrides):
    payload = {
        "studentId": "STU1",
        "teacherId": "TC1",
        "subject": "Mathematics",
        "timestamp": _ms(2024, 5, 1, 9, 30),
    }
    payload.update(overrides)
    return service.mark(payload)


def test_mark_fills_defaults(service):
    record = _mark(service)

    assert record.date == "2024-05-01"
    assert record.status == AttendanceStatus.PRESENT
    assert record.student_name == "Bob Student"
    assert record.record_id.startswith("att-")


def test_second_mark_same_student_subject_day_is_duplicate(service):
    _mark(service)

    with pytest.raises(DuplicateError) as exc:
        _mark(service, timestamp=_ms(2024, 5, 1, 14, 0), id="att-other")

    assert str(exc.value) == DUPLICATE_MESSAGE
    assert len(service.list_records(student_id="STU1")) == 1


def test_reused_record_id_is_duplicate_even_for_another_student(service):
    _mark(service, id="att-1")

    with pytest.raises(DuplicateError) as exc:
        _mark(service, id="att-1", studentId="STU2")

    assert str(exc.value) == ID_EXISTS_MESSAGE
    assert service.list_records(student_id="STU2") == []


def test_generated_ids_differ_within_one_millisecond(service, monkeypatch):
    monkeypatch.setattr("smart_attendance.attendance.service.now_millis", lambda: 1_714_550_400_000)

    first = _mark(service)
    second = _mark(service, studentId="STU2")

    assert first.record_id != second.record_id
    assert first.record_id.startswith("att-1714550400000-")


def test_same_day_other_subject_is_allowed(service):
    _mark(service)
    _mark(service, subject="Physics", id="att-2")

    assert len(service.list_records(student_id="STU1")) == 2


def test_explicit_date_overrides_timestamp_and_status_is_validated(service):
    record = _mark(service, date="2024-04-30", status="absent")
    assert record.date == "2024-04-30"
    assert record.status == AttendanceStatus.ABSENT

    with pytest.raises(ValidationError):
        _mark(service, date="30/04/2024", id="att-x")
    with pytest.raises(ValidationError):
        _mark(service, status="LATE", subject="Physics", id="att-y")


def test_missing_subject_is_validation_error(service):
    with pytest.raises(ValidationError):
        _mark(service, subject="")


def test_list_records_filters_and_orders_newest_first(service):
    _mark(service, id="a1", timestamp=_ms(2024, 5, 1, 9))
    _mark(service, id="a2", timestamp=_ms(2024, 5, 2, 9))
    _mark(service, id="a3", timestamp=_ms(2024, 5, 3, 9), subject="Physics")
    _mark(service, id="a4", studentId="STU2", timestamp=_ms(2024, 5, 2, 10))

    assert [r.record_id for r in service.list_records(student_id="STU1")] == ["a3", "a2", "a1"]
    assert [r.record_id for r in service.list_records(subject="All", start_date="2024-05-02")] == ["a3", "a4", "a2"]
    assert [r.record_id for r in service.list_records(subject="Mathematics", end_date="2024-05-01")] == ["a1"]


def test_student_summary(service):
    _mark(service, id="a1", timestamp=_ms(2024, 5, 1, 9))
    _mark(service, id="a2", timestamp=_ms(2024, 5, 2, 9))
    _mark(service, id="a3", timestamp=_ms(2024, 5, 3, 9), status="ABSENT")

    summary = service.student_summary("STU1")

    assert (summary.total, summary.present, summary.absent, summary.percentage) == (3, 2, 1, 67)
    assert summary.standing == "warning"


def test_standing_thresholds():
    assert standing_for(75) == "good"
    assert standing_for(60) == "warning"
    assert standing_for(59) == "critical"
    assert summarize_records([]).percentage == 0

from __future__ import annotations

from datetime import datetime

from smart_attendance.attendance.model import AttendanceRecord
from smart_attendance.core.enums import AttendanceStatus
from smart_attendance.reports.export import render_pdf, write_csv
from smart_attendance.reports.service import ReportService, attendance_report_data
from smart_attendance.users.model import MarksConfig

from conftest import InMemoryAttendance


def _record(record_id, student_id, name, day, subject="Mathematics", status=AttendanceStatus.PRESENT, teacher_id="TC1"):
    ts = int(datetime.strptime(f"{day} 09:00", "%Y-%m-%d %H:%M").timestamp() * 1000)
    return AttendanceRecord(record_id, student_id, name, teacher_id, subject, ts, day, status)


def _service(users_repo):
    attendance = InMemoryAttendance()
    for r in [
        _record("a1", "STU1", "Bob Student", "2024-05-01"),
        _record("a2", "STU1", "Bob Student", "2024-05-02", status=AttendanceStatus.ABSENT),
        _record("a3", "STU2", "Carol Student", "2024-05-02", subject="Physics"),
        _record("a4", "STU3", "Dan Elsewhere", "2024-05-02", teacher_id="TC9"),
    ]:
        attendance.create(r)
    return ReportService(attendance, users_repo)


def test_attendance_report_for_teacher(users_repo):
    data = _service(users_repo).attendance_report(teacher_id="TC1")

    assert [row["date"] for row in data.rows] == ["2024-05-02", "2024-05-02", "2024-05-01"]
    assert {row["student_id"] for row in data.rows} == {"STU1", "STU2"}
    bob = next(s for s in data.summary if s["student_id"] == "STU1")
    assert (bob["present"], bob["absent"], bob["percentage"]) == (1, 1, 50)


def test_attendance_report_filters(users_repo):
    data = _service(users_repo).attendance_report(start_date="2024-05-02", subject="Physics")

    assert [row["student_name"] for row in data.rows] == ["Carol Student"]
    assert "Subject: Physics" in data.header_lines


def test_marks_report_sorted_by_cie1(users_repo):
    data = _service(users_repo).marks_report(
        teacher_id="TC1", teacher_name="Alice", config=MarksConfig(max_cie1=25), sort_key="cie1", descending=True
    )

    assert [row["id"] for row in data.rows] == ["STU2", "STU1"]
    assert data.rows[0]["status"] == "Pending"
    assert any("CIE 1 (Max 25)" in line for line in data.header_lines)


def test_csv_export_has_bom_and_header():
    data = attendance_report_data([_record("a1", "STU1", "Zoë", "2024-05-01")])

    payload = write_csv(data)

    assert payload.startswith(b"\xef\xbb\xbf")
    lines = payload.decode("utf-8-sig").splitlines()
    assert lines[0] == "Date,Student,Subject,Status,Time"
    assert lines[1].startswith("2024-05-01,Zoë,Mathematics,PRESENT,09:00:00")


def test_pdf_export_renders_empty_report():
    assert render_pdf(attendance_report_data([])).startswith(b"%PDF")

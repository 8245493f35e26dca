from __future__ import annotations

import pytest

from smart_attendance.core.enums import Role
from smart_attendance.core.exceptions import ValidationError
from smart_attendance.users.model import CIEMarks, MarksConfig, User
from smart_attendance.users.rules import apply_user_changes, build_user, sort_students


def _student(user_id, name, **marks):
    return User(user_id=user_id, name=name, email=f"{user_id}@x.io", role=Role.STUDENT, cie=CIEMarks(**marks))


def test_build_user_normalizes_fields():
    user = build_user(
        {
            "id": " TC7 ",
            "name": "Grace",
            "email": "Grace@School.EDU",
            "password": "abcdef",
            "role": "teacher",
            "subjects": ["Physics", "Physics", " Chemistry "],
        },
        created_at=42,
    )

    assert user.user_id == "TC7"
    assert user.email == "grace@school.edu"
    assert user.role == Role.TEACHER
    assert user.subjects == ("Physics", "Chemistry")
    assert user.cie is None
    assert user.created_at == 42


def test_build_user_rejects_bad_email():
    with pytest.raises(ValidationError):
        build_user({"id": "X", "name": "X", "email": "nope", "password": "abcdef", "role": "ADMIN"}, created_at=1)


def test_apply_changes_merges_marks_and_rejects_negative():
    student = _student("S1", "Sam", cie1=5, cie2=6)

    updated = apply_user_changes(student, {"cie": {"cie1": 9, "assignmentSubmitted": True}})
    assert updated.marks == CIEMarks(cie1=9, cie2=6, assignment=0, assignment_submitted=True)

    with pytest.raises(ValidationError):
        apply_user_changes(student, {"cie": {"cie2": -1}})


def test_marks_config_clamps_into_range():
    config = MarksConfig(max_cie1=20, max_cie2=25, max_assignment=10)

    clamped = config.clamp(CIEMarks(cie1=35, cie2=-3, assignment=10))

    assert (clamped.cie1, clamped.cie2, clamped.assignment) == (20, 0, 10)
    assert config.limit_for("unknown") == 100


def test_sort_students_by_marks_and_name():
    roster = [_student("A", "zed", cie1=3), _student("B", "Amy", cie1=9), _student("C", "mia", cie1=5)]

    assert [s.user_id for s in sort_students(roster, "cie1", descending=True)] == ["B", "C", "A"]
    assert [s.name for s in sort_students(roster)] == ["Amy", "mia", "zed"]
    with pytest.raises(ValidationError):
        sort_students(roster, "email")

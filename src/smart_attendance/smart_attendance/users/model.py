from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

from ..common.validators import clamp
from ..core.constants import MAX_ASSIGNMENT, MAX_CIE1, MAX_CIE2
from ..core.enums import Role


@dataclass(frozen=True)
class CIEMarks:
    """Continuous internal evaluation marks of one student."""

    cie1: int = 0
    cie2: int = 0
    assignment: int = 0
    assignment_submitted: bool = False

    def to_dict(self) -> dict:
        return {
            "cie1": self.cie1,
            "cie2": self.cie2,
            "assignment": self.assignment,
            "assignmentSubmitted": self.assignment_submitted,
        }

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "CIEMarks":
        data = data or {}
        return cls(
            cie1=int(data.get("cie1") or 0),
            cie2=int(data.get("cie2") or 0),
            assignment=int(data.get("assignment") or 0),
            assignment_submitted=bool(data.get("assignmentSubmitted", False)),
        )

    def merged(self, changes: Mapping[str, Any]) -> "CIEMarks":
        return CIEMarks.from_dict({**self.to_dict(), **dict(changes)})


@dataclass(frozen=True)
class MarksConfig:
    """Maximum marks a teacher allows per CIE component."""

    max_cie1: int = MAX_CIE1
    max_cie2: int = MAX_CIE2
    max_assignment: int = MAX_ASSIGNMENT

    def limit_for(self, field_name: str) -> int:
        return {
            "cie1": self.max_cie1,
            "cie2": self.max_cie2,
            "assignment": self.max_assignment,
        }.get(field_name, 100)

    def clamp(self, marks: CIEMarks) -> CIEMarks:
        return replace(
            marks,
            cie1=clamp(marks.cie1, low=0, high=self.max_cie1),
            cie2=clamp(marks.cie2, low=0, high=self.max_cie2),
            assignment=clamp(marks.assignment, low=0, high=self.max_assignment),
        )


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    ``password_hash`` never leaves the process through ``to_dict``; the
    local fallback store uses ``to_storage_dict`` to keep it.
    """

    user_id: str
    name: str
    email: str
    role: Role
    password_hash: str = ""
    subjects: tuple[str, ...] = ()
    teacher_ids: tuple[str, ...] = ()
    cie: Optional[CIEMarks] = None
    created_at: int = 0

    def to_dict(self) -> dict:
        out = {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "role": self.role.value,
            "subjects": list(self.subjects),
            "teacherIds": list(self.teacher_ids),
            "createdAt": self.created_at,
        }
        if self.cie is not None:
            out["cie"] = self.cie.to_dict()
        return out

    def to_storage_dict(self) -> dict:
        return {**self.to_dict(), "passwordHash": self.password_hash}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "User":
        cie = data.get("cie")
        return cls(
            user_id=str(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=Role(data["role"]),
            password_hash=str(data.get("passwordHash") or ""),
            subjects=tuple(data.get("subjects") or ()),
            teacher_ids=tuple(data.get("teacherIds") or ()),
            cie=CIEMarks.from_dict(cie) if cie is not None else None,
            created_at=int(data.get("createdAt") or 0),
        )

    def teaches(self, student: "User") -> bool:
        return self.user_id in student.teacher_ids

    @property
    def marks(self) -> CIEMarks:
        return self.cie or CIEMarks()

"""Payload rules for users shared by the API services and the local fallback."""
from __future__ import annotations

from dataclasses import replace
from typing import Any, Iterable, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..common.datetime_utils import now_millis
from ..core.constants import ADMIN_EMAIL, ADMIN_ID, ADMIN_NAME, ADMIN_PASSWORD, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import CIEMarks, User


def normalize_email(value: Any) -> str:
    return require_email(value).lower()


def parse_role(value: Any) -> Role:
    try:
        return Role(str(value or "").strip().upper())
    except ValueError:
        raise ValidationError(f"Invalid role: {value}")


def _str_tuple(values: Optional[Iterable[Any]]) -> tuple[str, ...]:
    out: list[str] = []
    for v in values or ():
        s = str(v).strip()
        if s and s not in out:
            out.append(s)
    return tuple(out)


def _parse_marks(base: CIEMarks, changes: Any) -> CIEMarks:
    if not isinstance(changes, Mapping):
        raise ValidationError("CIE marks must be an object")
    try:
        marks = base.merged(changes)
    except (TypeError, ValueError):
        raise ValidationError("CIE marks must be numbers")
    if min(marks.cie1, marks.cie2, marks.assignment) < 0:
        raise ValidationError("CIE marks cannot be negative")
    return marks


def hash_password(password: Optional[str]) -> str:
    return generate_password_hash(require_min_length(password, "Password", MIN_PASSWORD_LENGTH))


def admin_user() -> User:
    """The bootstrap admin account seeded into every store."""
    return User(
        user_id=ADMIN_ID,
        name=ADMIN_NAME,
        email=ADMIN_EMAIL,
        role=Role.ADMIN,
        password_hash=generate_password_hash(ADMIN_PASSWORD),
        created_at=now_millis(),
    )


def check_password(user: User, password: Optional[str]) -> bool:
    if not user.password_hash or not password:
        return False
    try:
        return check_password_hash(user.password_hash, password)
    except ValueError:
        # e.g. placeholder hashes or corrupted values
        return False


def build_user(payload: Mapping[str, Any], *, created_at: int) -> User:
    role = parse_role(payload.get("role"))
    cie = payload.get("cie")
    if cie is not None:
        marks: Optional[CIEMarks] = _parse_marks(CIEMarks(), cie)
    else:
        marks = CIEMarks() if role == Role.STUDENT else None

    return User(
        user_id=require_non_empty(payload.get("id"), "User ID"),
        name=require_non_empty(payload.get("name"), "Name"),
        email=normalize_email(payload.get("email")),
        role=role,
        password_hash=hash_password(payload.get("password")),
        subjects=_str_tuple(payload.get("subjects")),
        teacher_ids=_str_tuple(payload.get("teacherIds")),
        cie=marks,
        created_at=int(payload.get("createdAt") or created_at),
    )


def apply_user_changes(user: User, changes: Mapping[str, Any]) -> User:
    """Merge a partial update into ``user``.

    The id is immutable and an empty password keeps the current one.
    """

    updates: dict[str, Any] = {}
    if "name" in changes:
        updates["name"] = require_non_empty(changes["name"], "Name")
    if "email" in changes:
        updates["email"] = normalize_email(changes["email"])
    if changes.get("password"):
        updates["password_hash"] = hash_password(changes["password"])
    if "role" in changes:
        updates["role"] = parse_role(changes["role"])
    if "subjects" in changes:
        updates["subjects"] = _str_tuple(changes["subjects"])
    if "teacherIds" in changes:
        updates["teacher_ids"] = _str_tuple(changes["teacherIds"])
    if changes.get("cie") is not None:
        updates["cie"] = _parse_marks(user.marks, changes["cie"])
    return replace(user, **updates)


SORT_KEYS = ("name", "cie1", "cie2", "assignment")


def sort_students(students: Iterable[User], key: str = "name", *, descending: bool = False) -> list[User]:
    if key not in SORT_KEYS:
        raise ValidationError(f"Cannot sort students by {key}")
    if key == "name":
        return sorted(students, key=lambda s: s.name.lower(), reverse=descending)
    return sorted(students, key=lambda s: getattr(s.marks, key), reverse=descending)

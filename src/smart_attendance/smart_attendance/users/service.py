from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_millis
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, DuplicateError, NotFoundError, ValidationError
from .model import User
from .repository import UserRepository
from .rules import apply_user_changes, build_user, check_password, normalize_email, parse_role

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
NO_ACCOUNT = "No account found with this email address."
RESET_SENT = "Password reset instructions have been sent to your email."


class AuthService:
    """Use case: authenticate user (login) and password reset requests."""

    def __init__(self, users: UserRepository):
        self._users = users

    def login(self, email: Any, password: Optional[str], role: Any) -> User:
        try:
            email_n = normalize_email(email)
            role_n = parse_role(role)
        except ValidationError:
            raise AuthenticationError(INVALID_CREDENTIALS)

        user = self._users.get_by_email(email_n)
        if not user or user.role != role_n or not check_password(user, password):
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user

    def forgot_password(self, email: Any) -> str:
        user = self._users.get_by_email(str(email or "").strip().lower())
        if not user:
            raise NotFoundError(NO_ACCOUNT)
        # No mail transport; the reset is simulated.
        logger.info("[simulation] password reset link sent to %s", user.email)
        return RESET_SENT


class UserService:
    """Use case: manage users (admin and teacher screens)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, role: Optional[Any] = None) -> Sequence[User]:
        return self._users.list_users(parse_role(role) if role else None)

    def get_user(self, user_id: str) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_user(self, payload: Mapping[str, Any]) -> User:
        user = build_user(payload, created_at=now_millis())

        if self._users.get_by_id(user.user_id):
            raise DuplicateError(f'User with ID "{user.user_id}" already exists')
        if self._users.get_by_email(user.email):
            raise DuplicateError("User with this email already exists")

        self._users.create(user)
        logger.info("created %s %s", user.role.value.lower(), user.user_id)
        return user

    def update_user(self, user_id: str, changes: Mapping[str, Any]) -> User:
        current = self.get_user(require_non_empty(user_id, "User ID"))
        updated = apply_user_changes(current, changes)

        if updated.email != current.email:
            other = self._users.get_by_email(updated.email)
            if other and other.user_id != current.user_id:
                raise DuplicateError("User with this email already exists")

        if not self._users.update(updated):
            raise NotFoundError("User not found")
        return updated

    def delete_user(self, user_id: str) -> None:
        # Attendance and notices that reference the user are left as-is.
        if not self._users.delete_by_id(user_id):
            raise NotFoundError("User not found")
        logger.info("deleted user %s", user_id)

    def roster(self, teacher_id: str) -> list[User]:
        """Students enrolled under ``teacher_id``."""
        return [s for s in self._users.list_users(Role.STUDENT) if teacher_id in s.teacher_ids]

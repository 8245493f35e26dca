from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role; the value is what travels on the wire and in the store."""

    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"


class ConnectionMode(str, Enum):
    """How the data-access client chooses its backend."""

    AUTO = "auto"
    REMOTE = "remote"
    LOCAL = "local"

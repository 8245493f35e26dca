from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..core.constants import DEFAULT_ACADEMIC_YEAR, DEFAULT_SCHOOL_NAME


@dataclass(frozen=True)
class SystemSettings:
    """Singleton record (id ``global``) with school-wide settings."""

    school_name: str = DEFAULT_SCHOOL_NAME
    academic_year: str = DEFAULT_ACADEMIC_YEAR
    system_notification: str = ""

    def to_dict(self) -> dict:
        return {
            "schoolName": self.school_name,
            "academicYear": self.academic_year,
            "systemNotification": self.system_notification,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SystemSettings":
        defaults = cls()
        return cls(
            school_name=str(data.get("schoolName", defaults.school_name)),
            academic_year=str(data.get("academicYear", defaults.academic_year)),
            system_notification=str(data.get("systemNotification", defaults.system_notification) or ""),
        )

    def merged(self, changes: Mapping[str, Any]) -> "SystemSettings":
        return SystemSettings.from_dict({**self.to_dict(), **dict(changes)})

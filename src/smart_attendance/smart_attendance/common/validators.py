from __future__ import annotations

import re
from typing import Any, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Any) -> str:
    email = require_non_empty(value, "Email")
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"Invalid email address: {email}")
    return email


def require_iso_date(value: Any, field_name: str = "Date") -> str:
    text = require_non_empty(value, field_name)
    if not _ISO_DATE_RE.match(text):
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")
    return text


def clamp(value: Any, *, low: int, high: int) -> int:
    """Coerce to int and clamp into [low, high]; junk becomes ``low``."""
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = low
    return max(low, min(number, high))

from __future__ import annotations

from datetime import datetime, timezone


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def now_millis() -> int:
    return int(now_local().timestamp() * 1000)


def millis_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(int(value) / 1000)


def date_from_millis(value: int) -> str:
    return millis_to_datetime(value).strftime("%Y-%m-%d")


def utc_iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()

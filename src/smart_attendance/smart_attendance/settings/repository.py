from __future__ import annotations

from typing import Optional, Protocol

from .model import SystemSettings


class SettingsRepository(Protocol):
    def get(self, settings_id: str) -> Optional[SystemSettings]:
        raise NotImplementedError

    def upsert(self, settings_id: str, settings: SystemSettings) -> None:
        raise NotImplementedError

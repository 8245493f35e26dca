from __future__ import annotations

from typing import Any, Mapping

from ..core.constants import SETTINGS_ID
from ..core.exceptions import ValidationError
from .model import SystemSettings
from .repository import SettingsRepository


class SettingsService:
    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> SystemSettings:
        current = self._settings.get(SETTINGS_ID)
        if current is None:
            current = SystemSettings()
            self._settings.upsert(SETTINGS_ID, current)
        return current

    def save_settings(self, payload: Mapping[str, Any]) -> SystemSettings:
        if not isinstance(payload, Mapping):
            raise ValidationError("Settings must be an object")
        updated = self.get_settings().merged(payload)
        self._settings.upsert(SETTINGS_ID, updated)
        return updated

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

logger = logging.getLogger(__name__)


class LocalStorage:
    """Key-value store persisted as one JSON document.

    Without a ``path`` the data lives only in memory.
    """

    def __init__(self, path: Optional[str | Path] = None):
        self._path = Path(path) if path else None
        self._data: dict[str, Any] = self._load()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._path is None or not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8") or "{}")
        except json.JSONDecodeError as e:
            logger.warning("local storage %s is corrupt, starting empty: %s", self._path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _flush(self) -> None:
        if self._path is None:
            return
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, self._path)

    def get_item(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set_item(self, key: str, value: Any) -> None:
        self._data[key] = value
        self._flush()

    def keys(self) -> list[str]:
        return list(self._data)

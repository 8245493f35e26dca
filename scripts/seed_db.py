from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "smart_attendance"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from config import get_settings_module

from smart_attendance.container import build_container
from smart_attendance.core.constants import ADMIN_EMAIL
from smart_attendance.database.bootstrap import ensure_admin
from smart_attendance.database.connection import DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    container = build_container(db_config=db_config)
    created = ensure_admin(container.users_repo)
    state = "created" if created else "already present"
    print(f"OK: Admin {ADMIN_EMAIL} {state} -> {DBConfig.from_dict(db_config).describe()}")


if __name__ == "__main__":
    main()

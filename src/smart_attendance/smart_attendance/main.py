from __future__ import annotations

import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask
from flask_cors import CORS

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_admin, list_tables
from .database.connection import DBConfig
from .notices.controller import register as register_notices
from .reports.controller import register as register_reports
from .settings.controller import register as register_settings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None) -> Flask:
    """Build the REST API.

    A prepared ``container`` skips database bootstrap entirely (tests pass
    one wired to in-memory repositories).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    _configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["MAX_CONTENT_LENGTH"] = getattr(settings, "MAX_CONTENT_LENGTH", None)

    origins = [o.strip() for o in str(getattr(settings, "CORS_ORIGINS", "*")).split(",") if o.strip()]
    CORS(app, origins=origins or "*")

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info("settings=%s db=%s", settings_module, DBConfig.from_dict(db_config).describe())

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config)
            logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

        container = build_container(db_config=db_config)

    if getattr(settings, "SEED_ADMIN", True):
        ensure_admin(container.users_repo)

    register_users(app, container)
    register_attendance(app, container)
    register_notices(app, container)
    register_settings(app, container)
    register_reports(app, container)

    return app

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .admin.controller import register as register_admin
from .attendance.controller import register as register_attendance
from .common.http import CONTAINER_KEY, register_error_handlers, register_request_logging
from .common.logging_setup import configure_logging
from .config import get_settings_module
from .container import Container, build_container
from .database.bootstrap import apply_schema, ensure_demo_admin, list_tables
from .groups.controller import register as register_groups
from .holidays.controller import register as register_holidays
from .practice.controller import register as register_practice
from .qr.controller import register as register_qr
from .reports.controller import register as register_reports
from .schedules.controller import register as register_schedules
from .specialties.controller import register as register_specialties
from .students.controller import register as register_students
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a ready ``container`` to skip the database entirely (tests).
    """
    load_dotenv(override=False)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    app.secret_key = settings.SECRET_KEY
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.ensure_ascii = False

    if container is None:
        db_config = settings.DB_CONFIG
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("schema ready (tables=%s)", len(list_tables(db_config)))
        if getattr(settings, "AUTO_SEED_DB", False):
            ensure_demo_admin(db_config)
        container = build_container(settings)

    app.extensions[CONTAINER_KEY] = container

    register_error_handlers(app)
    register_request_logging(app, cors_origins=getattr(settings, "CORS_ORIGINS", ""))

    register_users(app, container)
    register_specialties(app, container)
    register_groups(app, container)
    register_students(app, container)
    register_holidays(app, container)
    register_schedules(app, container)
    register_practice(app, container)
    register_attendance(app, container)
    register_qr(app, container)
    register_reports(app, container)
    register_admin(app, container)

    return app

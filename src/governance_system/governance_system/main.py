from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .common.http import register_error_handlers
from .common.logging_config import setup_logging
from .container import Container, build_container
from .core.constants import DEFAULT_NOTIFICATION_QUEUE_SIZE, DEFAULT_TOKEN_MAX_AGE_SECONDS
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_accounts, list_tables

from .attendance.controller import register as register_attendance
from .clearances.controller import register as register_clearances
from .events.controller import register as register_events
from .identity.controller import register as register_identity
from .messaging.controller import register as register_messaging
from .notifications.controller import register as register_notifications
from .organizations.controller import register as register_organizations
from .points.controller import register as register_points

logger = logging.getLogger(__name__)

_DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"


def _prepare_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=_DATABASE_DIR / "schema.sql")
        logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        apply_seed_sql(db_config, seed_path=_DATABASE_DIR / "seed.sql")
        ensure_demo_accounts(db_config)
        logger.info("Demo seed ready")


def create_app(container: Optional[Container] = None) -> Flask:
    """Flask app factory. Pass a prebuilt `container` to skip database setup."""
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    setup_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        _prepare_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            token_max_age=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS", DEFAULT_TOKEN_MAX_AGE_SECONDS)),
            notification_queue_size=int(getattr(settings, "NOTIFICATION_QUEUE_SIZE", DEFAULT_NOTIFICATION_QUEUE_SIZE)),
        )

    app.extensions["governance_container"] = container
    register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    register_identity(app, container)
    register_organizations(app, container)
    register_events(app, container)
    register_attendance(app, container)
    register_clearances(app, container)
    register_points(app, container)
    register_messaging(app, container)
    register_notifications(app, container)

    return app

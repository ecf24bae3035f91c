from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import Container, build_container
from .core.constants import DEFAULT_HISTORY_LIMIT, HISTORY_RETENTION_DAYS
from .dashboard.controller import register as register_dashboard
from .database.bootstrap import apply_schema, ensure_demo_data, list_tables
from .history.controller import register as register_history
from .roster.controller import register as register_roster
from .sessions.controller import register as register_sessions
from .teachers.controller import register as register_teachers

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(container: Optional[Container] = None, *, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    retention_days = int(getattr(settings, "HISTORY_RETENTION_DAYS", HISTORY_RETENTION_DAYS))
    app.config["DEFAULT_HISTORY_LIMIT"] = int(getattr(settings, "DEFAULT_HISTORY_LIMIT", DEFAULT_HISTORY_LIMIT))
    logger.info("Starting with settings=%s", settings_module)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            logger.info("Schema ready (tables=%d)", len(list_tables(db_config)))
        if bool(getattr(settings, "AUTO_SEED_DB", False)):
            ensure_demo_data(db_config)
            logger.info("Demo teacher and roster ready")
        container = build_container(db_config=db_config, retention_days=retention_days)

    app.extensions["swipe_attendance"] = container

    register_teachers(app, container)
    register_roster(app, container)
    register_sessions(app, container)
    register_history(app, container)
    register_dashboard(app, container)

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify({"success": False, "message": "Route not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(_error):
        return jsonify({"success": False, "message": "Method not allowed"}), 405

    return app

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, request

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .chat.controller import register as register_chat
from .container import Container, build_container
from .core.constants import (
    DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
    DEFAULT_CHAT_LIMIT,
    DEFAULT_SESSION_TTL_SECONDS,
)
from .database.bootstrap import apply_schema, apply_seed_sql, ensure_demo_user, list_tables
from .favorites.controller import register as register_favorites
from .health.controller import register as register_health
from .logging_config import init_logging
from .progress.controller import register as register_progress
from .sessions.middleware import install as install_sessions
from .studies.controller import register as register_studies
from .topics.controller import register as register_topics
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

DATABASE_DIR = Path(__file__).resolve().parents[3] / "database"

_SETTING_DEFAULTS = {
    "DEBUG": False,
    "TESTING": False,
    "AUTO_INIT_DB": False,
    "AUTO_SEED_DB": False,
    "PORT": 8181,
    "LOG_LEVEL": "INFO",
    "LOG_FORMAT": "text",
    "CORS_ORIGINS": ["*"],
    "SESSION_TTL_SECONDS": DEFAULT_SESSION_TTL_SECONDS,
    "ATTENDANCE_CODE_TTL_SECONDS": DEFAULT_ATTENDANCE_CODE_TTL_SECONDS,
    "CHAT_DEFAULT_LIMIT": DEFAULT_CHAT_LIMIT,
    "ENABLE_DEMO_ROUTES": False,
}


def _load_settings(app: Flask, settings_module: str) -> dict:
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    for key, default in _SETTING_DEFAULTS.items():
        app.config[key] = getattr(settings, key, default)
    app.config["SETTINGS_MODULE"] = settings_module
    return dict(getattr(settings, "DB_CONFIG"))


def _init_database(app: Flask, db_config: dict) -> None:
    if app.config["AUTO_INIT_DB"]:
        apply_schema(db_config, schema_path=DATABASE_DIR / "schema.sql")
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))
    if app.config["AUTO_SEED_DB"]:
        apply_seed_sql(db_config, seed_path=DATABASE_DIR / "seed.sql")
        ensure_demo_user(db_config)
        logger.info("demo seed ready")


def _install_cors(app: Flask) -> None:
    origins = app.config["CORS_ORIGINS"]
    if isinstance(origins, str):
        origins = [o.strip() for o in origins.split(",") if o.strip()]

    @app.after_request
    def _cors_headers(response):
        if not request.path.startswith("/api"):
            return response
        origin = request.headers.get("Origin")
        if "*" in origins:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
        else:
            return response
        response.headers["Access-Control-Allow-Headers"] = "Content-Type, Authorization"
        response.headers["Access-Control-Allow-Methods"] = "GET, POST, PATCH, DELETE, OPTIONS"
        return response


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)
    app.json.ensure_ascii = False

    settings_module = settings_module or get_settings_module()
    db_config = _load_settings(app, settings_module)
    init_logging(app)

    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if container is None:
        _init_database(app, db_config)
        container = build_container(
            db_config=db_config,
            session_ttl_seconds=int(app.config["SESSION_TTL_SECONDS"]),
            attendance_code_ttl_seconds=int(app.config["ATTENDANCE_CODE_TTL_SECONDS"]),
            chat_default_limit=int(app.config["CHAT_DEFAULT_LIMIT"]),
        )
    app.extensions["study_up"] = container

    _install_cors(app)
    install_sessions(app, container.session_store)

    register_health(app, container)
    register_users(app, container)
    register_topics(app, container)
    register_chat(app, container)
    register_studies(app, container)
    register_favorites(app, container)
    register_attendance(app, container)
    register_progress(app, container)

    return app

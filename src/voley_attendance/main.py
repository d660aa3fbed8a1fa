from __future__ import annotations

import atexit
import importlib
import logging
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from .config import get_settings_module
from .container import build_container
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    StoreError,
    ValidationError,
)
from .core.logging import setup_logging
from .database.bootstrap import apply_schema, ensure_default_admin, list_tables, seed_default_trainings
from .database.connection import DatabaseConnection, DBConfig
from .database.migrations import apply_migrations

from .analytics.controller import register as register_analytics
from .attendance.controller import register as register_attendance
from .players.controller import register as register_players
from .reports.controller import register as register_reports
from .trainings.controller import register as register_trainings
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def prepare_store(db: DatabaseConnection, *, admin_email: str, admin_password: str, seed_trainings: bool) -> list[str]:
    """Bring the store to the current schema; returns migrations applied now."""
    apply_schema(db)
    ensure_default_admin(db, email=admin_email, password=admin_password)
    applied = apply_migrations(db)
    if seed_trainings:
        seed_default_trainings(db)
    return applied


def _register_error_handlers(app: Flask) -> None:
    def _error(message: str, status: int):
        return jsonify({"error": message}), status

    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e) or "Invalid input", 400)

    @app.errorhandler(AuthenticationError)
    def handle_authentication(e: AuthenticationError):
        return _error("Invalid credentials", 401)

    @app.errorhandler(AuthorizationError)
    def handle_authorization(e: AuthorizationError):
        return _error("Forbidden", 403)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _error(str(e) or "Not found", 404)

    @app.errorhandler(StoreError)
    def handle_store(e: StoreError):
        return _error("Internal server error", 500)

    @app.errorhandler(HTTPException)
    def handle_http(e: HTTPException):
        return _error(e.name, e.code or 500)

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        logger.exception("Unhandled error")
        return _error("Internal server error", 500)


def create_app(settings_module: Optional[str] = None, **overrides) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config.from_object(settings)
    app.config.update(overrides)
    app.secret_key = app.config["SECRET_KEY"]

    setup_logging(app.config.get("LOG_LEVEL", "INFO"), app.config.get("LOG_FORMAT", "text"))
    logger.info("Starting with settings=%s db=%s", settings_module, app.config["DB_PATH"])

    db = DatabaseConnection(DBConfig(path=str(app.config["DB_PATH"]))).open()
    atexit.register(db.close)

    applied = prepare_store(
        db,
        admin_email=app.config["ADMIN_EMAIL"],
        admin_password=app.config["ADMIN_PASSWORD"],
        seed_trainings=bool(app.config.get("SEED_DEFAULT_TRAININGS", False)),
    )
    if applied:
        logger.info("Migrations applied: %s", ", ".join(applied))
    logger.debug("Store ready (tables=%s)", len(list_tables(db)))

    container = build_container(db, skip_foreign_players=bool(app.config.get("BULK_SKIP_FOREIGN_PLAYERS", True)))

    register_users(app, container)
    register_players(app, container)
    register_trainings(app, container)
    register_attendance(app, container)
    register_analytics(app, container)
    register_reports(app, container)
    _register_error_handlers(app)

    @app.route("/api/health", methods=["GET"], endpoint="api_health")
    def health():
        return jsonify({"status": "ok"})

    return app

from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.log import configure_logging
from .container import Container, build_container
from .core.constants import DEFAULT_JWT_ALGORITHM, STORE_RETRY_AFTER_SECONDS
from .core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    DomainError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from .database.bootstrap import apply_schema, ensure_default_users, list_tables
from .sessions.controller import register as register_sessions

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"

_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (StoreUnavailableError, 503),
)


def status_for(error: DomainError) -> int:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return code
    return 400


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(error: DomainError):
        code = status_for(error)
        response = jsonify({"success": False, "message": str(error), "retryable": error.retryable})
        response.status_code = code
        if error.retryable:
            response.headers["Retry-After"] = str(STORE_RETRY_AFTER_SECONDS)
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        if isinstance(error, HTTPException):
            return error
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        response = jsonify({"success": False, "message": "Server error", "retryable": False})
        response.status_code = 500
        return response


def _bootstrap_database(settings, db_config: dict) -> None:
    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config, schema_path=SCHEMA_PATH)
        logger.info("Schema ready (tables=%s)", len(list_tables(db_config)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        inserted = ensure_default_users(db_config)
        logger.info("Demo seed ready (inserted=%s)", inserted)


def create_app(container: Optional[Container] = None) -> Flask:
    """Application factory.

    Pass a prebuilt ``container`` (e.g. in-memory repositories in tests) to
    skip all database wiring.
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

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
        _bootstrap_database(settings, db_config)
        container = build_container(
            db_config=db_config,
            secret_key=app.secret_key,
            jwt_algorithm=getattr(settings, "JWT_ALGORITHM", DEFAULT_JWT_ALGORITHM),
        )

    register_sessions(app, container)
    register_attendance(app, container)
    register_error_handlers(app)

    @app.route("/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    return app

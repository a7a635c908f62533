"""MoodJournal application factory and bootstrap."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask

from moodjournal.config import config_by_name
from moodjournal.extensions import init_extensions, login_manager


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the MoodJournal Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(level=app.config.get("LOG_LEVEL", "INFO"))

    instance_root.mkdir(parents=True, exist_ok=True)

    # Normalize sqlite path to absolute to avoid "unable to open database file"
    db_uri = app.config.get("SQLALCHEMY_DATABASE_URI")
    is_sqlite = db_uri and db_uri.startswith("sqlite:")
    if is_sqlite and db_uri.startswith("sqlite:///") and db_uri != "sqlite:///:memory:":
        db_path = db_uri.replace("sqlite:///", "", 1)
        abs_path = project_root / db_path
        abs_path.parent.mkdir(parents=True, exist_ok=True)
        app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{abs_path}"

    engine_opts = app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {})
    if not is_sqlite:
        # Remove the sqlite busy timeout, which breaks Postgres/MySQL drivers
        connect_args = engine_opts.get("connect_args") or {}
        connect_args.pop("timeout", None)
        if not connect_args:
            engine_opts.pop("connect_args", None)

    export_dir = Path(app.config.get("EXPORT_DIR") or "instance/exports").expanduser()
    if not export_dir.is_absolute():
        export_dir = project_root / export_dir
    app.config["EXPORT_DIR"] = str(export_dir)

    init_extensions(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _register_auth_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from moodjournal.scripts.manage import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from moodjournal.core.auth.controllers import auth_bp
    from moodjournal.domains.journal.controllers.analytics_api import analytics_api_bp
    from moodjournal.domains.journal.controllers.export_api import export_api_bp
    from moodjournal.domains.journal.controllers.journal_api import journal_api_bp
    from moodjournal.domains.journal.controllers.tag_api import tag_api_bp

    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(journal_api_bp, url_prefix="/api/journal")
    app.register_blueprint(tag_api_bp, url_prefix="/api/tags")
    app.register_blueprint(analytics_api_bp, url_prefix="/api/analytics")
    app.register_blueprint(export_api_bp, url_prefix="/api/export")


def _register_error_handlers(app: Flask) -> None:
    """JSON error responses, one status per error kind."""
    from werkzeug.exceptions import HTTPException

    from moodjournal.core.errors import (
        DuplicateDateEntry,
        DuplicateTag,
        ExportCancelled,
        ExportFailed,
        InvalidEntry,
        InvalidPin,
        JournalError,
        NoUser,
        OperationFailed,
        UserExists,
        WrongPin,
    )

    status_by_error = (
        (InvalidEntry, 400, "validation_error"),
        (InvalidPin, 400, "invalid_pin"),
        (WrongPin, 401, "wrong_pin"),
        (DuplicateDateEntry, 409, "duplicate_date"),
        (DuplicateTag, 409, "duplicate_tag"),
        (UserExists, 409, "user_exists"),
        (NoUser, 409, "no_user"),
        (ExportCancelled, 409, "export_cancelled"),
        (ExportFailed, 500, "export_failed"),
        (OperationFailed, 500, "operation_failed"),
    )

    @app.errorhandler(JournalError)
    def _journal_error(exc: JournalError):
        for error_cls, status, code in status_by_error:
            if isinstance(exc, error_cls):
                if status >= 500:
                    app.logger.error("%s: %s", code, exc)
                return {"ok": False, "error": code, "message": str(exc)}, status
        app.logger.exception("Unmapped journal error: %s", exc)
        return {"ok": False, "error": "unexpected_error"}, 500

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


def _register_auth_handlers(app: Flask) -> None:
    """Login manager wiring for the PIN-gated session."""

    @login_manager.user_loader
    def _load_user(user_id: str):
        from moodjournal.core.auth.models import User
        from moodjournal.extensions import db

        return db.session.get(User, user_id) if user_id else None

    @login_manager.unauthorized_handler
    def _unauthorized():
        return {"ok": False, "error": "unauthorized"}, 401

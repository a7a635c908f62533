"""Shared extensions for the MoodJournal application."""

import sqlite3
from pathlib import Path

from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine

# Core persistence and access-gate primitives
db = SQLAlchemy(session_options={"expire_on_commit": False})
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(key_func=get_remote_address, enabled=True, default_limits=["200 per hour"])


@event.listens_for(Engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE CASCADE unless the pragma is set per connection.
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    db.init_app(app)
    migrations_dir = Path(__file__).resolve().parent / "migrations"
    migrate.init_app(app, db, directory=str(migrations_dir))
    login_manager.init_app(app)
    limiter.enabled = app.config.get("RATELIMIT_ENABLED", True)
    limiter.default_limits = [app.config.get("RATELIMIT_DEFAULT", "200 per hour")]
    limiter.storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    limiter.init_app(app)

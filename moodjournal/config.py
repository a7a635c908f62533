"""Application configuration for MoodJournal."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, Type

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url

load_dotenv()


def _engine_options_from_uri(uri: str) -> dict:
    url = make_url(uri)
    if url.get_backend_name() == "sqlite":
        return {"pool_pre_ping": True, "connect_args": {"timeout": 30}}
    if url.get_backend_name() in {"postgresql", "postgres"}:
        timeout = int(os.environ.get("DB_CONNECT_TIMEOUT_SECONDS", "10"))
        return {"pool_pre_ping": True, "connect_args": {"connect_timeout": timeout}}
    return {"pool_pre_ping": True}


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def default_export_dir() -> str:
    """Downloads folder of the current user, or an instance-local fallback."""
    downloads = Path.home() / "Downloads"
    if downloads.is_dir():
        return str(downloads)
    return "instance/exports"


class BaseConfig:
    """Base configuration loaded for all environments."""

    SECRET_KEY = os.environ.get("SECRET_KEY", "change-me")
    SQLALCHEMY_DATABASE_URI = os.environ.get("DATABASE_URL", "sqlite:///instance/moodjournal.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Substring search collation for title/description lookups.
    SEARCH_CASE_SENSITIVE = _flag("SEARCH_CASE_SENSITIVE", "false")

    EXPORT_DIR = os.environ.get("EXPORT_DIR") or default_export_dir()
    EXPORT_WORKERS = int(os.environ.get("EXPORT_WORKERS", "1"))

    RATELIMIT_DEFAULT = "200/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = _flag("RATELIMIT_ENABLED", "true")
    PIN_RATE_LIMIT = os.environ.get("PIN_RATE_LIMIT", "10 per minute")


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = os.environ.get("TEST_DATABASE_URL", "sqlite:///instance/test.db")
    SQLALCHEMY_ENGINE_OPTIONS = _engine_options_from_uri(SQLALCHEMY_DATABASE_URI)
    EXPORT_DIR = "instance/test-exports"
    RATELIMIT_ENABLED = False
    LOG_LEVEL = "DEBUG"


class ProductionConfig(BaseConfig):
    ENV = "production"
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "WARNING")


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}

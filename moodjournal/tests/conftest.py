import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from moodjournal import create_app
from moodjournal.domains.journal.services.export_service import shutdown_export_workers
from moodjournal.domains.journal.services.storage_service import initialize_storage
from moodjournal.extensions import db

TEST_PIN = "1234"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app(tmp_path):
    """
    Create a per-test app backed by its own SQLite file.

    Storage is initialized (tables + prebuilt tags) inside a pushed app
    context, so tests can call services directly.
    """
    app = create_app(
        "testing",
        {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'test.db'}",
            "EXPORT_DIR": str(tmp_path / "exports"),
        },
    )
    ctx = app.app_context()
    ctx.push()
    try:
        initialize_storage()
        yield app
    finally:
        shutdown_export_workers()
        db.session.remove()
        db.engine.dispose()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def logged_in_client(client):
    """Client with the PIN set up and an authenticated session."""
    resp = client.post("/auth/pin/setup", json={"pin": TEST_PIN})
    assert resp.status_code == 201
    return client

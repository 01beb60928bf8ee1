"""
Shared fixtures for the tag API tests.

Each test gets its own SQLite file under ``tmp_path`` and a static
bearer token, both patched onto the global ``settings`` object.
"""
import json

import pytest
from fastapi.testclient import TestClient

from web_archive_api.app.core.config import settings
from web_archive_api.app.core.db import get_connection, init_db


TEST_TOKEN = "test-bearer-token"


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the application at a fresh, migrated database."""
    path = tmp_path / "tags.db"
    monkeypatch.setattr(settings, "database_url", str(path))
    monkeypatch.setattr(settings, "bearer_token", TEST_TOKEN)
    init_db()
    return path


@pytest.fixture
def db(db_path):
    """Connection to the test database."""
    conn = get_connection()
    yield conn
    conn.close()


@pytest.fixture
def client(db_path):
    """Authenticated TestClient."""
    from web_archive_api.app.main import app
    with TestClient(app) as test_client:
        test_client.headers.update({"Authorization": f"Bearer {TEST_TOKEN}"})
        yield test_client


@pytest.fixture
def anonymous_client(db_path):
    from web_archive_api.app.main import app
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_tag(db):
    """Insert a tag row directly and return its id."""
    def _make_tag(name="research", color="#ff0000", page_ids=None):
        cursor = db.execute(
            "INSERT INTO tags (name, color, page_ids) VALUES (?, ?, ?)",
            (name, color, json.dumps(page_ids or [])),
        )
        db.commit()
        return cursor.lastrowid
    return _make_tag


@pytest.fixture
def read_tag(db):
    """Return a stored tag row as a dict with decoded page ids."""
    def _read_tag(tag_id):
        row = db.execute("SELECT * FROM tags WHERE id = ?", (tag_id,)).fetchone()
        if row is None:
            return None
        tag = dict(row)
        tag["page_ids"] = json.loads(tag["page_ids"])
        return tag
    return _read_tag

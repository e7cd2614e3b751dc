"""Pytest fixtures: SQLite database, temp-dir storage, and no network."""
import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
import requests
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient

from ticketbook.config import settings
from ticketbook.database import Base, get_db
from ticketbook.dependencies import (
    get_event_bridge,
    get_photo_bridge,
    get_photo_storage,
    get_qr_storage,
)
from ticketbook.main import app
from ticketbook.services.storage import LocalStorage

# Import all models so they register with Base.metadata
from ticketbook.models.event import Event  # noqa: F401

SQLITE_URL = "sqlite:///./test.db"


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh SQLite engine for each test."""
    engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})

    # Enable WAL mode for better concurrency
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn, connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(db_engine):
    """Yield a database session, closed after the test."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def qr_storage(tmp_path):
    return LocalStorage(tmp_path / "qr-codes", "/qr-codes")


@pytest.fixture(scope="function")
def photo_storage(tmp_path):
    return LocalStorage(tmp_path / "uploads", "/uploads")


@pytest.fixture(scope="function")
def client(db_engine, qr_storage, photo_storage, tmp_path, monkeypatch):
    """TestClient on SQLite with local temp-dir storage and the bridge disabled."""
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def _override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(settings, "PUBLIC_DIR", str(tmp_path / "public"))
    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_qr_storage] = lambda: qr_storage
    app.dependency_overrides[get_photo_storage] = lambda: photo_storage
    app.dependency_overrides[get_event_bridge] = lambda: None
    app.dependency_overrides[get_photo_bridge] = lambda: None
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
EVENT_FORM = {
    "title": "Concert",
    "place": "Arena",
    "gradient": "from-blue-200 to-blue-100",
    "icon": "music",
    "date": "2030-01-01",
    "time": "20:00",
}


def create_test_event(client: TestClient, files: dict = None, **overrides) -> dict:
    """Helper: POST /api/events as multipart and return response JSON."""
    form = {**EVENT_FORM, **overrides}
    resp = client.post("/api/events", data=form, files=files)
    assert resp.status_code == 201, resp.text
    return resp.json()


def fake_response(status_code: int, body=None) -> requests.Response:
    """A ``requests.Response`` with a JSON (or empty) body, for fake sessions."""
    resp = requests.Response()
    resp.status_code = status_code
    resp._content = json.dumps(body).encode() if body is not None else b""
    resp.headers["Content-Type"] = "application/json"
    return resp


class FakeDriveService:
    """Stands in for ``googleapiclient`` Drive v3: ``files().create(...).execute()``."""

    def __init__(self, response=None, error: Exception = None):
        self.response = response if response is not None else {
            "id": "drive-file-1",
            "webViewLink": "https://drive.google.com/file/d/drive-file-1/view",
        }
        self.error = error
        self.created = []

    def files(self):
        return self

    def create(self, body, media_body, fields):
        self.created.append({"body": body, "media": media_body, "fields": fields})
        return self

    def execute(self):
        if self.error is not None:
            raise self.error
        return self.response

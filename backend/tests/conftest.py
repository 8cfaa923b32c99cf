"""
Pytest configuration and fixtures
"""
import os
import tempfile
from pathlib import Path

import pytest

# Point storage at a throwaway directory before the app reads its settings
_tmp_dir = Path(tempfile.mkdtemp(prefix="smartqr-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_tmp_dir / 'test.db'}")
os.environ.setdefault("QR_SAVE_DIR", str(_tmp_dir / "qr"))
os.environ.setdefault("DATA_SAVE_DIR", str(_tmp_dir / "data"))
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient

from smartqr.core.db import Base, SessionLocal, engine
from smartqr.main import app
from smartqr.routers.uploads import get_orchestrator
from smartqr.services.uploader import UploadOrchestrator, UploadResult


@pytest.fixture(autouse=True)
def clean_db():
    """Fresh schema for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


class FakeTransport:
    """Upload transport that reports progress in fixed steps without any network."""

    def __init__(self, steps=(25, 50, 75, 100), result=None, error=None):
        self.steps = steps
        self.result = result or UploadResult(url="https://res.cloudinary.com/demo/raw/upload/v1/report.pdf", public_id="report")
        self.error = error
        self.calls = 0

    def send(self, file, on_progress):
        self.calls += 1
        for step in self.steps:
            on_progress(step, 100)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def fake_transport():
    return FakeTransport()


@pytest.fixture
def orchestrator(fake_transport):
    return UploadOrchestrator(transport=fake_transport, online_check=lambda: True)


@pytest.fixture
def upload_client(client, orchestrator):
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    return client


@pytest.fixture
def make_transport():
    return FakeTransport

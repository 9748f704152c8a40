import os
import tempfile

import pytest

_DB_DIR = tempfile.mkdtemp(prefix="hopebot-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["OPENAI_API_KEY"] = ""
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ENV"] = "test"
os.environ["TIMEZONE"] = "UTC"
os.environ["MENTAL_HEALTH_DOC_PATH"] = ""

from fastapi.testclient import TestClient  # noqa: E402

from hopebot.core.config import settings  # noqa: E402
from hopebot.db.base import Base  # noqa: E402
from hopebot.db.session import SessionLocal, engine  # noqa: E402
from hopebot.main import app  # noqa: E402
from hopebot.services import knowledge  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    knowledge.reset_background_document()
    yield
    knowledge.reset_background_document()


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")


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


@pytest.fixture
def register(client):
    def _register(username="alice", email="alice@example.com", password="s3cret-pass"):
        return client.post(
            "/api/auth/register",
            json={"username": username, "email": email, "password": password},
        )
    return _register


@pytest.fixture
def logged_in(client, register):
    resp = register()
    assert resp.status_code == 201
    return resp.json()["user"]

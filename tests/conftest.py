import os

# must be in place before tasktracker.config is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["DATABASE_URL"] = "sqlite:///./test_tasktracker.db"

import pytest
from fastapi.testclient import TestClient

from tasktracker.main import app
from tasktracker.database import Base, SessionLocal, engine


# Recreate all tables for each test
@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def signup():
    """Register a user on a fresh client and return ``(token, user, headers)``.

    A separate client keeps the token cookie out of the test's own client.
    """
    def _signup(username, email=None, password="pw123"):
        c = TestClient(app)
        r = c.post("/api/auth/register", json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        })
        assert r.status_code == 200, r.text
        data = r.json()
        return data["token"], data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _signup

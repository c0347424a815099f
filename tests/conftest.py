"""Shared fixtures for Taskboard tests."""

import pytest
from fastapi.testclient import TestClient
from ulid import ULID

from taskboard.config import Settings
from taskboard.db import Database, create_user
from taskboard.main import create_app
from taskboard.models import Identity
from taskboard.services import TaskService


class FakeClock:
    """Monotonic clock that advances one second per reading."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway database."""
    return Settings(
        _env_file=None,
        env="test",
        database_path=tmp_path / "tasks.db",
        jwt_secret="test-secret",
    )


@pytest.fixture
def db(settings):
    database = Database(settings.database_path)
    database.init_schema()
    return database


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_identity(db):
    """Create a stored user and return its identity."""

    def _make(name: str) -> Identity:
        user = create_user(
            db,
            user_id=str(ULID()),
            name=name,
            email=f"{name.lower()}@example.com",
            password_hash="unused",
            created_at=0.0,
        )
        return Identity(id=user["id"], name=user["name"], email=user["email"], role=user["role"])

    return _make


@pytest.fixture
def alice(make_identity):
    return make_identity("Alice")


@pytest.fixture
def bob(make_identity):
    return make_identity("Bob")


@pytest.fixture
def service(db, settings, clock):
    return TaskService(db, settings, clock=clock)


@pytest.fixture
def client(settings):
    """Test client running the app lifespan against a temporary database."""
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


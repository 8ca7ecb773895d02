"""Pytest fixtures for task service testing."""

import os
from datetime import datetime, timedelta

import pytest


# Disable OpenTelemetry for tests
os.environ["OTEL_SDK_DISABLED"] = "true"


class FakeClock:
    """Clock that advances one second on every reading."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, 12, 0, 0)) -> None:
        self.current = start

    def __call__(self) -> datetime:
        now = self.current
        self.current += timedelta(seconds=1)
        return now


@pytest.fixture
def clock():
    """Deterministic, strictly increasing clock."""
    return FakeClock()


@pytest.fixture
def app(clock):
    """Create test application backed by in-memory SQLite."""
    from task_service import create_app
    from task_service.config import TestConfig
    from task_service.extensions import db as _db
    from task_service.repositories import SQLAlchemyTaskRepository

    app = create_app(TestConfig, repository=SQLAlchemyTaskRepository(_db.session, clock=clock))
    app.config["TESTING"] = True

    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def db(app):
    """Create test database."""
    from task_service.extensions import db as _db

    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def memory_repository(clock):
    """Empty in-memory task repository."""
    from task_service.repositories import InMemoryTaskRepository

    return InMemoryTaskRepository(clock=clock)


@pytest.fixture
def memory_client(memory_repository):
    """Test client for an app served from the in-memory repository."""
    from task_service import create_app
    from task_service.config import TestConfig

    app = create_app(TestConfig, repository=memory_repository)
    return app.test_client()


@pytest.fixture
def task_payload():
    """Valid task creation body."""
    return {
        "title": "Write report",
        "description": "Quarterly numbers",
        "due_date": "2024-02-01",
        "status": "pending",
    }

"""Test configuration for the task tracker."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from task_tracker.main import create_app  # noqa: E402
from task_tracker.repositories.task_repository import InMemoryTaskRepository  # noqa: E402
from task_tracker.services.task_service import TaskService  # noqa: E402


class FakeClock:
    """Controllable replacement for ``now_utc``."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2030, 1, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def task_service(repository: InMemoryTaskRepository, clock: FakeClock) -> TaskService:
    return TaskService(repository, clock=clock)


@pytest.fixture
def app(repository: InMemoryTaskRepository):
    return create_app(repository=repository)


@pytest.fixture
def client(app) -> TestClient:
    """Provide a FastAPI test client."""
    return TestClient(app)

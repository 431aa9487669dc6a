"""
Pytest fixtures for Project Advisor.

Tests mirror src/project_advisor structure.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from project_advisor.api.v1.analytics import get_advisory
from project_advisor.main import app
from project_advisor.models import Project, Task, TeamMember
from project_advisor.services.advisory_client import AdvisoryUnavailable

NOW = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)


class FailingAdvisory:
    """Advisory double that is never available."""

    def __init__(self) -> None:
        self.calls = 0

    async def generate(self, prompt: str) -> str:
        self.calls += 1
        raise AdvisoryUnavailable("test double")


class CannedAdvisory:
    """Advisory double that returns a fixed reply and records prompts."""

    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_project() -> Callable[..., Project]:
    def _make(**overrides: Any) -> Project:
        fields: dict[str, Any] = {
            "id": "proj-1",
            "name": "Portal",
            "description": "Customer portal",
            "start_date": NOW - timedelta(days=30),
            "end_date": NOW + timedelta(days=60),
            "actual_hours": 0,
        }
        fields.update(overrides)
        return Project(**fields)

    return _make


@pytest.fixture
def make_task() -> Callable[..., Task]:
    counter = {"n": 0}

    def _make(**overrides: Any) -> Task:
        counter["n"] += 1
        fields: dict[str, Any] = {
            "id": f"task-{counter['n']:03d}",
            "project_id": "proj-1",
            "title": f"Task {counter['n']}",
            "status": "todo",
            "priority": "medium",
            "estimated_hours": 0,
            "actual_hours": 0,
            "due_date": NOW + timedelta(days=30),
        }
        fields.update(overrides)
        return Task(**fields)

    return _make


@pytest.fixture
def make_member() -> Callable[..., TeamMember]:
    def _make(member_id: str, **overrides: Any) -> TeamMember:
        fields: dict[str, Any] = {"id": member_id, "name": member_id.title(), "role": "Developer", "max_workload": 40}
        fields.update(overrides)
        return TeamMember(**fields)

    return _make


@pytest.fixture
def failing_advisory() -> FailingAdvisory:
    return FailingAdvisory()


@pytest.fixture
def canned_advisory() -> Callable[[str], CannedAdvisory]:
    return CannedAdvisory


@pytest.fixture
def client() -> Iterator[TestClient]:
    app.dependency_overrides[get_advisory] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()

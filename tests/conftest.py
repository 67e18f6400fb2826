"""Shared fixtures: fake repositories, services, an in-memory database, an API client."""

import pytest
from fastapi.testclient import TestClient

from toodo.application import (
    ActivityService,
    DependencyService,
    ProjectService,
    TagService,
    TodoService,
    WorkPeriodService,
)
from toodo.config import Settings
from toodo.infrastructure import Database
from toodo.interfaces.api import create_app

from tests.fakes import (
    FakeClock,
    InMemoryProjectRepository,
    InMemoryTagRepository,
    InMemoryTodoActivityRepository,
    InMemoryTodoRepository,
    InMemoryWorkPeriodRepository,
)


# =============================================================================
# Fakes and services
# =============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def todo_repo():
    return InMemoryTodoRepository()


@pytest.fixture
def project_repo(todo_repo):
    return InMemoryProjectRepository(todo_repo)


@pytest.fixture
def tag_repo(todo_repo):
    return InMemoryTagRepository(todo_repo)


@pytest.fixture
def activity_repo():
    return InMemoryTodoActivityRepository()


@pytest.fixture
def work_period_repo(activity_repo):
    return InMemoryWorkPeriodRepository(activity_repo)


@pytest.fixture
def todo_service(todo_repo, activity_repo, project_repo, clock):
    return TodoService(todo_repo, activities=activity_repo, projects=project_repo, clock=clock)


@pytest.fixture
def dependency_service(todo_repo):
    return DependencyService(todo_repo)


@pytest.fixture
def project_service(project_repo, todo_repo):
    return ProjectService(project_repo, todo_repo)


@pytest.fixture
def tag_service(tag_repo, todo_repo):
    return TagService(tag_repo, todo_repo)


@pytest.fixture
def activity_service(todo_repo, activity_repo, clock):
    return ActivityService(todo_repo, activity_repo, clock=clock)


@pytest.fixture
def work_period_service(work_period_repo, activity_repo, tag_repo, clock):
    return WorkPeriodService(work_period_repo, activity_repo, tag_repo, clock=clock)


# =============================================================================
# Database and API
# =============================================================================


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.close()


@pytest.fixture
def session(database):
    with database.session() as s:
        yield s


@pytest.fixture
def client(database, clock):
    app = create_app(database=database, settings=Settings(database_url="sqlite://"), clock=clock)
    with TestClient(app) as c:
        yield c


# =============================================================================
# CLI
# =============================================================================


@pytest.fixture
def cli_home(tmp_path, monkeypatch):
    """Point the CLI at a throwaway config directory and SQLite file."""
    monkeypatch.setenv("TOODO_HOME", str(tmp_path))
    monkeypatch.setenv("TOODO_LOG_LEVEL", "WARNING")
    monkeypatch.delenv("TOODO_DATABASE_URL", raising=False)
    # Wide enough that rich tables never wrap ids or titles
    monkeypatch.setenv("COLUMNS", "200")
    return tmp_path

"""FastAPI dependency providers.

One database session per request; every service built for that request
shares it, so a request is a single transaction.
"""

from collections.abc import Callable, Iterator
from datetime import datetime

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from toodo.application import (
    ActivityService,
    DependencyService,
    ProjectService,
    TagService,
    TodoService,
    WorkPeriodService,
)
from toodo.config import Settings
from toodo.infrastructure import (
    Database,
    SqlAlchemyProjectRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTodoActivityRepository,
    SqlAlchemyTodoRepository,
    SqlAlchemyWorkPeriodRepository,
)


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_clock(request: Request) -> Callable[[], datetime]:
    return request.app.state.clock


def get_session(database: Database = Depends(get_database)) -> Iterator[Session]:
    with database.session() as session:
        yield session


def get_todo_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> TodoService:
    return TodoService(
        SqlAlchemyTodoRepository(session),
        activities=SqlAlchemyTodoActivityRepository(session),
        projects=SqlAlchemyProjectRepository(session),
        clock=clock,
        due_soon_days=settings.due_soon_days,
    )


def get_dependency_service(
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> DependencyService:
    return DependencyService(
        SqlAlchemyTodoRepository(session),
        max_depth=settings.dependency_tree_max_depth,
    )


def get_project_service(session: Session = Depends(get_session)) -> ProjectService:
    return ProjectService(SqlAlchemyProjectRepository(session), SqlAlchemyTodoRepository(session))


def get_tag_service(session: Session = Depends(get_session)) -> TagService:
    return TagService(SqlAlchemyTagRepository(session), SqlAlchemyTodoRepository(session))


def get_activity_service(
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ActivityService:
    return ActivityService(
        SqlAlchemyTodoRepository(session),
        SqlAlchemyTodoActivityRepository(session),
        clock=clock,
    )


def get_work_period_service(
    session: Session = Depends(get_session),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> WorkPeriodService:
    return WorkPeriodService(
        SqlAlchemyWorkPeriodRepository(session),
        SqlAlchemyTodoActivityRepository(session),
        SqlAlchemyTagRepository(session),
        clock=clock,
    )

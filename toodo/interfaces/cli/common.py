"""Shared utilities for toodo CLI commands.

This module provides common utilities used across CLI commands:
- A service scope that opens the database, runs one unit of work and
  reports domain errors
- Formatted output helpers (error, success, info)
- Rich rendering for todos
"""

from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from sqlalchemy.orm import Session

from toodo.application import (
    ActivityService,
    DependencyService,
    ProjectService,
    TagService,
    TodoService,
    WorkPeriodService,
)
from toodo.config import Settings, load_settings
from toodo.domain.shared.errors import ToodoError
from toodo.domain.todo import Todo, TodoStatus, WorkState, format_duration
from toodo.infrastructure import (
    Database,
    SqlAlchemyProjectRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTodoActivityRepository,
    SqlAlchemyTodoRepository,
    SqlAlchemyWorkPeriodRepository,
)

STATUS_STYLES = {
    TodoStatus.PENDING: "yellow",
    TodoStatus.IN_PROGRESS: "cyan",
    TodoStatus.COMPLETED: "green",
}


# =============================================================================
# Services
# =============================================================================


class Services:
    """Application services bound to one session."""

    def __init__(self, session: Session, settings: Settings) -> None:
        self.settings = settings
        todos = SqlAlchemyTodoRepository(session)
        activities = SqlAlchemyTodoActivityRepository(session)
        projects = SqlAlchemyProjectRepository(session)
        tags = SqlAlchemyTagRepository(session)

        self.todos = TodoService(
            todos,
            activities=activities,
            projects=projects,
            due_soon_days=settings.due_soon_days,
        )
        self.dependencies = DependencyService(todos, max_depth=settings.dependency_tree_max_depth)
        self.projects = ProjectService(projects, todos)
        self.tags = TagService(tags, todos)
        self.activities = ActivityService(todos, activities)
        self.work_periods = WorkPeriodService(SqlAlchemyWorkPeriodRepository(session), activities, tags)


@contextmanager
def service_scope() -> Iterator[Services]:
    """Open the configured database and yield services for one unit of work.

    Domain errors are printed and turned into exit code 1; the unit of work
    is rolled back.

    Raises:
        typer.Exit: If a domain error was raised inside the scope.
    """
    settings = load_settings()
    database = Database(settings.resolved_database_url())
    database.create_all()
    try:
        with database.session() as session:
            yield Services(session, settings)
    except ToodoError as e:
        print_error(e.message)
        raise typer.Exit(1)
    finally:
        database.close()


# =============================================================================
# Output
# =============================================================================


def get_console() -> Console:
    return Console()


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"


def todo_table(todos: list[Todo], title: str | None = None) -> Table:
    """Render todos as a rich table."""
    table = Table(title=title)
    table.add_column("ID", no_wrap=True)
    table.add_column("Title")
    table.add_column("Status")
    table.add_column("Priority")
    table.add_column("Due")
    table.add_column("Time", justify="right")
    for todo in todos:
        style = STATUS_STYLES.get(todo.status, "")
        state = todo.status.value
        if todo.work_state in (WorkState.ACTIVE, WorkState.PAUSED):
            state = f"{state} ({todo.work_state.value})"
        table.add_row(
            todo.id,
            escape(todo.title),
            f"[{style}]{state}[/{style}]" if style else state,
            todo.priority.value,
            format_date(todo.due_date),
            format_duration(todo.total_work_time),
        )
    return table


def print_todos(todos: list[Todo], title: str | None = None, empty: str = "No todos found.") -> None:
    if not todos:
        print_info(empty)
        return
    get_console().print(todo_table(todos, title))


def print_todo(todo: Todo) -> None:
    """Print the details of one todo."""
    console = get_console()
    console.print(f"[bold]{escape(todo.title)}[/bold]  ({todo.id})")
    if todo.description:
        console.print(escape(todo.description))
    console.print(f"Status:     {todo.status.value} / {todo.work_state.value}")
    console.print(f"Priority:   {todo.priority.value}")
    console.print(f"Work time:  {format_duration(todo.total_work_time)}")
    console.print(f"Due:        {format_date(todo.due_date)}")
    if todo.project_id:
        console.print(f"Project:    {todo.project_id}")
    if todo.parent_id:
        console.print(f"Parent:     {todo.parent_id}")
    if todo.dependencies:
        console.print(f"Depends on: {', '.join(todo.dependencies)}")
    if todo.dependents:
        console.print(f"Blocks:     {', '.join(todo.dependents)}")

"""Todo CLI commands.

Commands for creating and editing todos, driving the work-state machine,
work time, due dates, subtasks and the activity log.
"""

from datetime import datetime

import typer
from rich.markup import escape
from rich.tree import Tree as RichTree

from toodo.domain.activity import ActivityType
from toodo.domain.todo import PriorityLevel, SubtaskNode, TodoStatus
from toodo.interfaces.cli.common import (
    format_date,
    get_console,
    print_info,
    print_success,
    print_todo,
    print_todos,
    service_scope,
)

app = typer.Typer(help="Todo commands")


# =============================================================================
# CRUD
# =============================================================================


@app.command("add")
def add(
    title: str = typer.Argument(..., help="Todo title"),
    description: str | None = typer.Option(None, "--description", "-d"),
    priority: PriorityLevel = typer.Option(PriorityLevel.MEDIUM, "--priority", "-p"),
    due: datetime | None = typer.Option(None, "--due", help="Due date (UTC), e.g. 2025-05-01 or 2025-05-01T17:00:00"),
    project: str | None = typer.Option(None, "--project", help="Project ID"),
    parent: str | None = typer.Option(None, "--parent", help="Parent todo ID"),
) -> None:
    """Create a todo.

    Example:
        toodo todo add "Write release notes" -p high --due 2025-05-01
    """
    with service_scope() as services:
        todo = services.todos.create(
            title,
            description=description,
            priority=priority,
            due_date=due,
            project_id=project,
            parent_id=parent,
        )
    print_success(f"Created todo {todo.id}")


@app.command("list")
def list_todos(
    status: TodoStatus | None = typer.Option(None, "--status", "-s"),
    priority: PriorityLevel | None = typer.Option(None, "--priority", "-p"),
    project: str | None = typer.Option(None, "--project"),
) -> None:
    """List todos."""
    with service_scope() as services:
        todos = services.todos.list_all(status=status, priority=priority, project_id=project)
    print_todos(todos, title="Todos")


@app.command("show")
def show(todo_id: str) -> None:
    """Show one todo."""
    with service_scope() as services:
        todo = services.todos.get(todo_id)
    print_todo(todo)


@app.command("update")
def update(
    todo_id: str,
    title: str | None = typer.Option(None, "--title", "-t"),
    description: str | None = typer.Option(None, "--description", "-d"),
    priority: PriorityLevel | None = typer.Option(None, "--priority", "-p"),
    due: datetime | None = typer.Option(None, "--due"),
    clear_due: bool = typer.Option(False, "--clear-due", help="Remove the due date"),
) -> None:
    """Update a todo's descriptive fields."""
    fields = {
        name: value
        for name, value in (("title", title), ("description", description), ("priority", priority), ("due_date", due))
        if value is not None
    }
    if clear_due:
        fields["due_date"] = None
    if not fields:
        print_info("Nothing to update.")
        return
    with service_scope() as services:
        todo = services.todos.update(todo_id, **fields)
    print_success(f"Updated todo {todo.id}")


@app.command("delete")
def delete(todo_id: str) -> None:
    """Delete a todo and its dependency edges."""
    with service_scope() as services:
        services.todos.delete(todo_id)
    print_success(f"Deleted todo {todo_id}")


# =============================================================================
# Work State
# =============================================================================


@app.command("start")
def start(todo_id: str, note: str | None = typer.Option(None, "--note", "-n")) -> None:
    """Start working on a todo."""
    with service_scope() as services:
        todo = services.todos.start(todo_id, note)
    print_success(f"Started: {todo.title}")


@app.command("pause")
def pause(todo_id: str, note: str | None = typer.Option(None, "--note", "-n")) -> None:
    with service_scope() as services:
        todo = services.todos.pause(todo_id, note)
    print_success(f"Paused: {todo.title}")


@app.command("resume")
def resume(todo_id: str, note: str | None = typer.Option(None, "--note", "-n")) -> None:
    with service_scope() as services:
        todo = services.todos.resume(todo_id, note)
    print_success(f"Resumed: {todo.title}")


@app.command("done")
def done(todo_id: str, note: str | None = typer.Option(None, "--note", "-n")) -> None:
    """Complete a todo. Fails while any dependency is still open."""
    with service_scope() as services:
        todo = services.todos.complete(todo_id, note)
    print_success(f"Completed: {todo.title}")


@app.command("reopen")
def reopen(todo_id: str) -> None:
    with service_scope() as services:
        todo = services.todos.reopen(todo_id)
    print_success(f"Reopened: {todo.title}")


@app.command("time")
def work_time(todo_id: str) -> None:
    """Show accumulated work time, including a running interval."""
    with service_scope() as services:
        summary = services.todos.get_work_time(todo_id)
    typer.echo(f"{summary.formatted_time} ({summary.work_state.value})")


# =============================================================================
# Due Dates
# =============================================================================


@app.command("overdue")
def overdue() -> None:
    """List open todos past their due date."""
    with service_scope() as services:
        todos = services.todos.find_overdue()
    print_todos(todos, title="Overdue", empty="Nothing overdue.")


@app.command("due-soon")
def due_soon(days: int | None = typer.Option(None, "--days", "-d", min=0)) -> None:
    """List open todos due within the next few days."""
    with service_scope() as services:
        todos = services.todos.find_due_soon(days=days)
    print_todos(todos, title="Due soon", empty="Nothing due soon.")


# =============================================================================
# Subtasks
# =============================================================================


def _add_subtask_branch(branch: RichTree, nodes: list[SubtaskNode]) -> None:
    for node in nodes:
        child = branch.add(f"{escape(node.todo.title)} [dim]({node.todo.status.value}, {node.todo.id})[/dim]")
        _add_subtask_branch(child, node.subtasks)


@app.command("subtasks")
def subtasks(todo_id: str) -> None:
    """Show the subtask hierarchy below a todo."""
    with service_scope() as services:
        parent = services.todos.get(todo_id)
        nodes = services.todos.get_subtask_tree(todo_id)
    tree = RichTree(f"[bold]{escape(parent.title)}[/bold]")
    _add_subtask_branch(tree, nodes)
    get_console().print(tree)


@app.command("nest")
def nest(parent_id: str, subtask_id: str) -> None:
    """Make SUBTASK_ID a subtask of PARENT_ID."""
    with service_scope() as services:
        services.todos.add_subtask(parent_id, subtask_id)
    print_success(f"{subtask_id} is now a subtask of {parent_id}")


@app.command("unnest")
def unnest(parent_id: str, subtask_id: str) -> None:
    with service_scope() as services:
        services.todos.remove_subtask(parent_id, subtask_id)
    print_success(f"{subtask_id} is no longer a subtask of {parent_id}")


# =============================================================================
# Activities
# =============================================================================


@app.command("log")
def log(
    todo_id: str,
    record: ActivityType | None = typer.Option(None, "--record", "-r", help="Record an activity first"),
    note: str | None = typer.Option(None, "--note", "-n"),
) -> None:
    """Show the activity log of a todo, newest first."""
    with service_scope() as services:
        if record is not None:
            services.activities.record(todo_id, record, note)
        activities = services.activities.list_for_todo(todo_id)
    if not activities:
        print_info("No activities recorded.")
        return
    for activity in activities:
        line = f"{activity.id}  {format_date(activity.created_at)}  {activity.type.value:<10}"
        if activity.work_time:
            line += f"  +{activity.work_time}s"
        if activity.note:
            line += f"  {activity.note}"
        typer.echo(line)

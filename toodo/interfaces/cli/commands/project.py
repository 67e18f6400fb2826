"""Project management CLI commands."""

import typer
from rich.table import Table

from toodo.domain.project import ProjectStatus
from toodo.interfaces.cli.common import (
    get_console,
    print_info,
    print_success,
    print_todos,
    service_scope,
)

app = typer.Typer(help="Project management commands")


@app.command("create")
def create(
    name: str,
    description: str | None = typer.Option(None, "--description", "-d"),
    color: str | None = typer.Option(None, "--color", "-c"),
) -> None:
    """Create a project. Names are unique.

    Example:
        toodo project create "Website relaunch" -c "#3366ff"
    """
    with service_scope() as services:
        project = services.projects.create(name, description, color)
    print_success(f"Created project {project.id}")


@app.command("list")
def list_projects() -> None:
    with service_scope() as services:
        projects = services.projects.list_all()
    if not projects:
        print_info("No projects yet.")
        return
    table = Table(title="Projects")
    table.add_column("ID", no_wrap=True)
    table.add_column("Name")
    table.add_column("Status")
    for project in projects:
        table.add_row(project.id, project.name, project.status.value)
    get_console().print(table)


@app.command("show")
def show(project_id: str) -> None:
    """Show a project and its todos."""
    with service_scope() as services:
        project = services.projects.get(project_id)
        todos = services.projects.get_todos(project_id)
    typer.echo(f"{project.name} [{project.status.value}]")
    if project.description:
        typer.echo(project.description)
    print_todos(todos, empty="No todos in this project.")


@app.command("update")
def update(
    project_id: str,
    name: str | None = typer.Option(None, "--name", "-n"),
    description: str | None = typer.Option(None, "--description", "-d"),
    color: str | None = typer.Option(None, "--color", "-c"),
) -> None:
    fields = {k: v for k, v in (("name", name), ("description", description), ("color", color)) if v is not None}
    if not fields:
        print_info("Nothing to update.")
        return
    with service_scope() as services:
        services.projects.update(project_id, **fields)
    print_success(f"Updated project {project_id}")


@app.command("delete")
def delete(project_id: str) -> None:
    """Delete a project. Its todos are kept."""
    with service_scope() as services:
        services.projects.delete(project_id)
    print_success(f"Deleted project {project_id}")


@app.command("archive")
def archive(project_id: str) -> None:
    with service_scope() as services:
        services.projects.archive(project_id)
    print_success(f"Project {project_id} is now {ProjectStatus.ARCHIVED.value}")


@app.command("activate")
def activate(project_id: str) -> None:
    with service_scope() as services:
        services.projects.activate(project_id)
    print_success(f"Project {project_id} is now {ProjectStatus.ACTIVE.value}")


@app.command("add-todo")
def add_todo(project_id: str, todo_id: str) -> None:
    with service_scope() as services:
        services.projects.add_todo(project_id, todo_id)
    print_success(f"Added {todo_id} to project {project_id}")


@app.command("remove-todo")
def remove_todo(project_id: str, todo_id: str) -> None:
    with service_scope() as services:
        services.projects.remove_todo(project_id, todo_id)
    print_success(f"Removed {todo_id} from project {project_id}")

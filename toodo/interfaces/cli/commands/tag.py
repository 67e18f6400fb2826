"""Tag CLI commands."""

import typer
from rich.table import Table

from toodo.interfaces.cli.common import (
    get_console,
    print_info,
    print_success,
    print_todos,
    service_scope,
)

app = typer.Typer(help="Tag commands")


@app.command("create")
def create(name: str, color: str | None = typer.Option(None, "--color", "-c")) -> None:
    with service_scope() as services:
        tag = services.tags.create(name, color)
    print_success(f"Created tag {tag.id}")


@app.command("list")
def list_tags() -> None:
    with service_scope() as services:
        tags = services.tags.list_all()
    if not tags:
        print_info("No tags yet.")
        return
    for tag in tags:
        typer.echo(f"{tag.id}  {tag.name}")


@app.command("delete")
def delete(tag_id: str) -> None:
    with service_scope() as services:
        services.tags.delete(tag_id)
    print_success(f"Deleted tag {tag_id}")


@app.command("assign")
def assign(tag_id: str, todo_ids: list[str]) -> None:
    """Attach a tag to one or more todos."""
    with service_scope() as services:
        count = services.tags.bulk_assign(tag_id, todo_ids)
    print_success(f"Tagged {count} todo(s)")


@app.command("unassign")
def unassign(tag_id: str, todo_ids: list[str]) -> None:
    with service_scope() as services:
        count = services.tags.bulk_remove(tag_id, todo_ids)
    print_success(f"Untagged {count} todo(s)")


@app.command("todos")
def todos(
    tag_ids: list[str],
    any_tag: bool = typer.Option(False, "--any", help="Match todos with any of the tags"),
) -> None:
    """List todos carrying all of the given tags (or any, with --any)."""
    with service_scope() as services:
        found = services.tags.todos_by_tags(tag_ids, "any" if any_tag else "all")
    print_todos(found, title="Tagged todos")


@app.command("stats")
def stats() -> None:
    """Show usage counts per tag."""
    with service_scope() as services:
        statistics = services.tags.statistics()
    if not statistics:
        print_info("No tags yet.")
        return
    table = Table(title="Tag statistics")
    table.add_column("Tag")
    table.add_column("Used", justify="right")
    table.add_column("Pending", justify="right")
    table.add_column("Completed", justify="right")
    for row in statistics:
        table.add_row(row.name, str(row.usage_count), str(row.pending_todo_count), str(row.completed_todo_count))
    get_console().print(table)

"""Dependency CLI commands.

Add and remove dependency edges and render dependency trees.
"""

import typer
from rich.markup import escape
from rich.tree import Tree as RichTree

from toodo.domain.todo import DependencyNode, TodoStatus, count_nodes
from toodo.interfaces.cli.common import (
    STATUS_STYLES,
    get_console,
    print_success,
    print_todos,
    service_scope,
)

app = typer.Typer(help="Dependency commands")


def _label(node: DependencyNode) -> str:
    style = STATUS_STYLES.get(node.status, "")
    mark = "x" if node.status == TodoStatus.COMPLETED else " "
    return f"[{style}]{escape(f'[{mark}]')}[/{style}] {escape(node.title)} [dim]({node.priority.value}, {node.id})[/dim]"


def render_tree(node: DependencyNode, branch: RichTree | None = None) -> RichTree:
    """Build a rich tree for a dependency tree."""
    tree = branch if branch is not None else RichTree(_label(node))
    for child in node.dependencies:
        render_tree(child, tree.add(_label(child)))
    return tree


@app.command("add")
def add(todo_id: str, dependency_id: str) -> None:
    """Make TODO_ID depend on DEPENDENCY_ID."""
    with service_scope() as services:
        services.dependencies.add_dependency(todo_id, dependency_id)
    print_success(f"{todo_id} now depends on {dependency_id}")


@app.command("remove")
def remove(todo_id: str, dependency_id: str) -> None:
    with service_scope() as services:
        services.dependencies.remove_dependency(todo_id, dependency_id)
    print_success(f"{todo_id} no longer depends on {dependency_id}")


@app.command("list")
def list_dependencies(
    todo_id: str,
    dependents: bool = typer.Option(False, "--dependents", help="List todos that depend on TODO_ID instead"),
) -> None:
    """List the direct dependencies (or dependents) of a todo."""
    with service_scope() as services:
        if dependents:
            todos = services.dependencies.get_dependents(todo_id)
        else:
            todos = services.dependencies.get_dependencies(todo_id)
    print_todos(
        todos,
        title="Dependents" if dependents else "Dependencies",
        empty="No dependents." if dependents else "No dependencies.",
    )


@app.command("tree")
def tree(
    todo_id: str,
    depth: int | None = typer.Option(None, "--depth", "-d", min=0, help="Levels to expand"),
) -> None:
    """Show the dependency tree of a todo."""
    with service_scope() as services:
        root = services.dependencies.get_dependency_tree(todo_id, depth)
    console = get_console()
    console.print(render_tree(root))
    console.print(f"[dim]{count_nodes(root)} node(s)[/dim]")

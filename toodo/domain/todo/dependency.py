"""Pure dependency-graph operations.

All functions in this module are pure - no I/O, no side effects. Graph
access is supplied by the caller as a lookup callable, so the same code
runs over ORM sessions and in-memory fakes alike.
"""

from collections import deque
from collections.abc import Callable, Iterable

from .models import DependencyNode, Todo

DEFAULT_MAX_DEPTH = 10


def would_create_cycle(
    todo_id: str,
    dependency_id: str,
    get_dependency_ids: Callable[[str], Iterable[str]],
) -> bool:
    """Check whether adding the edge todo_id -> dependency_id closes a cycle.

    Walks breadth-first from `dependency_id` along existing dependency edges.
    If `todo_id` is reachable, the new edge would close a loop. Each node is
    expanded at most once, so pre-existing corruption cannot hang the walk.

    Args:
        todo_id: The todo that would gain a dependency
        dependency_id: The todo it would depend on
        get_dependency_ids: Function (id) -> ids that `id` depends on

    Returns:
        True if the edge would create a cycle
    """
    if todo_id == dependency_id:
        return True

    visited: set[str] = {dependency_id}
    queue: deque[str] = deque([dependency_id])

    while queue:
        current = queue.popleft()
        for next_id in get_dependency_ids(current):
            if next_id == todo_id:
                return True
            if next_id not in visited:
                visited.add(next_id)
                queue.append(next_id)

    return False


def build_dependency_tree(
    root: Todo,
    find_dependencies: Callable[[str], list[Todo]],
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> DependencyNode:
    """Expand a todo's dependencies into a bounded-depth tree.

    The visited set is the path from the root to the current node. It is an
    immutable frozenset, so every branch gets its own copy and a revisit on
    one branch never hides a shared dependency reached through a sibling.
    A dependency already on the current path is skipped, so a cycle ends
    one level before it would repeat.

    Args:
        root: The todo at the top of the tree
        find_dependencies: Function (id) -> todos that `id` depends on
        max_depth: Levels of dependencies to expand; 0 yields a bare node

    Returns:
        DependencyNode for root with nested dependency nodes
    """

    def leaf(todo: Todo) -> DependencyNode:
        return DependencyNode(
            id=todo.id,
            title=todo.title,
            status=todo.status,
            priority=todo.priority,
        )

    def expand(todo: Todo, depth: int, path: frozenset[str]) -> DependencyNode:
        node = leaf(todo)
        if depth <= 0:
            return node

        children = []
        for dependency in find_dependencies(todo.id):
            if dependency.id in path:
                continue
            children.append(expand(dependency, depth - 1, path | {dependency.id}))

        return node.model_copy(update={"dependencies": children})

    return expand(root, max_depth, frozenset({root.id}))


def count_nodes(node: DependencyNode) -> int:
    """Count nodes in a dependency tree, root included."""
    return 1 + sum(count_nodes(child) for child in node.dependencies)

"""Dependency graph use cases.

Validation always runs before mutation, in a fixed order: self-reference,
todo existence, dependency existence, duplicate edge, cycle. An edge is only
inserted once every check has passed.
"""

import logging

from toodo.domain.repositories import TodoRepository
from toodo.domain.shared.errors import (
    DependencyCycleError,
    DependencyExistsError,
    DependencyNotFoundError,
    SelfDependencyError,
    TodoNotFoundError,
)
from toodo.domain.todo import (
    DEFAULT_MAX_DEPTH,
    DependencyNode,
    Todo,
    build_dependency_tree,
)

logger = logging.getLogger(__name__)


class DependencyService:
    """Maintains the directed acyclic graph of todo dependencies."""

    def __init__(self, todos: TodoRepository, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self._todos = todos
        self._max_depth = max_depth

    def _get(self, todo_id: str) -> Todo:
        todo = self._todos.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def add_dependency(self, todo_id: str, dependency_id: str) -> Todo:
        """Make `todo_id` depend on `dependency_id`.

        Raises:
            SelfDependencyError: todo_id == dependency_id
            TodoNotFoundError: either endpoint is missing (todo checked first)
            DependencyExistsError: the edge is already present
            DependencyCycleError: the edge would close a cycle

        Returns:
            The todo with its updated dependency list.
        """
        if todo_id == dependency_id:
            raise SelfDependencyError(todo_id)

        todo = self._get(todo_id)
        self._get(dependency_id)

        if todo.has_dependency_on(dependency_id):
            raise DependencyExistsError(todo_id, dependency_id)

        if self._todos.would_create_cycle(todo_id, dependency_id):
            logger.warning(f"Refused dependency {todo_id} -> {dependency_id}: cycle")
            raise DependencyCycleError(todo_id, dependency_id)

        self._todos.add_dependency(todo_id, dependency_id)
        logger.info(f"Added dependency {todo_id} -> {dependency_id}")
        return self._get(todo_id)

    def remove_dependency(self, todo_id: str, dependency_id: str) -> Todo:
        """Remove the edge todo_id -> dependency_id.

        A missing edge raises DependencyNotFoundError and leaves the graph
        untouched.
        """
        todo = self._get(todo_id)
        self._get(dependency_id)

        if not todo.has_dependency_on(dependency_id):
            raise DependencyNotFoundError(todo_id, dependency_id)

        self._todos.remove_dependency(todo_id, dependency_id)
        logger.info(f"Removed dependency {todo_id} -> {dependency_id}")
        return self._get(todo_id)

    def get_dependencies(self, todo_id: str) -> list[Todo]:
        self._get(todo_id)
        return self._todos.find_dependencies(todo_id)

    def get_dependents(self, todo_id: str) -> list[Todo]:
        self._get(todo_id)
        return self._todos.find_dependents(todo_id)

    def get_dependency_tree(self, todo_id: str, max_depth: int | None = None) -> DependencyNode:
        root = self._get(todo_id)
        depth = self._max_depth if max_depth is None else max_depth
        return build_dependency_tree(root, self._todos.find_dependencies, depth)

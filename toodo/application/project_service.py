"""Project use cases."""

import logging
from typing import Any

from toodo.application.todo_service import persistable
from toodo.domain.project import Project
from toodo.domain.repositories import ProjectRepository, TodoRepository
from toodo.domain.shared.errors import (
    ProjectNameExistsError,
    ProjectNotFoundError,
    TodoNotFoundError,
    TodoNotInProjectError,
)
from toodo.domain.todo import Todo

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, projects: ProjectRepository, todos: TodoRepository) -> None:
        self._projects = projects
        self._todos = todos

    def get(self, project_id: str) -> Project:
        project = self._projects.find_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def list_all(self) -> list[Project]:
        return self._projects.find_all()

    def create(self, name: str, description: str | None = None, color: str | None = None) -> Project:
        if self._projects.find_by_name(name) is not None:
            raise ProjectNameExistsError(name)
        project = self._projects.create(Project(name=name, description=description, color=color))
        logger.info(f"Created project {project.id} ({project.name!r})")
        return project

    def update(self, project_id: str, **fields: Any) -> Project:
        """Update name, description, color or status. Names stay unique."""
        project = self.get(project_id)
        name = fields.get("name")
        if name is not None and name != project.name:
            existing = self._projects.find_by_name(name)
            if existing is not None and existing.id != project_id:
                raise ProjectNameExistsError(name)
        return self._projects.update(project.update(**fields))

    def delete(self, project_id: str) -> None:
        """Delete a project; its todos are kept and detached."""
        self.get(project_id)
        self._projects.delete(project_id)
        logger.info(f"Deleted project {project_id}")

    def archive(self, project_id: str) -> Project:
        return self._projects.update(self.get(project_id).archive())

    def activate(self, project_id: str) -> Project:
        return self._projects.update(self.get(project_id).activate())

    # =========================================================================
    # Membership
    # =========================================================================

    def get_todos(self, project_id: str) -> list[Todo]:
        self.get(project_id)
        return self._todos.find_all(project_id=project_id)

    def add_todo(self, project_id: str, todo_id: str) -> Todo:
        self.get(project_id)
        todo = self._get_todo(todo_id)
        updated = self._save(todo.assign_to_project(project_id))
        logger.info(f"Added todo {todo_id} to project {project_id}")
        return updated

    def remove_todo(self, project_id: str, todo_id: str) -> Todo:
        self.get(project_id)
        todo = self._get_todo(todo_id)
        if todo.project_id != project_id:
            raise TodoNotInProjectError(todo_id, project_id)
        updated = self._save(todo.remove_from_project())
        logger.info(f"Removed todo {todo_id} from project {project_id}")
        return updated

    def _get_todo(self, todo_id: str) -> Todo:
        todo = self._todos.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def _save(self, todo: Todo) -> Todo:
        saved = self._todos.update(todo.id, persistable(todo))
        if saved is None:
            raise TodoNotFoundError(todo.id)
        return saved

"""Tag use cases: CRUD, tagging todos, multi-tag queries and statistics."""

import logging
from typing import Any, Literal

from toodo.domain.repositories import TagRepository, TodoRepository
from toodo.domain.shared.errors import (
    TagNameExistsError,
    TagNotFoundError,
    TodoNotFoundError,
)
from toodo.domain.tag import Tag, TagStatistics
from toodo.domain.todo import Todo

logger = logging.getLogger(__name__)

TagMatch = Literal["all", "any"]


class TagService:
    def __init__(self, tags: TagRepository, todos: TodoRepository) -> None:
        self._tags = tags
        self._todos = todos

    def get(self, tag_id: str) -> Tag:
        tag = self._tags.find_by_id(tag_id)
        if tag is None:
            raise TagNotFoundError(tag_id)
        return tag

    def list_all(self) -> list[Tag]:
        return self._tags.find_all()

    def create(self, name: str, color: str | None = None) -> Tag:
        if self._tags.find_by_name(name) is not None:
            raise TagNameExistsError(name)
        tag = self._tags.create(Tag(name=name, color=color))
        logger.info(f"Created tag {tag.id} ({tag.name!r})")
        return tag

    def update(self, tag_id: str, **fields: Any) -> Tag:
        tag = self.get(tag_id)
        name = fields.get("name")
        if name is not None and name != tag.name:
            existing = self._tags.find_by_name(name)
            if existing is not None and existing.id != tag_id:
                raise TagNameExistsError(name)
        return self._tags.update(tag.update(**fields))

    def delete(self, tag_id: str) -> None:
        self.get(tag_id)
        self._tags.delete(tag_id)
        logger.info(f"Deleted tag {tag_id}")

    # =========================================================================
    # Tagging
    # =========================================================================

    def assign(self, todo_id: str, tag_id: str) -> list[Tag]:
        """Attach a tag to a todo and return the todo's tags."""
        self._require_todo(todo_id)
        self.get(tag_id)
        self._tags.assign(todo_id, tag_id)
        return self._tags.find_tags_for_todo(todo_id)

    def unassign(self, todo_id: str, tag_id: str) -> list[Tag]:
        self._require_todo(todo_id)
        self.get(tag_id)
        if not self._tags.unassign(todo_id, tag_id):
            logger.debug(f"Tag {tag_id} was not attached to todo {todo_id}")
        return self._tags.find_tags_for_todo(todo_id)

    def tags_for_todo(self, todo_id: str) -> list[Tag]:
        self._require_todo(todo_id)
        return self._tags.find_tags_for_todo(todo_id)

    def todos_for_tag(self, tag_id: str) -> list[Todo]:
        self.get(tag_id)
        return self._todos.find_by_ids(self._tags.find_todo_ids_for_tag(tag_id))

    def todos_by_tags(self, tag_ids: list[str], mode: TagMatch = "all") -> list[Todo]:
        """Todos carrying every tag (mode="all") or at least one (mode="any")."""
        if not tag_ids:
            return []
        for tag_id in tag_ids:
            self.get(tag_id)
        if mode == "any":
            ids = self._tags.find_todo_ids_with_any_tag(tag_ids)
        else:
            ids = self._tags.find_todo_ids_with_all_tags(tag_ids)
        return self._todos.find_by_ids(ids)

    def bulk_assign(self, tag_id: str, todo_ids: list[str]) -> int:
        """Attach a tag to every existing todo in `todo_ids`; returns links created."""
        self.get(tag_id)
        existing = [t.id for t in self._todos.find_by_ids(todo_ids)]
        count = self._tags.bulk_assign(tag_id, existing)
        logger.info(f"Tag {tag_id} assigned to {count} todos")
        return count

    def bulk_remove(self, tag_id: str, todo_ids: list[str]) -> int:
        self.get(tag_id)
        count = self._tags.bulk_remove(tag_id, todo_ids)
        logger.info(f"Tag {tag_id} removed from {count} todos")
        return count

    def statistics(self) -> list[TagStatistics]:
        return self._tags.statistics()

    def _require_todo(self, todo_id: str) -> None:
        if self._todos.find_by_id(todo_id) is None:
            raise TodoNotFoundError(todo_id)

"""Repository contracts consumed by the application layer.

Each aggregate has one independent repository protocol with a single
concrete adapter (see toodo.infrastructure.storage). Tests supply explicit
in-memory implementations of the same protocols.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Protocol

from toodo.domain.activity.models import TodoActivity
from toodo.domain.project.models import Project
from toodo.domain.tag.models import Tag, TagStatistics
from toodo.domain.todo.models import PriorityLevel, Todo, TodoStatus
from toodo.domain.work_period.models import WorkPeriod


class TodoRepository(Protocol):
    """Persistence of todos and the dependency edges between them."""

    def find_all(
        self,
        status: TodoStatus | None = None,
        priority: PriorityLevel | None = None,
        project_id: str | None = None,
    ) -> list[Todo]: ...

    def find_by_id(self, todo_id: str) -> Todo | None: ...

    def find_by_ids(self, todo_ids: Iterable[str]) -> list[Todo]: ...

    def create(self, todo: Todo) -> Todo: ...

    def update(self, todo_id: str, changes: Mapping[str, Any]) -> Todo | None:
        """Apply a partial update; returns None when the todo does not exist."""
        ...

    def delete(self, todo_id: str) -> None: ...

    def add_dependency(self, todo_id: str, dependency_id: str) -> None: ...

    def remove_dependency(self, todo_id: str, dependency_id: str) -> None: ...

    def find_dependents(self, todo_id: str) -> list[Todo]: ...

    def find_dependencies(self, todo_id: str) -> list[Todo]: ...

    def would_create_cycle(self, todo_id: str, dependency_id: str) -> bool: ...

    def find_children(self, parent_id: str) -> list[Todo]: ...

    def find_due_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Todo]:
        """Todos with a due date inside [start, end]; open bounds are unbounded."""
        ...


class ProjectRepository(Protocol):
    def create(self, project: Project) -> Project: ...

    def find_by_id(self, project_id: str) -> Project | None: ...

    def find_by_name(self, name: str) -> Project | None: ...

    def find_all(self) -> list[Project]: ...

    def update(self, project: Project) -> Project: ...

    def delete(self, project_id: str) -> None: ...

    def find_todo_ids(self, project_id: str) -> list[str]: ...


class TagRepository(Protocol):
    def create(self, tag: Tag) -> Tag: ...

    def find_by_id(self, tag_id: str) -> Tag | None: ...

    def find_by_name(self, name: str) -> Tag | None: ...

    def find_all(self) -> list[Tag]: ...

    def update(self, tag: Tag) -> Tag: ...

    def delete(self, tag_id: str) -> None: ...

    def assign(self, todo_id: str, tag_id: str) -> None:
        """Attach a tag to a todo; attaching twice is a no-op."""
        ...

    def unassign(self, todo_id: str, tag_id: str) -> bool:
        """Detach a tag; returns False when it was not attached."""
        ...

    def find_tags_for_todo(self, todo_id: str) -> list[Tag]: ...

    def find_todo_ids_for_tag(self, tag_id: str) -> list[str]: ...

    def find_todo_ids_with_all_tags(self, tag_ids: list[str]) -> list[str]: ...

    def find_todo_ids_with_any_tag(self, tag_ids: list[str]) -> list[str]: ...

    def bulk_assign(self, tag_id: str, todo_ids: list[str]) -> int:
        """Attach a tag to many todos; returns how many links were created."""
        ...

    def bulk_remove(self, tag_id: str, todo_ids: list[str]) -> int:
        """Detach a tag from many todos; returns how many links were removed."""
        ...

    def statistics(self) -> list[TagStatistics]: ...


class TodoActivityRepository(Protocol):
    def find_by_todo_id(self, todo_id: str) -> list[TodoActivity]:
        """Activities of a todo, newest first."""
        ...

    def find_by_id(self, activity_id: str) -> TodoActivity | None: ...

    def create(self, activity: TodoActivity) -> TodoActivity: ...

    def delete(self, activity_id: str) -> None: ...

    def find_by_work_period_id(self, work_period_id: str) -> list[TodoActivity]:
        """Activities attributed to a work period, oldest first."""
        ...

    def update_work_period(self, activity_id: str, work_period_id: str | None) -> TodoActivity | None:
        """Attribute an activity to a period, or detach it with None."""
        ...


class WorkPeriodRepository(Protocol):
    def create(self, work_period: WorkPeriod) -> WorkPeriod: ...

    def find_by_id(self, work_period_id: str) -> WorkPeriod | None: ...

    def find_all(self) -> list[WorkPeriod]:
        """All periods, latest date first."""
        ...

    def find_by_date_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[WorkPeriod]:
        """Periods whose date lies in [start, end], latest first; open bounds are unbounded."""
        ...

    def find_overlapping(
        self,
        start_time: datetime,
        end_time: datetime,
        exclude_id: str | None = None,
    ) -> list[WorkPeriod]: ...

    def update(self, work_period: WorkPeriod) -> WorkPeriod: ...

    def delete(self, work_period_id: str) -> None:
        """Delete a period; its activities are kept and detached."""
        ...

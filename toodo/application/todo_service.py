"""Todo application service.

Orchestrates the Todo entity and its repository: existence checks, the
work-state transitions, work-time reporting, due dates and the subtask
hierarchy. Domain errors raised here propagate unchanged to the caller.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Any

from toodo.domain.activity.models import ActivityType, TodoActivity
from toodo.domain.repositories import (
    ProjectRepository,
    TodoActivityRepository,
    TodoRepository,
)
from toodo.domain.shared.errors import (
    DependencyCycleError,
    IncompleteDependenciesError,
    ProjectNotFoundError,
    SelfDependencyError,
    SubtaskNotFoundError,
    TodoNotFoundError,
    ToodoError,
)
from toodo.domain.todo import (
    DEFAULT_MAX_DEPTH,
    PriorityLevel,
    SubtaskNode,
    Todo,
    TodoStatus,
    WorkTime,
    as_utc,
    current_work_time,
    format_duration,
    utcnow,
)

logger = logging.getLogger(__name__)

# Fields the repository never receives through update()
_IMMUTABLE_FIELDS = {"id", "created_at", "dependencies", "dependents"}

TRANSITIONS = ("start", "pause", "resume", "complete", "reopen")

# Transition name -> activity type it records
_TRANSITION_ACTIVITY = {
    "start": ActivityType.STARTED,
    "resume": ActivityType.STARTED,
    "pause": ActivityType.PAUSED,
    "complete": ActivityType.COMPLETED,
}


def persistable(todo: Todo) -> dict[str, Any]:
    """Fields of a todo that a repository update may write."""
    return todo.model_dump(exclude=_IMMUTABLE_FIELDS)


class TodoService:
    """Use cases around a single todo."""

    def __init__(
        self,
        todos: TodoRepository,
        activities: TodoActivityRepository | None = None,
        projects: ProjectRepository | None = None,
        clock: Callable[[], datetime] = utcnow,
        due_soon_days: int = 2,
    ) -> None:
        """Initialize the service.

        Args:
            todos: Todo repository.
            activities: Activity repository. When given, every work-state
                transition is recorded as a TodoActivity.
            projects: Project repository used to validate project references.
            clock: Source of the current time.
            due_soon_days: Default window for find_due_soon.
        """
        self._todos = todos
        self._activities = activities
        self._projects = projects
        self._clock = clock
        self._due_soon_days = due_soon_days

    # =========================================================================
    # CRUD
    # =========================================================================

    def get(self, todo_id: str) -> Todo:
        todo = self._todos.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo

    def list_all(
        self,
        status: TodoStatus | None = None,
        priority: PriorityLevel | None = None,
        project_id: str | None = None,
    ) -> list[Todo]:
        return self._todos.find_all(status=status, priority=priority, project_id=project_id)

    def create(
        self,
        title: str,
        description: str | None = None,
        priority: PriorityLevel = PriorityLevel.MEDIUM,
        due_date: datetime | None = None,
        project_id: str | None = None,
        parent_id: str | None = None,
    ) -> Todo:
        """Create a pending, idle todo with no dependencies."""
        if project_id is not None:
            self._require_project(project_id)
        if parent_id is not None:
            self.get(parent_id)

        now = self._clock()
        todo = Todo(
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            project_id=project_id,
            parent_id=parent_id,
            last_state_change_at=now,
            created_at=now,
            updated_at=now,
        )
        created = self._todos.create(todo)
        logger.info(f"Created todo {created.id} ({created.title!r})")
        return created

    def update(self, todo_id: str, **fields: Any) -> Todo:
        """Update descriptive fields (title, description, priority, due date, project)."""
        todo = self.get(todo_id)
        if fields.get("project_id") is not None:
            self._require_project(fields["project_id"])
        return self._save(todo.update(**fields))

    def delete(self, todo_id: str) -> None:
        """Delete a todo. Its dependency edges go with it."""
        self.get(todo_id)
        self._todos.delete(todo_id)
        logger.info(f"Deleted todo {todo_id}")

    # =========================================================================
    # Work State Transitions
    # =========================================================================

    def start(self, todo_id: str, note: str | None = None) -> Todo:
        return self.transition(todo_id, "start", note)[0]

    def pause(self, todo_id: str, note: str | None = None) -> Todo:
        return self.transition(todo_id, "pause", note)[0]

    def resume(self, todo_id: str, note: str | None = None) -> Todo:
        return self.transition(todo_id, "resume", note)[0]

    def complete(self, todo_id: str, note: str | None = None) -> Todo:
        return self.transition(todo_id, "complete", note)[0]

    def reopen(self, todo_id: str) -> Todo:
        return self.transition(todo_id, "reopen")[0]

    def transition(
        self,
        todo_id: str,
        action: str,
        note: str | None = None,
    ) -> tuple[Todo, TodoActivity | None]:
        """Apply a named transition, persist it and record the activity.

        Completion is refused while any dependency is not completed.

        Args:
            todo_id: Todo to transition.
            action: One of start, pause, resume, complete, reopen.
            note: Optional note stored on the recorded activity.

        Returns:
            The persisted todo and the recorded activity (None when no
            activity repository is configured or the action records none).
        """
        if action not in TRANSITIONS:
            raise ValueError(f"Unknown transition: {action}")

        todo = self.get(todo_id)
        now = self._clock()

        try:
            if action == "complete":
                self._require_dependencies_completed(todo)
            updated = getattr(todo, action)(now)
        except ToodoError as e:
            logger.warning(f"Rejected {action} on todo {todo_id}: {e.message}")
            raise

        saved = self._save(updated)
        logger.info(
            f"Todo {todo_id}: {action} ({todo.work_state.value} -> {saved.work_state.value}, "
            f"total {saved.total_work_time}s)"
        )

        activity = None
        activity_type = _TRANSITION_ACTIVITY.get(action)
        if self._activities is not None and activity_type is not None:
            activity = self._activities.create(
                TodoActivity(
                    todo_id=todo_id,
                    type=activity_type,
                    work_time=saved.total_work_time - todo.total_work_time,
                    previous_state=todo.work_state,
                    note=note,
                    created_at=now,
                )
            )
        return saved, activity

    def get_work_time(self, todo_id: str) -> WorkTime:
        """Work-time summary including the running interval of an active todo."""
        todo = self.get(todo_id)
        running = current_work_time(todo, self._clock())
        return WorkTime(
            id=todo.id,
            total_work_time=todo.total_work_time,
            current_work_time=running,
            work_state=todo.work_state,
            formatted_time=format_duration(running),
        )

    # =========================================================================
    # Due Dates
    # =========================================================================

    def find_overdue(self, now: datetime | None = None) -> list[Todo]:
        now = as_utc(now) or self._clock()
        return [t for t in self._todos.find_due_between(end=now) if t.is_overdue(now)]

    def find_due_soon(self, days: int | None = None, now: datetime | None = None) -> list[Todo]:
        days = self._due_soon_days if days is None else days
        now = as_utc(now) or self._clock()
        candidates = self._todos.find_due_between(start=now, end=now + timedelta(days=days))
        return [t for t in candidates if t.is_due_soon(days, now)]

    def find_by_due_date_range(self, start: datetime, end: datetime) -> list[Todo]:
        return self._todos.find_due_between(start=as_utc(start), end=as_utc(end))

    def bulk_update_due_date(self, todo_ids: list[str], due_date: datetime | None) -> list[Todo]:
        """Set (or clear) the due date of several todos; unknown ids are skipped."""
        updated = []
        for todo in self._todos.find_by_ids(todo_ids):
            updated.append(self._save(todo.update_due_date(due_date)))
        return updated

    # =========================================================================
    # Subtasks
    # =========================================================================

    def add_subtask(self, parent_id: str, subtask_id: str) -> Todo:
        """Make `subtask_id` a child of `parent_id`.

        The hierarchy stays acyclic: a todo cannot become a subtask of
        itself or of one of its own descendants.
        """
        if parent_id == subtask_id:
            raise SelfDependencyError(parent_id)
        parent = self.get(parent_id)
        subtask = self.get(subtask_id)

        ancestor: Todo | None = parent
        seen: set[str] = set()
        while ancestor is not None and ancestor.parent_id and ancestor.id not in seen:
            seen.add(ancestor.id)
            if ancestor.parent_id == subtask_id:
                raise DependencyCycleError(subtask_id, parent_id)
            ancestor = self._todos.find_by_id(ancestor.parent_id)

        return self._save(subtask.update(parent_id=parent_id))

    def remove_subtask(self, parent_id: str, subtask_id: str) -> Todo:
        self.get(parent_id)
        subtask = self.get(subtask_id)
        if subtask.parent_id != parent_id:
            raise SubtaskNotFoundError(subtask_id, parent_id)
        return self._save(subtask.update(parent_id=None))

    def get_subtasks(self, parent_id: str) -> list[Todo]:
        self.get(parent_id)
        return self._todos.find_children(parent_id)

    def get_subtask_tree(self, parent_id: str, max_depth: int = DEFAULT_MAX_DEPTH) -> list[SubtaskNode]:
        """Nested subtasks of a todo, `max_depth` levels deep."""
        self.get(parent_id)

        def expand(todo_id: str, depth: int, path: frozenset[str]) -> list[SubtaskNode]:
            if depth <= 0:
                return []
            return [
                SubtaskNode(todo=child, subtasks=expand(child.id, depth - 1, path | {child.id}))
                for child in self._todos.find_children(todo_id)
                if child.id not in path
            ]

        return expand(parent_id, max_depth, frozenset({parent_id}))

    def get_parent(self, todo_id: str) -> Todo | None:
        todo = self.get(todo_id)
        if todo.parent_id is None:
            return None
        return self._todos.find_by_id(todo.parent_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _save(self, todo: Todo) -> Todo:
        saved = self._todos.update(todo.id, persistable(todo))
        if saved is None:
            raise TodoNotFoundError(todo.id)
        return saved

    def _require_project(self, project_id: str) -> None:
        if self._projects is not None and self._projects.find_by_id(project_id) is None:
            raise ProjectNotFoundError(project_id)

    def _require_dependencies_completed(self, todo: Todo) -> None:
        if not todo.dependencies:
            return
        completed = {
            dep.id
            for dep in self._todos.find_dependencies(todo.id)
            if dep.status == TodoStatus.COMPLETED
        }
        if not todo.can_be_completed(completed):
            pending = [d for d in todo.dependencies if d not in completed]
            raise IncompleteDependenciesError(todo.id, pending)

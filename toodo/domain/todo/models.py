"""Todo domain models.

The Todo entity is an immutable pydantic model. Every state change goes
through a named method that returns a new instance; callers persist the
returned value. Work time is tracked in whole seconds.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator, model_validator

from toodo.domain.shared.errors import (
    AlreadyCompletedError,
    InvalidStateTransitionError,
    NotCompletedError,
    SelfDependencyError,
)

ONE_SECOND = timedelta(seconds=1)


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def elapsed_seconds(since: datetime, now: datetime) -> int:
    """Whole seconds between two instants, floored (999ms counts as 0)."""
    return (now - since) // ONE_SECOND


def as_utc(value: datetime | None) -> datetime | None:
    """Treat a naive datetime as UTC; aware values pass through."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=UTC)


class TodoStatus(str, Enum):
    """Completion status of a todo."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class WorkState(str, Enum):
    """Activity-tracking state, distinct from the completion status."""

    IDLE = "idle"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class PriorityLevel(str, Enum):
    """Priority of a todo."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Todo(BaseModel):
    """A unit of work with status, work-time tracking and dependencies.

    `dependencies` lists the todos this one depends on; `dependents` lists
    the todos depending on this one. Neither list contains the todo's own id
    or duplicates.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    description: str | None = None
    status: TodoStatus = TodoStatus.PENDING
    work_state: WorkState = WorkState.IDLE
    total_work_time: int = 0
    last_state_change_at: datetime = Field(default_factory=utcnow)
    due_date: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    priority: PriorityLevel = PriorityLevel.MEDIUM
    project_id: str | None = None
    parent_id: str | None = None
    dependencies: list[str] = Field(default_factory=list)
    dependents: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @field_validator("last_state_change_at", "due_date", "created_at", "updated_at")
    @classmethod
    def _aware(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @model_validator(mode="after")
    def _check_dependency_lists(self) -> "Todo":
        for name in ("dependencies", "dependents"):
            ids = getattr(self, name)
            if self.id in ids:
                raise ValueError(f"Todo {self.id} cannot appear in its own {name}")
            if len(set(ids)) != len(ids):
                raise ValueError(f"Duplicate ids in {name} of todo {self.id}")
        return self

    def _copy(self, now: datetime | None = None, **changes: Any) -> "Todo":
        # Copies go through full validation
        changes.setdefault("updated_at", now or utcnow())
        return type(self).model_validate({**self.model_dump(), **changes})

    # =========================================================================
    # Plain Updates
    # =========================================================================

    def update(self, **fields: Any) -> "Todo":
        """Update several descriptive fields at once.

        Identity, timestamps and dependency lists are not updatable here.
        """
        protected = {"id", "created_at", "updated_at", "dependencies", "dependents"}
        illegal = protected.intersection(fields)
        if illegal:
            raise ValueError(f"Fields cannot be updated directly: {', '.join(sorted(illegal))}")
        return self._copy(**fields)

    def assign_to_project(self, project_id: str) -> "Todo":
        return self._copy(project_id=project_id)

    def remove_from_project(self) -> "Todo":
        return self._copy(project_id=None)

    def update_due_date(self, due_date: datetime | None) -> "Todo":
        """Set a new due date, or clear it with None."""
        return self._copy(due_date=due_date)

    # =========================================================================
    # Work State Machine
    # =========================================================================

    def start(self, now: datetime | None = None) -> "Todo":
        """Begin working: idle/paused -> active, status -> in_progress."""
        now = now or utcnow()
        if self.status == TodoStatus.COMPLETED:
            raise InvalidStateTransitionError(
                "start", self.work_state.value, "Cannot start a completed todo"
            )
        if self.work_state == WorkState.ACTIVE:
            raise InvalidStateTransitionError(
                "start", self.work_state.value, "Todo is already active"
            )
        return self._copy(
            now,
            work_state=WorkState.ACTIVE,
            status=TodoStatus.IN_PROGRESS,
            last_state_change_at=now,
        )

    def pause(self, now: datetime | None = None) -> "Todo":
        """Stop the clock: active -> paused, accruing the elapsed seconds."""
        now = now or utcnow()
        if self.work_state != WorkState.ACTIVE:
            raise InvalidStateTransitionError(
                "pause", self.work_state.value, "Todo is not active"
            )
        return self._copy(
            now,
            work_state=WorkState.PAUSED,
            total_work_time=self.total_work_time + elapsed_seconds(self.last_state_change_at, now),
            last_state_change_at=now,
        )

    def resume(self, now: datetime | None = None) -> "Todo":
        """Restart the clock: paused -> active. Status is left untouched."""
        now = now or utcnow()
        if self.work_state != WorkState.PAUSED:
            raise InvalidStateTransitionError(
                "resume", self.work_state.value, "Todo is not paused"
            )
        return self._copy(now, work_state=WorkState.ACTIVE, last_state_change_at=now)

    def complete(self, now: datetime | None = None) -> "Todo":
        """Finish the todo, accruing time first if it was active."""
        now = now or utcnow()
        if self.status == TodoStatus.COMPLETED:
            raise AlreadyCompletedError(self.id)

        total = self.total_work_time
        if self.work_state == WorkState.ACTIVE:
            total += elapsed_seconds(self.last_state_change_at, now)

        return self._copy(
            now,
            status=TodoStatus.COMPLETED,
            work_state=WorkState.COMPLETED,
            total_work_time=total,
            last_state_change_at=now,
        )

    def reopen(self, now: datetime | None = None) -> "Todo":
        """Return a completed todo to pending/idle."""
        now = now or utcnow()
        if self.status != TodoStatus.COMPLETED:
            raise NotCompletedError(self.id, self.status.value)
        return self._copy(
            now,
            status=TodoStatus.PENDING,
            work_state=WorkState.IDLE,
            last_state_change_at=now,
        )

    # =========================================================================
    # Dependencies
    # =========================================================================

    def add_dependency(self, dependency_id: str) -> "Todo":
        """Record that this todo depends on `dependency_id`."""
        if dependency_id == self.id:
            raise SelfDependencyError(self.id)
        if dependency_id in self.dependencies:
            return self
        return self._copy(dependencies=[*self.dependencies, dependency_id])

    def remove_dependency(self, dependency_id: str) -> "Todo":
        if dependency_id not in self.dependencies:
            return self
        return self._copy(dependencies=[d for d in self.dependencies if d != dependency_id])

    def add_dependent(self, dependent_id: str) -> "Todo":
        """Record that `dependent_id` depends on this todo."""
        if dependent_id == self.id:
            raise SelfDependencyError(self.id)
        if dependent_id in self.dependents:
            return self
        return self._copy(dependents=[*self.dependents, dependent_id])

    def remove_dependent(self, dependent_id: str) -> "Todo":
        if dependent_id not in self.dependents:
            return self
        return self._copy(dependents=[d for d in self.dependents if d != dependent_id])

    def has_dependency_on(self, dependency_id: str) -> bool:
        return dependency_id in self.dependencies

    def has_dependent(self, dependent_id: str) -> bool:
        return dependent_id in self.dependents

    def can_be_completed(self, completed_ids: set[str] | list[str]) -> bool:
        """True iff every dependency is among `completed_ids`.

        A todo without dependencies is always completable.
        """
        completed = set(completed_ids)
        return all(dep in completed for dep in self.dependencies)

    # =========================================================================
    # Due Dates
    # =========================================================================

    def is_overdue(self, now: datetime | None = None) -> bool:
        """Past its due date and not completed."""
        if self.due_date is None or self.status == TodoStatus.COMPLETED:
            return False
        return self.due_date < (now or utcnow())

    def is_due_soon(self, days: int = 2, now: datetime | None = None) -> bool:
        """Due within the next `days` days and not yet past due."""
        if self.due_date is None or self.status == TodoStatus.COMPLETED:
            return False
        now = now or utcnow()
        return now <= self.due_date <= now + timedelta(days=days)


class DependencyNode(BaseModel):
    """Read-only projection of a todo and its expanded dependencies.

    Built on demand by build_dependency_tree; never persisted.
    """

    id: str
    title: str
    status: TodoStatus
    priority: PriorityLevel
    dependencies: list["DependencyNode"] = Field(default_factory=list)


class SubtaskNode(BaseModel):
    """A todo with its nested subtasks, used for hierarchy views."""

    todo: Todo
    subtasks: list["SubtaskNode"] = Field(default_factory=list)


class WorkTime(BaseModel):
    """Work-time summary for a single todo."""

    id: str
    total_work_time: int
    current_work_time: int
    work_state: WorkState
    formatted_time: str

"""Domain error taxonomy.

Every failure the domain and application layers can report is a subclass of
ToodoError. Errors are raised where they are detected and propagate
unchanged to the caller; the presentation layer decides how each kind is
surfaced (see toodo.interfaces.api.errors).

Kinds:
    NotFoundError - a referenced entity or dependency edge does not exist
    ConflictError - a uniqueness rule would be violated
    SelfDependencyError - a todo would depend on itself
    DependencyExistsError - the edge is already present
    DependencyCycleError - the edge would close a cycle
    InvalidStateTransitionError - work-state/status transition not allowed
    AlreadyCompletedError / NotCompletedError - completion/reopen from the wrong status
    InvalidWorkPeriodError - a work period ends before it starts
    ActivityOutsideWorkPeriodError - an activity is assigned to a period that does not cover it
"""

from datetime import datetime


class ToodoError(Exception):
    """Base class for all domain errors."""

    kind = "error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


# =============================================================================
# Not Found
# =============================================================================


class NotFoundError(ToodoError):
    """A referenced entity does not exist."""

    kind = "not_found"

    def __init__(self, entity: str, entity_id: str, message: str | None = None) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(message or f"{entity} with id {entity_id} not found")


class TodoNotFoundError(NotFoundError):
    def __init__(self, todo_id: str) -> None:
        super().__init__("Todo", todo_id)


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str) -> None:
        super().__init__("Project", project_id)


class TagNotFoundError(NotFoundError):
    def __init__(self, tag_id: str) -> None:
        super().__init__("Tag", tag_id)


class TodoActivityNotFoundError(NotFoundError):
    def __init__(self, activity_id: str) -> None:
        super().__init__("Todo activity", activity_id)


class WorkPeriodNotFoundError(NotFoundError):
    def __init__(self, work_period_id: str) -> None:
        super().__init__("Work period", work_period_id)


class DependencyNotFoundError(NotFoundError):
    """The dependency edge todo_id -> dependency_id does not exist."""

    def __init__(self, todo_id: str, dependency_id: str) -> None:
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(
            "Dependency",
            f"{todo_id}->{dependency_id}",
            f"Todo {todo_id} does not depend on todo {dependency_id}",
        )


class SubtaskNotFoundError(NotFoundError):
    def __init__(self, subtask_id: str, parent_id: str) -> None:
        self.parent_id = parent_id
        super().__init__(
            "Subtask",
            subtask_id,
            f"Todo {subtask_id} is not a subtask of todo {parent_id}",
        )


class TodoNotInProjectError(NotFoundError):
    def __init__(self, todo_id: str, project_id: str) -> None:
        self.project_id = project_id
        super().__init__(
            "Todo",
            todo_id,
            f"Todo {todo_id} does not belong to project {project_id}",
        )


class ActivityNotInWorkPeriodError(NotFoundError):
    def __init__(self, activity_id: str, work_period_id: str) -> None:
        self.work_period_id = work_period_id
        super().__init__(
            "Todo activity",
            activity_id,
            f"Activity {activity_id} is not attributed to work period {work_period_id}",
        )


# =============================================================================
# Conflicts
# =============================================================================


class ConflictError(ToodoError):
    """A uniqueness rule would be violated."""

    kind = "conflict"


class ProjectNameExistsError(ConflictError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Project with name '{name}' already exists")


class TagNameExistsError(ConflictError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tag with name '{name}' already exists")


class WorkPeriodOverlapError(ConflictError):
    def __init__(self, overlapping_id: str) -> None:
        self.overlapping_id = overlapping_id
        super().__init__(f"The time period overlaps with work period {overlapping_id}")


# =============================================================================
# Dependency Graph
# =============================================================================


class SelfDependencyError(ToodoError):
    kind = "self_dependency"

    def __init__(self, todo_id: str) -> None:
        self.todo_id = todo_id
        super().__init__(f"Todo {todo_id} cannot depend on itself")


class DependencyExistsError(ToodoError):
    kind = "dependency_exists"

    def __init__(self, todo_id: str, dependency_id: str) -> None:
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(f"Todo {todo_id} already depends on todo {dependency_id}")


class DependencyCycleError(ToodoError):
    kind = "dependency_cycle"

    def __init__(self, todo_id: str, dependency_id: str) -> None:
        self.todo_id = todo_id
        self.dependency_id = dependency_id
        super().__init__(
            f"Adding dependency from {todo_id} to {dependency_id} would create a cycle"
        )


# =============================================================================
# State Transitions
# =============================================================================


class InvalidStateTransitionError(ToodoError):
    """A transition was attempted from a state that forbids it.

    Attributes:
        transition: Name of the attempted transition (e.g. "pause").
        current_state: The state the todo was in when it was attempted.
    """

    kind = "invalid_state_transition"

    def __init__(self, transition: str, current_state: str, message: str | None = None) -> None:
        self.transition = transition
        self.current_state = current_state
        super().__init__(
            message or f"Cannot {transition} a todo in state '{current_state}'"
        )


class AlreadyCompletedError(InvalidStateTransitionError):
    kind = "already_completed"

    def __init__(self, todo_id: str) -> None:
        self.todo_id = todo_id
        super().__init__("complete", "completed", f"Todo {todo_id} is already completed")


class NotCompletedError(InvalidStateTransitionError):
    kind = "not_completed"

    def __init__(self, todo_id: str, current_state: str) -> None:
        self.todo_id = todo_id
        super().__init__("reopen", current_state, f"Todo {todo_id} is not completed")


class IncompleteDependenciesError(InvalidStateTransitionError):
    """Completion refused while some dependencies are still open."""

    kind = "incomplete_dependencies"

    def __init__(self, todo_id: str, pending_ids: list[str]) -> None:
        self.todo_id = todo_id
        self.pending_ids = pending_ids
        super().__init__(
            "complete",
            "blocked",
            f"Todo {todo_id} has incomplete dependencies: {', '.join(pending_ids)}",
        )


# =============================================================================
# Activities
# =============================================================================


class UnauthorizedActivityDeletionError(ToodoError):
    kind = "unauthorized_activity_deletion"

    def __init__(self, activity_id: str, reason: str) -> None:
        self.activity_id = activity_id
        self.reason = reason
        super().__init__(f"Cannot delete activity {activity_id}: {reason}")


# =============================================================================
# Work Periods
# =============================================================================


class InvalidWorkPeriodError(ToodoError):
    kind = "invalid_work_period"

    def __init__(self, start_time: datetime, end_time: datetime) -> None:
        self.start_time = start_time
        self.end_time = end_time
        super().__init__(f"Start time {start_time} must not be after end time {end_time}")


class ActivityOutsideWorkPeriodError(ToodoError):
    """The activity was recorded outside the period's time range."""

    kind = "activity_outside_work_period"

    def __init__(self, activity_id: str, work_period_id: str) -> None:
        self.activity_id = activity_id
        self.work_period_id = work_period_id
        super().__init__(
            f"Activity {activity_id} was not recorded within work period {work_period_id}"
        )

"""Shared domain building blocks.

Currently the error taxonomy used across all aggregates:

    >>> from toodo.domain.shared import TodoNotFoundError
    >>> raise TodoNotFoundError("missing-id")
    Traceback (most recent call last):
    ...
    toodo.domain.shared.errors.TodoNotFoundError: Todo with id missing-id not found
"""

from toodo.domain.shared.errors import (
    ActivityNotInWorkPeriodError,
    ActivityOutsideWorkPeriodError,
    AlreadyCompletedError,
    ConflictError,
    DependencyCycleError,
    DependencyExistsError,
    DependencyNotFoundError,
    IncompleteDependenciesError,
    InvalidStateTransitionError,
    InvalidWorkPeriodError,
    NotCompletedError,
    NotFoundError,
    ProjectNameExistsError,
    ProjectNotFoundError,
    SelfDependencyError,
    SubtaskNotFoundError,
    TagNameExistsError,
    TagNotFoundError,
    TodoActivityNotFoundError,
    TodoNotFoundError,
    TodoNotInProjectError,
    ToodoError,
    UnauthorizedActivityDeletionError,
    WorkPeriodNotFoundError,
    WorkPeriodOverlapError,
)

__all__ = [
    "ToodoError",
    # Not found
    "NotFoundError",
    "TodoNotFoundError",
    "ProjectNotFoundError",
    "TagNotFoundError",
    "TodoActivityNotFoundError",
    "DependencyNotFoundError",
    "SubtaskNotFoundError",
    "TodoNotInProjectError",
    "WorkPeriodNotFoundError",
    "ActivityNotInWorkPeriodError",
    # Conflicts
    "ConflictError",
    "ProjectNameExistsError",
    "TagNameExistsError",
    "WorkPeriodOverlapError",
    # Dependency graph
    "SelfDependencyError",
    "DependencyExistsError",
    "DependencyCycleError",
    # State transitions
    "InvalidStateTransitionError",
    "AlreadyCompletedError",
    "NotCompletedError",
    "IncompleteDependenciesError",
    # Activities
    "UnauthorizedActivityDeletionError",
    # Work periods
    "InvalidWorkPeriodError",
    "ActivityOutsideWorkPeriodError",
]

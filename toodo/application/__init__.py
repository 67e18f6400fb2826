"""Application service layer for toodo.

Services orchestrate domain operations over the repository protocols in
toodo.domain.repositories. Repositories and the clock are injected through
the constructor; domain errors propagate unchanged.

Services:
    TodoService - CRUD, work-state transitions, work time, due dates, subtasks
    DependencyService - Dependency edges and dependency trees
    ProjectService - Projects and project membership
    TagService - Tags, tagging and tag statistics
    ActivityService - Activity log that drives the work-state machine
    WorkPeriodService - Work periods, activity attribution and utilization statistics

Example usage:
    >>> from toodo.application import TodoService, DependencyService
    >>>
    >>> todos = TodoService(todo_repository)
    >>> a = todos.create("Write docs")
    >>> b = todos.create("Ship release")
    >>> DependencyService(todo_repository).add_dependency(b.id, a.id)
"""

from toodo.application.activity_service import ActivityService
from toodo.application.dependency_service import DependencyService
from toodo.application.project_service import ProjectService
from toodo.application.tag_service import TagMatch, TagService
from toodo.application.todo_service import TRANSITIONS, TodoService, persistable
from toodo.application.work_period_service import WorkPeriodService

__all__ = [
    # Todo service
    "TodoService",
    "TRANSITIONS",
    "persistable",
    # Dependency service
    "DependencyService",
    # Project service
    "ProjectService",
    # Tag service
    "TagService",
    "TagMatch",
    # Activity service
    "ActivityService",
    # Work period service
    "WorkPeriodService",
]

"""Todo activity use cases.

Recording an activity drives the todo's work-state machine through
TodoService, so the activity log and the todo never disagree.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from toodo.application.todo_service import TodoService
from toodo.domain.activity import STATE_CHANGING_TYPES, ActivityType, TodoActivity
from toodo.domain.repositories import TodoActivityRepository, TodoRepository
from toodo.domain.shared.errors import (
    TodoActivityNotFoundError,
    TodoNotFoundError,
    UnauthorizedActivityDeletionError,
)
from toodo.domain.todo import WorkState, elapsed_seconds, utcnow

logger = logging.getLogger(__name__)


class ActivityService:
    def __init__(
        self,
        todos: TodoRepository,
        activities: TodoActivityRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._todos = todos
        self._activities = activities
        self._clock = clock
        self._todo_service = TodoService(todos, activities=activities, clock=clock)

    def record(self, todo_id: str, activity_type: ActivityType, note: str | None = None) -> TodoActivity:
        """Record an activity and apply the matching transition.

        started resumes a paused todo and starts any other one; paused and
        completed map to pause and complete. discarded leaves the todo as it
        is and only notes the running interval of an active todo.

        Raises:
            TodoNotFoundError: the todo does not exist
            InvalidStateTransitionError: the transition is not allowed
        """
        todo = self._todos.find_by_id(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)

        if activity_type == ActivityType.DISCARDED:
            now = self._clock()
            running = None
            if todo.work_state == WorkState.ACTIVE:
                running = elapsed_seconds(todo.last_state_change_at, now)
            activity = self._activities.create(
                TodoActivity(
                    todo_id=todo_id,
                    type=activity_type,
                    work_time=running,
                    previous_state=todo.work_state,
                    note=note,
                    created_at=now,
                )
            )
            logger.info(f"Recorded discarded activity {activity.id} on todo {todo_id}")
            return activity

        if activity_type == ActivityType.STARTED:
            action = "resume" if todo.work_state == WorkState.PAUSED else "start"
        elif activity_type == ActivityType.PAUSED:
            action = "pause"
        else:
            action = "complete"

        _, activity = self._todo_service.transition(todo_id, action, note)
        return activity

    def list_for_todo(self, todo_id: str) -> list[TodoActivity]:
        """Activities of a todo, newest first."""
        if self._todos.find_by_id(todo_id) is None:
            raise TodoNotFoundError(todo_id)
        return self._activities.find_by_todo_id(todo_id)

    def delete(self, todo_id: str, activity_id: str) -> None:
        """Delete an activity that does not affect the todo's history.

        Activities that accrued work time, and the latest activity of each
        state-changing type, are protected.
        """
        if self._todos.find_by_id(todo_id) is None:
            raise TodoNotFoundError(todo_id)

        activity = self._activities.find_by_id(activity_id)
        if activity is None:
            raise TodoActivityNotFoundError(activity_id)

        if activity.todo_id != todo_id:
            raise UnauthorizedActivityDeletionError(activity_id, "Activity does not belong to this todo")

        if activity.work_time:
            raise UnauthorizedActivityDeletionError(
                activity_id, "Deleting it would change the recorded work time"
            )

        if activity.type in STATE_CHANGING_TYPES:
            latest = next(
                (a for a in self._activities.find_by_todo_id(todo_id) if a.type == activity.type),
                None,
            )
            if latest is not None and latest.id == activity_id:
                raise UnauthorizedActivityDeletionError(
                    activity_id, "Cannot delete the most recent state-changing activity"
                )

        self._activities.delete(activity_id)
        logger.info(f"Deleted activity {activity_id} of todo {todo_id}")

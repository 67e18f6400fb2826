"""Todo activity domain models.

An activity is an immutable log entry describing a work-state change of a
todo, together with the seconds of work that change accrued. It may be
attributed to one work period.
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from toodo.domain.todo.models import WorkState, utcnow


class ActivityType(str, Enum):
    """Kind of activity recorded against a todo."""

    STARTED = "started"
    PAUSED = "paused"
    COMPLETED = "completed"
    DISCARDED = "discarded"


# Activity types that move the work-state machine
STATE_CHANGING_TYPES = frozenset(
    {ActivityType.STARTED, ActivityType.PAUSED, ActivityType.COMPLETED}
)


class TodoActivity(BaseModel):
    """A recorded work-state change of a todo."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    todo_id: str
    type: ActivityType
    work_time: int | None = None
    previous_state: WorkState | None = None
    note: str | None = None
    work_period_id: str | None = None
    created_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}

"""Tag domain models."""

from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from toodo.domain.todo.models import utcnow


class Tag(BaseModel):
    """A label that can be attached to any number of todos."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str
    color: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}

    def update(self, **fields: Any) -> "Tag":
        return type(self).model_validate({**self.model_dump(), **fields, "updated_at": utcnow()})


class TagStatistics(BaseModel):
    """Usage counts for a tag.

    Pending covers every todo that is not completed.
    """

    id: str
    name: str
    color: str | None = None
    usage_count: int = 0
    pending_todo_count: int = 0
    completed_todo_count: int = 0

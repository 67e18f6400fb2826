"""Project domain models.

Projects group todos. Like todos they are immutable; updates return new
instances.
"""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, Field

from toodo.domain.todo.models import utcnow


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    ACTIVE = "active"
    ARCHIVED = "archived"


class Project(BaseModel):
    """A named group of todos."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    name: str = Field(description="Unique human-readable name")
    description: str | None = None
    color: str | None = Field(default=None, description="Display color, e.g. '#ff8800'")
    status: ProjectStatus = ProjectStatus.ACTIVE
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    model_config = {"frozen": True}

    def update(self, **fields: Any) -> "Project":
        """Return a copy with the given descriptive fields replaced."""
        return type(self).model_validate({**self.model_dump(), **fields, "updated_at": utcnow()})

    def archive(self) -> "Project":
        return self.update(status=ProjectStatus.ARCHIVED)

    def activate(self) -> "Project":
        return self.update(status=ProjectStatus.ACTIVE)

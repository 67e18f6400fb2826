"""Request/Response schemas for the toodo API.

Request bodies are defined here. Responses reuse the domain models
(Todo, Project, Tag, TodoActivity, DependencyNode, WorkTime, TagStatistics,
WorkPeriod, WorkPeriodStatistics) directly, since they are already immutable
pydantic models. ErrorResponse documents the body of every domain error.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from toodo.domain.activity import ActivityType
from toodo.domain.project import ProjectStatus
from toodo.domain.todo import PriorityLevel


# =============================================================================
# Todo Schemas
# =============================================================================


class CreateTodoRequest(BaseModel):
    """Request to create a new todo."""

    title: str = Field(min_length=1, max_length=500)
    description: str | None = None
    priority: PriorityLevel = PriorityLevel.MEDIUM
    due_date: datetime | None = None
    project_id: str | None = None
    parent_id: str | None = None


class UpdateTodoRequest(BaseModel):
    """Partial update of a todo's descriptive fields.

    Status and work state change only through the transition endpoints.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    priority: PriorityLevel | None = None
    due_date: datetime | None = None
    project_id: str | None = None

    @field_validator("title", "priority")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class BulkDueDateRequest(BaseModel):
    todo_ids: list[str] = Field(min_length=1)
    due_date: datetime | None = None


# =============================================================================
# Activity Schemas
# =============================================================================


class CreateActivityRequest(BaseModel):
    """Request to record an activity against a todo."""

    type: ActivityType
    note: str | None = None


# =============================================================================
# Project Schemas
# =============================================================================


class CreateProjectRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    color: str | None = None


class UpdateProjectRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    color: str | None = None
    status: ProjectStatus | None = None

    @field_validator("name", "status")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# =============================================================================
# Tag Schemas
# =============================================================================


class CreateTagRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    color: str | None = None


class UpdateTagRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    color: str | None = None

    @field_validator("name")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class BulkTagRequest(BaseModel):
    todo_ids: list[str] = Field(min_length=1)


class BulkTagResponse(BaseModel):
    tag_id: str
    count: int


TagMatchMode = Literal["all", "any"]


# =============================================================================
# Work Period Schemas
# =============================================================================


class CreateWorkPeriodRequest(BaseModel):
    """Request to create a work period. date defaults to the start time."""

    name: str = Field(min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime
    date: datetime | None = None


class UpdateWorkPeriodRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    start_time: datetime | None = None
    end_time: datetime | None = None
    date: datetime | None = None

    @field_validator("name", "start_time", "end_time", "date")
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


# =============================================================================
# Errors
# =============================================================================


class ErrorResponse(BaseModel):
    """Body returned for every domain error."""

    error: str
    detail: str

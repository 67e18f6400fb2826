"""FastAPI routes for toodo.

Every route delegates to an application service built per request (see
toodo.interfaces.api.dependencies). Domain errors raised by the services are
turned into responses by the handlers in toodo.interfaces.api.errors.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Response

from toodo.application import (
    ActivityService,
    DependencyService,
    ProjectService,
    TagService,
    TodoService,
    WorkPeriodService,
)
from toodo.domain.activity import TodoActivity
from toodo.domain.project import Project
from toodo.domain.tag import Tag, TagStatistics
from toodo.domain.todo import (
    DependencyNode,
    PriorityLevel,
    SubtaskNode,
    Todo,
    TodoStatus,
    WorkTime,
)
from toodo.domain.work_period import WorkPeriod, WorkPeriodStatistics
from toodo.interfaces.api.dependencies import (
    get_activity_service,
    get_dependency_service,
    get_project_service,
    get_tag_service,
    get_todo_service,
    get_work_period_service,
)
from toodo.interfaces.api.schemas import (
    BulkDueDateRequest,
    BulkTagRequest,
    BulkTagResponse,
    CreateActivityRequest,
    CreateProjectRequest,
    CreateTagRequest,
    CreateTodoRequest,
    CreateWorkPeriodRequest,
    ErrorResponse,
    TagMatchMode,
    UpdateProjectRequest,
    UpdateTagRequest,
    UpdateTodoRequest,
    UpdateWorkPeriodRequest,
)

router = APIRouter(
    prefix="/api",
    responses={code: {"model": ErrorResponse} for code in (400, 403, 404, 409)},
)


def _no_content() -> Response:
    return Response(status_code=204)


# =============================================================================
# Todos
# =============================================================================


@router.get("/todos", response_model=list[Todo])
def list_todos(
    status: TodoStatus | None = None,
    priority: PriorityLevel | None = None,
    project_id: str | None = None,
    service: TodoService = Depends(get_todo_service),
):
    """List todos, optionally filtered by status, priority or project."""
    return service.list_all(status=status, priority=priority, project_id=project_id)


@router.post("/todos", response_model=Todo, status_code=201)
def create_todo(req: CreateTodoRequest, service: TodoService = Depends(get_todo_service)):
    return service.create(**req.model_dump())


# Fixed paths come before /todos/{todo_id} so they are not captured as ids


@router.get("/todos/overdue", response_model=list[Todo])
def list_overdue_todos(service: TodoService = Depends(get_todo_service)):
    return service.find_overdue()


@router.get("/todos/due-soon", response_model=list[Todo])
def list_due_soon_todos(
    days: int | None = Query(default=None, ge=0),
    service: TodoService = Depends(get_todo_service),
):
    return service.find_due_soon(days=days)


@router.get("/todos/due-range", response_model=list[Todo])
def list_todos_due_between(
    start: datetime,
    end: datetime,
    service: TodoService = Depends(get_todo_service),
):
    return service.find_by_due_date_range(start, end)


@router.patch("/todos/due-date", response_model=list[Todo])
def bulk_update_due_date(req: BulkDueDateRequest, service: TodoService = Depends(get_todo_service)):
    """Set or clear the due date of several todos at once."""
    return service.bulk_update_due_date(req.todo_ids, req.due_date)


@router.get("/todos/by-tags", response_model=list[Todo])
def list_todos_by_tags(
    tag_ids: list[str] = Query(...),
    mode: TagMatchMode = "all",
    service: TagService = Depends(get_tag_service),
):
    """Todos carrying all (mode=all) or any (mode=any) of the given tags."""
    return service.todos_by_tags(tag_ids, mode)


@router.get("/todos/{todo_id}", response_model=Todo)
def get_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.get(todo_id)


@router.patch("/todos/{todo_id}", response_model=Todo)
def update_todo(todo_id: str, req: UpdateTodoRequest, service: TodoService = Depends(get_todo_service)):
    return service.update(todo_id, **req.model_dump(exclude_unset=True))


@router.delete("/todos/{todo_id}", status_code=204)
def delete_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    service.delete(todo_id)
    return _no_content()


# =============================================================================
# Work State
# =============================================================================


@router.post("/todos/{todo_id}/start", response_model=Todo)
def start_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.start(todo_id)


@router.post("/todos/{todo_id}/pause", response_model=Todo)
def pause_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.pause(todo_id)


@router.post("/todos/{todo_id}/resume", response_model=Todo)
def resume_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.resume(todo_id)


@router.post("/todos/{todo_id}/complete", response_model=Todo)
def complete_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    """Complete a todo. Refused while any of its dependencies is open."""
    return service.complete(todo_id)


@router.post("/todos/{todo_id}/reopen", response_model=Todo)
def reopen_todo(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.reopen(todo_id)


@router.get("/todos/{todo_id}/work-time", response_model=WorkTime)
def get_work_time(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.get_work_time(todo_id)


# =============================================================================
# Dependencies
# =============================================================================


@router.get("/todos/{todo_id}/dependencies", response_model=list[Todo])
def list_dependencies(todo_id: str, service: DependencyService = Depends(get_dependency_service)):
    return service.get_dependencies(todo_id)


@router.post("/todos/{todo_id}/dependencies/{dependency_id}", response_model=Todo, status_code=201)
def add_dependency(
    todo_id: str,
    dependency_id: str,
    service: DependencyService = Depends(get_dependency_service),
):
    return service.add_dependency(todo_id, dependency_id)


@router.delete("/todos/{todo_id}/dependencies/{dependency_id}", response_model=Todo)
def remove_dependency(
    todo_id: str,
    dependency_id: str,
    service: DependencyService = Depends(get_dependency_service),
):
    return service.remove_dependency(todo_id, dependency_id)


@router.get("/todos/{todo_id}/dependents", response_model=list[Todo])
def list_dependents(todo_id: str, service: DependencyService = Depends(get_dependency_service)):
    return service.get_dependents(todo_id)


@router.get("/todos/{todo_id}/dependency-tree", response_model=DependencyNode)
def get_dependency_tree(
    todo_id: str,
    max_depth: int | None = Query(default=None, ge=0),
    service: DependencyService = Depends(get_dependency_service),
):
    return service.get_dependency_tree(todo_id, max_depth)


# =============================================================================
# Subtasks
# =============================================================================


@router.get("/todos/{todo_id}/subtasks", response_model=list[Todo])
def list_subtasks(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.get_subtasks(todo_id)


@router.get("/todos/{todo_id}/subtask-tree", response_model=list[SubtaskNode])
def get_subtask_tree(
    todo_id: str,
    max_depth: int = Query(default=10, ge=0),
    service: TodoService = Depends(get_todo_service),
):
    return service.get_subtask_tree(todo_id, max_depth)


@router.post("/todos/{todo_id}/subtasks/{subtask_id}", response_model=Todo)
def add_subtask(todo_id: str, subtask_id: str, service: TodoService = Depends(get_todo_service)):
    return service.add_subtask(todo_id, subtask_id)


@router.delete("/todos/{todo_id}/subtasks/{subtask_id}", response_model=Todo)
def remove_subtask(todo_id: str, subtask_id: str, service: TodoService = Depends(get_todo_service)):
    return service.remove_subtask(todo_id, subtask_id)


@router.get("/todos/{todo_id}/parent", response_model=Todo | None)
def get_parent(todo_id: str, service: TodoService = Depends(get_todo_service)):
    return service.get_parent(todo_id)


# =============================================================================
# Activities
# =============================================================================


@router.get("/todos/{todo_id}/activities", response_model=list[TodoActivity])
def list_activities(todo_id: str, service: ActivityService = Depends(get_activity_service)):
    """Activities of a todo, newest first."""
    return service.list_for_todo(todo_id)


@router.post("/todos/{todo_id}/activities", response_model=TodoActivity, status_code=201)
def create_activity(
    todo_id: str,
    req: CreateActivityRequest,
    service: ActivityService = Depends(get_activity_service),
):
    return service.record(todo_id, req.type, req.note)


@router.delete("/todos/{todo_id}/activities/{activity_id}", status_code=204)
def delete_activity(
    todo_id: str,
    activity_id: str,
    service: ActivityService = Depends(get_activity_service),
):
    service.delete(todo_id, activity_id)
    return _no_content()


# =============================================================================
# Todo Tags
# =============================================================================


@router.get("/todos/{todo_id}/tags", response_model=list[Tag])
def list_todo_tags(todo_id: str, service: TagService = Depends(get_tag_service)):
    return service.tags_for_todo(todo_id)


@router.post("/todos/{todo_id}/tags/{tag_id}", response_model=list[Tag])
def assign_tag(todo_id: str, tag_id: str, service: TagService = Depends(get_tag_service)):
    return service.assign(todo_id, tag_id)


@router.delete("/todos/{todo_id}/tags/{tag_id}", response_model=list[Tag])
def unassign_tag(todo_id: str, tag_id: str, service: TagService = Depends(get_tag_service)):
    return service.unassign(todo_id, tag_id)


# =============================================================================
# Projects
# =============================================================================


@router.get("/projects", response_model=list[Project])
def list_projects(service: ProjectService = Depends(get_project_service)):
    return service.list_all()


@router.post("/projects", response_model=Project, status_code=201)
def create_project(req: CreateProjectRequest, service: ProjectService = Depends(get_project_service)):
    return service.create(req.name, req.description, req.color)


@router.get("/projects/{project_id}", response_model=Project)
def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return service.get(project_id)


@router.patch("/projects/{project_id}", response_model=Project)
def update_project(
    project_id: str,
    req: UpdateProjectRequest,
    service: ProjectService = Depends(get_project_service),
):
    return service.update(project_id, **req.model_dump(exclude_unset=True))


@router.delete("/projects/{project_id}", status_code=204)
def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    """Delete a project. Its todos are kept without a project."""
    service.delete(project_id)
    return _no_content()


@router.post("/projects/{project_id}/archive", response_model=Project)
def archive_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return service.archive(project_id)


@router.post("/projects/{project_id}/activate", response_model=Project)
def activate_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    return service.activate(project_id)


@router.get("/projects/{project_id}/todos", response_model=list[Todo])
def list_project_todos(project_id: str, service: ProjectService = Depends(get_project_service)):
    return service.get_todos(project_id)


@router.post("/projects/{project_id}/todos/{todo_id}", response_model=Todo)
def add_todo_to_project(
    project_id: str,
    todo_id: str,
    service: ProjectService = Depends(get_project_service),
):
    return service.add_todo(project_id, todo_id)


@router.delete("/projects/{project_id}/todos/{todo_id}", response_model=Todo)
def remove_todo_from_project(
    project_id: str,
    todo_id: str,
    service: ProjectService = Depends(get_project_service),
):
    return service.remove_todo(project_id, todo_id)


# =============================================================================
# Tags
# =============================================================================


@router.get("/tags", response_model=list[Tag])
def list_tags(service: TagService = Depends(get_tag_service)):
    return service.list_all()


@router.post("/tags", response_model=Tag, status_code=201)
def create_tag(req: CreateTagRequest, service: TagService = Depends(get_tag_service)):
    return service.create(req.name, req.color)


@router.get("/tags/statistics", response_model=list[TagStatistics])
def get_tag_statistics(service: TagService = Depends(get_tag_service)):
    """Usage, pending and completed counts per tag."""
    return service.statistics()


@router.get("/tags/{tag_id}", response_model=Tag)
def get_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    return service.get(tag_id)


@router.patch("/tags/{tag_id}", response_model=Tag)
def update_tag(tag_id: str, req: UpdateTagRequest, service: TagService = Depends(get_tag_service)):
    return service.update(tag_id, **req.model_dump(exclude_unset=True))


@router.delete("/tags/{tag_id}", status_code=204)
def delete_tag(tag_id: str, service: TagService = Depends(get_tag_service)):
    service.delete(tag_id)
    return _no_content()


@router.get("/tags/{tag_id}/todos", response_model=list[Todo])
def list_tag_todos(tag_id: str, service: TagService = Depends(get_tag_service)):
    return service.todos_for_tag(tag_id)


@router.post("/tags/{tag_id}/bulk-assign", response_model=BulkTagResponse)
def bulk_assign_tag(tag_id: str, req: BulkTagRequest, service: TagService = Depends(get_tag_service)):
    return BulkTagResponse(tag_id=tag_id, count=service.bulk_assign(tag_id, req.todo_ids))


@router.post("/tags/{tag_id}/bulk-remove", response_model=BulkTagResponse)
def bulk_remove_tag(tag_id: str, req: BulkTagRequest, service: TagService = Depends(get_tag_service)):
    return BulkTagResponse(tag_id=tag_id, count=service.bulk_remove(tag_id, req.todo_ids))


# =============================================================================
# Work Periods
# =============================================================================


@router.get("/work-periods", response_model=list[WorkPeriod])
def list_work_periods(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    """List work periods filed between start_date and end_date, latest first."""
    return service.list_all(start_date, end_date)


@router.post("/work-periods", response_model=WorkPeriod, status_code=201)
def create_work_period(
    req: CreateWorkPeriodRequest,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    return service.create(**req.model_dump())


@router.get("/work-periods/statistics", response_model=WorkPeriodStatistics)
def get_work_period_statistics(
    start_date: datetime | None = None,
    end_date: datetime | None = None,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    return service.statistics(start_date, end_date)


@router.get("/work-periods/{work_period_id}", response_model=WorkPeriod)
def get_work_period(work_period_id: str, service: WorkPeriodService = Depends(get_work_period_service)):
    return service.get(work_period_id)


@router.patch("/work-periods/{work_period_id}", response_model=WorkPeriod)
def update_work_period(
    work_period_id: str,
    req: UpdateWorkPeriodRequest,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    return service.update(work_period_id, **req.model_dump(exclude_unset=True))


@router.delete("/work-periods/{work_period_id}", status_code=204)
def delete_work_period(work_period_id: str, service: WorkPeriodService = Depends(get_work_period_service)):
    """Delete a work period. Its activities are kept without a period."""
    service.delete(work_period_id)
    return _no_content()


@router.get("/work-periods/{work_period_id}/activities", response_model=list[TodoActivity])
def list_work_period_activities(
    work_period_id: str,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    return service.activities(work_period_id)


@router.post("/work-periods/{work_period_id}/activities/{activity_id}", response_model=TodoActivity)
def assign_activity_to_work_period(
    work_period_id: str,
    activity_id: str,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    return service.assign_activity(work_period_id, activity_id)


@router.delete("/work-periods/{work_period_id}/activities/{activity_id}", status_code=204)
def unassign_activity_from_work_period(
    work_period_id: str,
    activity_id: str,
    service: WorkPeriodService = Depends(get_work_period_service),
):
    service.unassign_activity(work_period_id, activity_id)
    return _no_content()

"""SQLAlchemy implementations of the domain repository protocols.

Each repository wraps a Session supplied by the caller; committing is the
caller's job (see Database.session). Methods flush so that later reads in
the same unit of work see earlier writes.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

from sqlalchemy import case, delete, func, or_, select, update
from sqlalchemy.orm import Session

from toodo.domain.activity import TodoActivity
from toodo.domain.project import Project
from toodo.domain.tag import Tag, TagStatistics
from toodo.domain.todo import (
    PriorityLevel,
    Todo,
    TodoStatus,
    utcnow,
    would_create_cycle,
)
from toodo.domain.work_period import WorkPeriod
from toodo.infrastructure.storage.orm import (
    ProjectRecord,
    TagRecord,
    TodoActivityRecord,
    TodoDependencyRecord,
    TodoRecord,
    TodoTagRecord,
    WorkPeriodRecord,
)

logger = logging.getLogger(__name__)

_TODO_COLUMNS = set(TodoRecord.__table__.columns.keys())
_PROJECT_COLUMNS = set(ProjectRecord.__table__.columns.keys())
_TAG_COLUMNS = set(TagRecord.__table__.columns.keys())
_WORK_PERIOD_COLUMNS = set(WorkPeriodRecord.__table__.columns.keys())


def _row_fields(record: Any, columns: set[str]) -> dict[str, Any]:
    return {name: getattr(record, name) for name in columns}


# =============================================================================
# Todos
# =============================================================================


class SqlAlchemyTodoRepository:
    """Todos and their dependency edges."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _to_domain(self, records: Iterable[TodoRecord]) -> list[Todo]:
        records = list(records)
        if not records:
            return []

        ids = [r.id for r in records]
        dependencies: dict[str, list[str]] = defaultdict(list)
        dependents: dict[str, list[str]] = defaultdict(list)
        edges = self._session.scalars(
            select(TodoDependencyRecord)
            .where(
                or_(
                    TodoDependencyRecord.dependent_id.in_(ids),
                    TodoDependencyRecord.dependency_id.in_(ids),
                )
            )
            .order_by(TodoDependencyRecord.id)
        )
        for edge in edges:
            dependencies[edge.dependent_id].append(edge.dependency_id)
            dependents[edge.dependency_id].append(edge.dependent_id)

        return [
            Todo(
                **_row_fields(r, _TODO_COLUMNS),
                dependencies=dependencies[r.id],
                dependents=dependents[r.id],
            )
            for r in records
        ]

    def _load(self, record: TodoRecord) -> Todo:
        return self._to_domain([record])[0]

    def find_all(
        self,
        status: TodoStatus | None = None,
        priority: PriorityLevel | None = None,
        project_id: str | None = None,
    ) -> list[Todo]:
        stmt = select(TodoRecord).order_by(TodoRecord.created_at, TodoRecord.id)
        if status is not None:
            stmt = stmt.where(TodoRecord.status == status)
        if priority is not None:
            stmt = stmt.where(TodoRecord.priority == priority)
        if project_id is not None:
            stmt = stmt.where(TodoRecord.project_id == project_id)
        return self._to_domain(self._session.scalars(stmt))

    def find_by_id(self, todo_id: str) -> Todo | None:
        record = self._session.get(TodoRecord, todo_id)
        return self._load(record) if record is not None else None

    def find_by_ids(self, todo_ids: Iterable[str]) -> list[Todo]:
        """Todos for the given ids in request order; unknown ids are skipped."""
        wanted = list(dict.fromkeys(todo_ids))
        if not wanted:
            return []
        records = {r.id: r for r in self._session.scalars(select(TodoRecord).where(TodoRecord.id.in_(wanted)))}
        return self._to_domain(records[i] for i in wanted if i in records)

    def create(self, todo: Todo) -> Todo:
        record = TodoRecord(**todo.model_dump(include=_TODO_COLUMNS))
        self._session.add(record)
        self._session.flush()
        for dependency_id in todo.dependencies:
            self.add_dependency(todo.id, dependency_id)
        return self._load(record)

    def update(self, todo_id: str, changes: Mapping[str, Any]) -> Todo | None:
        record = self._session.get(TodoRecord, todo_id)
        if record is None:
            return None
        for name, value in changes.items():
            if name in _TODO_COLUMNS and name != "id":
                setattr(record, name, value)
        self._session.flush()
        return self._load(record)

    def delete(self, todo_id: str) -> None:
        """Delete a todo with its edges, tag links and activities; detach subtasks."""
        s = self._session
        s.execute(
            delete(TodoDependencyRecord).where(
                or_(
                    TodoDependencyRecord.dependent_id == todo_id,
                    TodoDependencyRecord.dependency_id == todo_id,
                )
            )
        )
        s.execute(delete(TodoTagRecord).where(TodoTagRecord.todo_id == todo_id))
        s.execute(delete(TodoActivityRecord).where(TodoActivityRecord.todo_id == todo_id))
        s.execute(update(TodoRecord).where(TodoRecord.parent_id == todo_id).values(parent_id=None))
        s.execute(delete(TodoRecord).where(TodoRecord.id == todo_id))
        s.expire_all()
        logger.debug(f"Removed todo {todo_id} with its edges, tag links and activities")

    # -------------------------------------------------------------------------
    # Dependency edges
    # -------------------------------------------------------------------------

    def add_dependency(self, todo_id: str, dependency_id: str) -> None:
        self._session.add(
            TodoDependencyRecord(dependent_id=todo_id, dependency_id=dependency_id, created_at=utcnow())
        )
        self._session.flush()

    def remove_dependency(self, todo_id: str, dependency_id: str) -> None:
        self._session.execute(
            delete(TodoDependencyRecord).where(
                TodoDependencyRecord.dependent_id == todo_id,
                TodoDependencyRecord.dependency_id == dependency_id,
            )
        )

    def find_dependencies(self, todo_id: str) -> list[Todo]:
        stmt = (
            select(TodoRecord)
            .join(TodoDependencyRecord, TodoDependencyRecord.dependency_id == TodoRecord.id)
            .where(TodoDependencyRecord.dependent_id == todo_id)
            .order_by(TodoDependencyRecord.id)
        )
        return self._to_domain(self._session.scalars(stmt))

    def find_dependents(self, todo_id: str) -> list[Todo]:
        stmt = (
            select(TodoRecord)
            .join(TodoDependencyRecord, TodoDependencyRecord.dependent_id == TodoRecord.id)
            .where(TodoDependencyRecord.dependency_id == todo_id)
            .order_by(TodoDependencyRecord.id)
        )
        return self._to_domain(self._session.scalars(stmt))

    def _dependency_ids(self, todo_id: str) -> list[str]:
        return list(
            self._session.scalars(
                select(TodoDependencyRecord.dependency_id)
                .where(TodoDependencyRecord.dependent_id == todo_id)
                .order_by(TodoDependencyRecord.id)
            )
        )

    def would_create_cycle(self, todo_id: str, dependency_id: str) -> bool:
        return would_create_cycle(todo_id, dependency_id, self._dependency_ids)

    # -------------------------------------------------------------------------
    # Hierarchy and due dates
    # -------------------------------------------------------------------------

    def find_children(self, parent_id: str) -> list[Todo]:
        stmt = (
            select(TodoRecord)
            .where(TodoRecord.parent_id == parent_id)
            .order_by(TodoRecord.created_at, TodoRecord.id)
        )
        return self._to_domain(self._session.scalars(stmt))

    def find_due_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Todo]:
        stmt = select(TodoRecord).where(TodoRecord.due_date.is_not(None))
        if start is not None:
            stmt = stmt.where(TodoRecord.due_date >= start)
        if end is not None:
            stmt = stmt.where(TodoRecord.due_date <= end)
        stmt = stmt.order_by(TodoRecord.due_date, TodoRecord.id)
        return self._to_domain(self._session.scalars(stmt))


# =============================================================================
# Projects
# =============================================================================


class SqlAlchemyProjectRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_domain(record: ProjectRecord) -> Project:
        return Project(**_row_fields(record, _PROJECT_COLUMNS))

    def create(self, project: Project) -> Project:
        record = ProjectRecord(**project.model_dump())
        self._session.add(record)
        self._session.flush()
        return self._to_domain(record)

    def find_by_id(self, project_id: str) -> Project | None:
        record = self._session.get(ProjectRecord, project_id)
        return self._to_domain(record) if record is not None else None

    def find_by_name(self, name: str) -> Project | None:
        record = self._session.scalar(select(ProjectRecord).where(ProjectRecord.name == name))
        return self._to_domain(record) if record is not None else None

    def find_all(self) -> list[Project]:
        stmt = select(ProjectRecord).order_by(ProjectRecord.created_at, ProjectRecord.id)
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def update(self, project: Project) -> Project:
        record = self._session.get(ProjectRecord, project.id)
        if record is None:
            raise LookupError(f"Project {project.id} is not persisted")
        for name, value in project.model_dump(exclude={"id", "created_at"}).items():
            setattr(record, name, value)
        self._session.flush()
        return self._to_domain(record)

    def delete(self, project_id: str) -> None:
        """Delete a project; its todos stay and lose the reference."""
        self._session.execute(
            update(TodoRecord).where(TodoRecord.project_id == project_id).values(project_id=None)
        )
        self._session.execute(delete(ProjectRecord).where(ProjectRecord.id == project_id))
        self._session.expire_all()

    def find_todo_ids(self, project_id: str) -> list[str]:
        stmt = (
            select(TodoRecord.id)
            .where(TodoRecord.project_id == project_id)
            .order_by(TodoRecord.created_at, TodoRecord.id)
        )
        return list(self._session.scalars(stmt))


# =============================================================================
# Tags
# =============================================================================


class SqlAlchemyTagRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_domain(record: TagRecord) -> Tag:
        return Tag(**_row_fields(record, _TAG_COLUMNS))

    def create(self, tag: Tag) -> Tag:
        record = TagRecord(**tag.model_dump())
        self._session.add(record)
        self._session.flush()
        return self._to_domain(record)

    def find_by_id(self, tag_id: str) -> Tag | None:
        record = self._session.get(TagRecord, tag_id)
        return self._to_domain(record) if record is not None else None

    def find_by_name(self, name: str) -> Tag | None:
        record = self._session.scalar(select(TagRecord).where(TagRecord.name == name))
        return self._to_domain(record) if record is not None else None

    def find_all(self) -> list[Tag]:
        stmt = select(TagRecord).order_by(TagRecord.name)
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def update(self, tag: Tag) -> Tag:
        record = self._session.get(TagRecord, tag.id)
        if record is None:
            raise LookupError(f"Tag {tag.id} is not persisted")
        for name, value in tag.model_dump(exclude={"id", "created_at"}).items():
            setattr(record, name, value)
        self._session.flush()
        return self._to_domain(record)

    def delete(self, tag_id: str) -> None:
        self._session.execute(delete(TodoTagRecord).where(TodoTagRecord.tag_id == tag_id))
        self._session.execute(delete(TagRecord).where(TagRecord.id == tag_id))
        self._session.expire_all()

    def _is_linked(self, todo_id: str, tag_id: str) -> bool:
        return self._session.get(TodoTagRecord, (todo_id, tag_id)) is not None

    def assign(self, todo_id: str, tag_id: str) -> None:
        if self._is_linked(todo_id, tag_id):
            return
        self._session.add(TodoTagRecord(todo_id=todo_id, tag_id=tag_id, created_at=utcnow()))
        self._session.flush()

    def unassign(self, todo_id: str, tag_id: str) -> bool:
        result = self._session.execute(
            delete(TodoTagRecord).where(TodoTagRecord.todo_id == todo_id, TodoTagRecord.tag_id == tag_id)
        )
        self._session.expire_all()
        return result.rowcount > 0

    def find_tags_for_todo(self, todo_id: str) -> list[Tag]:
        stmt = (
            select(TagRecord)
            .join(TodoTagRecord, TodoTagRecord.tag_id == TagRecord.id)
            .where(TodoTagRecord.todo_id == todo_id)
            .order_by(TagRecord.name)
        )
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def find_todo_ids_for_tag(self, tag_id: str) -> list[str]:
        stmt = (
            select(TodoTagRecord.todo_id)
            .where(TodoTagRecord.tag_id == tag_id)
            .order_by(TodoTagRecord.created_at, TodoTagRecord.todo_id)
        )
        return list(self._session.scalars(stmt))

    def find_todo_ids_with_all_tags(self, tag_ids: list[str]) -> list[str]:
        wanted = set(tag_ids)
        if not wanted:
            return []
        stmt = (
            select(TodoTagRecord.todo_id)
            .where(TodoTagRecord.tag_id.in_(wanted))
            .group_by(TodoTagRecord.todo_id)
            .having(func.count(TodoTagRecord.tag_id.distinct()) == len(wanted))
            .order_by(TodoTagRecord.todo_id)
        )
        return list(self._session.scalars(stmt))

    def find_todo_ids_with_any_tag(self, tag_ids: list[str]) -> list[str]:
        if not tag_ids:
            return []
        stmt = (
            select(TodoTagRecord.todo_id)
            .where(TodoTagRecord.tag_id.in_(set(tag_ids)))
            .distinct()
            .order_by(TodoTagRecord.todo_id)
        )
        return list(self._session.scalars(stmt))

    def bulk_assign(self, tag_id: str, todo_ids: list[str]) -> int:
        created = 0
        now = utcnow()
        for todo_id in dict.fromkeys(todo_ids):
            if self._is_linked(todo_id, tag_id):
                continue
            self._session.add(TodoTagRecord(todo_id=todo_id, tag_id=tag_id, created_at=now))
            created += 1
        self._session.flush()
        return created

    def bulk_remove(self, tag_id: str, todo_ids: list[str]) -> int:
        if not todo_ids:
            return 0
        result = self._session.execute(
            delete(TodoTagRecord).where(
                TodoTagRecord.tag_id == tag_id,
                TodoTagRecord.todo_id.in_(set(todo_ids)),
            )
        )
        self._session.expire_all()
        return result.rowcount

    def statistics(self) -> list[TagStatistics]:
        completed = func.coalesce(
            func.sum(case((TodoRecord.status == TodoStatus.COMPLETED, 1), else_=0)), 0
        )
        stmt = (
            select(TagRecord, func.count(TodoRecord.id), completed)
            .outerjoin(TodoTagRecord, TodoTagRecord.tag_id == TagRecord.id)
            .outerjoin(TodoRecord, TodoRecord.id == TodoTagRecord.todo_id)
            .group_by(TagRecord.id)
            .order_by(TagRecord.name)
        )
        return [
            TagStatistics(
                id=tag.id,
                name=tag.name,
                color=tag.color,
                usage_count=usage,
                pending_todo_count=usage - done,
                completed_todo_count=done,
            )
            for tag, usage, done in self._session.execute(stmt)
        ]


# =============================================================================
# Activities
# =============================================================================


class SqlAlchemyTodoActivityRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_domain(record: TodoActivityRecord) -> TodoActivity:
        return TodoActivity(
            id=record.id,
            todo_id=record.todo_id,
            type=record.type,
            work_time=record.work_time,
            previous_state=record.previous_state,
            note=record.note,
            work_period_id=record.work_period_id,
            created_at=record.created_at,
        )

    def _record(self, activity_id: str) -> TodoActivityRecord | None:
        stmt = select(TodoActivityRecord).where(TodoActivityRecord.id == activity_id)
        return self._session.scalars(stmt).one_or_none()

    def find_by_todo_id(self, todo_id: str) -> list[TodoActivity]:
        stmt = (
            select(TodoActivityRecord)
            .where(TodoActivityRecord.todo_id == todo_id)
            .order_by(TodoActivityRecord.created_at.desc(), TodoActivityRecord.seq.desc())
        )
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def find_by_id(self, activity_id: str) -> TodoActivity | None:
        record = self._record(activity_id)
        return self._to_domain(record) if record is not None else None

    def create(self, activity: TodoActivity) -> TodoActivity:
        record = TodoActivityRecord(**activity.model_dump())
        self._session.add(record)
        self._session.flush()
        return self._to_domain(record)

    def delete(self, activity_id: str) -> None:
        self._session.execute(delete(TodoActivityRecord).where(TodoActivityRecord.id == activity_id))
        self._session.expire_all()

    def find_by_work_period_id(self, work_period_id: str) -> list[TodoActivity]:
        stmt = (
            select(TodoActivityRecord)
            .where(TodoActivityRecord.work_period_id == work_period_id)
            .order_by(TodoActivityRecord.created_at, TodoActivityRecord.seq)
        )
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def update_work_period(self, activity_id: str, work_period_id: str | None) -> TodoActivity | None:
        record = self._record(activity_id)
        if record is None:
            return None
        record.work_period_id = work_period_id
        self._session.flush()
        return self._to_domain(record)


# =============================================================================
# Work Periods
# =============================================================================


class SqlAlchemyWorkPeriodRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    @staticmethod
    def _to_domain(record: WorkPeriodRecord) -> WorkPeriod:
        return WorkPeriod(**_row_fields(record, _WORK_PERIOD_COLUMNS))

    def create(self, work_period: WorkPeriod) -> WorkPeriod:
        record = WorkPeriodRecord(**work_period.model_dump())
        self._session.add(record)
        self._session.flush()
        return self._to_domain(record)

    def find_by_id(self, work_period_id: str) -> WorkPeriod | None:
        record = self._session.get(WorkPeriodRecord, work_period_id)
        return self._to_domain(record) if record is not None else None

    def find_all(self) -> list[WorkPeriod]:
        return self.find_by_date_range()

    def find_by_date_range(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[WorkPeriod]:
        stmt = select(WorkPeriodRecord)
        if start is not None:
            stmt = stmt.where(WorkPeriodRecord.date >= start)
        if end is not None:
            stmt = stmt.where(WorkPeriodRecord.date <= end)
        stmt = stmt.order_by(WorkPeriodRecord.date.desc(), WorkPeriodRecord.start_time.desc())
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def find_overlapping(
        self,
        start_time: datetime,
        end_time: datetime,
        exclude_id: str | None = None,
    ) -> list[WorkPeriod]:
        stmt = select(WorkPeriodRecord).where(
            WorkPeriodRecord.start_time < end_time,
            WorkPeriodRecord.end_time > start_time,
        )
        if exclude_id is not None:
            stmt = stmt.where(WorkPeriodRecord.id != exclude_id)
        stmt = stmt.order_by(WorkPeriodRecord.start_time)
        return [self._to_domain(r) for r in self._session.scalars(stmt)]

    def update(self, work_period: WorkPeriod) -> WorkPeriod:
        record = self._session.get(WorkPeriodRecord, work_period.id)
        if record is None:
            raise LookupError(f"Work period {work_period.id} is not persisted")
        for name, value in work_period.model_dump(exclude={"id", "created_at"}).items():
            setattr(record, name, value)
        self._session.flush()
        return self._to_domain(record)

    def delete(self, work_period_id: str) -> None:
        self._session.execute(
            update(TodoActivityRecord)
            .where(TodoActivityRecord.work_period_id == work_period_id)
            .values(work_period_id=None)
        )
        self._session.execute(delete(WorkPeriodRecord).where(WorkPeriodRecord.id == work_period_id))
        self._session.expire_all()
        logger.debug(f"Removed work period {work_period_id} and detached its activities")

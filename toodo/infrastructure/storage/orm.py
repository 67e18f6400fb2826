"""SQLAlchemy table mappings.

Records are plain persistence rows; repositories translate them to and from
the immutable domain models. Datetimes are stored as naive UTC and come back
timezone-aware.
"""

from datetime import UTC, datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, TypeDecorator, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from toodo.domain.activity import ActivityType
from toodo.domain.project import ProjectStatus
from toodo.domain.todo import PriorityLevel, TodoStatus, WorkState, utcnow


class UTCDateTime(TypeDecorator):
    """DateTime column that always round-trips aware UTC datetimes."""

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC).replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


def _enum(enum_cls: type[Enum]) -> SAEnum:
    # Store the enum value ("in_progress"), not the member name
    return SAEnum(
        enum_cls,
        native_enum=False,
        length=20,
        values_callable=lambda members: [m.value for m in members],
    )


class Base(DeclarativeBase):
    pass


class ProjectRecord(Base):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    status: Mapped[ProjectStatus] = mapped_column(
        _enum(ProjectStatus), nullable=False, default=ProjectStatus.ACTIVE
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class TodoRecord(Base):
    __tablename__ = "todos"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[TodoStatus] = mapped_column(
        _enum(TodoStatus), nullable=False, default=TodoStatus.PENDING
    )
    work_state: Mapped[WorkState] = mapped_column(
        _enum(WorkState), nullable=False, default=WorkState.IDLE
    )
    total_work_time: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_state_change_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True, index=True)
    priority: Mapped[PriorityLevel] = mapped_column(
        _enum(PriorityLevel), nullable=False, default=PriorityLevel.MEDIUM
    )
    project_id: Mapped[str | None] = mapped_column(
        ForeignKey("projects.id", ondelete="SET NULL"), nullable=True, index=True
    )
    parent_id: Mapped[str | None] = mapped_column(
        ForeignKey("todos.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class TodoDependencyRecord(Base):
    """Directed edge: dependent_id depends on dependency_id.

    The surrogate key keeps edges in insertion order.
    """

    __tablename__ = "todo_dependencies"
    __table_args__ = (UniqueConstraint("dependent_id", "dependency_id"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    dependent_id: Mapped[str] = mapped_column(
        ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    dependency_id: Mapped[str] = mapped_column(
        ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class TagRecord(Base):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class TodoTagRecord(Base):
    __tablename__ = "todo_tags"

    todo_id: Mapped[str] = mapped_column(
        ForeignKey("todos.id", ondelete="CASCADE"), primary_key=True
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class WorkPeriodRecord(Base):
    __tablename__ = "work_periods"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    date: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, index=True)
    start_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    end_time: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)


class TodoActivityRecord(Base):
    """One activity log row.

    seq increases with every insert and orders activities that share a
    created_at.
    """

    __tablename__ = "todo_activities"

    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False)
    todo_id: Mapped[str] = mapped_column(
        ForeignKey("todos.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type: Mapped[ActivityType] = mapped_column(_enum(ActivityType), nullable=False)
    work_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    previous_state: Mapped[WorkState | None] = mapped_column(_enum(WorkState), nullable=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    work_period_id: Mapped[str | None] = mapped_column(
        ForeignKey("work_periods.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)

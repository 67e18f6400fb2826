"""Tests for the SQLAlchemy repositories against in-memory SQLite."""

from datetime import UTC, datetime, timedelta

import pytest

from toodo.application import DependencyService, TodoService
from toodo.domain.activity import ActivityType, TodoActivity
from toodo.domain.project import Project
from toodo.domain.shared.errors import DependencyCycleError
from toodo.domain.tag import Tag
from toodo.domain.todo import PriorityLevel, Todo, TodoStatus, WorkState
from toodo.domain.work_period import WorkPeriod
from toodo.infrastructure import (
    Database,
    SqlAlchemyProjectRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTodoActivityRepository,
    SqlAlchemyTodoRepository,
    SqlAlchemyWorkPeriodRepository,
)

T0 = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def todos(session):
    return SqlAlchemyTodoRepository(session)


@pytest.fixture
def projects(session):
    return SqlAlchemyProjectRepository(session)


@pytest.fixture
def tags(session):
    return SqlAlchemyTagRepository(session)


@pytest.fixture
def activities(session):
    return SqlAlchemyTodoActivityRepository(session)


@pytest.fixture
def work_periods(session):
    return SqlAlchemyWorkPeriodRepository(session)


def add(todos, title, **kwargs) -> Todo:
    return todos.create(Todo(title=title, **kwargs))


class TestTodoRepository:
    def test_create_and_find(self, todos):
        created = add(todos, "Write docs", priority=PriorityLevel.HIGH, due_date=T0)

        found = todos.find_by_id(created.id)

        assert found.title == "Write docs"
        assert found.priority == PriorityLevel.HIGH
        assert found.status == TodoStatus.PENDING
        assert found.work_state == WorkState.IDLE
        assert found.due_date == T0
        assert found.due_date.tzinfo is not None

    def test_find_missing(self, todos):
        assert todos.find_by_id("missing") is None

    def test_find_by_ids_keeps_request_order(self, todos):
        a = add(todos, "a")
        b = add(todos, "b")

        assert [t.id for t in todos.find_by_ids([b.id, "missing", a.id])] == [b.id, a.id]
        assert todos.find_by_ids([]) == []

    def test_find_all_filters(self, todos):
        a = add(todos, "a", priority=PriorityLevel.LOW)
        add(todos, "b", status=TodoStatus.COMPLETED)

        assert [t.id for t in todos.find_all(priority=PriorityLevel.LOW)] == [a.id]
        assert len(todos.find_all(status=TodoStatus.COMPLETED)) == 1
        assert len(todos.find_all()) == 2

    def test_update(self, todos):
        todo = add(todos, "old")

        updated = todos.update(todo.id, {"title": "new", "total_work_time": 42, "dependencies": ["x"]})

        assert updated.title == "new"
        assert updated.total_work_time == 42
        assert updated.dependencies == []

    def test_update_missing_returns_none(self, todos):
        assert todos.update("missing", {"title": "x"}) is None

    def test_timestamps_round_trip_as_utc(self, todos):
        todo = add(todos, "x", last_state_change_at=datetime(2025, 6, 1, 8, 30, 15))

        found = todos.find_by_id(todo.id)

        assert found.last_state_change_at == datetime(2025, 6, 1, 8, 30, 15, tzinfo=UTC)


class TestDependencyEdges:
    def test_edges_show_up_on_both_sides(self, todos):
        a = add(todos, "a")
        b = add(todos, "b")

        todos.add_dependency(a.id, b.id)

        assert todos.find_by_id(a.id).dependencies == [b.id]
        assert todos.find_by_id(b.id).dependents == [a.id]
        assert [t.id for t in todos.find_dependencies(a.id)] == [b.id]
        assert [t.id for t in todos.find_dependents(b.id)] == [a.id]

    def test_insertion_order(self, todos):
        a, b, c, d = (add(todos, n) for n in "abcd")
        for dep in (d, b, c):
            todos.add_dependency(a.id, dep.id)

        assert todos.find_by_id(a.id).dependencies == [d.id, b.id, c.id]
        assert [t.id for t in todos.find_dependencies(a.id)] == [d.id, b.id, c.id]

    def test_remove(self, todos):
        a = add(todos, "a")
        b = add(todos, "b")
        todos.add_dependency(a.id, b.id)

        todos.remove_dependency(a.id, b.id)

        assert todos.find_by_id(a.id).dependencies == []

    def test_would_create_cycle(self, todos):
        a, b, c = (add(todos, n) for n in "abc")
        todos.add_dependency(a.id, b.id)
        todos.add_dependency(b.id, c.id)

        assert todos.would_create_cycle(c.id, a.id)
        assert not todos.would_create_cycle(a.id, c.id)

    def test_service_refuses_cycle(self, todos):
        service = DependencyService(todos)
        a, b = add(todos, "a"), add(todos, "b")
        service.add_dependency(a.id, b.id)

        with pytest.raises(DependencyCycleError):
            service.add_dependency(b.id, a.id)

        assert todos.find_by_id(b.id).dependencies == []

    def test_delete_cascades(self, todos, tags, activities):
        a, b, c = (add(todos, n) for n in "abc")
        child = add(todos, "child", parent_id=b.id)
        todos.add_dependency(a.id, b.id)
        todos.add_dependency(b.id, c.id)
        tag = tags.create(Tag(name="t"))
        tags.assign(b.id, tag.id)
        activities.create(TodoActivity(todo_id=b.id, type=ActivityType.STARTED))

        todos.delete(b.id)

        assert todos.find_by_id(b.id) is None
        assert todos.find_by_id(a.id).dependencies == []
        assert todos.find_by_id(c.id).dependents == []
        assert todos.find_by_id(child.id).parent_id is None
        assert tags.find_todo_ids_for_tag(tag.id) == []
        assert activities.find_by_todo_id(b.id) == []


class TestHierarchyAndDueDates:
    def test_children(self, todos):
        parent = add(todos, "parent")
        child = add(todos, "child", parent_id=parent.id)

        assert [t.id for t in todos.find_children(parent.id)] == [child.id]

    def test_due_between(self, todos):
        early = add(todos, "early", due_date=T0)
        late = add(todos, "late", due_date=T0 + timedelta(days=3))
        add(todos, "none")

        assert [t.id for t in todos.find_due_between()] == [early.id, late.id]
        assert [t.id for t in todos.find_due_between(end=T0 + timedelta(days=1))] == [early.id]
        assert [t.id for t in todos.find_due_between(start=T0 + timedelta(seconds=1))] == [late.id]


class TestProjectRepository:
    def test_crud(self, projects):
        project = projects.create(Project(name="Home"))

        assert projects.find_by_name("Home").id == project.id
        renamed = projects.update(project.update(name="House"))
        assert renamed.name == "House"
        assert [p.name for p in projects.find_all()] == ["House"]

    def test_update_unknown_raises(self, projects):
        with pytest.raises(LookupError):
            projects.update(Project(name="ghost"))

    def test_delete_detaches_todos(self, projects, todos):
        project = projects.create(Project(name="Home"))
        todo = add(todos, "dishes", project_id=project.id)

        assert projects.find_todo_ids(project.id) == [todo.id]
        projects.delete(project.id)

        assert projects.find_by_id(project.id) is None
        assert todos.find_by_id(todo.id).project_id is None


class TestTagRepository:
    @pytest.fixture
    def tagged(self, todos, tags):
        urgent = tags.create(Tag(name="urgent"))
        home = tags.create(Tag(name="home"))
        a, b, c = (add(todos, n) for n in "abc")
        tags.assign(a.id, urgent.id)
        tags.assign(a.id, home.id)
        tags.assign(b.id, urgent.id)
        return urgent, home, a, b, c

    def test_assign_twice_is_a_no_op(self, tags, tagged):
        urgent, _, a, _, _ = tagged

        tags.assign(a.id, urgent.id)

        assert [t.name for t in tags.find_tags_for_todo(a.id)] == ["home", "urgent"]

    def test_unassign(self, tags, tagged):
        urgent, _, _, b, _ = tagged

        assert tags.unassign(b.id, urgent.id) is True
        assert tags.unassign(b.id, urgent.id) is False

    def test_all_and_any(self, tags, tagged):
        urgent, home, a, b, _ = tagged

        assert tags.find_todo_ids_with_all_tags([urgent.id, home.id]) == [a.id]
        assert set(tags.find_todo_ids_with_any_tag([urgent.id, home.id])) == {a.id, b.id}
        assert tags.find_todo_ids_with_all_tags([]) == []

    def test_bulk(self, tags, tagged):
        urgent, _, a, b, c = tagged

        assert tags.bulk_assign(urgent.id, [a.id, c.id]) == 1
        assert tags.bulk_remove(urgent.id, [a.id, b.id, c.id]) == 3
        assert tags.find_todo_ids_for_tag(urgent.id) == []

    def test_statistics(self, tags, todos, tagged):
        _, _, a, _, _ = tagged
        todos.update(a.id, {"status": TodoStatus.COMPLETED})
        tags.create(Tag(name="unused"))

        stats = {s.name: s for s in tags.statistics()}

        assert (stats["urgent"].usage_count, stats["urgent"].completed_todo_count) == (2, 1)
        assert stats["urgent"].pending_todo_count == 1
        assert stats["home"].usage_count == 1
        assert stats["unused"].usage_count == 0
        assert stats["unused"].pending_todo_count == 0

    def test_delete_removes_links(self, tags, tagged):
        urgent, _, a, _, _ = tagged

        tags.delete(urgent.id)

        assert tags.find_by_id(urgent.id) is None
        assert [t.name for t in tags.find_tags_for_todo(a.id)] == ["home"]


class TestActivityRepository:
    def test_newest_first(self, todos, activities):
        todo = add(todos, "x")
        activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.STARTED, created_at=T0))
        activities.create(
            TodoActivity(todo_id=todo.id, type=ActivityType.PAUSED, work_time=30, created_at=T0 + timedelta(seconds=30))
        )

        found = activities.find_by_todo_id(todo.id)

        assert [a.type for a in found] == [ActivityType.PAUSED, ActivityType.STARTED]
        assert found[0].work_time == 30

    def test_same_timestamp_newest_insert_first(self, todos, activities):
        todo = add(todos, "x")
        started = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.STARTED, created_at=T0))
        paused = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.PAUSED, created_at=T0))
        discarded = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.DISCARDED, created_at=T0))

        found = activities.find_by_todo_id(todo.id)

        assert [a.id for a in found] == [discarded.id, paused.id, started.id]

    def test_delete(self, todos, activities):
        todo = add(todos, "x")
        activity = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.DISCARDED))

        activities.delete(activity.id)

        assert activities.find_by_id(activity.id) is None

    def test_update_work_period(self, todos, activities, work_periods):
        todo = add(todos, "x")
        period = work_periods.create(WorkPeriod(name="Day", start_time=T0, end_time=T0 + timedelta(hours=1)))
        activity = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.STARTED, created_at=T0))

        updated = activities.update_work_period(activity.id, period.id)

        assert updated.work_period_id == period.id
        assert [a.id for a in activities.find_by_work_period_id(period.id)] == [activity.id]
        assert activities.update_work_period("missing", period.id) is None


class TestWorkPeriodRepository:
    @staticmethod
    def add(work_periods, name, start, hours=1.0) -> WorkPeriod:
        return work_periods.create(WorkPeriod(name=name, start_time=start, end_time=start + timedelta(hours=hours)))

    def test_create_and_find(self, work_periods):
        created = self.add(work_periods, "Morning", T0, hours=2)

        found = work_periods.find_by_id(created.id)

        assert found.name == "Morning"
        assert found.date == T0
        assert found.end_time == T0 + timedelta(hours=2)
        assert found.start_time.tzinfo is not None
        assert work_periods.find_by_id("missing") is None

    def test_date_range_latest_first(self, work_periods):
        first = self.add(work_periods, "One", T0)
        second = self.add(work_periods, "Two", T0 + timedelta(days=1))
        self.add(work_periods, "Three", T0 + timedelta(days=3))

        found = work_periods.find_by_date_range(T0, T0 + timedelta(days=2))

        assert [p.id for p in found] == [second.id, first.id]
        assert len(work_periods.find_all()) == 3

    def test_overlapping(self, work_periods):
        period = self.add(work_periods, "Day", T0, hours=2)

        assert [p.id for p in work_periods.find_overlapping(T0 + timedelta(hours=1), T0 + timedelta(hours=3))] == [
            period.id
        ]
        assert work_periods.find_overlapping(T0 + timedelta(hours=2), T0 + timedelta(hours=3)) == []
        assert work_periods.find_overlapping(T0, T0 + timedelta(hours=1), exclude_id=period.id) == []

    def test_update(self, work_periods):
        period = self.add(work_periods, "Day", T0)

        work_periods.update(period.update(name="Evening"))

        assert work_periods.find_by_id(period.id).name == "Evening"

    def test_update_unknown_raises(self, work_periods):
        with pytest.raises(LookupError):
            work_periods.update(WorkPeriod(name="Ghost", start_time=T0, end_time=T0))

    def test_delete_detaches_activities(self, work_periods, activities, todos):
        todo = add(todos, "x")
        period = self.add(work_periods, "Day", T0)
        activity = activities.create(TodoActivity(todo_id=todo.id, type=ActivityType.STARTED, created_at=T0))
        activities.update_work_period(activity.id, period.id)

        work_periods.delete(period.id)

        assert work_periods.find_by_id(period.id) is None
        assert activities.find_by_id(activity.id).work_period_id is None


class TestUnitOfWork:
    def test_rollback_on_error(self, database):
        with pytest.raises(RuntimeError):
            with database.session() as s:
                SqlAlchemyTodoRepository(s).create(Todo(id="t1", title="x"))
                raise RuntimeError("boom")

        with database.session() as s:
            assert SqlAlchemyTodoRepository(s).find_by_id("t1") is None

    def test_committed_work_is_visible_to_new_sessions(self, database):
        with database.session() as s:
            TodoService(SqlAlchemyTodoRepository(s)).create("persisted")

        with database.session() as s:
            assert [t.title for t in SqlAlchemyTodoRepository(s).find_all()] == ["persisted"]

    def test_file_database(self, tmp_path):
        db = Database(f"sqlite:///{tmp_path / 'nested' / 'toodo.db'}")
        db.create_all()
        try:
            with db.session() as s:
                SqlAlchemyTodoRepository(s).create(Todo(title="on disk"))
        finally:
            db.close()

        assert (tmp_path / "nested" / "toodo.db").exists()

"""Tests for TagService."""

import pytest

from toodo.domain.shared.errors import TagNameExistsError, TagNotFoundError, TodoNotFoundError


@pytest.fixture
def tagged(tag_service, todo_service):
    """Three todos: a has urgent+home, b has urgent, c has none."""
    urgent = tag_service.create("urgent", color="red")
    home = tag_service.create("home")
    a = todo_service.create("a")
    b = todo_service.create("b")
    c = todo_service.create("c")
    tag_service.assign(a.id, urgent.id)
    tag_service.assign(a.id, home.id)
    tag_service.assign(b.id, urgent.id)
    return urgent, home, a, b, c


class TestTagCrud:
    def test_create_and_list(self, tag_service):
        tag_service.create("zeta")
        tag_service.create("alpha")

        assert [t.name for t in tag_service.list_all()] == ["alpha", "zeta"]

    def test_duplicate_name(self, tag_service):
        tag_service.create("urgent")

        with pytest.raises(TagNameExistsError):
            tag_service.create("urgent")

    def test_update(self, tag_service):
        tag = tag_service.create("urgent")

        assert tag_service.update(tag.id, color="blue").color == "blue"

    def test_rename_conflict(self, tag_service):
        tag_service.create("urgent")
        home = tag_service.create("home")

        with pytest.raises(TagNameExistsError):
            tag_service.update(home.id, name="urgent")

    def test_delete_removes_links(self, tag_service, tagged):
        urgent, _, a, _, _ = tagged

        tag_service.delete(urgent.id)

        assert [t.name for t in tag_service.tags_for_todo(a.id)] == ["home"]
        with pytest.raises(TagNotFoundError):
            tag_service.get(urgent.id)


class TestTagging:
    def test_assign_returns_todo_tags(self, tag_service, tagged):
        _, _, a, _, _ = tagged

        assert [t.name for t in tag_service.tags_for_todo(a.id)] == ["home", "urgent"]

    def test_assign_is_idempotent(self, tag_service, tagged):
        urgent, _, _, b, _ = tagged

        tags = tag_service.assign(b.id, urgent.id)

        assert [t.name for t in tags] == ["urgent"]

    def test_assign_missing_todo(self, tag_service, tagged):
        urgent, *_ = tagged

        with pytest.raises(TodoNotFoundError):
            tag_service.assign("missing", urgent.id)

    def test_assign_missing_tag(self, tag_service, tagged):
        _, _, a, _, _ = tagged

        with pytest.raises(TagNotFoundError):
            tag_service.assign(a.id, "missing")

    def test_unassign(self, tag_service, tagged):
        urgent, _, _, b, _ = tagged

        assert tag_service.unassign(b.id, urgent.id) == []
        assert tag_service.unassign(b.id, urgent.id) == []

    def test_todos_for_tag(self, tag_service, tagged):
        urgent, _, a, b, _ = tagged

        assert {t.id for t in tag_service.todos_for_tag(urgent.id)} == {a.id, b.id}


class TestTagQueries:
    def test_all_mode(self, tag_service, tagged):
        urgent, home, a, _, _ = tagged

        found = tag_service.todos_by_tags([urgent.id, home.id], mode="all")

        assert [t.id for t in found] == [a.id]

    def test_any_mode(self, tag_service, tagged):
        urgent, home, a, b, _ = tagged

        found = tag_service.todos_by_tags([urgent.id, home.id], mode="any")

        assert {t.id for t in found} == {a.id, b.id}

    def test_empty_tag_list(self, tag_service):
        assert tag_service.todos_by_tags([]) == []

    def test_unknown_tag(self, tag_service, tagged):
        urgent, *_ = tagged

        with pytest.raises(TagNotFoundError):
            tag_service.todos_by_tags([urgent.id, "missing"])


class TestBulkAndStatistics:
    def test_bulk_assign_skips_missing_and_existing(self, tag_service, tagged):
        urgent, _, a, _, c = tagged

        count = tag_service.bulk_assign(urgent.id, [a.id, c.id, "missing"])

        assert count == 1
        assert {t.name for t in tag_service.tags_for_todo(c.id)} == {"urgent"}

    def test_bulk_remove(self, tag_service, tagged):
        urgent, _, a, b, c = tagged

        assert tag_service.bulk_remove(urgent.id, [a.id, b.id, c.id]) == 2
        assert tag_service.todos_for_tag(urgent.id) == []

    def test_statistics(self, tag_service, todo_service, tagged):
        _, _, a, _, _ = tagged
        todo_service.complete(a.id)

        stats = {s.name: s for s in tag_service.statistics()}

        assert stats["urgent"].usage_count == 2
        assert stats["urgent"].completed_todo_count == 1
        assert stats["urgent"].pending_todo_count == 1
        assert stats["home"].usage_count == 1
        assert stats["urgent"].color == "red"

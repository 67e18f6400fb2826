"""Tests for DependencyService."""

import pytest

from toodo.domain.shared.errors import (
    DependencyCycleError,
    DependencyExistsError,
    DependencyNotFoundError,
    SelfDependencyError,
    TodoNotFoundError,
)


@pytest.fixture
def abc(todo_service):
    return tuple(todo_service.create(name) for name in ("A", "B", "C"))


class TestAddDependency:
    def test_adds_edge_both_ways(self, dependency_service, abc):
        a, b, _ = abc

        updated = dependency_service.add_dependency(a.id, b.id)

        assert updated.dependencies == [b.id]
        assert [t.id for t in dependency_service.get_dependents(b.id)] == [a.id]

    def test_self_dependency_checked_first(self, dependency_service):
        with pytest.raises(SelfDependencyError):
            dependency_service.add_dependency("ghost", "ghost")

    def test_missing_todo_reported_before_dependency(self, dependency_service):
        with pytest.raises(TodoNotFoundError) as exc_info:
            dependency_service.add_dependency("ghost-1", "ghost-2")

        assert exc_info.value.entity_id == "ghost-1"

    def test_missing_dependency(self, dependency_service, abc):
        a, _, _ = abc

        with pytest.raises(TodoNotFoundError) as exc_info:
            dependency_service.add_dependency(a.id, "ghost")

        assert exc_info.value.entity_id == "ghost"

    def test_duplicate_edge(self, dependency_service, abc):
        a, b, _ = abc
        dependency_service.add_dependency(a.id, b.id)

        with pytest.raises(DependencyExistsError):
            dependency_service.add_dependency(a.id, b.id)

    def test_direct_cycle(self, dependency_service, abc):
        a, b, _ = abc
        dependency_service.add_dependency(a.id, b.id)

        with pytest.raises(DependencyCycleError):
            dependency_service.add_dependency(b.id, a.id)

    def test_transitive_cycle_leaves_graph_unchanged(self, dependency_service, todo_repo, abc):
        a, b, c = abc
        dependency_service.add_dependency(a.id, b.id)
        dependency_service.add_dependency(b.id, c.id)
        edges_before = list(todo_repo.edges)

        with pytest.raises(DependencyCycleError):
            dependency_service.add_dependency(c.id, a.id)

        assert todo_repo.edges == edges_before
        assert dependency_service.get_dependencies(c.id) == []

    def test_dependencies_keep_insertion_order(self, dependency_service, abc):
        a, b, c = abc
        dependency_service.add_dependency(a.id, c.id)
        dependency_service.add_dependency(a.id, b.id)

        assert [t.id for t in dependency_service.get_dependencies(a.id)] == [c.id, b.id]


class TestRemoveDependency:
    def test_removes_edge(self, dependency_service, abc):
        a, b, _ = abc
        dependency_service.add_dependency(a.id, b.id)

        updated = dependency_service.remove_dependency(a.id, b.id)

        assert updated.dependencies == []
        assert dependency_service.get_dependents(b.id) == []

    def test_missing_edge(self, dependency_service, todo_repo, abc):
        a, b, c = abc
        dependency_service.add_dependency(a.id, b.id)

        with pytest.raises(DependencyNotFoundError):
            dependency_service.remove_dependency(a.id, c.id)

        assert todo_repo.edges == [(a.id, b.id)]

    def test_missing_todo(self, dependency_service, abc):
        _, b, _ = abc

        with pytest.raises(TodoNotFoundError):
            dependency_service.remove_dependency("ghost", b.id)


class TestDependencyTree:
    def test_tree(self, dependency_service, abc):
        a, b, c = abc
        dependency_service.add_dependency(a.id, b.id)
        dependency_service.add_dependency(b.id, c.id)

        tree = dependency_service.get_dependency_tree(a.id)

        assert tree.id == a.id
        assert tree.dependencies[0].id == b.id
        assert tree.dependencies[0].dependencies[0].id == c.id

    def test_max_depth(self, dependency_service, abc):
        a, b, c = abc
        dependency_service.add_dependency(a.id, b.id)
        dependency_service.add_dependency(b.id, c.id)

        assert dependency_service.get_dependency_tree(a.id, max_depth=0).dependencies == []
        assert dependency_service.get_dependency_tree(a.id, max_depth=1).dependencies[0].dependencies == []

    def test_default_depth_from_constructor(self, todo_repo, abc):
        from toodo.application import DependencyService

        service = DependencyService(todo_repo, max_depth=1)
        a, b, c = abc
        service.add_dependency(a.id, b.id)
        service.add_dependency(b.id, c.id)

        assert service.get_dependency_tree(a.id).dependencies[0].dependencies == []

    def test_missing_root(self, dependency_service):
        with pytest.raises(TodoNotFoundError):
            dependency_service.get_dependency_tree("ghost")

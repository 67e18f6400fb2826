"""Tests for the Typer CLI, run against a SQLite file in a temp dir."""

import json

import pytest
from typer.testing import CliRunner

from toodo import __version__
from toodo.interfaces.cli import app

runner = CliRunner()


def invoke(*args: str):
    return runner.invoke(app, list(args))


def created_id(result) -> str:
    """Id from a "Created ... <id>" line."""
    assert result.exit_code == 0, result.output
    return result.output.strip().split()[-1]


@pytest.fixture(autouse=True)
def _home(cli_home):
    return cli_home


class TestTopLevel:
    def test_version(self):
        result = invoke("--version")

        assert result.exit_code == 0
        assert f"toodo version {__version__}" in result.output

    def test_init_creates_database(self, cli_home):
        result = invoke("init")

        assert result.exit_code == 0
        assert "Database ready" in result.output
        assert (cli_home / "toodo.db").exists()


class TestTodoCommands:
    def test_add_and_show(self):
        todo_id = created_id(invoke("todo", "add", "Docs", "-p", "high", "-d", "release notes"))

        result = invoke("todo", "show", todo_id)

        assert result.exit_code == 0
        assert "Docs" in result.output
        assert "release notes" in result.output
        assert "high" in result.output

    def test_list(self):
        invoke("todo", "add", "Alpha")
        invoke("todo", "add", "Beta")

        result = invoke("todo", "list")

        assert result.exit_code == 0
        assert "Alpha" in result.output
        assert "Beta" in result.output

    def test_list_empty(self):
        result = invoke("todo", "list")

        assert "No todos found." in result.output

    def test_show_missing(self):
        result = invoke("todo", "show", "missing")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_update(self):
        todo_id = created_id(invoke("todo", "add", "Old"))

        assert invoke("todo", "update", todo_id, "--title", "New").exit_code == 0

        assert "New" in invoke("todo", "show", todo_id).output

    def test_delete(self):
        todo_id = created_id(invoke("todo", "add", "Gone"))

        assert invoke("todo", "delete", todo_id).exit_code == 0
        assert invoke("todo", "show", todo_id).exit_code == 1

    def test_work_state_commands(self):
        todo_id = created_id(invoke("todo", "add", "Work"))

        assert "Started: Work" in invoke("todo", "start", todo_id).output
        assert "Paused: Work" in invoke("todo", "pause", todo_id).output
        assert "(paused)" in invoke("todo", "time", todo_id).output
        assert "Resumed: Work" in invoke("todo", "resume", todo_id).output
        assert "Completed: Work" in invoke("todo", "done", todo_id).output
        assert "Reopened: Work" in invoke("todo", "reopen", todo_id).output

    def test_invalid_transition_exits_with_error(self):
        todo_id = created_id(invoke("todo", "add", "Idle"))

        result = invoke("todo", "pause", todo_id)

        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_time_of_new_todo(self):
        todo_id = created_id(invoke("todo", "add", "Fresh"))

        result = invoke("todo", "time", todo_id)

        assert result.output.strip().endswith("0s (idle)")

    def test_overdue(self):
        invoke("todo", "add", "Late", "--due", "2000-01-01")

        result = invoke("todo", "overdue")

        assert "Late" in result.output

    def test_nothing_overdue(self):
        assert "Nothing overdue." in invoke("todo", "overdue").output

    def test_subtasks(self):
        parent_id = created_id(invoke("todo", "add", "Parent"))
        child_id = created_id(invoke("todo", "add", "Child"))

        assert invoke("todo", "nest", parent_id, child_id).exit_code == 0

        result = invoke("todo", "subtasks", parent_id)
        assert "Parent" in result.output
        assert "Child" in result.output

        assert invoke("todo", "unnest", parent_id, child_id).exit_code == 0
        assert invoke("todo", "unnest", parent_id, child_id).exit_code == 1

    def test_log(self):
        todo_id = created_id(invoke("todo", "add", "Logged"))

        assert "No activities recorded." in invoke("todo", "log", todo_id).output

        result = invoke("todo", "log", todo_id, "--record", "started", "--note", "kickoff")
        assert result.exit_code == 0
        assert "started" in result.output
        assert "kickoff" in result.output


class TestDependencyCommands:
    def test_add_tree_remove(self):
        ship = created_id(invoke("todo", "add", "Ship"))
        docs = created_id(invoke("todo", "add", "Docs"))

        result = invoke("dep", "add", ship, docs)
        assert result.exit_code == 0
        assert "now depends on" in result.output

        tree = invoke("dep", "tree", ship)
        assert "Ship" in tree.output
        assert "Docs" in tree.output
        assert "2 node(s)" in tree.output

        listed = invoke("dep", "list", docs, "--dependents")
        assert "Ship" in listed.output

        assert invoke("dep", "remove", ship, docs).exit_code == 0
        assert "No dependencies." in invoke("dep", "list", ship).output

    def test_cycle_rejected(self):
        a = created_id(invoke("todo", "add", "A"))
        b = created_id(invoke("todo", "add", "B"))
        invoke("dep", "add", a, b)

        result = invoke("dep", "add", b, a)

        assert result.exit_code == 1
        assert "cycle" in result.output

    def test_done_blocked_by_dependency(self):
        a = created_id(invoke("todo", "add", "A"))
        b = created_id(invoke("todo", "add", "B"))
        invoke("dep", "add", a, b)

        result = invoke("todo", "done", a)

        assert result.exit_code == 1
        assert "incomplete dependencies" in result.output

    def test_tree_depth(self):
        a = created_id(invoke("todo", "add", "A"))
        b = created_id(invoke("todo", "add", "B"))
        invoke("dep", "add", a, b)

        assert "1 node(s)" in invoke("dep", "tree", a, "--depth", "0").output


class TestProjectCommands:
    def test_lifecycle(self):
        project_id = created_id(invoke("project", "create", "Home"))
        todo_id = created_id(invoke("todo", "add", "Dishes"))

        assert invoke("project", "add-todo", project_id, todo_id).exit_code == 0
        shown = invoke("project", "show", project_id)
        assert "Home [active]" in shown.output
        assert "Dishes" in shown.output

        assert "archived" in invoke("project", "archive", project_id).output
        assert "Home" in invoke("project", "list").output

        assert invoke("project", "remove-todo", project_id, todo_id).exit_code == 0
        assert invoke("project", "delete", project_id).exit_code == 0
        assert "No projects yet." in invoke("project", "list").output

    def test_duplicate_name(self):
        invoke("project", "create", "Home")

        result = invoke("project", "create", "Home")

        assert result.exit_code == 1
        assert "already exists" in result.output


class TestTagCommands:
    def test_tagging(self):
        tag_id = created_id(invoke("tag", "create", "urgent"))
        a = created_id(invoke("todo", "add", "Alpha"))
        b = created_id(invoke("todo", "add", "Beta"))

        assert "Tagged 2 todo(s)" in invoke("tag", "assign", tag_id, a, b).output
        assert "urgent" in invoke("tag", "list").output

        tagged = invoke("tag", "todos", tag_id)
        assert "Alpha" in tagged.output
        assert "Beta" in tagged.output

        stats = invoke("tag", "stats")
        assert "urgent" in stats.output

        assert "Untagged 1 todo(s)" in invoke("tag", "unassign", tag_id, a).output
        assert invoke("tag", "delete", tag_id).exit_code == 0
        assert "No tags yet." in invoke("tag", "list").output


class TestPeriodCommands:
    @staticmethod
    def started_activity_id(todo_id: str) -> str:
        result = invoke("todo", "log", todo_id, "--record", "started")
        assert result.exit_code == 0, result.output
        line = next(line for line in result.output.splitlines() if "started" in line)
        return line.split()[0]

    def test_lifecycle(self):
        period_id = created_id(invoke("period", "add", "Always", "2000-01-01T00:00:00", "2100-01-01T00:00:00"))
        todo_id = created_id(invoke("todo", "add", "Tracked"))
        activity_id = self.started_activity_id(todo_id)

        assert "Always" in invoke("period", "list").output
        assert f"Assigned activity {activity_id}" in invoke("period", "assign", period_id, activity_id).output
        assert f"Unassigned activity {activity_id}" in invoke("period", "unassign", period_id, activity_id).output
        assert invoke("period", "rename", period_id, "Forever").exit_code == 0
        assert "Forever" in invoke("period", "list").output

        stats = invoke("period", "stats")
        assert "Work periods:   1" in stats.output
        assert "Utilization:    0%" in stats.output

        assert f"Deleted work period {period_id}" in invoke("period", "delete", period_id).output
        assert "No work periods yet." in invoke("period", "list").output

    def test_overlap_rejected(self):
        invoke("period", "add", "Morning", "2025-05-01T09:00:00", "2025-05-01T12:00:00")

        result = invoke("period", "add", "Clash", "2025-05-01T11:00:00", "2025-05-01T13:00:00")

        assert result.exit_code == 1
        assert "overlaps" in result.output

    def test_assign_outside_range(self):
        period_id = created_id(invoke("period", "add", "Past", "2000-01-01T09:00:00", "2000-01-01T12:00:00"))
        todo_id = created_id(invoke("todo", "add", "Tracked"))
        activity_id = self.started_activity_id(todo_id)

        result = invoke("period", "assign", period_id, activity_id)

        assert result.exit_code == 1
        assert "not recorded within" in result.output


class TestConfigCommands:
    def test_show(self, cli_home):
        result = invoke("config", "show")

        data = json.loads(result.output)
        assert data["database_url"].endswith("toodo.db")
        assert data["due_soon_days"] == 2

    def test_set_and_show(self, cli_home):
        result = invoke("config", "set", "due_soon_days", "5")

        assert result.exit_code == 0
        assert "Saved due_soon_days" in result.output
        assert json.loads(invoke("config", "show").output)["due_soon_days"] == 5
        assert (cli_home / "config.json").exists()

    def test_set_unknown_key(self):
        result = invoke("config", "set", "colour", "blue")

        assert result.exit_code == 1
        assert "Unknown setting" in result.output

    def test_set_invalid_value(self):
        result = invoke("config", "set", "due_soon_days", "--", "-1")

        assert result.exit_code == 1
        assert "Invalid value" in result.output

    def test_set_non_numeric_value(self):
        result = invoke("config", "set", "due_soon_days", "abc")

        assert result.exit_code == 1
        assert "Invalid value" in result.output

    def test_path(self, cli_home):
        assert invoke("config", "path").output.strip() == str(cli_home / "config.json")

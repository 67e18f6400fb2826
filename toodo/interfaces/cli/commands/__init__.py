"""CLI command groups for toodo.

Command groups:
- todo: Todo CRUD, work state, due dates, subtasks, activities
- dep: Dependency edges and dependency trees
- project: Projects and project membership
- tag: Tags, tagging and tag statistics
- period: Work periods and activity attribution
- config: Settings file

Each command group is a Typer app that gets registered
with the main app using app.add_typer().
"""

from toodo.interfaces.cli.commands import config, dep, period, project, tag, todo

__all__ = ["todo", "dep", "project", "tag", "period", "config"]

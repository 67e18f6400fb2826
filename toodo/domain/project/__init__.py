"""Project domain package."""

from toodo.domain.project.models import Project, ProjectStatus

__all__ = [
    "Project",
    "ProjectStatus",
]

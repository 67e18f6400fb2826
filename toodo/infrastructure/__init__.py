"""Infrastructure layer for toodo.

Exports:
    Database: Engine and unit-of-work sessions
    Storage:
        - SqlAlchemyTodoRepository: Todos and dependency edges
        - SqlAlchemyProjectRepository: Projects
        - SqlAlchemyTagRepository: Tags and todo/tag links
        - SqlAlchemyTodoActivityRepository: Activity log
        - SqlAlchemyWorkPeriodRepository: Work periods
"""

from toodo.infrastructure.database import Database
from toodo.infrastructure.storage import (
    SqlAlchemyProjectRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTodoActivityRepository,
    SqlAlchemyTodoRepository,
    SqlAlchemyWorkPeriodRepository,
)

__all__ = [
    "Database",
    # Storage
    "SqlAlchemyTodoRepository",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyTagRepository",
    "SqlAlchemyTodoActivityRepository",
    "SqlAlchemyWorkPeriodRepository",
]

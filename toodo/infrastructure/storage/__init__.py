"""Storage infrastructure for toodo.

SQLAlchemy table mappings and the repository adapters that implement the
protocols in toodo.domain.repositories.
"""

from toodo.infrastructure.storage.orm import Base
from toodo.infrastructure.storage.repositories import (
    SqlAlchemyProjectRepository,
    SqlAlchemyTagRepository,
    SqlAlchemyTodoActivityRepository,
    SqlAlchemyTodoRepository,
    SqlAlchemyWorkPeriodRepository,
)

__all__ = [
    "Base",
    "SqlAlchemyTodoRepository",
    "SqlAlchemyProjectRepository",
    "SqlAlchemyTagRepository",
    "SqlAlchemyTodoActivityRepository",
    "SqlAlchemyWorkPeriodRepository",
]

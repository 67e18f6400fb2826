"""Todo activity domain package."""

from toodo.domain.activity.models import STATE_CHANGING_TYPES, ActivityType, TodoActivity

__all__ = [
    "ActivityType",
    "STATE_CHANGING_TYPES",
    "TodoActivity",
]

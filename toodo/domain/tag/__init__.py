"""Tag domain package."""

from toodo.domain.tag.models import Tag, TagStatistics

__all__ = [
    "Tag",
    "TagStatistics",
]

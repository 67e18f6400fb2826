"""Work period domain package."""

from toodo.domain.work_period.models import WorkPeriod, WorkPeriodStatistics

__all__ = [
    "WorkPeriod",
    "WorkPeriodStatistics",
]

"""Work period use cases.

Work periods may not overlap one another. Activities are attributed to the
period whose range covers the moment they were recorded, and statistics add
up the work time of those activities per period, todo and tag.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import datetime
from typing import Any

from toodo.domain.activity import TodoActivity
from toodo.domain.repositories import TagRepository, TodoActivityRepository, WorkPeriodRepository
from toodo.domain.shared.errors import (
    ActivityNotInWorkPeriodError,
    ActivityOutsideWorkPeriodError,
    TodoActivityNotFoundError,
    WorkPeriodNotFoundError,
    WorkPeriodOverlapError,
)
from toodo.domain.todo import as_utc, utcnow
from toodo.domain.work_period import WorkPeriod, WorkPeriodStatistics

logger = logging.getLogger(__name__)


class WorkPeriodService:
    def __init__(
        self,
        work_periods: WorkPeriodRepository,
        activities: TodoActivityRepository,
        tags: TagRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._work_periods = work_periods
        self._activities = activities
        self._tags = tags
        self._clock = clock

    def _require_free(self, start_time: datetime, end_time: datetime, exclude_id: str | None = None) -> None:
        overlapping = self._work_periods.find_overlapping(start_time, end_time, exclude_id=exclude_id)
        if overlapping:
            raise WorkPeriodOverlapError(overlapping[0].id)

    # =========================================================================
    # CRUD
    # =========================================================================

    def get(self, work_period_id: str) -> WorkPeriod:
        work_period = self._work_periods.find_by_id(work_period_id)
        if work_period is None:
            raise WorkPeriodNotFoundError(work_period_id)
        return work_period

    def list_all(self, start_date: datetime | None = None, end_date: datetime | None = None) -> list[WorkPeriod]:
        """Periods filed between start_date and end_date, latest first."""
        return self._work_periods.find_by_date_range(as_utc(start_date), as_utc(end_date))

    def create(
        self,
        name: str,
        start_time: datetime,
        end_time: datetime,
        date: datetime | None = None,
    ) -> WorkPeriod:
        """Create a work period.

        Raises:
            InvalidWorkPeriodError: end_time is before start_time
            WorkPeriodOverlapError: another period shares part of the range
        """
        now = self._clock()
        work_period = WorkPeriod(
            name=name,
            start_time=start_time,
            end_time=end_time,
            date=date,
            created_at=now,
            updated_at=now,
        )
        self._require_free(work_period.start_time, work_period.end_time)
        created = self._work_periods.create(work_period)
        logger.info(
            f"Created work period {created.id} ({created.name!r}, "
            f"{created.start_time.isoformat()} - {created.end_time.isoformat()})"
        )
        return created

    def update(self, work_period_id: str, **fields: Any) -> WorkPeriod:
        """Update name, date, start_time or end_time; a new range must stay free."""
        work_period = self.get(work_period_id)
        updated = work_period.update(now=self._clock(), **fields)
        if (updated.start_time, updated.end_time) != (work_period.start_time, work_period.end_time):
            self._require_free(updated.start_time, updated.end_time, exclude_id=work_period_id)
        return self._work_periods.update(updated)

    def delete(self, work_period_id: str) -> None:
        """Delete a work period; its activities are kept and detached."""
        self.get(work_period_id)
        self._work_periods.delete(work_period_id)
        logger.info(f"Deleted work period {work_period_id}")

    # =========================================================================
    # Activities
    # =========================================================================

    def activities(self, work_period_id: str) -> list[TodoActivity]:
        """Activities attributed to a period, oldest first."""
        self.get(work_period_id)
        return self._activities.find_by_work_period_id(work_period_id)

    def assign_activity(self, work_period_id: str, activity_id: str) -> TodoActivity:
        """Attribute an activity to a period. Reassigning moves it.

        Raises:
            WorkPeriodNotFoundError / TodoActivityNotFoundError
            ActivityOutsideWorkPeriodError: the activity was recorded outside
                the period's range
        """
        work_period = self.get(work_period_id)
        activity = self._activities.find_by_id(activity_id)
        if activity is None:
            raise TodoActivityNotFoundError(activity_id)
        if not work_period.covers(activity.created_at):
            raise ActivityOutsideWorkPeriodError(activity_id, work_period_id)

        updated = self._activities.update_work_period(activity_id, work_period_id)
        logger.info(f"Assigned activity {activity_id} to work period {work_period_id}")
        return updated

    def unassign_activity(self, work_period_id: str, activity_id: str) -> TodoActivity:
        self.get(work_period_id)
        activity = self._activities.find_by_id(activity_id)
        if activity is None:
            raise TodoActivityNotFoundError(activity_id)
        if activity.work_period_id != work_period_id:
            raise ActivityNotInWorkPeriodError(activity_id, work_period_id)

        updated = self._activities.update_work_period(activity_id, None)
        logger.info(f"Unassigned activity {activity_id} from work period {work_period_id}")
        return updated

    # =========================================================================
    # Statistics
    # =========================================================================

    def statistics(
        self,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> WorkPeriodStatistics:
        """Work-time totals over the periods filed between start_date and end_date.

        utilization_rate is the activity time divided by the period time, or
        0.0 when the periods have no length.
        """
        work_periods = self.list_all(start_date, end_date)
        total_period = 0
        total_activity = 0
        by_todo: dict[str, int] = defaultdict(int)
        by_tag: dict[str, int] = defaultdict(int)
        tag_ids_by_todo: dict[str, list[str]] = {}

        for work_period in work_periods:
            total_period += work_period.duration_seconds
            for activity in self._activities.find_by_work_period_id(work_period.id):
                if not activity.work_time:
                    continue
                total_activity += activity.work_time
                by_todo[activity.todo_id] += activity.work_time

                if activity.todo_id not in tag_ids_by_todo:
                    tag_ids_by_todo[activity.todo_id] = [
                        t.id for t in self._tags.find_tags_for_todo(activity.todo_id)
                    ]
                for tag_id in tag_ids_by_todo[activity.todo_id]:
                    by_tag[tag_id] += activity.work_time

        return WorkPeriodStatistics(
            work_period_count=len(work_periods),
            total_work_period_time=total_period,
            total_activity_time=total_activity,
            utilization_rate=total_activity / total_period if total_period else 0.0,
            activities_by_todo=dict(by_todo),
            activities_by_tag=dict(by_tag),
        )

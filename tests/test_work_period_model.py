"""Tests for the WorkPeriod entity."""

from datetime import UTC, datetime, timedelta

import pytest

from toodo.domain.shared.errors import InvalidWorkPeriodError
from toodo.domain.work_period import WorkPeriod

T0 = datetime(2025, 1, 1, 9, 0, tzinfo=UTC)


def make_period(**kwargs) -> WorkPeriod:
    kwargs.setdefault("name", "Morning")
    kwargs.setdefault("start_time", T0)
    kwargs.setdefault("end_time", T0 + timedelta(hours=3))
    return WorkPeriod(**kwargs)


class TestWorkPeriod:
    def test_date_defaults_to_start_time(self):
        period = make_period()

        assert period.date == T0
        assert period.duration_seconds == 3 * 3600

    def test_naive_times_are_utc(self):
        period = make_period(start_time=datetime(2025, 1, 1, 9), end_time=datetime(2025, 1, 1, 10))

        assert period.start_time.tzinfo is not None
        assert period.start_time == T0

    def test_end_before_start_fails(self):
        with pytest.raises(InvalidWorkPeriodError) as exc_info:
            make_period(end_time=T0 - timedelta(minutes=1))

        assert exc_info.value.kind == "invalid_work_period"

    def test_empty_range_is_allowed(self):
        assert make_period(end_time=T0).duration_seconds == 0

    def test_covers_is_inclusive(self):
        period = make_period()

        assert period.covers(T0)
        assert period.covers(T0 + timedelta(hours=3))
        assert not period.covers(T0 + timedelta(hours=3, seconds=1))

    def test_adjacent_ranges_do_not_overlap(self):
        period = make_period()

        assert not period.overlaps(T0 + timedelta(hours=3), T0 + timedelta(hours=4))
        assert not period.overlaps(T0 - timedelta(hours=1), T0)
        assert period.overlaps(T0 + timedelta(hours=2), T0 + timedelta(hours=4))


class TestUpdates:
    def test_rename(self):
        period = make_period()

        renamed = period.update(name="Afternoon")

        assert renamed.name == "Afternoon"
        assert renamed.id == period.id

    def test_update_rechecks_range(self):
        with pytest.raises(InvalidWorkPeriodError):
            make_period().update(end_time=T0 - timedelta(hours=1))

    def test_update_protected_field_fails(self):
        with pytest.raises(ValueError):
            make_period().update(id="other")

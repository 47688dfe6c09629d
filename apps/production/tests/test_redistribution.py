from datetime import date, timedelta

import pytest

from apps.production.constants import CompletionKind, WeekTargetScope
from apps.production.exceptions import InvalidQuantityError, InvalidRangeError, LockedUnitError, OverCommittedError
from apps.production.kpi import (
    build_plan,
    redistribute_remainder,
    set_attending,
    set_day_completion,
    set_day_target,
    set_week_target,
)
from apps.production.kpi.redistribution import open_days

from .conftest import FIRST_MONDAY

TUESDAY = FIRST_MONDAY + timedelta(days=1)
WEDNESDAY = FIRST_MONDAY + timedelta(days=2)


def day_values(plan):
    return [day.target_value for _week, day in plan.iter_days()]


@pytest.fixture
def week_plan():
    """One week of 5 working days at 4 units each."""
    return build_plan(20, FIRST_MONDAY, FIRST_MONDAY + timedelta(days=4))


class TestSetWeekTarget:
    @pytest.fixture(autouse=True)
    def lock_two_days(self, week_plan, ledger):
        set_day_completion(week_plan, ledger, FIRST_MONDAY, True)
        set_day_completion(week_plan, ledger, TUESDAY, True)

    def test_week_total_keeps_completed_days(self, week_plan, ledger):
        week = set_week_target(week_plan, ledger, 1, 20)

        assert [day.target_value for day in week.days] == [4, 4, 4, 4, 4]
        assert week.target_value == 20

    def test_week_total_spreads_remainder_over_open_days(self, week_plan, ledger):
        week = set_week_target(week_plan, ledger, 1, 19)

        assert [day.target_value for day in week.days] == [4, 4, 4, 4, 3]

    def test_open_days_scope(self, week_plan, ledger):
        week = set_week_target(week_plan, ledger, 1, 20, scope=WeekTargetScope.OPEN_DAYS)

        assert [day.target_value for day in week.days] == [4, 4, 7, 7, 6]
        assert week.target_value == 28

    def test_week_total_below_completed_value(self, week_plan, ledger):
        before = week_plan.to_storage()

        with pytest.raises(LockedUnitError) as exc_info:
            set_week_target(week_plan, ledger, 1, 6)

        assert exc_info.value.params["locked_sum"] == 8
        assert week_plan.to_storage() == before

    def test_fully_completed_week(self, week_plan, ledger):
        for offset in range(2, 5):
            set_day_completion(week_plan, ledger, FIRST_MONDAY + timedelta(days=offset), True)

        with pytest.raises(LockedUnitError):
            set_week_target(week_plan, ledger, 1, 30)

    def test_no_attending_open_day(self, week_plan, ledger):
        for offset in range(2, 5):
            set_attending(week_plan, ledger, FIRST_MONDAY + timedelta(days=offset), False)

        with pytest.raises(LockedUnitError):
            set_week_target(week_plan, ledger, 1, 30)

    def test_non_attending_days_receive_nothing(self, week_plan, ledger):
        set_attending(week_plan, ledger, WEDNESDAY, False)

        week = set_week_target(week_plan, ledger, 1, 20)

        assert [day.target_value for day in week.days] == [4, 4, 0, 6, 6]

    def test_negative_value(self, week_plan, ledger):
        with pytest.raises(InvalidQuantityError):
            set_week_target(week_plan, ledger, 1, -1)


class TestSetDayTarget:
    def test_override_keeps_declared_total(self, week_plan, ledger):
        day = set_day_target(week_plan, ledger, WEDNESDAY, 10)

        assert day.target_value == 10
        assert week_plan.weeks[0].target_value == 26
        assert week_plan.total_value == 20
        assert week_plan.allocated_value == 26
        assert not week_plan.is_balanced

    def test_completed_day_is_locked(self, week_plan, ledger):
        set_day_completion(week_plan, ledger, WEDNESDAY, True)

        with pytest.raises(LockedUnitError) as exc_info:
            set_day_target(week_plan, ledger, WEDNESDAY, 10)

        assert exc_info.value.params == {"date": "2025-01-08", "target_value": 4}

    def test_non_attending_day_only_takes_zero(self, week_plan, ledger):
        set_attending(week_plan, ledger, WEDNESDAY, False)

        with pytest.raises(InvalidQuantityError):
            set_day_target(week_plan, ledger, WEDNESDAY, 3)
        assert set_day_target(week_plan, ledger, WEDNESDAY, 0).target_value == 0

    def test_day_outside_plan(self, week_plan, ledger):
        with pytest.raises(InvalidRangeError):
            set_day_target(week_plan, ledger, date(2025, 1, 11), 1)


class TestRedistributeRemainder:
    @pytest.fixture
    def locked_plan(self, ledger):
        """30 units over 10 days (3 each) with the first four days completed."""
        plan = build_plan(30, FIRST_MONDAY, date(2025, 1, 17))
        for offset in range(4):
            set_day_completion(plan, ledger, FIRST_MONDAY + timedelta(days=offset), True)
        return plan

    def test_spreads_remainder_over_open_days(self, locked_plan, ledger):
        assert ledger.locked_sum(locked_plan) == 12

        redistribute_remainder(locked_plan, ledger, 30)

        open_values = [day.target_value for day in open_days([d for _w, d in locked_plan.iter_days()], ledger)]
        assert sum(open_values) == 18
        assert open_values == [3, 3, 3, 3, 3, 3]
        assert locked_plan.is_balanced

    def test_new_total_below_locked_sum(self, locked_plan, ledger):
        before = locked_plan.to_storage()

        with pytest.raises(OverCommittedError) as exc_info:
            redistribute_remainder(locked_plan, ledger, 10)

        assert exc_info.value.params == {"new_total": 10, "locked_sum": 12}
        assert locked_plan.to_storage() == before
        assert locked_plan.total_value == 30

    def test_new_total_equal_to_locked_sum(self, locked_plan, ledger):
        redistribute_remainder(locked_plan, ledger, 12)

        assert day_values(locked_plan) == [3, 3, 3, 3, 0, 0, 0, 0, 0, 0]

    @pytest.mark.parametrize("new_total", [12, 13, 30, 31, 101])
    def test_locked_plus_open_equals_new_total(self, locked_plan, ledger, new_total):
        redistribute_remainder(locked_plan, ledger, new_total)

        all_days = [day for _week, day in locked_plan.iter_days()]
        open_sum = sum(day.target_value for day in open_days(all_days, ledger))
        assert ledger.locked_sum(locked_plan) + open_sum == new_total
        assert locked_plan.allocated_value == new_total

    def test_completed_days_never_change(self, locked_plan, ledger):
        for new_total in (50, 12, 17, 40):
            redistribute_remainder(locked_plan, ledger, new_total)
            assert day_values(locked_plan)[:4] == [3, 3, 3, 3]

        set_day_completion(locked_plan, ledger, FIRST_MONDAY, False)
        redistribute_remainder(locked_plan, ledger, 16)
        assert day_values(locked_plan)[0] == 1

    def test_restores_balance_after_local_edit(self, locked_plan, ledger):
        set_day_target(locked_plan, ledger, date(2025, 1, 17), 20)
        assert not locked_plan.is_balanced

        redistribute_remainder(locked_plan, ledger, locked_plan.total_value)

        assert locked_plan.is_balanced

    def test_no_open_day_left(self, week_plan, ledger):
        for _week, day in list(week_plan.iter_days()):
            set_day_completion(week_plan, ledger, day.date, True)

        redistribute_remainder(week_plan, ledger, 20)
        with pytest.raises(LockedUnitError):
            redistribute_remainder(week_plan, ledger, 21)


class TestSetAttending:
    def test_absence_zeroes_day_and_week(self, week_plan, ledger):
        day = set_attending(week_plan, ledger, WEDNESDAY, False)

        assert day.target_value == 0
        assert not day.is_attending
        assert week_plan.weeks[0].target_value == 16

    def test_redistribution_skips_absent_days(self, week_plan, ledger):
        set_attending(week_plan, ledger, WEDNESDAY, False)

        redistribute_remainder(week_plan, ledger, 20)

        assert day_values(week_plan) == [5, 5, 0, 5, 5]

    def test_returning_day_keeps_zero_until_redistribution(self, week_plan, ledger):
        set_attending(week_plan, ledger, WEDNESDAY, False)
        day = set_attending(week_plan, ledger, WEDNESDAY, True)

        assert day.is_attending
        assert day.target_value == 0

        redistribute_remainder(week_plan, ledger, 20)
        assert day_values(week_plan) == [4, 4, 4, 4, 4]

    def test_completed_day_is_locked(self, week_plan, ledger):
        set_day_completion(week_plan, ledger, WEDNESDAY, True)

        with pytest.raises(LockedUnitError):
            set_attending(week_plan, ledger, WEDNESDAY, False)
        assert ledger.is_complete(CompletionKind.DAY, WEDNESDAY)

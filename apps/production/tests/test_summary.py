from datetime import date

from apps.production.constants import CompletionKind
from apps.production.kpi import build_plan, is_accumulated, set_day_completion, set_week_completion, summarize

from .conftest import FIRST_MONDAY


def test_summary_of_fresh_plan(two_week_plan, ledger):
    data = summarize(two_week_plan, ledger)

    assert data == {
        "total_value": 23,
        "allocated_value": 23,
        "completed_value": 0,
        "open_value": 23,
        "working_day_count": 10,
        "completed_day_count": 0,
        "week_count": 2,
        "completed_week_count": 0,
        "is_balanced": True,
    }


def test_summary_counts_completed_units(two_week_plan, ledger):
    set_week_completion(two_week_plan, ledger, 1, True)

    data = summarize(two_week_plan, ledger)

    assert data["completed_value"] == 13
    assert data["open_value"] == 10
    assert data["completed_day_count"] == 5
    assert data["completed_week_count"] == 1


class TestIsAccumulated:
    def test_requires_every_quota_day(self, two_week_plan, ledger):
        set_week_completion(two_week_plan, ledger, 1, True)
        assert not is_accumulated(two_week_plan, ledger)

        set_week_completion(two_week_plan, ledger, 2, True)
        assert is_accumulated(two_week_plan, ledger)

    def test_zero_target_days_are_ignored(self, ledger):
        # 2 units over 5 days: only Monday and Tuesday carry a quota
        plan = build_plan(2, FIRST_MONDAY, date(2025, 1, 10))
        set_day_completion(plan, ledger, FIRST_MONDAY, True)
        set_day_completion(plan, ledger, date(2025, 1, 7), True)

        assert is_accumulated(plan, ledger)
        assert not ledger.is_complete(CompletionKind.WEEK, 1)

    def test_plan_without_quota(self, ledger):
        plan = build_plan(0, FIRST_MONDAY, date(2025, 1, 10))
        set_week_completion(plan, ledger, 1, True)

        assert not is_accumulated(plan, ledger)

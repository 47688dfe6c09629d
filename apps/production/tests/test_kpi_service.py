"""Tests for ChainKPIService persistence, locking and retries."""

from datetime import date

import pytest
from django.db.models import F

from apps.production.constants import CompletionKind, WeekTargetScope
from apps.production.exceptions import InvalidRangeError, LockedUnitError, OverCommittedError, StaleKPISnapshotError
from apps.production.kpi import redistribute_remainder
from apps.production.models import ChainKPI, KPICompletion
from apps.production.services import ChainKPIService

from .conftest import FIRST_MONDAY, SECOND_FRIDAY


@pytest.mark.django_db
class TestCreate:
    def test_stores_partitioned_tree(self, kpi):
        kpi.refresh_from_db()

        assert kpi.total_value == 23
        assert kpi.unit_label == "products"
        assert kpi.version == 1
        assert [week["target_value"] for week in kpi.weeks] == [13, 10]
        assert kpi.weeks[0]["days"][0] == {"date": "2025-01-06", "target_value": 3, "is_attending": True}
        assert "is_completed" not in kpi.weeks[0]

    def test_rejects_range_without_working_days(self, chain):
        with pytest.raises(InvalidRangeError):
            ChainKPIService.create(chain, 10, date(2025, 1, 4), date(2025, 1, 5))

        assert not ChainKPI.objects.exists()

    def test_find_overlapping(self, kpi, chain):
        assert ChainKPIService.find_overlapping(chain, SECOND_FRIDAY, date(2025, 1, 31)).count() == 1
        assert ChainKPIService.find_overlapping(chain, date(2025, 1, 20), date(2025, 1, 31)).count() == 0
        assert ChainKPIService.find_overlapping(chain, FIRST_MONDAY, SECOND_FRIDAY, exclude_pk=kpi.pk).count() == 0


@pytest.mark.django_db
class TestCompletionWrites:
    def test_day_toggle_writes_ledger_rows(self, kpi, superuser):
        result = ChainKPIService.toggle_day_completion(kpi, FIRST_MONDAY, actor=superuser)

        completion = KPICompletion.objects.get(kpi=kpi)
        assert completion.kind == CompletionKind.DAY
        assert completion.date == FIRST_MONDAY
        assert completion.recorded_by == superuser
        assert result.kpi.version == 2

    def test_last_day_completes_week(self, kpi):
        for offset in range(5):
            ChainKPIService.set_day_completion(kpi, date(2025, 1, 6 + offset), True)

        assert KPICompletion.objects.filter(kpi=kpi, kind=CompletionKind.WEEK, week_index=1).exists()
        assert KPICompletion.objects.filter(kpi=kpi, kind=CompletionKind.DAY).count() == 5

    def test_week_toggle_writes_and_removes_rows(self, kpi):
        ChainKPIService.toggle_week_completion(kpi, 2)
        assert KPICompletion.objects.filter(kpi=kpi).count() == 6

        ChainKPIService.toggle_week_completion(kpi, 2)
        assert not KPICompletion.objects.filter(kpi=kpi).exists()

    def test_projection_reads_the_ledger(self, kpi):
        ChainKPIService.set_week_completion(kpi, 1, True)

        weeks = ChainKPIService.project(kpi)["weeks"]

        assert weeks[0]["is_completed"] is True
        assert all(day["is_completed"] for day in weeks[0]["days"])
        assert weeks[1]["is_completed"] is False

    def test_accumulation_follows_the_ledger(self, kpi):
        ChainKPIService.set_week_completion(kpi, 1, True)
        result = ChainKPIService.set_week_completion(kpi, 2, True)

        assert result.kpi.is_accumulated
        assert result.kpi.accumulated_at is not None

        result = ChainKPIService.set_day_completion(kpi, SECOND_FRIDAY, False)

        assert not result.kpi.is_accumulated
        assert result.kpi.accumulated_at is None

    def test_summary(self, kpi):
        ChainKPIService.set_week_completion(kpi, 1, True)

        data = ChainKPIService.summary(kpi)

        assert data["kpi"] == kpi.pk
        assert data["completed_value"] == 13
        assert data["completed_week_count"] == 1
        assert data["is_accumulated"] is False


@pytest.mark.django_db
class TestRedistributionWrites:
    def test_update_total_keeps_completed_days(self, kpi):
        ChainKPIService.set_day_completion(kpi, FIRST_MONDAY, True)

        result = ChainKPIService.update_total(kpi, 30)

        assert result.kpi.total_value == 30
        days = [day for week in result.kpi.weeks for day in week["days"]]
        assert days[0]["target_value"] == 3
        assert sum(day["target_value"] for day in days) == 30

    def test_rejected_edit_leaves_row_untouched(self, kpi):
        ChainKPIService.set_week_completion(kpi, 1, True)
        kpi.refresh_from_db()
        version, weeks = kpi.version, kpi.weeks

        with pytest.raises(OverCommittedError):
            ChainKPIService.update_total(kpi, 5)

        kpi.refresh_from_db()
        assert kpi.version == version
        assert kpi.weeks == weeks
        assert kpi.total_value == 23

    def test_week_target_scopes(self, kpi):
        ChainKPIService.set_day_completion(kpi, FIRST_MONDAY, True)

        result = ChainKPIService.set_week_target(kpi, 1, 4, scope=WeekTargetScope.OPEN_DAYS)

        assert result.value.target_value == 3 + 4
        with pytest.raises(LockedUnitError):
            ChainKPIService.set_week_target(kpi, 1, 2)

    def test_day_target_unbalances_plan(self, kpi):
        result = ChainKPIService.set_day_target(kpi, SECOND_FRIDAY, 12)

        assert result.kpi.total_value == 23
        assert not result.plan.is_balanced
        assert result.plan.allocated_value == 33

    def test_attending_with_redistribution(self, kpi):
        result = ChainKPIService.set_attending(kpi, SECOND_FRIDAY, False, redistribute=True)

        assert result.value.target_value == 0
        assert result.plan.is_balanced
        assert result.plan.working_day_count == 10


@pytest.mark.django_db
class TestOptimisticLocking:
    def test_concurrent_write_is_retried(self, kpi):
        calls = []

        def mutate(plan, ledger):
            calls.append(plan.total_value)
            if len(calls) == 1:
                # Another writer commits between our read and our write
                ChainKPI.objects.filter(pk=kpi.pk).update(version=F("version") + 1)
            return redistribute_remainder(plan, ledger, 40)

        result = ChainKPIService.write(kpi, mutate)

        assert len(calls) == 2
        assert result.kpi.total_value == 40
        assert result.kpi.version == 2

    def test_gives_up_after_max_attempts(self, kpi, settings):
        settings.PRODUCTION_KPI_WRITE_MAX_ATTEMPTS = 1

        def mutate(plan, ledger):
            ChainKPI.objects.filter(pk=kpi.pk).update(version=F("version") + 1)
            return redistribute_remainder(plan, ledger, 40)

        with pytest.raises(StaleKPISnapshotError):
            ChainKPIService.write(kpi, mutate)

        kpi.refresh_from_db()
        assert kpi.total_value == 23
        assert kpi.version == 1


@pytest.mark.django_db
class TestUpdateDetails:
    def test_updates_label_and_note(self, kpi):
        updated = ChainKPIService.update_details(kpi, unit_label="boxes", note="Rush order")

        kpi.refresh_from_db()
        assert updated.unit_label == kpi.unit_label == "boxes"
        assert kpi.note == "Rush order"
        assert kpi.version == 1

    def test_missing_fields_are_kept(self, kpi):
        ChainKPIService.update_details(kpi, note="Only the note")

        kpi.refresh_from_db()
        assert kpi.unit_label == "products"
        assert kpi.note == "Only the note"

    def test_locked_once_a_unit_is_completed(self, kpi):
        ChainKPIService.toggle_day_completion(kpi, FIRST_MONDAY)

        with pytest.raises(LockedUnitError) as exc_info:
            ChainKPIService.update_details(kpi, unit_label="boxes")

        assert exc_info.value.params == {"kpi_id": kpi.pk}
        kpi.refresh_from_db()
        assert kpi.unit_label == "products"

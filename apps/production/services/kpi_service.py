import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from django.conf import settings
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from django.utils.translation import gettext as _

from apps.production import kpi as engine
from apps.production.constants import CompletionKind, WeekTargetScope
from apps.production.exceptions import LockedUnitError, StaleKPISnapshotError
from apps.production.kpi import CompletionLedger, KPIPlan
from apps.production.models import ChainKPI, KPICompletion, ProductionChain
from libs.retry import retry

logger = logging.getLogger(__name__)


def _max_attempts() -> int:
    return settings.PRODUCTION_KPI_WRITE_MAX_ATTEMPTS


def _retry_delay() -> float:
    return settings.PRODUCTION_KPI_WRITE_RETRY_DELAY


@dataclass
class KPIWriteResult:
    """Outcome of a KPI mutation: the refreshed row, the tree and ledger it was written from."""

    kpi: ChainKPI
    plan: KPIPlan
    ledger: CompletionLedger
    value: Any = None


class ChainKPIService:
    """Transactional orchestration of the KPI engine.

    Every mutation locks the ``ChainKPI`` row, reloads the tree and the completion ledger
    inside the transaction, runs the pure engine on them and writes both back. The
    ``version`` column guards the write; a concurrent change raises
    ``StaleKPISnapshotError`` and the whole read-compute-write cycle is retried.
    """

    @staticmethod
    def load(kpi: ChainKPI) -> tuple[KPIPlan, CompletionLedger]:
        """Read-only snapshot of the tree and the ledger."""
        return kpi.get_plan(), CompletionLedger.from_records(kpi.completions.all())

    @staticmethod
    def project(kpi: ChainKPI) -> dict:
        """Tree with ``is_completed`` projected from the ledger on every week and day."""
        plan, ledger = ChainKPIService.load(kpi)
        return plan.to_dict(ledger)

    @staticmethod
    def find_overlapping(chain: ProductionChain, start_date: date, end_date: date, exclude_pk=None):
        queryset = ChainKPI.objects.filter(chain=chain, start_date__lte=end_date, end_date__gte=start_date)
        if exclude_pk is not None:
            queryset = queryset.exclude(pk=exclude_pk)
        return queryset

    @staticmethod
    @transaction.atomic
    def create(
        chain: ProductionChain,
        total_value: int,
        start_date: date,
        end_date: date,
        unit_label: Optional[str] = None,
        note: str = "",
        created_by=None,
    ) -> ChainKPI:
        """Partition ``total_value`` over the period and store the new target."""
        plan = engine.build_plan(total_value, start_date, end_date)
        kpi = ChainKPI.objects.create(
            chain=chain,
            total_value=plan.total_value,
            start_date=start_date,
            end_date=end_date,
            unit_label=unit_label or settings.PRODUCTION_KPI_DEFAULT_UNIT_LABEL,
            note=note,
            weeks=plan.to_storage(),
            created_by=created_by,
        )
        logger.info(
            "Created KPI %s for chain %s: %s over %s working days (%s to %s)",
            kpi.pk,
            chain.pk,
            total_value,
            plan.working_day_count,
            start_date,
            end_date,
        )
        return kpi

    @staticmethod
    @transaction.atomic
    def update_details(kpi: ChainKPI, unit_label: Optional[str] = None, note: Optional[str] = None) -> ChainKPI:
        """Edit ``unit_label`` and ``note`` of a target that has no completion record yet."""
        locked = ChainKPI.objects.select_for_update().get(pk=kpi.pk)
        if locked.completions.exists():
            raise LockedUnitError(
                _("KPI %(kpi_id)s already has completed units; its unit label and note are locked"),
                kpi_id=locked.pk,
            )
        fields = ["updated_at"]
        if unit_label:
            locked.unit_label = unit_label
            fields.append("unit_label")
        if note is not None:
            locked.note = note
            fields.append("note")
        locked.save(update_fields=fields)
        logger.info("KPI %s details updated (%s)", locked.pk, ", ".join(fields[1:]) or "no change")
        return locked

    @staticmethod
    def write(
        kpi: ChainKPI,
        mutate: Callable[[KPIPlan, CompletionLedger], Any],
        actor=None,
        action: str = "update",
    ) -> KPIWriteResult:
        """Run ``mutate`` on a locked snapshot of ``kpi`` and persist the result."""

        @retry(
            max_attempts=_max_attempts,
            exceptions=(StaleKPISnapshotError,),
            delay=_retry_delay,
            logger=logger,
        )
        def _attempt() -> KPIWriteResult:
            with transaction.atomic():
                locked = ChainKPI.objects.select_for_update().get(pk=kpi.pk)
                plan = locked.get_plan()
                original = CompletionLedger.from_records(locked.completions.all())
                ledger = original.copy()

                value = mutate(plan, ledger)

                now = timezone.now()
                accumulated = engine.is_accumulated(plan, ledger)
                if accumulated and locked.is_accumulated:
                    accumulated_at = locked.accumulated_at
                else:
                    accumulated_at = now if accumulated else None
                updated = ChainKPI.objects.filter(pk=locked.pk, version=locked.version).update(
                    weeks=plan.to_storage(),
                    total_value=plan.total_value,
                    is_accumulated=accumulated,
                    accumulated_at=accumulated_at,
                    version=F("version") + 1,
                    updated_at=now,
                )
                if not updated:
                    raise StaleKPISnapshotError(f"KPI {locked.pk} changed after version {locked.version} was read")

                ChainKPIService._write_ledger(locked, ledger.diff(original), actor, now)
                locked.refresh_from_db()

            logger.info("KPI %s %s by %s (version %s)", locked.pk, action, getattr(actor, "pk", None), locked.version)
            return KPIWriteResult(kpi=locked, plan=plan, ledger=ledger, value=value)

        return _attempt()

    @staticmethod
    def _write_ledger(kpi: ChainKPI, changes, actor, now) -> None:
        added, removed = changes
        if removed:
            condition = Q()
            for record in removed:
                if record.kind == CompletionKind.WEEK:
                    condition |= Q(kind=CompletionKind.WEEK, week_index=record.ref)
                else:
                    condition |= Q(kind=CompletionKind.DAY, date=record.ref)
            KPICompletion.objects.filter(condition, kpi=kpi).delete()
        if added:
            KPICompletion.objects.bulk_create(
                [
                    KPICompletion(
                        kpi=kpi,
                        kind=record.kind,
                        week_index=record.ref if record.kind == CompletionKind.WEEK else None,
                        date=record.ref if record.kind == CompletionKind.DAY else None,
                        recorded_by=actor,
                        recorded_at=now,
                    )
                    for record in added
                ]
            )

    @staticmethod
    def update_total(kpi: ChainKPI, new_total_value: int, actor=None) -> KPIWriteResult:
        """Re-declare the total and redistribute the uncompleted remainder."""
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.redistribute_remainder(plan, ledger, new_total_value),
            actor,
            action=f"total set to {new_total_value}",
        )

    @staticmethod
    def set_week_target(
        kpi: ChainKPI,
        week_index: int,
        new_value: int,
        scope: str = WeekTargetScope.WEEK_TOTAL,
        actor=None,
    ) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.set_week_target(plan, ledger, week_index, new_value, scope),
            actor,
            action=f"week {week_index} set to {new_value} ({scope})",
        )

    @staticmethod
    def set_day_target(kpi: ChainKPI, day_date: date, new_value: int, actor=None) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.set_day_target(plan, ledger, day_date, new_value),
            actor,
            action=f"day {day_date} set to {new_value}",
        )

    @staticmethod
    def set_attending(
        kpi: ChainKPI,
        day_date: date,
        attending: bool,
        redistribute: bool = False,
        actor=None,
    ) -> KPIWriteResult:
        """Flag a day as (not) attending, optionally redistributing the declared total right away."""

        def _mutate(plan, ledger):
            day = engine.set_attending(plan, ledger, day_date, attending)
            if redistribute:
                engine.redistribute_remainder(plan, ledger, plan.total_value)
            return day

        return ChainKPIService.write(kpi, _mutate, actor, action=f"day {day_date} attending={attending}")

    @staticmethod
    def set_day_completion(kpi: ChainKPI, day_date: date, completed: bool, actor=None) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.set_day_completion(plan, ledger, day_date, completed, actor),
            actor,
            action=f"day {day_date} completed={completed}",
        )

    @staticmethod
    def toggle_day_completion(kpi: ChainKPI, day_date: date, actor=None) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.toggle_day_completion(plan, ledger, day_date, actor),
            actor,
            action=f"day {day_date} toggled",
        )

    @staticmethod
    def set_week_completion(kpi: ChainKPI, week_index: int, completed: bool, actor=None) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.set_week_completion(plan, ledger, week_index, completed, actor),
            actor,
            action=f"week {week_index} completed={completed}",
        )

    @staticmethod
    def toggle_week_completion(kpi: ChainKPI, week_index: int, actor=None) -> KPIWriteResult:
        return ChainKPIService.write(
            kpi,
            lambda plan, ledger: engine.toggle_week_completion(plan, ledger, week_index, actor),
            actor,
            action=f"week {week_index} toggled",
        )

    @staticmethod
    def completions(kpi: ChainKPI):
        return kpi.completions.select_related("recorded_by").order_by("recorded_at", "id")

    @staticmethod
    def summary(kpi: ChainKPI) -> dict:
        plan, ledger = ChainKPIService.load(kpi)
        data = engine.summarize(plan, ledger)
        data.update(
            {
                "kpi": kpi.pk,
                "unit_label": kpi.unit_label,
                "is_accumulated": kpi.is_accumulated,
                "accumulated_at": kpi.accumulated_at,
            }
        )
        return data

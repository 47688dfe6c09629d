import logging
from typing import Optional

from django.db import transaction
from django.db.models import ProtectedError
from django.utils.translation import gettext as _

from apps.production.constants import FIRST_STEP_ORDER, MIN_CHAIN_DEPARTMENTS, ChainStatus, ChainTaskStatus
from apps.production.exceptions import ChainStateError, ChainStepsError
from apps.production.models import ChainTask, KPICompletion, ProductionChain, ProductionChainStep

logger = logging.getLogger(__name__)


def normalize_steps(steps: list[dict]) -> list[dict]:
    """Validate step definitions and return them ordered by ``step_order``.

    Each step is a dict with ``department`` and optional ``title`` and ``step_order``.
    Missing orders are taken from the list position. Orders must be contiguous from 1
    and the steps must span at least two distinct departments.
    """
    normalized = []
    for position, step in enumerate(steps, start=FIRST_STEP_ORDER):
        normalized.append(
            {
                "step_order": step.get("step_order") or position,
                "department": step["department"],
                "title": step.get("title") or "",
            }
        )
    normalized.sort(key=lambda step: step["step_order"])

    orders = [step["step_order"] for step in normalized]
    expected = list(range(FIRST_STEP_ORDER, FIRST_STEP_ORDER + len(normalized)))
    if orders != expected:
        raise ChainStepsError(
            _("Step orders must be contiguous starting at %(first)s, got %(orders)s"),
            first=FIRST_STEP_ORDER,
            orders=orders,
        )

    department_ids = {getattr(step["department"], "pk", step["department"]) for step in normalized}
    if len(department_ids) < MIN_CHAIN_DEPARTMENTS:
        raise ChainStepsError(
            _("A production chain needs at least %(minimum)s distinct departments, got %(count)s"),
            minimum=MIN_CHAIN_DEPARTMENTS,
            count=len(department_ids),
        )
    return normalized


def _department_id(department):
    return getattr(department, "pk", department)


class ProductionChainService:
    """Chain lifecycle: steps, status and deletion.

    Once any KPI target of a chain has a completion record the chain is locked: its
    existing steps keep their order and department, only titles change and new steps
    may be appended.
    """

    @staticmethod
    @transaction.atomic
    def create(name: str, steps: list[dict], description: str = "", created_by=None) -> ProductionChain:
        normalized = normalize_steps(steps)
        chain = ProductionChain.objects.create(name=name, description=description, created_by=created_by)
        ProductionChainStep.objects.bulk_create(
            [
                ProductionChainStep(
                    chain=chain,
                    step_order=step["step_order"],
                    department_id=_department_id(step["department"]),
                    title=step["title"],
                )
                for step in normalized
            ]
        )
        logger.info("Created production chain %s with %s steps", chain.pk, len(normalized))
        return chain

    @staticmethod
    @transaction.atomic
    def update(
        chain: ProductionChain,
        name: Optional[str] = None,
        description: Optional[str] = None,
        steps: Optional[list[dict]] = None,
    ) -> ProductionChain:
        if name is not None:
            chain.name = name
        if description is not None:
            chain.description = description
        chain.save()

        if steps is not None:
            normalized = normalize_steps(steps)
            existing = {step.step_order: step for step in chain.steps.all()}
            if chain.has_completions():
                ProductionChainService._check_locked_steps(existing, normalized)
            ProductionChainService._replace_steps(chain, existing, normalized)
        return chain

    @staticmethod
    def _check_locked_steps(existing: dict, normalized: list[dict]) -> None:
        if len(normalized) < len(existing):
            raise ChainStepsError(
                _("Steps of a locked chain cannot be removed (%(existing)s existing, %(given)s given)"),
                existing=len(existing),
                given=len(normalized),
            )
        for step in normalized:
            current = existing.get(step["step_order"])
            if current is not None and current.department_id != _department_id(step["department"]):
                raise ChainStepsError(
                    _("Step %(step_order)s of a chain with completed KPI units cannot change department"),
                    step_order=step["step_order"],
                )

    @staticmethod
    def _replace_steps(chain: ProductionChain, existing: dict, normalized: list[dict]) -> None:
        wanted_orders = {step["step_order"] for step in normalized}
        stale = [step for order, step in existing.items() if order not in wanted_orders]
        if stale:
            try:
                ProductionChainStep.objects.filter(pk__in=[step.pk for step in stale]).delete()
            except ProtectedError as exc:
                raise ChainStepsError(
                    _("Steps %(orders)s already have chain tasks or week assignments and cannot be removed"),
                    orders=sorted(step.step_order for step in stale),
                ) from exc

        for step in normalized:
            current = existing.get(step["step_order"])
            department_id = _department_id(step["department"])
            if current is None:
                ProductionChainStep.objects.create(
                    chain=chain,
                    step_order=step["step_order"],
                    department_id=department_id,
                    title=step["title"],
                )
            elif current.department_id != department_id or current.title != step["title"]:
                current.department_id = department_id
                current.title = step["title"]
                current.save(update_fields=["department", "title", "updated_at"])

    @staticmethod
    def disable(chain: ProductionChain) -> ProductionChain:
        """Deactivate a chain that already has KPI activity; chains without it are deleted instead."""
        if not chain.has_completions():
            raise ChainStateError(
                _("Chain %(chain_id)s has no completed KPI units; delete it instead of disabling"),
                chain_id=chain.pk,
            )
        chain.status = ChainStatus.INACTIVE
        chain.save(update_fields=["status", "updated_at"])
        logger.info("Disabled production chain %s", chain.pk)
        return chain

    @staticmethod
    def enable(chain: ProductionChain) -> ProductionChain:
        chain.status = ChainStatus.ACTIVE
        chain.save(update_fields=["status", "updated_at"])
        logger.info("Enabled production chain %s", chain.pk)
        return chain

    @staticmethod
    @transaction.atomic
    def delete(chain: ProductionChain) -> None:
        if chain.has_completions():
            raise ChainStateError(
                _("Chain %(chain_id)s has completed KPI units and can only be disabled"),
                chain_id=chain.pk,
            )
        chain_id = chain.pk
        try:
            chain.delete()
        except ProtectedError as exc:
            raise ChainStateError(
                _("Chain %(chain_id)s already has chain tasks or week assignments and can only be disabled"),
                chain_id=chain_id,
            ) from exc
        logger.info("Deleted production chain %s", chain_id)

    @staticmethod
    def activities(chain: ProductionChain) -> dict:
        completion_count = KPICompletion.objects.filter(kpi__chain=chain).count()
        completed_task_count = ChainTask.objects.filter(run__chain=chain, status=ChainTaskStatus.COMPLETED).count()
        return {
            "chain": chain.pk,
            "has_activities": completion_count > 0,
            "completion_count": completion_count,
            "completed_task_count": completed_task_count,
            "kpi_count": chain.kpis.count(),
            "run_count": chain.runs.count(),
        }

"""Week assignments: hand a KPI week over to chain steps and their members."""

import logging
from datetime import date
from typing import Optional

from django.db import transaction
from django.utils import timezone
from django.utils.translation import gettext as _

from apps.production import kpi as engine
from apps.production.exceptions import AssignmentError, InvalidRangeError
from apps.production.kpi import CompletionLedger, StepAllocation
from apps.production.models import ChainKPI, KPIWeekAssignment

logger = logging.getLogger(__name__)


def _iso_keys(values: Optional[dict]) -> dict:
    return {day.isoformat() if isinstance(day, date) else str(day): value for day, value in (values or {}).items()}


class KPIAssignmentService:
    @staticmethod
    @transaction.atomic
    def assign_week(kpi: ChainKPI, week_index: int, assignments: list[dict], actor=None) -> list[KPIWeekAssignment]:
        """Create or replace the assignments of ``week_index``, one per chain step.

        Each item holds ``step``, ``assignee`` and ``day_amounts`` (date to quantity),
        optionally ``day_titles``. The KPI row and the week's assignments are locked
        while the department caps are checked, so concurrent hand-overs cannot exceed
        a day's target together.
        """
        locked = ChainKPI.objects.select_for_update().get(pk=kpi.pk)
        existing = {
            assignment.step_id: assignment
            for assignment in KPIWeekAssignment.objects.select_for_update()
            .select_related("step")
            .filter(kpi=locked, week_index=week_index)
        }

        incoming = []
        for item in assignments:
            step = item["step"]
            if step.chain_id != locked.chain_id:
                raise AssignmentError(
                    _("Step %(step_id)s does not belong to chain %(chain_id)s"),
                    step_id=step.pk,
                    chain_id=locked.chain_id,
                )
            assignee = item.get("assignee")
            if assignee is not None and (assignee.department_id != step.department_id or not assignee.is_active):
                raise AssignmentError(
                    _("User %(user_id)s is not an active member of department %(department_id)s"),
                    user_id=assignee.pk,
                    department_id=step.department_id,
                )
            incoming.append(
                StepAllocation(
                    step_id=step.pk,
                    department_id=step.department_id,
                    day_amounts=dict(item.get("day_amounts") or {}),
                )
            )

        plan = locked.get_plan()
        ledger = CompletionLedger.from_records(locked.completions.all())
        engine.check_week_allocations(
            plan,
            ledger,
            week_index,
            {step_id: assignment.to_allocation() for step_id, assignment in existing.items()},
            incoming,
        )

        saved = []
        for item in assignments:
            step = item["step"]
            assignee = item.get("assignee")
            assignment = existing.get(step.pk) or KPIWeekAssignment(
                kpi=locked,
                week_index=week_index,
                step=step,
                created_by=actor,
            )
            if assignment.pk and assignment.assignee_id != getattr(assignee, "pk", None):
                assignment.accepted = False
                assignment.accepted_by = None
                assignment.accepted_at = None
            assignment.assignee = assignee
            assignment.day_amounts = _iso_keys(item.get("day_amounts"))
            assignment.day_titles = _iso_keys(item.get("day_titles"))
            assignment.save()
            saved.append(assignment)

        logger.info(
            "KPI %s week %s assigned to steps %s by %s",
            locked.pk,
            week_index,
            [assignment.step_id for assignment in saved],
            getattr(actor, "pk", None),
        )
        return saved

    @staticmethod
    def for_week(kpi: ChainKPI, week_index: int):
        return KPIWeekAssignment.objects.filter(kpi=kpi, week_index=week_index).select_related("step", "assignee")

    @staticmethod
    @transaction.atomic
    def accept(assignment: KPIWeekAssignment, user) -> KPIWeekAssignment:
        """Claim the assignment; accepting twice keeps the first acceptance."""
        assignment = KPIWeekAssignment.objects.select_for_update().get(pk=assignment.pk)
        if assignment.accepted:
            return assignment
        assignment.accepted = True
        assignment.accepted_by = user
        assignment.accepted_at = timezone.now()
        assignment.save(update_fields=["accepted", "accepted_by", "accepted_at", "updated_at"])
        logger.info("Assignment %s accepted by %s", assignment.pk, getattr(user, "pk", None))
        return assignment

    @staticmethod
    @transaction.atomic
    def save_day_result(
        assignment: KPIWeekAssignment,
        day_date: date,
        link: str,
        actor=None,
        slot_index: Optional[int] = None,
    ) -> KPIWeekAssignment:
        """Store a result link for an assigned day.

        Results of a day are a list of slots; ``slot_index`` overwrites one slot and
        without it the link is appended.
        """
        assignment = KPIWeekAssignment.objects.select_for_update().get(pk=assignment.pk)
        if not assignment.accepted:
            raise AssignmentError(
                _("Assignment %(assignment_id)s must be accepted before results are saved"),
                assignment_id=assignment.pk,
            )
        key = day_date.isoformat()
        if not assignment.day_amounts.get(key):
            raise InvalidRangeError(
                _("Nothing is assigned on %(date)s in assignment %(assignment_id)s"),
                date=key,
                assignment_id=assignment.pk,
            )

        slots = list(assignment.day_results.get(key) or [])
        entry = {"link": link, "saved_by": getattr(actor, "pk", None), "saved_at": timezone.now().isoformat()}
        if slot_index is None or slot_index >= len(slots):
            slots.append(entry)
        else:
            slots[slot_index] = entry
        assignment.day_results = {**assignment.day_results, key: slots}
        assignment.save(update_fields=["day_results", "updated_at"])
        return assignment

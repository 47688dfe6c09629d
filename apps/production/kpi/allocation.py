"""Hand-over of a week's day targets to the departments of a chain.

A week is split between chain steps: each step gets per-day amounts. For every
department and day the amounts of all its steps stay within the day's target, and
amounts on a completed day are locked like the target itself.
"""

from dataclasses import dataclass, field
from datetime import date

from django.utils.translation import gettext as _

from apps.production.exceptions import AssignmentError, AssignmentOverflowError, InvalidRangeError, LockedUnitError
from apps.production.kpi.ledger import CompletionLedger
from apps.production.kpi.partitioner import validate_quantity
from apps.production.kpi.propagation import get_week_or_raise
from apps.production.kpi.structures import KPIPlan


@dataclass
class StepAllocation:
    step_id: int
    department_id: int
    day_amounts: dict[date, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.day_amounts.values())


def department_day_totals(allocations) -> dict[int, dict[date, int]]:
    totals: dict[int, dict[date, int]] = {}
    for allocation in allocations:
        per_day = totals.setdefault(allocation.department_id, {})
        for day_date, amount in allocation.day_amounts.items():
            per_day[day_date] = per_day.get(day_date, 0) + amount
    return totals


def check_week_allocations(
    plan: KPIPlan,
    ledger: CompletionLedger,
    week_index: int,
    current: dict[int, StepAllocation],
    incoming: list[StepAllocation],
) -> dict[int, StepAllocation]:
    """Validate ``incoming`` against the week and return the merged allocations by step.

    ``current`` holds the allocations already stored for the week, keyed by step id;
    an incoming allocation replaces the current one of the same step. Nothing is
    changed when a check fails.
    """
    week = get_week_or_raise(plan, week_index)
    seen = set()
    for allocation in incoming:
        if allocation.step_id in seen:
            raise AssignmentError(
                _("Step %(step_id)s is assigned twice in week %(week_index)s"),
                step_id=allocation.step_id,
                week_index=week_index,
            )
        seen.add(allocation.step_id)

        previous = current.get(allocation.step_id)
        previous_amounts = previous.day_amounts if previous else {}
        for day_date, amount in allocation.day_amounts.items():
            validate_quantity(amount, "amount")
            if week.get_day(day_date) is None:
                raise InvalidRangeError(
                    _("%(date)s is not a working day of week %(week_index)s"),
                    date=day_date.isoformat(),
                    week_index=week_index,
                )
            if ledger.is_day_complete(day_date) and amount != previous_amounts.get(day_date, 0):
                raise LockedUnitError(
                    _("Day %(date)s is completed; its assigned amount of %(amount)s is locked"),
                    date=day_date.isoformat(),
                    amount=previous_amounts.get(day_date, 0),
                )
        for day_date, amount in previous_amounts.items():
            if day_date not in allocation.day_amounts and amount and ledger.is_day_complete(day_date):
                raise LockedUnitError(
                    _("Day %(date)s is completed; its assigned amount of %(amount)s is locked"),
                    date=day_date.isoformat(),
                    amount=amount,
                )

    merged = dict(current)
    merged.update({allocation.step_id: allocation for allocation in incoming})

    totals = department_day_totals(merged.values())
    for department_id, per_day in sorted(totals.items()):
        for day in week.days:
            assigned = per_day.get(day.date, 0)
            if assigned > day.target_value:
                raise AssignmentOverflowError(
                    department_id=department_id,
                    date=day.date.isoformat(),
                    assigned=assigned,
                    target=day.target_value,
                )
    return merged

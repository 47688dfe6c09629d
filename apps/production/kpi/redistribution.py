"""Quota redistribution under completion locks.

Every function validates its input completely before touching the plan, so a raised
error always leaves the plan exactly as it was. Completed days are never written.
"""

import logging
from datetime import date

from django.utils.translation import gettext as _

from apps.production.constants import WeekTargetScope
from apps.production.exceptions import InvalidQuantityError, InvalidRangeError, LockedUnitError, OverCommittedError
from apps.production.kpi.ledger import CompletionLedger
from apps.production.kpi.partitioner import split_evenly, validate_quantity
from apps.production.kpi.propagation import get_week_or_raise
from apps.production.kpi.structures import KPIDay, KPIPlan, KPIWeek

logger = logging.getLogger(__name__)


def _find_day_or_raise(plan: KPIPlan, day_date: date) -> tuple[KPIWeek, KPIDay]:
    week, day = plan.find_day(day_date)
    if day is None:
        raise InvalidRangeError(_("%(date)s is not a working day of this KPI"), date=day_date.isoformat())
    return week, day


def _ensure_day_open(ledger: CompletionLedger, day: KPIDay) -> None:
    if ledger.is_day_complete(day.date):
        raise LockedUnitError(
            _("Day %(date)s is completed; its target of %(target_value)s is locked"),
            date=day.date.isoformat(),
            target_value=day.target_value,
        )


def open_days(days, ledger: CompletionLedger) -> list[KPIDay]:
    """Days that absorb redistribution: attending and not completed, chronological."""
    return sorted(
        (day for day in days if day.is_attending and not ledger.is_day_complete(day.date)),
        key=lambda day: day.date,
    )


def _spread(days: list[KPIDay], value: int) -> None:
    for day, share in zip(days, split_evenly(value, len(days))):
        day.target_value = share


def set_day_target(plan: KPIPlan, ledger: CompletionLedger, day_date: date, new_value: int) -> KPIDay:
    """Override one day's target and recompute its week.

    The declared total is left as is; ``plan.allocated_value`` shows the resulting gap.
    """
    validate_quantity(new_value, "target_value")
    week, day = _find_day_or_raise(plan, day_date)
    _ensure_day_open(ledger, day)
    if not day.is_attending and new_value != 0:
        raise InvalidQuantityError(
            _("Day %(date)s is marked as not attending and cannot carry %(value)s"),
            date=day_date.isoformat(),
            value=new_value,
        )

    day.target_value = new_value
    week.recompute_target()
    return day


def set_week_target(
    plan: KPIPlan,
    ledger: CompletionLedger,
    week_index: int,
    new_value: int,
    scope: str = WeekTargetScope.WEEK_TOTAL,
) -> KPIWeek:
    """Spread a week value over the week's open days.

    With ``WEEK_TOTAL`` scope ``new_value`` is the new week total and must cover the
    values the week keeps (completed days). With ``OPEN_DAYS`` scope ``new_value`` is
    spread over the open days and the week total becomes ``kept + new_value``.
    """
    validate_quantity(new_value, "target_value")
    scope = WeekTargetScope(scope)
    week = get_week_or_raise(plan, week_index)

    completed = [day for day in week.days if ledger.is_day_complete(day.date)]
    if len(completed) == len(week.days):
        raise LockedUnitError(
            _("Every working day of week %(week_index)s is completed"),
            week_index=week_index,
        )
    targets = open_days(week.days, ledger)
    if not targets:
        raise LockedUnitError(
            _("Week %(week_index)s has no attending open day to receive %(value)s"),
            week_index=week_index,
            value=new_value,
        )

    kept_sum = sum(day.target_value for day in week.days if day not in targets)
    if scope == WeekTargetScope.WEEK_TOTAL:
        if new_value < kept_sum:
            raise LockedUnitError(
                _("Cannot set week %(week_index)s to %(value)s; %(locked_sum)s units already completed"),
                week_index=week_index,
                value=new_value,
                locked_sum=kept_sum,
            )
        open_value = new_value - kept_sum
    else:
        open_value = new_value

    _spread(targets, open_value)
    week.recompute_target()
    return week


def redistribute_remainder(plan: KPIPlan, ledger: CompletionLedger, new_total_value: int) -> KPIPlan:
    """Re-declare the total and spread what is not completed over every open day."""
    validate_quantity(new_total_value)
    locked_sum = ledger.locked_sum(plan)
    remaining = new_total_value - locked_sum
    if remaining < 0:
        raise OverCommittedError(new_total=new_total_value, locked_sum=locked_sum)

    all_days = [day for _week, day in plan.iter_days()]
    targets = open_days(all_days, ledger)
    if remaining > 0 and not targets:
        raise LockedUnitError(
            _("No open working day is left to receive the remaining %(remaining)s units"),
            remaining=remaining,
        )

    for day in all_days:
        if not day.is_attending and not ledger.is_day_complete(day.date):
            day.target_value = 0
    _spread(targets, remaining)
    for week in plan.weeks:
        week.recompute_target()
    plan.total_value = new_total_value
    logger.debug("Redistributed %s units over %s open days (locked %s)", remaining, len(targets), locked_sum)
    return plan


def set_attending(plan: KPIPlan, ledger: CompletionLedger, day_date: date, attending: bool) -> KPIDay:
    """Flag a day as (not) attending.

    A non-attending day drops to zero. Re-attending keeps zero until the next
    :func:`redistribute_remainder`.
    """
    week, day = _find_day_or_raise(plan, day_date)
    _ensure_day_open(ledger, day)
    day.is_attending = attending
    if not attending:
        day.target_value = 0
        week.recompute_target()
    return day

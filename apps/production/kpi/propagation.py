"""Bidirectional day/week completion rules.

Day to week: a week is complete exactly when every working day in it is complete.
Week to day: explicitly completing or reopening a week does the same to all its days.

Both directions are pure: they read a plan and a ledger and return the ledger mutations that
make the pair consistent. Callers apply the mutations; nothing here writes.
"""

from datetime import date

from django.utils.translation import gettext as _

from apps.production.constants import CompletionKind
from apps.production.exceptions import InvalidRangeError
from apps.production.kpi.ledger import CompletionLedger, LedgerMutation
from apps.production.kpi.structures import KPIPlan, KPIWeek


def get_week_or_raise(plan: KPIPlan, week_index: int) -> KPIWeek:
    week = plan.get_week(week_index)
    if week is None:
        raise InvalidRangeError(_("Week %(week_index)s does not exist"), week_index=week_index)
    return week


class CompletionPropagator:
    def __init__(self, plan: KPIPlan, ledger: CompletionLedger):
        self.plan = plan
        self.ledger = ledger

    def on_day_toggled(self, week_index: int, day_date: date) -> list[LedgerMutation]:
        """Derive the week flag from the current state of its days."""
        week = get_week_or_raise(self.plan, week_index)
        if week.get_day(day_date) is None:
            raise InvalidRangeError(
                _("%(date)s is not a working day of week %(week_index)s"),
                date=day_date.isoformat(),
                week_index=week_index,
            )
        return self.sync_week(week)

    def sync_week(self, week: KPIWeek) -> list[LedgerMutation]:
        # Weeks without working days are never written; their completion is projected.
        if not week.days:
            return []
        all_done = all(self.ledger.is_day_complete(day.date) for day in week.days)
        week_done = self.ledger.is_complete(CompletionKind.WEEK, week.week_index)
        if all_done and not week_done:
            return [LedgerMutation.mark_week(week.week_index)]
        if not all_done and week_done:
            return [LedgerMutation.unmark_week(week.week_index)]
        return []

    def on_week_toggled(self, week_index: int, completed: bool) -> list[LedgerMutation]:
        """Push the explicit week state down to every working day of the week."""
        week = get_week_or_raise(self.plan, week_index)
        if not week.days:
            return []
        mutations = []
        if self.ledger.is_complete(CompletionKind.WEEK, week_index) != completed:
            mutations.append(LedgerMutation(CompletionKind.WEEK, week_index, completed))
        for day in week.days:
            if self.ledger.is_day_complete(day.date) != completed:
                mutations.append(LedgerMutation(CompletionKind.DAY, day.date, completed))
        return mutations


def set_day_completion(
    plan: KPIPlan,
    ledger: CompletionLedger,
    day_date: date,
    completed: bool,
    actor=None,
    recorded_at=None,
) -> list[LedgerMutation]:
    """Mark or unmark a day in ``ledger`` and keep its week consistent.

    Returns every mutation applied, the day's own first. An already matching state
    yields an empty list.
    """
    week, day = plan.find_day(day_date)
    if day is None:
        raise InvalidRangeError(_("%(date)s is not a working day of this KPI"), date=day_date.isoformat())
    applied = []
    if ledger.is_day_complete(day_date) != completed:
        applied.append(LedgerMutation(CompletionKind.DAY, day_date, completed))
        ledger.apply(applied, actor, recorded_at)
    derived = CompletionPropagator(plan, ledger).on_day_toggled(week.week_index, day_date)
    ledger.apply(derived, actor, recorded_at)
    return applied + derived


def toggle_day_completion(
    plan: KPIPlan, ledger: CompletionLedger, day_date: date, actor=None, recorded_at=None
) -> list[LedgerMutation]:
    return set_day_completion(plan, ledger, day_date, not ledger.is_day_complete(day_date), actor, recorded_at)


def set_week_completion(
    plan: KPIPlan,
    ledger: CompletionLedger,
    week_index: int,
    completed: bool,
    actor=None,
    recorded_at=None,
) -> list[LedgerMutation]:
    """Mark or unmark a week and all its working days, then re-derive the week flag."""
    mutations = CompletionPropagator(plan, ledger).on_week_toggled(week_index, completed)
    ledger.apply(mutations, actor, recorded_at)
    # Empty on a consistent ledger.
    follow_up = CompletionPropagator(plan, ledger).sync_week(plan.get_week(week_index))
    ledger.apply(follow_up, actor, recorded_at)
    return mutations + follow_up


def toggle_week_completion(
    plan: KPIPlan, ledger: CompletionLedger, week_index: int, actor=None, recorded_at=None
) -> list[LedgerMutation]:
    week = get_week_or_raise(plan, week_index)
    return set_week_completion(plan, ledger, week_index, not ledger.is_week_complete(week), actor, recorded_at)

from apps.production.kpi.ledger import CompletionLedger
from apps.production.kpi.structures import KPIPlan


def summarize(plan: KPIPlan, ledger: CompletionLedger) -> dict:
    """Aggregate figures of a plan as seen through ``ledger``."""
    completed_days = [day for _week, day in plan.iter_days() if ledger.is_day_complete(day.date)]
    completed_value = sum(day.target_value for day in completed_days)
    allocated_value = plan.allocated_value
    return {
        "total_value": plan.total_value,
        "allocated_value": allocated_value,
        "completed_value": completed_value,
        "open_value": allocated_value - completed_value,
        "working_day_count": plan.working_day_count,
        "completed_day_count": len(completed_days),
        "week_count": len(plan.weeks),
        "completed_week_count": sum(1 for week in plan.weeks if ledger.is_week_complete(week)),
        "is_balanced": plan.is_balanced,
    }


def is_accumulated(plan: KPIPlan, ledger: CompletionLedger) -> bool:
    """True once every day carrying a quota is completed.

    Days with a zero target are ignored; a plan without any quota is not accumulated.
    """
    quota_days = [day for _week, day in plan.iter_days() if day.target_value > 0]
    if not quota_days:
        return False
    return all(ledger.is_day_complete(day.date) for day in quota_days)

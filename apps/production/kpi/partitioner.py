"""Calendar partitioner: split a quota over the working days of a date range."""

from datetime import date, timedelta

from django.utils.translation import gettext as _

from apps.production.constants import DAYS_PER_WEEK, WORKING_WEEKDAYS
from apps.production.exceptions import InvalidQuantityError, InvalidRangeError
from apps.production.kpi.structures import KPIDay, KPIPlan, KPIWeek


def is_working_day(value: date) -> bool:
    return value.weekday() in WORKING_WEEKDAYS


def split_evenly(total: int, count: int) -> list[int]:
    """Split ``total`` into ``count`` integers differing by at most one.

    The first ``total % count`` slots receive the extra unit.

    >>> split_evenly(23, 10)
    [3, 3, 3, 2, 2, 2, 2, 2, 2, 2]
    """
    if count <= 0:
        return []
    base, remainder = divmod(total, count)
    return [base + 1 if index < remainder else base for index in range(count)]


def validate_range(start_date: date, end_date: date) -> None:
    if start_date > end_date:
        raise InvalidRangeError(
            _("Start date %(start_date)s is after end date %(end_date)s"),
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )


def validate_quantity(value, field: str = "total_value") -> None:
    if value is None or isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidQuantityError(
            _("%(field)s must be a non-negative integer, got %(value)s"),
            field=field,
            value=value,
        )


def iter_weeks(start_date: date, end_date: date):
    """Yield ``(week_start, week_end)`` for every Monday-aligned week touching the range.

    Boundaries are clipped to the range, so the first and last weeks may be shorter
    than seven days.
    """
    monday = start_date - timedelta(days=start_date.weekday())
    while monday <= end_date:
        sunday = monday + timedelta(days=DAYS_PER_WEEK - 1)
        yield max(monday, start_date), min(sunday, end_date)
        monday += timedelta(days=DAYS_PER_WEEK)


def partition(total_value: int, start_date: date, end_date: date) -> list[KPIWeek]:
    """Build the week/day tree for ``total_value`` over ``[start_date, end_date]``.

    Weeks whose intersection with the range has no working day are kept with an empty
    ``days`` list and a zero target. When the range has no working day at all, the
    weeks are returned without any quota assigned; callers must reject that case.
    """
    validate_range(start_date, end_date)
    validate_quantity(total_value)

    weeks = []
    for week_index, (week_start, week_end) in enumerate(iter_weeks(start_date, end_date), start=1):
        days = []
        current = week_start
        while current <= week_end:
            if is_working_day(current):
                days.append(KPIDay(date=current))
            current += timedelta(days=1)
        weeks.append(KPIWeek(week_index=week_index, start_date=week_start, end_date=week_end, days=days))

    all_days = [day for week in weeks for day in week.days]
    if not all_days:
        return weeks

    for day, value in zip(all_days, split_evenly(total_value, len(all_days))):
        day.target_value = value
    for week in weeks:
        week.recompute_target()
    return weeks


def build_plan(total_value: int, start_date: date, end_date: date) -> KPIPlan:
    """Partition a new KPI target, rejecting ranges without any working day."""
    weeks = partition(total_value, start_date, end_date)
    if not any(week.days for week in weeks):
        raise InvalidRangeError(
            _("Range %(start_date)s to %(end_date)s has no working days"),
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )
    return KPIPlan(total_value=total_value, start_date=start_date, end_date=end_date, weeks=weeks)

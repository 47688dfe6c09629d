"""Week/day tree of a KPI target.

The tree is a plain value object: it is built by the partitioner, edited in place by
the redistribution functions and serialized as a single JSON document on ``ChainKPI``.
Completion is never stored here; ``is_completed`` flags only exist in the projection
returned by :meth:`KPIPlan.to_dict` when a ledger is supplied.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Iterator, Optional

if TYPE_CHECKING:
    from apps.production.kpi.ledger import CompletionLedger


def _parse_date(value) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


@dataclass
class KPIDay:
    """One working day carrying a quota."""

    date: date
    target_value: int = 0
    is_attending: bool = True

    def to_dict(self, ledger: Optional["CompletionLedger"] = None) -> dict:
        data = {
            "date": self.date.isoformat(),
            "target_value": self.target_value,
            "is_attending": self.is_attending,
        }
        if ledger is not None:
            data["is_completed"] = ledger.is_day_complete(self.date)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "KPIDay":
        return cls(
            date=_parse_date(data["date"]),
            target_value=int(data.get("target_value") or 0),
            is_attending=bool(data.get("is_attending", True)),
        )


@dataclass
class KPIWeek:
    """A Monday-aligned calendar week intersected with the KPI period."""

    week_index: int
    start_date: date
    end_date: date
    target_value: int = 0
    days: list[KPIDay] = field(default_factory=list)

    @property
    def dates(self) -> list[date]:
        return [day.date for day in self.days]

    def get_day(self, day_date: date) -> Optional[KPIDay]:
        for day in self.days:
            if day.date == day_date:
                return day
        return None

    def recompute_target(self) -> int:
        """Set the week target to the sum of its days and return it."""
        self.target_value = sum(day.target_value for day in self.days)
        return self.target_value

    def to_dict(self, ledger: Optional["CompletionLedger"] = None) -> dict:
        data = {
            "week_index": self.week_index,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "target_value": self.target_value,
            "days": [day.to_dict(ledger) for day in self.days],
        }
        if ledger is not None:
            data["is_completed"] = ledger.is_week_complete(self)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "KPIWeek":
        return cls(
            week_index=int(data["week_index"]),
            start_date=_parse_date(data["start_date"]),
            end_date=_parse_date(data["end_date"]),
            target_value=int(data.get("target_value") or 0),
            days=sorted((KPIDay.from_dict(day) for day in data.get("days") or []), key=lambda d: d.date),
        )


@dataclass
class KPIPlan:
    """The whole quota tree of one KPI target.

    Attributes:
        total_value: Declared total quota of the period
        start_date: First date of the period (inclusive)
        end_date: Last date of the period (inclusive)
        weeks: Ordered weeks, ``week_index`` starting at 1
    """

    total_value: int
    start_date: date
    end_date: date
    weeks: list[KPIWeek] = field(default_factory=list)

    def iter_days(self) -> Iterator[tuple[KPIWeek, KPIDay]]:
        """Yield ``(week, day)`` pairs in chronological order."""
        for week in self.weeks:
            for day in week.days:
                yield week, day

    @property
    def working_day_count(self) -> int:
        return sum(len(week.days) for week in self.weeks)

    @property
    def allocated_value(self) -> int:
        """Sum of the week targets; equals ``total_value`` unless local edits were made."""
        return sum(week.target_value for week in self.weeks)

    @property
    def is_balanced(self) -> bool:
        return self.allocated_value == self.total_value

    def get_week(self, week_index: int) -> Optional[KPIWeek]:
        for week in self.weeks:
            if week.week_index == week_index:
                return week
        return None

    def find_day(self, day_date: date) -> tuple[Optional[KPIWeek], Optional[KPIDay]]:
        for week in self.weeks:
            day = week.get_day(day_date)
            if day is not None:
                return week, day
        return None, None

    def to_storage(self) -> list[dict]:
        """Serialize the weeks for the ``ChainKPI.weeks`` JSON column."""
        return [week.to_dict() for week in self.weeks]

    def to_dict(self, ledger: Optional["CompletionLedger"] = None) -> dict:
        """Serialize the plan, projecting completion flags from ``ledger`` when given."""
        return {
            "total_value": self.total_value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "weeks": [week.to_dict(ledger) for week in self.weeks],
        }

    @classmethod
    def from_storage(cls, total_value: int, start_date: date, end_date: date, weeks: list) -> "KPIPlan":
        return cls(
            total_value=total_value,
            start_date=start_date,
            end_date=end_date,
            weeks=sorted((KPIWeek.from_dict(week) for week in weeks or []), key=lambda w: w.week_index),
        )

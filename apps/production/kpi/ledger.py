"""In-memory completion ledger.

The ledger is the single source of truth for locked units. Persistence lives in
``KPICompletion``; services load the rows with :meth:`CompletionLedger.from_records`,
let the engine work on the in-memory copy and write back :meth:`CompletionLedger.diff`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, Optional, Union

from apps.production.constants import CompletionKind

Ref = Union[int, date]


@dataclass(frozen=True)
class CompletionRecord:
    kind: str
    ref: Ref
    recorded_by: Any = None
    recorded_at: Optional[datetime] = None

    @property
    def key(self) -> tuple[str, Ref]:
        return (self.kind, self.ref)


@dataclass(frozen=True)
class LedgerMutation:
    """A single mark/unmark derived by the propagator."""

    kind: str
    ref: Ref
    complete: bool

    @classmethod
    def mark_day(cls, day_date: date) -> "LedgerMutation":
        return cls(CompletionKind.DAY, day_date, True)

    @classmethod
    def unmark_day(cls, day_date: date) -> "LedgerMutation":
        return cls(CompletionKind.DAY, day_date, False)

    @classmethod
    def mark_week(cls, week_index: int) -> "LedgerMutation":
        return cls(CompletionKind.WEEK, week_index, True)

    @classmethod
    def unmark_week(cls, week_index: int) -> "LedgerMutation":
        return cls(CompletionKind.WEEK, week_index, False)


def _normalize(kind, ref) -> tuple[str, Ref]:
    kind = CompletionKind(kind)
    if kind == CompletionKind.WEEK:
        return kind.value, int(ref)
    if isinstance(ref, datetime):
        ref = ref.date()
    elif isinstance(ref, str):
        ref = date.fromisoformat(ref)
    return kind.value, ref


def _list_key(record: CompletionRecord) -> tuple:
    # Dated and undated records never compare their timestamps with each other.
    if record.recorded_at is None:
        return (1, 0, record.kind, str(record.ref))
    return (0, record.recorded_at, record.kind, str(record.ref))


class CompletionLedger:
    """Set of completion records keyed by ``(kind, ref)``."""

    def __init__(self, records: Iterable[CompletionRecord] = ()):
        self._records: dict[tuple[str, Ref], CompletionRecord] = {}
        for record in records:
            key = _normalize(record.kind, record.ref)
            self._records[key] = CompletionRecord(key[0], key[1], record.recorded_by, record.recorded_at)

    @classmethod
    def from_records(cls, rows: Iterable) -> "CompletionLedger":
        """Build a ledger from objects exposing ``kind``, ``week_index``/``date`` and audit fields."""
        records = []
        for row in rows:
            ref = row.week_index if row.kind == CompletionKind.WEEK else row.date
            records.append(
                CompletionRecord(
                    kind=row.kind,
                    ref=ref,
                    recorded_by=getattr(row, "recorded_by_id", None),
                    recorded_at=getattr(row, "recorded_at", None),
                )
            )
        return cls(records)

    def copy(self) -> "CompletionLedger":
        return CompletionLedger(self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key) -> bool:
        return _normalize(*key) in self._records

    def mark_complete(self, kind, ref, actor=None, recorded_at: Optional[datetime] = None) -> bool:
        """Add a record; return False when the unit was already complete."""
        key = _normalize(kind, ref)
        if key in self._records:
            return False
        self._records[key] = CompletionRecord(key[0], key[1], actor, recorded_at)
        return True

    def unmark(self, kind, ref) -> bool:
        """Remove a record; return False when there was nothing to remove."""
        return self._records.pop(_normalize(kind, ref), None) is not None

    def is_complete(self, kind, ref) -> bool:
        return _normalize(kind, ref) in self._records

    def is_day_complete(self, day_date: date) -> bool:
        return self.is_complete(CompletionKind.DAY, day_date)

    def is_week_complete(self, week) -> bool:
        """Projected week completion; a week without working days is complete vacuously."""
        if not week.days:
            return True
        return self.is_complete(CompletionKind.WEEK, week.week_index)

    def list(self) -> list[CompletionRecord]:
        """Records ordered by recording time, then by unit. Undated records come last."""
        return sorted(self._records.values(), key=_list_key)

    def completed_dates(self) -> set[date]:
        return {ref for kind, ref in self._records if kind == CompletionKind.DAY}

    def completed_weeks(self) -> set[int]:
        return {ref for kind, ref in self._records if kind == CompletionKind.WEEK}

    def apply(self, mutations: Iterable[LedgerMutation], actor=None, recorded_at: Optional[datetime] = None) -> int:
        """Apply mutations in order and return how many changed the ledger."""
        changed = 0
        for mutation in mutations:
            if mutation.complete:
                changed += self.mark_complete(mutation.kind, mutation.ref, actor, recorded_at)
            else:
                changed += self.unmark(mutation.kind, mutation.ref)
        return changed

    def diff(self, original: "CompletionLedger") -> tuple[list[CompletionRecord], list[CompletionRecord]]:
        """Return ``(added, removed)`` records relative to ``original``."""
        added = [record for key, record in self._records.items() if key not in original._records]
        removed = [record for key, record in original._records.items() if key not in self._records]
        return added, removed

    def locked_sum(self, plan) -> int:
        """Sum of the target values of every completed day in ``plan``."""
        return sum(day.target_value for _, day in plan.iter_days() if self.is_day_complete(day.date))

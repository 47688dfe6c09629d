"""Pure KPI quota engine.

Nothing in this package touches the database: functions take a :class:`KPIPlan` and a
:class:`CompletionLedger`, mutate them in memory and return what changed.
"""

from .allocation import StepAllocation, check_week_allocations, department_day_totals
from .ledger import CompletionLedger, CompletionRecord, LedgerMutation
from .partitioner import build_plan, partition, split_evenly
from .propagation import (
    CompletionPropagator,
    set_day_completion,
    set_week_completion,
    toggle_day_completion,
    toggle_week_completion,
)
from .redistribution import redistribute_remainder, set_attending, set_day_target, set_week_target
from .structures import KPIDay, KPIPlan, KPIWeek
from .summary import is_accumulated, summarize

__all__ = [
    "CompletionLedger",
    "CompletionPropagator",
    "CompletionRecord",
    "KPIDay",
    "KPIPlan",
    "KPIWeek",
    "LedgerMutation",
    "StepAllocation",
    "build_plan",
    "check_week_allocations",
    "department_day_totals",
    "is_accumulated",
    "partition",
    "redistribute_remainder",
    "set_attending",
    "set_day_completion",
    "set_day_target",
    "set_week_completion",
    "set_week_target",
    "split_evenly",
    "summarize",
    "toggle_day_completion",
    "toggle_week_completion",
]

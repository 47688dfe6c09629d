from .chain_kpi import (
    ChainKPICreateSerializer,
    ChainKPIListSerializer,
    ChainKPISerializer,
    KPIAttendingSerializer,
    KPICompletionSerializer,
    KPICompletionToggleSerializer,
    KPIDayTargetSerializer,
    KPIDetailsSerializer,
    KPISummarySerializer,
    KPITotalValueSerializer,
    KPIWeekTargetSerializer,
    LedgerChangeSerializer,
)
from .chain_run import ChainRunSerializer, ChainTaskSerializer
from .kpi_assignment import (
    AssignmentDayResultSerializer,
    KPIWeekAssignmentSerializer,
    KPIWeekAssignSerializer,
    StepAssignmentInputSerializer,
)
from .production_chain import (
    ProductionChainActivitiesSerializer,
    ProductionChainSerializer,
    ProductionChainStepSerializer,
)

__all__ = [
    "AssignmentDayResultSerializer",
    "ChainKPICreateSerializer",
    "ChainKPIListSerializer",
    "ChainKPISerializer",
    "ChainRunSerializer",
    "ChainTaskSerializer",
    "KPIAttendingSerializer",
    "KPICompletionSerializer",
    "KPICompletionToggleSerializer",
    "KPIDayTargetSerializer",
    "KPIDetailsSerializer",
    "KPISummarySerializer",
    "KPITotalValueSerializer",
    "KPIWeekAssignSerializer",
    "KPIWeekAssignmentSerializer",
    "KPIWeekTargetSerializer",
    "LedgerChangeSerializer",
    "ProductionChainActivitiesSerializer",
    "ProductionChainSerializer",
    "ProductionChainStepSerializer",
    "StepAssignmentInputSerializer",
]

from .assignment_service import KPIAssignmentService
from .chain_sequencer import ChainStepSequencer
from .chain_service import ProductionChainService
from .kpi_service import ChainKPIService, KPIWriteResult

__all__ = [
    "ChainKPIService",
    "ChainStepSequencer",
    "KPIAssignmentService",
    "KPIWriteResult",
    "ProductionChainService",
]

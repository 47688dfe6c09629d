from .chain_kpi import ChainKPIViewSet
from .chain_task import ChainTaskViewSet
from .kpi_assignment import KPIWeekAssignmentViewSet
from .production_chain import ProductionChainViewSet

__all__ = [
    "ChainKPIViewSet",
    "ChainTaskViewSet",
    "KPIWeekAssignmentViewSet",
    "ProductionChainViewSet",
]

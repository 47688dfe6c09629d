from .chain_kpi import ChainKPIFilterSet
from .chain_task import ChainTaskFilterSet
from .kpi_assignment import KPIWeekAssignmentFilterSet
from .production_chain import ProductionChainFilterSet

__all__ = [
    "ChainKPIFilterSet",
    "ChainTaskFilterSet",
    "KPIWeekAssignmentFilterSet",
    "ProductionChainFilterSet",
]

from .chain_kpi import ChainKPI
from .chain_run import ChainRun, ChainTask
from .kpi_assignment import KPIWeekAssignment
from .kpi_completion import KPICompletion
from .production_chain import ProductionChain, ProductionChainStep

__all__ = [
    "ProductionChain",
    "ProductionChainStep",
    "ChainKPI",
    "KPICompletion",
    "KPIWeekAssignment",
    "ChainRun",
    "ChainTask",
]

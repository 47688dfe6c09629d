"""Production chain and KPI engine settings."""

from .base import config

# Attempts (including the first) of a KPI write whose optimistic version check failed
PRODUCTION_KPI_WRITE_MAX_ATTEMPTS = config("PRODUCTION_KPI_WRITE_MAX_ATTEMPTS", default=3, cast=int)
# Initial back-off between attempts, in seconds; doubles on each retry
PRODUCTION_KPI_WRITE_RETRY_DELAY = config("PRODUCTION_KPI_WRITE_RETRY_DELAY", default=0.05, cast=float)

PRODUCTION_KPI_DEFAULT_UNIT_LABEL = config("PRODUCTION_KPI_DEFAULT_UNIT_LABEL", default="products")

# Callable(department, step) -> user or None, used to assign chain tasks
PRODUCTION_ASSIGNEE_SELECTOR = config(
    "PRODUCTION_ASSIGNEE_SELECTOR",
    default="apps.production.services.chain_sequencer.earliest_member_selector",
)

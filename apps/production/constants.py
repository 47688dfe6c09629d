# Production Module Constants
from django.db import models
from django.utils.translation import gettext_lazy as _

# Calendar
# Monday=0 ... Friday=4, as returned by date.weekday()
WORKING_WEEKDAYS = (0, 1, 2, 3, 4)
DAYS_PER_WEEK = 7

# Chains
MIN_CHAIN_DEPARTMENTS = 2
FIRST_STEP_ORDER = 1

DEFAULT_UNIT_LABEL = "products"


class CompletionKind(models.TextChoices):
    """Unit a completion record refers to."""

    WEEK = "week", _("Week")
    DAY = "day", _("Day")


class ChainStatus(models.TextChoices):
    ACTIVE = "active", _("Active")
    INACTIVE = "inactive", _("Inactive")


class ChainRunStatus(models.TextChoices):
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")


class ChainTaskStatus(models.TextChoices):
    """Lifecycle of a single work unit inside a chain run."""

    PENDING = "pending", _("Pending")
    IN_PROGRESS = "in_progress", _("In progress")
    COMPLETED = "completed", _("Completed")

    @classmethod
    def dict_choices(cls) -> dict:
        return dict(cls.choices)

    @classmethod
    def get_label(cls, raw_value: str) -> str:
        return cls.dict_choices().get(raw_value, raw_value)


class WeekTargetScope(models.TextChoices):
    """How the value passed to a week target edit is interpreted.

    - WEEK_TOTAL: the value is the new week total; locked days keep their value and
      the open days absorb ``value - locked_sum``.
    - OPEN_DAYS: the value is spread over the open days only; the week total becomes
      ``locked_sum + value``.
    """

    WEEK_TOTAL = "week_total", _("Week total")
    OPEN_DAYS = "open_days", _("Open days")

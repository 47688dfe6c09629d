from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.production.constants import DEFAULT_UNIT_LABEL
from apps.production.kpi import KPIPlan
from libs.models import BaseModel


class ChainKPI(BaseModel):
    """KPI target of a production chain over one period.

    The week/day tree is stored as a single JSON document in ``weeks`` so it is always
    written and read as a whole. Completion is not stored here; see ``KPICompletion``.

    Attributes:
        chain: Production chain the target belongs to
        total_value: Declared total quota of the period
        start_date: First day of the period (inclusive)
        end_date: Last day of the period (inclusive)
        unit_label: What the quota counts (products, boxes...)
        note: Additional notes
        weeks: Serialized week/day tree
        version: Incremented on every write, used for optimistic concurrency
        is_accumulated: Whether every day carrying a quota is completed
        accumulated_at: When the target last became accumulated
    """

    chain = models.ForeignKey(
        "production.ProductionChain",
        on_delete=models.CASCADE,
        related_name="kpis",
        verbose_name=_("Chain"),
    )
    total_value = models.PositiveIntegerField(verbose_name=_("Total value"))
    start_date = models.DateField(verbose_name=_("Start date"))
    end_date = models.DateField(verbose_name=_("End date"))
    unit_label = models.CharField(
        max_length=50,
        default=DEFAULT_UNIT_LABEL,
        verbose_name=_("Unit label"),
    )
    note = models.TextField(blank=True, verbose_name=_("Note"))
    weeks = models.JSONField(
        default=list,
        verbose_name=_("Weeks"),
        help_text=_("Week/day quota tree"),
    )
    version = models.PositiveIntegerField(default=1, verbose_name=_("Version"))
    is_accumulated = models.BooleanField(default=False, verbose_name=_("Accumulated"))
    accumulated_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Accumulated at"))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chain_kpis_created",
        verbose_name=_("Created by"),
    )

    class Meta:
        verbose_name = _("Chain KPI")
        verbose_name_plural = _("Chain KPIs")
        db_table = "production_chain_kpi"
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["chain", "start_date", "end_date"], name="production_kpi_period_idx"),
        ]

    def __str__(self):
        return f"{self.chain} {self.start_date} - {self.end_date}"

    def get_plan(self) -> KPIPlan:
        return KPIPlan.from_storage(self.total_value, self.start_date, self.end_date, self.weeks)

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from apps.production.constants import CompletionKind


class KPICompletion(models.Model):
    """Completion ledger row: one completed week or day of a KPI target.

    Rows are created when a unit is marked complete and deleted when it is reopened.
    """

    kpi = models.ForeignKey(
        "production.ChainKPI",
        on_delete=models.CASCADE,
        related_name="completions",
        verbose_name=_("KPI"),
    )
    kind = models.CharField(max_length=10, choices=CompletionKind.choices, verbose_name=_("Kind"))
    week_index = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_("Week index"),
        help_text=_("Set for week completions"),
    )
    date = models.DateField(
        null=True,
        blank=True,
        verbose_name=_("Date"),
        help_text=_("Set for day completions"),
    )
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="kpi_completions",
        verbose_name=_("Recorded by"),
    )
    recorded_at = models.DateTimeField(default=timezone.now, verbose_name=_("Recorded at"))

    class Meta:
        verbose_name = _("KPI completion")
        verbose_name_plural = _("KPI completions")
        db_table = "production_kpi_completion"
        ordering = ["recorded_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["kpi", "week_index"],
                condition=Q(kind=CompletionKind.WEEK),
                name="production_kpi_completion_unique_week",
            ),
            models.UniqueConstraint(
                fields=["kpi", "date"],
                condition=Q(kind=CompletionKind.DAY),
                name="production_kpi_completion_unique_day",
            ),
            models.CheckConstraint(
                condition=(
                    Q(kind=CompletionKind.WEEK, week_index__isnull=False, date__isnull=True)
                    | Q(kind=CompletionKind.DAY, date__isnull=False, week_index__isnull=True)
                ),
                name="production_kpi_completion_ref_matches_kind",
            ),
        ]

    def __str__(self):
        return f"{self.kpi_id} {self.kind} {self.ref}"

    @property
    def ref(self):
        return self.week_index if self.kind == CompletionKind.WEEK else self.date

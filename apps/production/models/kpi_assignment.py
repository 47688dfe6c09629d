from datetime import date

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.production.kpi import StepAllocation
from libs.models import BaseModel


class KPIWeekAssignment(BaseModel):
    """Share of one KPI week handed to a chain step and one of its department's members.

    Attributes:
        kpi: KPI target the week belongs to
        week_index: Week of the KPI tree
        step: Chain step doing the work
        assignee: Member of the step's department receiving the work
        day_amounts: ISO date to assigned quantity
        day_titles: ISO date to the work item titles of that day
        day_results: ISO date to the submitted result links
        accepted: Whether the assignee accepted the assignment
    """

    kpi = models.ForeignKey(
        "production.ChainKPI",
        on_delete=models.CASCADE,
        related_name="assignments",
        verbose_name=_("KPI"),
    )
    week_index = models.PositiveIntegerField(verbose_name=_("Week index"))
    step = models.ForeignKey(
        "production.ProductionChainStep",
        on_delete=models.PROTECT,
        related_name="assignments",
        verbose_name=_("Step"),
    )
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="kpi_assignments",
        verbose_name=_("Assignee"),
    )
    day_amounts = models.JSONField(default=dict, verbose_name=_("Day amounts"))
    day_titles = models.JSONField(default=dict, blank=True, verbose_name=_("Day titles"))
    day_results = models.JSONField(default=dict, blank=True, verbose_name=_("Day results"))
    accepted = models.BooleanField(default=False, verbose_name=_("Accepted"))
    accepted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="kpi_assignments_accepted",
        verbose_name=_("Accepted by"),
    )
    accepted_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Accepted at"))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="kpi_assignments_created",
        verbose_name=_("Created by"),
    )

    class Meta:
        verbose_name = _("KPI week assignment")
        verbose_name_plural = _("KPI week assignments")
        db_table = "production_kpi_week_assignment"
        ordering = ["kpi", "week_index", "step__step_order"]
        constraints = [
            models.UniqueConstraint(
                fields=["kpi", "week_index", "step"],
                name="production_kpi_assignment_unique_step",
            ),
        ]

    def __str__(self):
        return f"{self.kpi_id} week {self.week_index} step {self.step_id}"

    @property
    def assigned_value(self) -> int:
        return sum(self.day_amounts.values())

    def to_allocation(self) -> StepAllocation:
        return StepAllocation(
            step_id=self.step_id,
            department_id=self.step.department_id,
            day_amounts={date.fromisoformat(key): value for key, value in self.day_amounts.items()},
        )

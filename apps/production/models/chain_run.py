from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.production.constants import ChainRunStatus, ChainTaskStatus
from libs.models import BaseModel


class ChainRun(BaseModel):
    """One pass of work through a production chain."""

    chain = models.ForeignKey(
        "production.ProductionChain",
        on_delete=models.CASCADE,
        related_name="runs",
        verbose_name=_("Chain"),
    )
    current_step_order = models.PositiveIntegerField(default=1, verbose_name=_("Current step order"))
    status = models.CharField(
        max_length=20,
        choices=ChainRunStatus.choices,
        default=ChainRunStatus.IN_PROGRESS,
        db_index=True,
        verbose_name=_("Status"),
    )
    started_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chain_runs_started",
        verbose_name=_("Started by"),
    )
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed at"))

    class Meta:
        verbose_name = _("Chain run")
        verbose_name_plural = _("Chain runs")
        db_table = "production_chain_run"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.chain} run {self.pk} ({self.status})"


class ChainTask(BaseModel):
    """Work unit of a chain run, held by one department at one step."""

    run = models.ForeignKey(ChainRun, on_delete=models.CASCADE, related_name="tasks", verbose_name=_("Run"))
    step = models.ForeignKey(
        "production.ProductionChainStep",
        on_delete=models.PROTECT,
        related_name="tasks",
        verbose_name=_("Step"),
    )
    department = models.ForeignKey(
        "hrm.Department",
        on_delete=models.PROTECT,
        related_name="chain_tasks",
        verbose_name=_("Department"),
    )
    assignee = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="chain_tasks",
        verbose_name=_("Assignee"),
    )
    title = models.CharField(max_length=255, verbose_name=_("Title"))
    status = models.CharField(
        max_length=20,
        choices=ChainTaskStatus.choices,
        default=ChainTaskStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_("Completed at"))

    class Meta:
        verbose_name = _("Chain task")
        verbose_name_plural = _("Chain tasks")
        db_table = "production_chain_task"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["assignee", "status"], name="production_task_assignee_idx"),
        ]

    def __str__(self):
        return self.title

    @property
    def step_order(self) -> int:
        return self.step.step_order

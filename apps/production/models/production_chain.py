from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from apps.production.constants import ChainStatus
from libs.models import BaseModel


class ProductionChain(BaseModel):
    """An ordered sequence of department hand-offs.

    Attributes:
        name: Display name of the chain
        description: Free-form description
        status: Whether new runs may be started
        created_by: User who created the chain
    """

    name = models.CharField(max_length=255, verbose_name=_("Name"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    status = models.CharField(
        max_length=20,
        choices=ChainStatus.choices,
        default=ChainStatus.ACTIVE,
        db_index=True,
        verbose_name=_("Status"),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="production_chains_created",
        verbose_name=_("Created by"),
    )

    class Meta:
        verbose_name = _("Production chain")
        verbose_name_plural = _("Production chains")
        db_table = "production_chain"
        ordering = ["-created_at"]

    def __str__(self):
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == ChainStatus.ACTIVE

    def has_completions(self) -> bool:
        """Whether any KPI target of this chain has a completion record.

        Steps of a chain with completions can no longer be reordered or reassigned.
        """
        from apps.production.models.kpi_completion import KPICompletion

        return KPICompletion.objects.filter(kpi__chain=self).exists()


class ProductionChainStep(BaseModel):
    """One department's stage in a production chain."""

    chain = models.ForeignKey(
        ProductionChain,
        on_delete=models.CASCADE,
        related_name="steps",
        verbose_name=_("Chain"),
    )
    step_order = models.PositiveIntegerField(
        verbose_name=_("Step order"),
        help_text=_("Position of the step in the chain, starting at 1"),
    )
    department = models.ForeignKey(
        "hrm.Department",
        on_delete=models.PROTECT,
        related_name="production_chain_steps",
        verbose_name=_("Department"),
    )
    title = models.CharField(max_length=255, blank=True, verbose_name=_("Title"))

    class Meta:
        verbose_name = _("Production chain step")
        verbose_name_plural = _("Production chain steps")
        db_table = "production_chain_step"
        ordering = ["chain", "step_order"]
        constraints = [
            models.UniqueConstraint(fields=["chain", "step_order"], name="production_chain_step_unique_order"),
        ]

    def __str__(self):
        return f"{self.chain} #{self.step_order}"

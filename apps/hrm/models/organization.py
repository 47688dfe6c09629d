from django.db import models
from django.utils.translation import gettext_lazy as _

from libs.models import BaseModel


class Department(BaseModel):
    """Department"""

    name = models.CharField(max_length=200, verbose_name=_("Department name"))
    code = models.CharField(max_length=50, unique=True, verbose_name=_("Department code"))
    description = models.TextField(blank=True, verbose_name=_("Description"))
    is_active = models.BooleanField(default=True, verbose_name=_("Active"))

    class Meta:
        verbose_name = _("Department")
        verbose_name_plural = _("Departments")
        db_table = "hrm_department"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} - {self.name}"

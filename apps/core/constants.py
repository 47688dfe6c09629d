"""Centralized constants for the core app."""

from django.db import models
from django.utils.translation import gettext_lazy as _


class UserRole(models.TextChoices):
    ADMIN = "admin", _("Admin")
    LEADER = "leader", _("Leader")
    USER = "user", _("User")


__all__ = [
    "UserRole",
]

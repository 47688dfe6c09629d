from django.apps import AppConfig


class ProductionConfig(AppConfig):
    """Configuration for the production chain and KPI application"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.production"
    verbose_name = "Production Management"

"""Core app configuration."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Configuration for the core application."""

    name = "beautycatalog.core"
    verbose_name = "Beauty Catalog Core"
    default_auto_field = "django.db.models.BigAutoField"

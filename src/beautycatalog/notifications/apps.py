"""Django app configuration for real-time notifications."""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """App configuration for SSE, websocket and push notifications."""

    name = "beautycatalog.notifications"
    verbose_name = "Notifications"
    default_auto_field = "django.db.models.BigAutoField"

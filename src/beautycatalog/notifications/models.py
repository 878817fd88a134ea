"""Push notification subscriptions."""

from django.db import models
from django.utils import timezone


class PushSubscriptionQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class PushSubscription(models.Model):
    """A browser (or device) registered for FCM push notifications."""

    class UserType(models.TextChoices):
        ADMIN = "admin", "Admin"
        CLIENT = "client", "Client"

    registration_id = models.CharField(max_length=512, unique=True)
    user_type = models.CharField(max_length=20, choices=UserType.choices, default=UserType.CLIENT)
    platform = models.CharField(max_length=20, default="web")
    user = models.ForeignKey(
        "core.User",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="push_subscriptions",
    )
    is_active = models.BooleanField(default=True)
    failure_count = models.PositiveIntegerField(default=0)
    last_success_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PushSubscriptionQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.user_type}:{self.registration_id[:20]}"

    def mark_success(self):
        self.failure_count = 0
        self.last_success_at = timezone.now()
        self.save(update_fields=["failure_count", "last_success_at", "updated_at"])

    def mark_failure(self, max_failures=5):
        """Count a failed delivery; deactivate after ``max_failures`` in a row."""
        self.failure_count += 1
        if self.failure_count >= max_failures:
            self.is_active = False
        self.save(update_fields=["failure_count", "is_active", "updated_at"])

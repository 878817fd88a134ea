from django.contrib import admin

from .models import PushSubscription


@admin.register(PushSubscription)
class PushSubscriptionAdmin(admin.ModelAdmin):
    list_display = ["registration_id", "user_type", "platform", "is_active", "failure_count", "last_success_at"]
    list_filter = ["user_type", "is_active", "platform"]
    search_fields = ["registration_id"]

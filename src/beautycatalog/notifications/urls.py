"""Notification URL patterns."""

from django.urls import path

from . import views

app_name = "notifications"

urlpatterns = [
    path("events", views.EventStreamView.as_view(), name="events"),
    path("notifications/subscribe", views.SubscribeView.as_view(), name="subscribe"),
    path("notifications/unsubscribe", views.UnsubscribeView.as_view(), name="unsubscribe"),
    path("notifications/broadcast", views.PushBroadcastView.as_view(), name="broadcast"),
    path("notifications/new-order", views.NewOrderPushView.as_view(), name="new-order"),
]

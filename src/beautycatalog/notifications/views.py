"""Notification endpoints: SSE stream and push subscriptions."""

import logging

from django.conf import settings
from django.http import HttpResponse, JsonResponse, StreamingHttpResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from beautycatalog.core.http import InvalidPayload, json_error, parse_json_body, parse_positive_int
from beautycatalog.core.mixins import StaffRequiredMixin
from beautycatalog.store.models import Order

from .models import PushSubscription
from .services import fcm, sse

logger = logging.getLogger(__name__)

SSE_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Cache-Control, Content-Type",
}


@method_decorator(csrf_exempt, name="dispatch")
class EventStreamView(View):
    """Server-Sent Events stream of catalog changes.

    GET /api/events

    The stream is an async generator, so it must be served by the ASGI
    application (``beautycatalog.asgi``); an open stream holds no worker
    thread while it waits for events.
    """

    http_method_names = ["get", "options"]

    async def get(self, request):
        connection = sse.registry.add()
        stream = sse.event_stream(sse.registry, connection, settings.SSE_HEARTBEAT_SECONDS)

        response = StreamingHttpResponse(stream, content_type="text/event-stream")
        response["Cache-Control"] = "no-cache"
        response["X-Accel-Buffering"] = "no"
        for header, value in SSE_CORS_HEADERS.items():
            response[header] = value
        return response

    async def options(self, request, *args, **kwargs):
        response = HttpResponse(status=200)
        response["Access-Control-Allow-Methods"] = "GET, OPTIONS"
        for header, value in SSE_CORS_HEADERS.items():
            response[header] = value
        return response

    async def http_method_not_allowed(self, request, *args, **kwargs):
        return HttpResponse("Method not allowed for SSE endpoint", status=405)


@method_decorator(csrf_exempt, name="dispatch")
class SubscribeView(View):
    """Register an FCM registration token for push notifications.

    POST /api/notifications/subscribe
    {
        "registration_id": "fcm-token",
        "user_type": "admin" | "client",
        "platform": "web"
    }
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        registration_id = str(data.get("registration_id") or data.get("token") or "").strip()
        if not registration_id:
            return json_error("registration_id required")

        user_type = data.get("user_type") or data.get("userType") or PushSubscription.UserType.CLIENT
        if user_type not in PushSubscription.UserType.values:
            return json_error(f"Invalid user_type. Valid types: {', '.join(PushSubscription.UserType.values)}")

        user = request.user if request.user.is_authenticated else None
        if user_type == PushSubscription.UserType.ADMIN and not (user and user.is_staff):
            return json_error("Staff access required", status=403)

        subscription, created = PushSubscription.objects.update_or_create(
            registration_id=registration_id,
            defaults={
                "user_type": user_type,
                "platform": str(data.get("platform") or "web")[:20],
                "user": user,
                "is_active": True,
                "failure_count": 0,
            },
        )

        logger.info(f"Push subscription {'registered' if created else 'updated'} ({user_type})")
        return JsonResponse({
            "success": True,
            "status": "registered" if created else "updated",
            "user_type": subscription.user_type,
        }, status=201 if created else 200)


@method_decorator(csrf_exempt, name="dispatch")
class UnsubscribeView(View):
    """Deactivate a registration token.

    POST /api/notifications/unsubscribe
    {"registration_id": "fcm-token"}
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        registration_id = str(data.get("registration_id") or data.get("token") or "").strip()
        if not registration_id:
            return json_error("registration_id required")

        updated = PushSubscription.objects.filter(registration_id=registration_id).update(is_active=False)
        return JsonResponse({"status": "unregistered" if updated else "not_found"})


@method_decorator(csrf_exempt, name="dispatch")
class PushBroadcastView(StaffRequiredMixin, View):
    """Push a custom notification to every admin subscription.

    POST /api/notifications/broadcast
    {"type": "new_order", "title": "...", "message": "...", "data": {...}}
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        message = str(data.get("message") or "").strip()
        if not message:
            return json_error("message required")

        extra = data.get("data") if isinstance(data.get("data"), dict) else {}
        sent, total = fcm.send_push_to_user_type(
            PushSubscription.UserType.ADMIN,
            title=str(data.get("title") or "Nueva lista de pedido"),
            body=message,
            data={"type": data.get("type") or "new_order", **extra},
        )

        return JsonResponse({
            "success": True,
            "sent": sent,
            "total": total,
        })


@method_decorator(csrf_exempt, name="dispatch")
class NewOrderPushView(StaffRequiredMixin, View):
    """Re-send the new-order push notification for an order.

    POST /api/notifications/new-order
    {"order_id": 12}
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        order_id = parse_positive_int(data.get("order_id") or data.get("orderId"))
        if order_id is None:
            return json_error("order_id required")

        try:
            order = Order.objects.get(pk=order_id)
        except Order.DoesNotExist:
            return json_error("Order not found", status=404)

        sent = fcm.notify_admins_of_new_order(
            order_id=order.pk,
            customer_name=order.customer_name,
            customer_phone=order.customer_phone,
            total=order.total_amount,
            items_count=order.items.count(),
        )
        return JsonResponse({"success": True, "sent": sent})

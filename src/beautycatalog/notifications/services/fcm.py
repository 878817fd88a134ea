"""Firebase Cloud Messaging (FCM) push notifications for the shop.

Admins register their browsers (see PushSubscription) and get a web push
whenever an order comes in. Every failure is logged and reported as
False; a subscription that keeps failing is deactivated.
"""

import logging
from typing import Optional

import firebase_admin
from django.conf import settings
from django.utils import timezone
from firebase_admin import credentials, messaging

logger = logging.getLogger(__name__)

# Initialized on first use
_firebase_app = None

INVALID_TOKEN_MARKERS = (
    "Requested entity was not found",
    "not a valid FCM registration token",
)


def _load_credentials():
    cred_path = getattr(settings, "FIREBASE_CREDENTIALS_PATH", None)
    if cred_path:
        return credentials.Certificate(cred_path)
    return credentials.ApplicationDefault()


def _get_firebase_app():
    """Return the Firebase Admin app, or None when push is unavailable."""
    global _firebase_app

    if _firebase_app is None and settings.PUSH_NOTIFICATIONS_ENABLED:
        try:
            _firebase_app = firebase_admin.get_app()
        except ValueError:
            try:
                _firebase_app = firebase_admin.initialize_app(_load_credentials())
                logger.info("Firebase Admin SDK initialized")
            except Exception as e:
                logger.exception(f"Failed to initialize Firebase: {e}")
    return _firebase_app


def _absolute_url(path: str) -> Optional[str]:
    # Web push click links must be absolute HTTPS URLs
    base = getattr(settings, "SHOP_BASE_URL", "")
    if not base.startswith("https://"):
        return None
    return f"{base.rstrip('/')}{path}"


def _stringify(data: Optional[dict]) -> dict:
    # FCM data payloads only carry string values
    return {str(key): "" if value is None else str(value) for key, value in (data or {}).items()}


def _build_message(registration_id, title, body, data, link, tag) -> messaging.Message:
    return messaging.Message(
        token=registration_id,
        notification=messaging.Notification(title=title, body=body),
        data=_stringify(data),
        webpush=messaging.WebpushConfig(
            notification=messaging.WebpushNotification(
                title=title,
                body=body,
                icon="/favicon.ico",
                badge="/favicon.ico",
                tag=tag,
                require_interaction=True,
            ),
            fcm_options=messaging.WebpushFCMOptions(link=link) if link else None,
        ),
    )


def send_push_notification(
    registration_id: str,
    title: str,
    body: str,
    data: Optional[dict] = None,
    link: Optional[str] = None,
    tag: Optional[str] = None,
) -> bool:
    """Send a web push to one registration token.

    Args:
        registration_id: FCM registration token
        title: Notification title
        body: Notification body text
        data: Optional data payload; values are sent as strings
        link: URL opened when the notification is clicked
        tag: Notifications with the same tag replace each other

    Returns:
        True if FCM accepted the message
    """
    app = _get_firebase_app()
    if not app:
        logger.warning("Firebase not initialized, skipping push notification")
        return False

    message = _build_message(registration_id, title, body, data, link, tag)
    try:
        message_id = messaging.send(message, app=app)
    except Exception as e:
        if any(marker in str(e) for marker in INVALID_TOKEN_MARKERS):
            logger.warning(f"Stale FCM token {registration_id[:20]}...: {e}")
        else:
            logger.exception(f"Failed to send FCM push: {e}")
        return False

    logger.info(f"FCM push sent: {message_id}")
    return True


def send_push_to_user_type(
    user_type: str,
    title: str,
    body: str,
    data: Optional[dict] = None,
    link: Optional[str] = None,
    tag: Optional[str] = None,
) -> tuple[int, int]:
    """Send a push notification to every active subscription of a user type.

    Args:
        user_type: "admin" or "client"
        title: Notification title
        body: Notification body text
        data: Optional data payload
        link: Click-through URL
        tag: Replacement tag

    Returns:
        (successful deliveries, subscriptions attempted)
    """
    from ..models import PushSubscription

    if not _get_firebase_app():
        logger.info(f"Push disabled, not notifying {user_type} subscriptions")
        return 0, 0

    subscriptions = list(PushSubscription.objects.active().filter(user_type=user_type))

    success_count = 0
    for subscription in subscriptions:
        if send_push_notification(
            registration_id=subscription.registration_id,
            title=title,
            body=body,
            data=data,
            link=link,
            tag=tag,
        ):
            subscription.mark_success()
            success_count += 1
        else:
            subscription.mark_failure(max_failures=settings.PUSH_MAX_FAILURES)

    return success_count, len(subscriptions)


def notify_admins_of_new_order(
    order_id,
    customer_name: str,
    customer_phone: str,
    total,
    items_count: int,
    currency_symbol: str = "C$",
) -> int:
    """Push a "new order" notification to every admin subscription.

    Returns:
        Number of devices notified
    """
    sent, total_subscriptions = send_push_to_user_type(
        "admin",
        title="Nuevo pedido recibido",
        body=f"{customer_name} ({customer_phone or 'sin teléfono'}) - Total: {currency_symbol}{total}",
        data={
            "type": "new_order",
            "order_id": order_id,
            "customer_name": customer_name,
            "customer_phone": customer_phone,
            "total": total,
            "items": items_count,
            "url": "/admin/",
            "timestamp": timezone.now().isoformat(),
        },
        link=_absolute_url("/admin/"),
        tag=f"order-{order_id}",
    )
    logger.info(f"Sent {sent}/{total_subscriptions} FCM notifications for order {order_id}")
    return sent

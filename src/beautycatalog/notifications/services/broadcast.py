"""Real-time broadcast services.

This module provides a unified interface for pushing catalog and order
events to connected browsers. All broadcast calls should use this
service to ensure:

1. Consistent payload structure: ``{"type": <event>, "data": <data>}``
2. Broadcasts happen AFTER transaction commit (prevents ghost events)
3. Failures never fail the main operation
4. Logging for debugging

Events go to websocket rooms through the channel layer. Events meant
for shoppers (the ``clients`` room, or everyone) are mirrored to the
SSE registry as well.

Usage:
    from beautycatalog.notifications.services.broadcast import BroadcastService

    # Send right away
    BroadcastService.broadcast("stock-updated", {"product_id": 1, "new_stock": 4}, room="clients")

    # Send after the current transaction commits
    with transaction.atomic():
        product.save()
        BroadcastService.broadcast_on_commit("product-updated", data, room="clients")
"""

import logging

from django.db import transaction

from . import sse

logger = logging.getLogger(__name__)

ROOM_ADMINS = "admins"
ROOM_CLIENTS = "clients"
ROOM_EVERYONE = "everyone"
ROOMS = (ROOM_ADMINS, ROOM_CLIENTS, ROOM_EVERYONE)

# Handler name on the consumer (``type`` of the channel layer message)
CONSUMER_HANDLER = "broadcast.event"


class BroadcastService:
    """Unified websocket + SSE broadcast service."""

    @staticmethod
    def broadcast(event: str, data, room: str | None = None) -> None:
        """Broadcast an event to a room, or to every connection.

        Args:
            event: Event name, e.g. "new-product"
            data: JSON-serializable payload (primitives only)
            room: "admins", "clients" or None for everyone
        """
        group = room or ROOM_EVERYONE
        if group not in ROOMS:
            logger.warning(f"Unknown broadcast room: {group}")
            return

        BroadcastService._send_to_group(group, event, data)

        if group != ROOM_ADMINS:
            try:
                sse.registry.broadcast(event, data)
            except Exception as e:
                logger.exception(f"Failed to broadcast {event} over SSE: {e}")

    @staticmethod
    def _send_to_group(group: str, event: str, data) -> None:
        try:
            from asgiref.sync import async_to_sync
            from channels.layers import get_channel_layer

            channel_layer = get_channel_layer()
            if not channel_layer:
                logger.warning("No channel layer configured, skipping WebSocket broadcast")
                return

            async_to_sync(channel_layer.group_send)(
                group,
                {
                    "type": CONSUMER_HANDLER,
                    "event": event,
                    "data": data,
                },
            )
            logger.debug(
                "Broadcast event via WebSocket",
                extra={"room": group, "event": event},
            )
        except Exception as e:
            # Never fail the main operation if broadcast fails
            logger.exception(f"Failed to broadcast {event} to {group}: {e}")

    @staticmethod
    def broadcast_on_commit(event: str, data, room: str | None = None) -> None:
        """Broadcast after the current transaction commits.

        This prevents "ghost events" where a broadcast is sent but the
        database transaction rolls back. Outside a transaction the
        broadcast runs immediately.

        Args:
            Same as broadcast()
        """

        def do_broadcast():
            BroadcastService.broadcast(event, data, room=room)

        transaction.on_commit(do_broadcast)

"""WebSocket consumer for real-time catalog and order notifications."""

import json
import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import WebsocketConsumer

from .services.broadcast import ROOM_ADMINS, ROOM_CLIENTS, ROOM_EVERYONE

logger = logging.getLogger(__name__)


class NotificationConsumer(WebsocketConsumer):
    """WebSocket consumer for broadcast rooms.

    Every connection receives events sent to everyone. Clients then ask
    to join a room:
    1. Shoppers: {"type": "join-client"} -> "clients"
    2. Admins (staff session required): {"type": "join-admin"} -> "admins"

    Events are delivered as {"type": <event>, "data": <payload>}.
    """

    def connect(self):
        """Handle WebSocket connection."""
        self.rooms = set()

        try:
            self._join(ROOM_EVERYONE)
        except Exception as e:
            logger.exception(f"Failed to join channel group: {e}")
            self.close()
            return

        self.accept()
        logger.info(f"WebSocket connected: {self.channel_name}")

        self.send(text_data=json.dumps({
            "type": "connection_established",
            "rooms": sorted(self.rooms),
        }))

    def disconnect(self, close_code):
        """Handle WebSocket disconnection."""
        for room in list(self.rooms):
            async_to_sync(self.channel_layer.group_discard)(room, self.channel_name)
        self.rooms.clear()
        logger.info(f"WebSocket disconnected: {self.channel_name} ({close_code})")

    def receive(self, text_data=None, bytes_data=None):
        """Handle incoming WebSocket message."""
        try:
            data = json.loads(text_data or "")
            message_type = data.get("type") if isinstance(data, dict) else None

            if message_type == "join-client":
                self.handle_join_client()
            elif message_type == "join-admin":
                self.handle_join_admin()
            else:
                logger.debug(f"Ignoring WebSocket message type: {message_type}")
        except json.JSONDecodeError:
            logger.warning("Invalid JSON in WebSocket message")
        except Exception as e:
            logger.exception(f"Error handling WebSocket message: {e}")

    def handle_join_client(self):
        """Join the shoppers room."""
        self._join(ROOM_CLIENTS)
        self._send_joined(ROOM_CLIENTS)

    def handle_join_admin(self):
        """Join the admins room; staff only."""
        user = self.scope.get("user")
        if not user or not user.is_authenticated or not user.is_staff:
            logger.warning("Unauthorized attempt to join the admins room")
            self.send(text_data=json.dumps({
                "type": "error",
                "message": "Staff access required",
            }))
            return
        self._join(ROOM_ADMINS)
        self._send_joined(ROOM_ADMINS)

    def _join(self, room):
        if room in self.rooms:
            return
        async_to_sync(self.channel_layer.group_add)(room, self.channel_name)
        self.rooms.add(room)
        logger.info(f"WebSocket {self.channel_name} joined {room}")

    def _send_joined(self, room):
        self.send(text_data=json.dumps({"type": "joined", "room": room}))

    def broadcast_event(self, event):
        """Forward a broadcast (sent by BroadcastService) to the socket."""
        self.send(text_data=json.dumps({
            "type": event["event"],
            "data": event.get("data"),
        }))

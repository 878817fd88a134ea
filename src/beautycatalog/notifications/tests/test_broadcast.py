"""Tests for BroadcastService and the event helpers."""

from unittest.mock import patch

import pytest
from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer

from beautycatalog.notifications import events
from beautycatalog.notifications.services.broadcast import BroadcastService


def receive(channel_layer, channel_name):
    return async_to_sync(channel_layer.receive)(channel_name)


@pytest.fixture
def channel_layer():
    layer = get_channel_layer()
    yield layer
    async_to_sync(layer.flush)()


def subscribe(channel_layer, group):
    channel_name = async_to_sync(channel_layer.new_channel)()
    async_to_sync(channel_layer.group_add)(group, channel_name)
    return channel_name


class TestBroadcastService:
    def test_sends_to_room_group(self, channel_layer):
        channel = subscribe(channel_layer, "clients")

        BroadcastService.broadcast("new-product", {"id": 1}, room="clients")

        assert receive(channel_layer, channel) == {
            "type": "broadcast.event",
            "event": "new-product",
            "data": {"id": 1},
        }

    def test_no_room_means_everyone(self, channel_layer, empty_sse_registry):
        channel = subscribe(channel_layer, "everyone")
        connection = empty_sse_registry.add()

        BroadcastService.broadcast("data-update", {"type": "x", "data": 1})

        assert receive(channel_layer, channel)["event"] == "data-update"
        assert '"data-update"' in connection.queue.get_nowait()

    def test_admin_events_stay_off_sse(self, channel_layer, empty_sse_registry):
        connection = empty_sse_registry.add()

        BroadcastService.broadcast("new-order", {"id": 1}, room="admins")

        assert connection.queue.empty()

    def test_unknown_room_is_ignored(self, empty_sse_registry):
        connection = empty_sse_registry.add()

        BroadcastService.broadcast("x", {}, room="nobody")

        assert connection.queue.empty()

    def test_channel_layer_failure_is_swallowed(self, empty_sse_registry):
        connection = empty_sse_registry.add()

        with patch("channels.layers.get_channel_layer", side_effect=RuntimeError("redis down")):
            BroadcastService.broadcast("stock-updated", {"product_id": 1, "new_stock": 0}, room="clients")

        # SSE delivery still happens
        assert '"stock-updated"' in connection.queue.get_nowait()


@pytest.mark.django_db
class TestBroadcastOnCommit:
    def test_deferred_until_commit(self, django_capture_on_commit_callbacks, empty_sse_registry):
        connection = empty_sse_registry.add()

        with django_capture_on_commit_callbacks() as callbacks:
            events.notify_stock_updated(5, 2)
            assert connection.queue.empty()

        assert len(callbacks) == 1
        callbacks[0]()
        assert '"new_stock": 2' in connection.queue.get_nowait()


@pytest.mark.django_db
class TestEventHelpers:
    def test_new_order_splits_audiences(self, channel_layer, django_capture_on_commit_callbacks):
        admins = subscribe(channel_layer, "admins")
        clients = subscribe(channel_layer, "clients")
        order = {
            "id": 9,
            "status": "pending",
            "total_amount": "10.00",
            "customer_email": "ana@example.com",
        }

        with django_capture_on_commit_callbacks(execute=True):
            events.notify_new_order(order)

        admin_message = receive(channel_layer, admins)
        client_message = receive(channel_layer, clients)
        assert admin_message["event"] == "new-order"
        assert admin_message["data"]["customer_email"] == "ana@example.com"
        assert client_message["event"] == "order-confirmed"
        assert client_message["data"] == {"order_id": 9, "status": "pending", "total_amount": "10.00"}

    def test_inventory_changed_carries_action(self, channel_layer, django_capture_on_commit_callbacks):
        clients = subscribe(channel_layer, "clients")

        with django_capture_on_commit_callbacks(execute=True):
            events.notify_inventory_changed({"id": 3}, "deleted")

        assert receive(channel_layer, clients)["data"] == {"id": 3, "action": "deleted"}

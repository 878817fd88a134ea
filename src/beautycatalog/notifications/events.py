"""Catalog and order events pushed to connected sessions.

Every helper defers delivery until the surrounding transaction commits.
Payloads must already be JSON primitives (see the serializers of each app).
"""

from .services.broadcast import ROOM_ADMINS, ROOM_CLIENTS, BroadcastService

NEW_PRODUCT = "new-product"
PRODUCT_UPDATED = "product-updated"
PRODUCT_DELETED = "product-deleted"
STOCK_UPDATED = "stock-updated"
INVENTORY_CHANGED = "inventory-changed"
NEW_ORDER = "new-order"
ORDER_CONFIRMED = "order-confirmed"
ORDER_DELETED = "order-deleted"
CUSTOMER_DELETED = "customer-deleted"
DATA_UPDATE = "data-update"


# Product-related notifications
def notify_new_product(product: dict):
    BroadcastService.broadcast_on_commit(NEW_PRODUCT, product, room=ROOM_CLIENTS)


def notify_product_updated(product: dict):
    BroadcastService.broadcast_on_commit(PRODUCT_UPDATED, product, room=ROOM_CLIENTS)


def notify_product_deleted(product_id):
    BroadcastService.broadcast_on_commit(PRODUCT_DELETED, {"product_id": product_id}, room=ROOM_CLIENTS)


# Stock and inventory notifications
def notify_stock_updated(product_id, new_stock: int):
    BroadcastService.broadcast_on_commit(
        STOCK_UPDATED,
        {"product_id": product_id, "new_stock": new_stock},
        room=ROOM_CLIENTS,
    )


def notify_inventory_changed(record: dict, action: str):
    """``action`` is one of "created", "updated", "deleted"."""
    BroadcastService.broadcast_on_commit(INVENTORY_CHANGED, {**record, "action": action}, room=ROOM_CLIENTS)


# Order notifications
def notify_new_order(order: dict):
    """Full order to the admins, confirmation to the shoppers."""
    BroadcastService.broadcast_on_commit(NEW_ORDER, order, room=ROOM_ADMINS)
    BroadcastService.broadcast_on_commit(
        ORDER_CONFIRMED,
        {"order_id": order["id"], "status": order["status"], "total_amount": order["total_amount"]},
        room=ROOM_CLIENTS,
    )


def notify_order_deleted(order_id):
    BroadcastService.broadcast_on_commit(ORDER_DELETED, {"order_id": order_id}, room=ROOM_CLIENTS)


# Customer notifications
def notify_customer_deleted(customer_id):
    BroadcastService.broadcast_on_commit(CUSTOMER_DELETED, {"customer_id": customer_id}, room=ROOM_CLIENTS)


# General notifications
def notify_data_update(kind: str, data):
    BroadcastService.broadcast_on_commit(DATA_UPDATE, {"type": kind, "data": data}, room=ROOM_CLIENTS)

"""Inventory service layer.

Purchase batches drive the product's cost price and stock level.
"""

import logging

from django.db import transaction

from beautycatalog.catalog.models import Product
from beautycatalog.core.forms import MAX_INTEGER
from beautycatalog.notifications import events

from .models import InventoryRecord
from .serializers import serialize_record

logger = logging.getLogger(__name__)


def _locked_product(product_id) -> Product:
    return Product.objects.select_for_update().get(pk=product_id)


@transaction.atomic
def create_record(form) -> InventoryRecord:
    """Save a validated InventoryRecordForm and sync the product.

    The product's cost price becomes the purchase price. Its stock is set
    to ``current_stock`` when given, otherwise the purchased quantity is
    added to it.
    """
    product = _locked_product(form.cleaned_data["product"].pk)
    record = form.save(commit=False)
    record.product = product
    record.save()

    current_stock = form.cleaned_data.get("current_stock")
    product.cost_price = record.purchase_price
    if current_stock is not None:
        product.stock_quantity = current_stock
    else:
        product.stock_quantity += record.purchase_quantity
    product.save(update_fields=["cost_price", "stock_quantity", "updated_at"])

    logger.info(
        f"Inventory record {record.pk} created for product {product.pk}: "
        f"{record.purchase_quantity} @ {record.purchase_price}, stock now {product.stock_quantity}"
    )
    events.notify_stock_updated(product.pk, product.stock_quantity)
    events.notify_inventory_changed(serialize_record(record), "created")
    return record


@transaction.atomic
def update_record(form, sync_product: bool = True) -> InventoryRecord:
    """Save a validated InventoryRecordUpdateForm.

    When the price or quantity changed and ``sync_product`` is set, the
    product's cost price follows the new price and its stock moves by the
    quantity difference (never below zero).
    """
    old_quantity = form.initial.get("purchase_quantity") or 0
    record = form.save()

    changed = {"purchase_price", "purchase_quantity"} & set(form.changed_data)
    if sync_product and changed:
        product = _locked_product(record.product_id)
        product.cost_price = record.purchase_price
        delta = record.purchase_quantity - old_quantity
        product.stock_quantity = min(MAX_INTEGER, max(0, product.stock_quantity + delta))
        product.save(update_fields=["cost_price", "stock_quantity", "updated_at"])
        record.product = product
        logger.info(f"Product {product.pk} re-synced from inventory record {record.pk}")
        events.notify_stock_updated(product.pk, product.stock_quantity)

    events.notify_inventory_changed(serialize_record(record), "updated")
    return record


@transaction.atomic
def delete_record(record: InventoryRecord) -> dict:
    """Delete a purchase batch; product stock is left as is."""
    snapshot = serialize_record(record)
    record.delete()
    logger.info(f"Inventory record {snapshot['id']} deleted")
    events.notify_inventory_changed(snapshot, "deleted")
    return snapshot

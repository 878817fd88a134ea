"""Catalog service layer.

Views call these functions instead of manipulating models directly, so
that every change to the catalog also notifies connected sessions.
"""

import logging
import re
import time

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone

from beautycatalog.notifications import events

from .models import Product
from .serializers import serialize_product

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}


class UploadError(ValueError):
    """Raised when an uploaded file is rejected."""


@transaction.atomic
def create_product(form) -> Product:
    """Save a validated ProductForm and announce the new product."""
    product = form.save()
    logger.info(f"Product created: {product.pk} {product.name}")
    if product.is_active:
        events.notify_new_product(serialize_product(product))
    return product


@transaction.atomic
def update_product(form) -> Product:
    """Save a validated ProductForm bound to an existing product."""
    product = form.save()
    logger.info(f"Product updated: {product.pk}")
    events.notify_product_updated(serialize_product(product))
    if "stock_quantity" in form.changed_data:
        events.notify_stock_updated(product.pk, product.stock_quantity)
    return product


@transaction.atomic
def delete_product(product: Product) -> dict:
    """Delete a product.

    Order lines keep their product name snapshot; inventory records of
    the product are removed with it.
    """
    product_id = product.pk
    snapshot = serialize_product(product, admin=True)
    product.delete()
    logger.info(f"Product deleted: {product_id}")
    events.notify_product_deleted(product_id)
    return snapshot


@transaction.atomic
def set_stock(product: Product, stock_quantity: int) -> Product:
    """Overwrite the stock level of a product."""
    product.stock_quantity = stock_quantity
    product.save(update_fields=["stock_quantity", "updated_at"])
    events.notify_stock_updated(product.pk, product.stock_quantity)
    return product


def check_stock(items) -> dict:
    """Check whether each requested quantity is available.

    Args:
        items: list of (product_id, quantity) pairs

    Returns:
        {"all_available": bool, "items": [...], "checked_at": iso timestamp}
    """
    ids = [product_id for product_id, _ in items]
    products = Product.objects.active().in_bulk(ids)

    results = []
    all_available = True
    for product_id, quantity in items:
        product = products.get(product_id)
        if product is None:
            all_available = False
            results.append({
                "product_id": product_id,
                "available": False,
                "reason": "product_not_found",
                "current_stock": 0,
                "requested_quantity": quantity,
            })
            continue

        available = product.stock_quantity >= quantity
        if not available:
            all_available = False
        results.append({
            "product_id": product_id,
            "product_name": product.name,
            "available": available,
            "current_stock": product.stock_quantity,
            "requested_quantity": quantity,
            "remaining_after_purchase": product.stock_quantity - quantity,
            "reason": "available" if available else "insufficient_stock",
        })

    return {
        "all_available": all_available,
        "items": results,
        "checked_at": timezone.now().isoformat(),
    }


def list_categories():
    """Distinct non-empty product categories, alphabetically."""
    names = (
        Product.objects.exclude(category="")
        .order_by("category")
        .values_list("category", flat=True)
        .distinct()
    )
    return [{"name": name, "description": name} for name in names]


def clean_filename(name: str) -> str:
    """Keep letters, digits, dots and dashes; lowercase."""
    return re.sub(r"[^a-zA-Z0-9.-]", "", name).lower()


def store_product_image(upload) -> dict:
    """Validate and store an uploaded product image.

    Raises:
        UploadError: If the file is not an image or is too large.
    """
    content_type = getattr(upload, "content_type", "") or ""
    cleaned = clean_filename(upload.name or "")
    extension = ("." + cleaned.rsplit(".", 1)[-1]) if "." in cleaned else ""

    if not content_type.startswith("image/") or extension not in ALLOWED_IMAGE_EXTENSIONS:
        raise UploadError("Only image files are allowed")
    if upload.size > settings.UPLOAD_MAX_BYTES:
        raise UploadError(f"File too large (max {settings.UPLOAD_MAX_BYTES} bytes)")

    filename = f"products/{int(time.time() * 1000)}-{cleaned}"
    stored_name = default_storage.save(filename, upload)
    logger.info(f"Stored product image: {stored_name}")
    return {
        "success": True,
        "filename": stored_name,
        "url": default_storage.url(stored_name),
    }

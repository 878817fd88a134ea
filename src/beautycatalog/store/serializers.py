"""Plain-dict renderings of store models."""

from beautycatalog.core.money import money


def _iso(value):
    return value.isoformat() if value else None


def serialize_customer(customer):
    return {
        "id": customer.pk,
        "name": customer.name,
        "email": customer.email,
        "phone": customer.phone,
        "address": customer.address,
        "total_orders": customer.total_orders,
        "total_spent": money(customer.total_spent),
        "first_purchase_date": _iso(customer.first_purchase_date),
        "last_purchase_date": _iso(customer.last_purchase_date),
        "created_at": _iso(customer.created_at),
        "updated_at": _iso(customer.updated_at),
    }


def serialize_order_item(item):
    product = item.product
    return {
        "id": item.pk,
        "product_id": item.product_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": money(item.unit_price),
        "total_price": money(item.total_price),
        "brand": product.brand if product else "",
        "image_url": product.image_url if product else "",
    }


def serialize_order(order, items=True):
    """Render an order; prefetch ``items__product`` when listing."""
    data = {
        "id": order.pk,
        "customer_id": order.customer_id,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "customer_phone": order.customer_phone,
        "total_amount": money(order.total_amount),
        "status": order.status,
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
    }
    if items:
        data["items"] = [serialize_order_item(item) for item in order.items.all()]
    return data

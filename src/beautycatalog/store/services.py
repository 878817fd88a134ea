"""Store service layer: order placement and order/customer maintenance.

Views should call these functions instead of manipulating models directly.
"""

import logging
from collections import OrderedDict
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.utils import timezone

from beautycatalog.catalog.models import Product
from beautycatalog.core.money import round_money
from beautycatalog.notifications import events
from beautycatalog.notifications.services import fcm

from .exceptions import (
    EmptyOrderError,
    InsufficientStockError,
    OrderTooLargeError,
    ProductInactiveError,
    ProductNotFoundError,
)
from .models import MAX_ORDER_TOTAL, Customer, Order, OrderItem
from .serializers import serialize_order

logger = logging.getLogger(__name__)


def merge_lines(items) -> "OrderedDict[int, int]":
    """Sum quantities of repeated products, keeping first-seen order."""
    merged = OrderedDict()
    for product_id, quantity in items:
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def _lock_products(product_ids):
    # Fixed lock order so concurrent checkouts cannot deadlock
    locked = Product.objects.select_for_update().filter(pk__in=product_ids).order_by("pk")
    return {product.pk: product for product in locked}


def _validate_lines(lines, products):
    for product_id, quantity in lines.items():
        product = products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        if not product.is_active:
            raise ProductInactiveError(product)
        if product.stock_quantity < quantity:
            raise InsufficientStockError(product, quantity)


def _find_customer(email):
    return Customer.objects.select_for_update().filter(email=email).first()


def record_purchase(email: str, name: str, phone: str, amount: Decimal, when=None):
    """Create or update the customer record for a purchase.

    Must run inside a transaction. The insert of a new customer runs in a
    savepoint: when a concurrent checkout created the same email first,
    the unique constraint fails and the now-existing row is updated.
    """
    when = when or timezone.now()
    customer = _find_customer(email)

    if customer is None:
        try:
            with transaction.atomic():
                return Customer.objects.create(
                    email=email,
                    name=name,
                    phone=phone,
                    total_orders=1,
                    total_spent=amount,
                    first_purchase_date=when,
                    last_purchase_date=when,
                )
        except IntegrityError:
            logger.info(f"Customer {email} created concurrently, updating it instead")
            customer = _find_customer(email)

    customer.total_orders += 1
    customer.total_spent += amount
    customer.last_purchase_date = when
    if customer.first_purchase_date is None:
        customer.first_purchase_date = when
    if name:
        customer.name = name
    if phone:
        customer.phone = phone
    customer.save()
    return customer


def _push_new_order(order_id, customer_name, customer_phone, total, items_count):
    try:
        fcm.notify_admins_of_new_order(order_id, customer_name, customer_phone, total, items_count)
    except Exception:
        logger.exception(f"Failed to push new order {order_id} to admins")


def place_order(
    customer_name: str,
    customer_email: str,
    customer_phone: str,
    items,
    status: str = Order.Status.PENDING,
) -> Order:
    """Place an order, decrementing stock atomically.

    Every referenced product row is locked for the duration of the
    transaction. Any validation failure aborts the whole order and leaves
    the database untouched.

    Args:
        customer_name: Name shown on the order
        customer_email: Customer email; when given the customer record is upserted
        customer_phone: Contact phone
        items: list of (product_id, quantity) pairs
        status: Initial order status

    Returns:
        The created Order

    Raises:
        EmptyOrderError: If no items were given
        ProductNotFoundError: If a product does not exist
        ProductInactiveError: If a product is not active
        InsufficientStockError: If a product has fewer units than requested
        OrderTooLargeError: If the total does not fit an order record
    """
    lines = merge_lines(items)
    if not lines:
        raise EmptyOrderError()

    with transaction.atomic():
        products = _lock_products(list(lines))
        _validate_lines(lines, products)

        total = round_money(sum(
            (products[product_id].price * quantity for product_id, quantity in lines.items()),
            Decimal("0"),
        ))
        if total > MAX_ORDER_TOTAL:
            raise OrderTooLargeError(total)

        order = Order.objects.create(
            customer_name=customer_name,
            customer_email=customer_email,
            customer_phone=customer_phone,
            total_amount=total,
            status=status,
        )

        stock_changes = []
        for product_id, quantity in lines.items():
            product = products[product_id]
            OrderItem.objects.create(
                order=order,
                product=product,
                product_name=product.name,
                quantity=quantity,
                unit_price=product.price,
                total_price=round_money(product.price * quantity),
            )
            product.stock_quantity -= quantity
            product.save(update_fields=["stock_quantity", "updated_at"])
            stock_changes.append((product.pk, product.stock_quantity))

        if customer_email:
            order.customer = record_purchase(customer_email, customer_name, customer_phone, total)
            order.save(update_fields=["customer"])

        order_data = serialize_order(order)
        events.notify_new_order(order_data)
        for product_id, new_stock in stock_changes:
            events.notify_stock_updated(product_id, new_stock)

        transaction.on_commit(lambda: _push_new_order(
            order.pk,
            customer_name,
            customer_phone,
            order_data["total_amount"],
            len(lines),
        ))

    logger.info(
        f"Order {order.pk} placed: {len(lines)} products, total {total}",
        extra={"order_id": order.pk, "customer_email": customer_email},
    )
    return order


@transaction.atomic
def update_order(form) -> Order:
    """Save a validated OrderUpdateForm."""
    order = form.save()
    logger.info(f"Order {order.pk} updated: status={order.status}")
    return order


@transaction.atomic
def delete_order(order: Order) -> None:
    """Delete an order and its lines.

    Stock is not restored; cancelling an order is the way to keep the
    history while recording that it was not fulfilled.
    """
    order_id = order.pk
    order.delete()
    logger.info(f"Order {order_id} deleted")
    events.notify_order_deleted(order_id)


@transaction.atomic
def delete_customer(customer: Customer) -> None:
    """Delete a customer; their orders keep the contact snapshot."""
    customer_id = customer.pk
    customer.delete()
    logger.info(f"Customer {customer_id} deleted")
    events.notify_customer_deleted(customer_id)

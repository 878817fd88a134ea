"""Store models: customers and their orders."""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

# Room for a line of the largest price times the largest stock count
TOTAL_MAX_DIGITS = 20
MAX_ORDER_TOTAL = Decimal("999999999999999999.99")


class Customer(models.Model):
    """A shopper, keyed by email.

    Purchase totals are maintained by order placement.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True)
    address = models.TextField(blank=True)
    total_orders = models.PositiveIntegerField(default=0)
    total_spent = models.DecimalField(max_digits=TOTAL_MAX_DIGITS, decimal_places=2, default=Decimal("0.00"))
    first_purchase_date = models.DateTimeField(null=True, blank=True)
    last_purchase_date = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = [models.F("last_purchase_date").desc(nulls_last=True), "-created_at"]

    def __str__(self):
        return f"{self.name} <{self.email}>"


class Order(models.Model):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"

    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField(blank=True, db_index=True)
    customer_phone = models.CharField(max_length=50, blank=True)
    total_amount = models.DecimalField(
        max_digits=TOTAL_MAX_DIGITS,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"Order #{self.pk} ({self.customer_name})"


class OrderItem(models.Model):
    """A line of an order.

    ``product_name`` is a snapshot taken at checkout, so the line survives
    deletion of the product.
    """

    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField()
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=TOTAL_MAX_DIGITS, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x {self.product_name}"

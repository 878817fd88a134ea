"""Inventory purchase batches."""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from beautycatalog.core.money import percent


class InventoryRecord(models.Model):
    """A purchase of stock from a supplier.

    The latest purchase price becomes the product's cost price.
    """

    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.CASCADE,
        related_name="inventory_records",
    )
    purchase_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    purchase_quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    purchase_date = models.DateTimeField(default=timezone.now, db_index=True)
    supplier_name = models.CharField(max_length=255, blank=True)
    supplier_contact = models.CharField(max_length=255, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-purchase_date", "-id"]

    def __str__(self):
        return f"{self.purchase_quantity} x {self.product} @ {self.purchase_price}"

    @property
    def profit_per_unit(self) -> Decimal:
        """Selling price minus the product's current cost."""
        return self.product.profit_per_unit

    @property
    def profit_margin_percent(self) -> Decimal:
        return percent(self.profit_per_unit, self.product.price)

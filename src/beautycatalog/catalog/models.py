"""Catalog models: currencies and products."""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from beautycatalog.core.money import percent

# Seed list used when the currency table is empty
DEFAULT_CURRENCIES = [
    {"code": "USD", "name": "Dólar Estadounidense", "symbol": "$", "flag_emoji": "🇺🇸"},
    {"code": "EUR", "name": "Euro", "symbol": "€", "flag_emoji": "🇪🇺"},
    {"code": "GBP", "name": "Libra Esterlina", "symbol": "£", "flag_emoji": "🇬🇧"},
    {"code": "JPY", "name": "Yen Japonés", "symbol": "¥", "flag_emoji": "🇯🇵"},
    {"code": "CAD", "name": "Dólar Canadiense", "symbol": "C$", "flag_emoji": "🇨🇦"},
    {"code": "AUD", "name": "Dólar Australiano", "symbol": "A$", "flag_emoji": "🇦🇺"},
    {"code": "CHF", "name": "Franco Suizo", "symbol": "CHF", "flag_emoji": "🇨🇭"},
    {"code": "CNY", "name": "Yuan Chino", "symbol": "¥", "flag_emoji": "🇨🇳"},
    {"code": "MXN", "name": "Peso Mexicano", "symbol": "$", "flag_emoji": "🇲🇽"},
    {"code": "BRL", "name": "Real Brasileño", "symbol": "R$", "flag_emoji": "🇧🇷"},
    {"code": "ARS", "name": "Peso Argentino", "symbol": "$", "flag_emoji": "🇦🇷"},
    {"code": "COP", "name": "Peso Colombiano", "symbol": "$", "flag_emoji": "🇨🇴"},
    {"code": "NIO", "name": "Córdoba Nicaragüense", "symbol": "C$", "flag_emoji": "🇳🇮"},
]


class Currency(models.Model):
    """Currency a product is priced in."""

    code = models.CharField(max_length=3, primary_key=True)
    name = models.CharField(max_length=100)
    symbol = models.CharField(max_length=10)
    flag_emoji = models.CharField(max_length=16, blank=True)

    class Meta:
        ordering = ["code"]
        verbose_name_plural = "currencies"

    def __str__(self):
        return f"{self.code} ({self.symbol})"


class ProductQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)

    def low_stock(self):
        """Active products at or below their minimum stock level."""
        return self.active().filter(stock_quantity__lte=models.F("min_stock_level"))


class Product(models.Model):
    """A product in the catalog.

    Only active products are shown to shoppers. ``cost_price`` is kept in
    sync with the latest inventory purchase and drives profit reports.
    """

    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    cost_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0"))],
    )
    currency = models.ForeignKey(
        Currency,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="products",
        db_column="currency_code",
    )
    category = models.CharField(max_length=100, blank=True, db_index=True)
    brand = models.CharField(max_length=100, blank=True)
    image_url = models.CharField(max_length=500, blank=True)
    sku = models.CharField(max_length=64, blank=True)
    stock_quantity = models.PositiveIntegerField(default=0)
    min_stock_level = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return self.name

    @property
    def profit_per_unit(self) -> Decimal:
        return self.price - (self.cost_price or Decimal("0"))

    @property
    def profit_margin(self) -> Decimal:
        """Margin over the selling price, in percent."""
        return percent(self.profit_per_unit, self.price)

"""Tests for the storefront catalog endpoints."""

import json
from decimal import Decimal

import pytest
from django.test import Client
from django.urls import reverse

from beautycatalog.catalog.models import Product


def send_json(client, method, url, data):
    return getattr(client, method)(url, data=json.dumps(data), content_type="application/json")


# =============================================================================
# Public listing
# =============================================================================


@pytest.mark.django_db
class TestProductList:
    """Tests for GET /api/products"""

    def test_lists_only_active_products(self, product, inactive_product):
        response = Client().get(reverse("catalog:product-list"))

        assert response.status_code == 200
        names = [p["name"] for p in response.json()]
        assert names == ["Labial Hidratante"]

    def test_newest_first(self, product, other_product):
        response = Client().get(reverse("catalog:product-list"))

        ids = [p["id"] for p in response.json()]
        assert ids == [other_product.pk, product.pk]

    def test_no_cache_headers(self, product):
        response = Client().get(reverse("catalog:product-list"))

        assert "no-store" in response["Cache-Control"]
        assert response["Pragma"] == "no-cache"

    def test_shoppers_never_see_cost(self, product):
        data = Client().get(reverse("catalog:product-list")).json()[0]

        assert "cost_price" not in data
        assert data["price"] == "220.00"
        assert data["currency_code"] == "NIO"

    def test_filter_by_category(self, product, other_product):
        response = Client().get(reverse("catalog:product-list"), {"category": "maquillaje"})

        assert [p["id"] for p in response.json()] == [product.pk]

    def test_search(self, product, other_product):
        response = Client().get(reverse("catalog:product-list"), {"q": "vitamina"})

        assert [p["id"] for p in response.json()] == [other_product.pk]


@pytest.mark.django_db
class TestProductCreate:
    """Tests for POST /api/products"""

    def test_requires_staff(self, currency):
        response = send_json(Client(), "post", reverse("catalog:product-list"), {"name": "X", "price": "1"})

        assert response.status_code == 401
        assert not Product.objects.exists()

    def test_staff_creates_active_product(self, staff_client, currency, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            response = send_json(staff_client, "post", reverse("catalog:product-list"), {
                "name": "  Rubor Compacto ",
                "price": "180.50",
                "category": "Maquillaje",
                "stock_quantity": 7,
                "is_active": False,
            })

        assert response.status_code == 201
        product = Product.objects.get()
        assert product.name == "Rubor Compacto"
        assert product.price == Decimal("180.50")
        assert product.is_active is True
        assert product.currency_id == "NIO"
        assert len(callbacks) == 1

    def test_name_and_price_required(self, staff_client, currency):
        response = send_json(staff_client, "post", reverse("catalog:product-list"), {"description": "x"})

        assert response.status_code == 400
        details = response.json()["details"]
        assert "name" in details
        assert "price" in details

    def test_negative_price_rejected(self, staff_client, currency):
        response = send_json(staff_client, "post", reverse("catalog:product-list"), {"name": "X", "price": "-1"})

        assert response.status_code == 400

    def test_price_above_column_limit_rejected(self, staff_client, currency):
        response = send_json(
            staff_client, "post", reverse("catalog:product-list"), {"name": "X", "price": "100000000.00"}
        )

        assert response.status_code == 400


@pytest.mark.django_db
class TestProductDetail:
    def test_get_active_product(self, product):
        response = Client().get(reverse("catalog:product-detail", args=[product.pk]))

        assert response.status_code == 200
        assert response.json()["name"] == product.name

    def test_inactive_product_is_404(self, inactive_product):
        response = Client().get(reverse("catalog:product-detail", args=[inactive_product.pk]))

        assert response.status_code == 404

    def test_staff_sets_stock(self, staff_client, product):
        response = send_json(
            staff_client, "put", reverse("catalog:product-detail", args=[product.pk]), {"stock_quantity": 42}
        )

        assert response.status_code == 200
        product.refresh_from_db()
        assert product.stock_quantity == 42

    def test_negative_stock_rejected(self, staff_client, product):
        response = send_json(
            staff_client, "put", reverse("catalog:product-detail", args=[product.pk]), {"stock_quantity": -3}
        )

        assert response.status_code == 400
        product.refresh_from_db()
        assert product.stock_quantity == 10

    @pytest.mark.parametrize("stock", [10**20, 2147483648, 1.5, True, "many"])
    def test_out_of_range_stock_rejected(self, staff_client, product, stock):
        response = send_json(
            staff_client, "put", reverse("catalog:product-detail", args=[product.pk]), {"stock_quantity": stock}
        )

        assert response.status_code == 400
        assert "stock_quantity" in response.json()["details"]
        product.refresh_from_db()
        assert product.stock_quantity == 10

    def test_set_stock_requires_staff(self, shopper_client, product):
        response = send_json(
            shopper_client, "put", reverse("catalog:product-detail", args=[product.pk]), {"stock_quantity": 1}
        )

        assert response.status_code == 403


# =============================================================================
# Stock check
# =============================================================================


@pytest.mark.django_db
class TestCheckStock:
    """Tests for POST /api/products/check-stock"""

    def test_all_available(self, product):
        response = send_json(Client(), "post", reverse("catalog:check-stock"), {
            "items": [{"id": product.pk, "quantity": 4}],
        })

        assert response.status_code == 200
        data = response.json()
        assert data["all_available"] is True
        item = data["items"][0]
        assert item["reason"] == "available"
        assert item["current_stock"] == 10
        assert item["remaining_after_purchase"] == 6
        assert item["product_name"] == product.name
        assert "checked_at" in data

    def test_insufficient_and_missing(self, product):
        response = send_json(Client(), "post", reverse("catalog:check-stock"), {
            "items": [{"id": product.pk, "quantity": 11}, {"id": 999999, "quantity": 1}],
        })

        data = response.json()
        assert data["all_available"] is False
        assert data["items"][0]["reason"] == "insufficient_stock"
        assert data["items"][1]["reason"] == "product_not_found"
        assert data["items"][1]["current_stock"] == 0

    def test_inactive_product_counts_as_missing(self, inactive_product):
        response = send_json(Client(), "post", reverse("catalog:check-stock"), {
            "items": [{"id": inactive_product.pk, "quantity": 1}],
        })

        assert response.json()["items"][0]["reason"] == "product_not_found"

    @pytest.mark.parametrize("payload", [{}, {"items": []}, {"items": [{"id": 1, "quantity": 0}]}])
    def test_invalid_payload(self, db, payload):
        response = send_json(Client(), "post", reverse("catalog:check-stock"), payload)

        assert response.status_code == 400


# =============================================================================
# Categories and currencies
# =============================================================================


@pytest.mark.django_db
class TestCategoriesAndCurrencies:
    def test_categories_are_distinct_and_sorted(self, product, other_product, inactive_product):
        Product.objects.create(name="Otro", price=Decimal("1"), category="Maquillaje")

        response = Client().get(reverse("catalog:category-list"))

        assert response.json() == [
            {"name": "Cuidado de la Piel", "description": "Cuidado de la Piel"},
            {"name": "Maquillaje", "description": "Maquillaje"},
        ]

    def test_creating_category_is_informational(self, db):
        response = Client().post(reverse("catalog:category-list"))

        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_currencies_from_table(self, currency):
        response = Client().get(reverse("catalog:currency-list"))

        assert response.json() == [
            {"code": "NIO", "name": "Córdoba Nicaragüense", "symbol": "C$", "flag_emoji": "🇳🇮"},
        ]

    def test_currencies_fall_back_to_defaults(self, db):
        response = Client().get(reverse("catalog:currency-list"))

        codes = [c["code"] for c in response.json()]
        assert "USD" in codes
        assert "NIO" in codes

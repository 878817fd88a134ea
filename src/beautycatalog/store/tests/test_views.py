"""Tests for order and customer endpoints."""

import json
from decimal import Decimal

import pytest
from django.test import Client
from django.urls import reverse

from beautycatalog.store.models import Customer, Order, OrderItem
from beautycatalog.store.services import place_order


def send_json(client, method, url, data):
    return getattr(client, method)(url, data=json.dumps(data), content_type="application/json")


@pytest.fixture
def order(product):
    return place_order(
        customer_name="Ana López",
        customer_email="ana@example.com",
        customer_phone="8888-0000",
        items=[(product.pk, 2)],
    )


# =============================================================================
# Checkout
# =============================================================================


@pytest.mark.django_db
class TestCreateOrder:
    """Tests for POST /api/orders"""

    def test_places_order(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana López",
            "customer_email": "Ana@Example.com",
            "customer_phone": "8888-0000",
            "items": [{"id": product.pk, "quantity": 3}],
        })

        assert response.status_code == 201
        data = response.json()
        assert data["total_amount"] == "660.00"
        assert data["status"] == "pending"
        assert data["customer_email"] == "ana@example.com"
        assert data["items"][0]["product_name"] == product.name
        assert data["items"][0]["brand"] == product.brand
        assert "message" in data
        product.refresh_from_db()
        assert product.stock_quantity == 7

    def test_client_prices_are_ignored(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [{"product_id": product.pk, "quantity": 1, "price": "0.01"}],
            "total": "0.01",
        })

        assert response.json()["total_amount"] == "220.00"

    def test_empty_items_rejected(self, db):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "EMPTY_ORDER"
        assert not Order.objects.exists()

    def test_insufficient_stock_response(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [{"id": product.pk, "quantity": 11}],
        })

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "INSUFFICIENT_STOCK"
        assert data["product_name"] == product.name
        assert data["available_stock"] == 10
        assert data["requested_quantity"] == 11

    def test_unknown_product_response(self, db):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [{"id": 424242, "quantity": 1}],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "PRODUCT_NOT_FOUND"

    def test_invalid_item_rejected(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [{"id": product.pk, "quantity": -1}],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ITEM"

    @pytest.mark.parametrize("quantity", [True, 1.9, 10**20])
    def test_non_integer_quantity_rejected(self, product, quantity):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "items": [{"id": product.pk, "quantity": quantity}],
        })

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_ITEM"
        assert not Order.objects.exists()

    def test_name_required(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "items": [{"id": product.pk, "quantity": 1}],
        })

        assert response.status_code == 400
        assert "customer_name" in response.json()["details"]

    def test_invalid_status_rejected(self, product):
        response = send_json(Client(), "post", reverse("store:order-list"), {
            "customer_name": "Ana",
            "status": "shipped",
            "items": [{"id": product.pk, "quantity": 1}],
        })

        assert response.status_code == 400


# =============================================================================
# Listing and detail
# =============================================================================


@pytest.mark.django_db
class TestListOrders:
    def test_lookup_by_email_is_public(self, order):
        response = Client().get(reverse("store:order-list"), {"customer_email": "ANA@example.com"})

        assert response.status_code == 200
        assert [o["id"] for o in response.json()] == [order.pk]

    def test_full_list_requires_staff(self, order):
        assert Client().get(reverse("store:order-list")).status_code == 401

    def test_staff_lists_all_with_items(self, staff_client, order):
        response = staff_client.get(reverse("store:order-list"))

        data = response.json()
        assert len(data) == 1
        assert data[0]["items"][0]["quantity"] == 2

    def test_status_filter(self, staff_client, order):
        response = staff_client.get(reverse("store:order-list"), {"status": "completed"})

        assert response.json() == []


@pytest.mark.django_db
class TestOrderDetail:
    def test_get(self, order):
        response = Client().get(reverse("store:order-detail", args=[order.pk]))

        assert response.status_code == 200
        assert response.json()["total_amount"] == "440.00"

    def test_missing(self, db):
        assert Client().get(reverse("store:order-detail", args=[999])).status_code == 404

    def test_staff_updates_status(self, staff_client, order):
        response = send_json(staff_client, "patch", reverse("store:order-detail", args=[order.pk]), {
            "status": "completed",
        })

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == Order.Status.COMPLETED
        assert order.customer_name == "Ana López"

    def test_invalid_status(self, staff_client, order):
        response = send_json(staff_client, "put", reverse("store:order-detail", args=[order.pk]), {
            "status": "lost",
        })

        assert response.status_code == 400
        order.refresh_from_db()
        assert order.status == Order.Status.PENDING

    def test_update_requires_staff(self, order):
        response = send_json(Client(), "put", reverse("store:order-detail", args=[order.pk]), {
            "status": "cancelled",
        })

        assert response.status_code == 401

    def test_delete_keeps_stock(self, staff_client, order, product, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            response = staff_client.delete(reverse("store:order-detail", args=[order.pk]))

        assert response.status_code == 200
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()
        product.refresh_from_db()
        assert product.stock_quantity == 8
        assert len(callbacks) == 1

    def test_delete_missing_is_404(self, staff_client, db):
        assert staff_client.delete(reverse("store:order-detail", args=[999])).status_code == 404


@pytest.mark.django_db
def test_invoice_renders_html(order, product):
    response = Client().get(reverse("store:order-invoice", args=[order.pk]))

    assert response.status_code == 200
    assert response["Content-Type"].startswith("text/html")
    content = response.content.decode()
    assert f"FACTURA #{order.pk}" in content
    assert product.name in content
    assert "Ana López" in content


# =============================================================================
# Customers
# =============================================================================


@pytest.mark.django_db
class TestCustomers:
    def test_requires_staff(self, shopper_client):
        assert shopper_client.get(reverse("store:customer-list")).status_code == 403

    def test_list(self, staff_client, order):
        response = staff_client.get(reverse("store:customer-list"))

        data = response.json()
        assert data[0]["email"] == "ana@example.com"
        assert data[0]["total_orders"] == 1
        assert data[0]["total_spent"] == "440.00"

    def test_create(self, staff_client):
        response = send_json(staff_client, "post", reverse("store:customer-list"), {
            "name": "Lucía",
            "email": "lucia@example.com",
            "phone": None,
        })

        assert response.status_code == 201
        assert Customer.objects.get().total_orders == 0

    def test_create_requires_name_and_email(self, staff_client):
        response = send_json(staff_client, "post", reverse("store:customer-list"), {"phone": "1"})

        assert response.status_code == 400
        assert set(response.json()["details"]) == {"name", "email"}

    def test_duplicate_email_rejected(self, staff_client, order):
        response = send_json(staff_client, "post", reverse("store:customer-list"), {
            "name": "Otra Ana",
            "email": "ana@example.com",
        })

        assert response.status_code == 400

    def test_update(self, staff_client, order):
        customer = Customer.objects.get()

        response = send_json(staff_client, "put", reverse("store:customer-detail", args=[customer.pk]), {
            "address": "Managua",
        })

        assert response.status_code == 200
        customer.refresh_from_db()
        assert customer.address == "Managua"
        assert customer.total_spent == Decimal("440.00")

    def test_delete_keeps_orders(self, staff_client, order, django_capture_on_commit_callbacks):
        customer = Customer.objects.get()

        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            response = staff_client.delete(reverse("store:customer-detail", args=[customer.pk]))

        assert response.status_code == 200
        assert not Customer.objects.exists()
        order.refresh_from_db()
        assert order.customer is None
        assert order.customer_email == "ana@example.com"
        assert len(callbacks) == 1

    def test_missing(self, staff_client, db):
        url = reverse("store:customer-detail", args=[999])

        assert staff_client.get(url).status_code == 404
        assert staff_client.delete(url).status_code == 404

"""Tests for profit reports, dashboard and sales stats."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from django.test import override_settings
from django.urls import reverse
from django.utils import timezone

from beautycatalog.inventory import reports
from beautycatalog.inventory.models import InventoryRecord
from beautycatalog.store.models import Order, OrderItem
from beautycatalog.store.services import place_order


def make_order(product_qty, status=Order.Status.COMPLETED, email="ana@example.com", when=None):
    order = place_order(
        customer_name="Ana",
        customer_email=email,
        customer_phone="",
        items=product_qty,
        status=status,
    )
    if when is not None:
        Order.objects.filter(pk=order.pk).update(created_at=when)
        order.refresh_from_db()
    return order


def at_noon(day):
    return timezone.make_aware(datetime(day.year, day.month, day.day, 12, 0))


@pytest.mark.django_db
class TestLineFigures:
    def test_uses_cost_price(self, product):
        order = make_order([(product.pk, 2)])

        figures = reports.line_figures(order.items.get())

        assert figures.unit_cost == Decimal("120.00")
        assert figures.cost == Decimal("240.00")
        assert figures.profit == Decimal("200.00")
        assert figures.margin == Decimal("45.45")

    def test_falls_back_to_default_ratio(self, other_product):
        order = make_order([(other_product.pk, 1)])

        figures = reports.line_figures(order.items.get())

        assert figures.unit_cost == Decimal("60.00")
        assert figures.profit == Decimal("40.00")

    @override_settings(SHOP_DEFAULT_COST_RATIO="0.5")
    def test_ratio_is_configurable(self, other_product):
        order = make_order([(other_product.pk, 1)])

        assert reports.unit_cost(order.items.get()) == Decimal("50.00")

    def test_deleted_product_uses_price_paid(self, other_product):
        order = make_order([(other_product.pk, 1)])
        other_product.delete()

        item = OrderItem.objects.get(order=order)

        assert reports.unit_cost(item) == Decimal("60.00")


@pytest.mark.django_db
class TestProfitReport:
    def test_summary(self, product, other_product):
        day = date(2026, 3, 10)
        make_order([(product.pk, 1), (other_product.pk, 1)], when=at_noon(day))
        make_order([(product.pk, 1)], status=Order.Status.PENDING, email="bea@example.com", when=at_noon(day))
        make_order([(product.pk, 1)], email="ana@example.com", when=at_noon(day + timedelta(days=1)))
        # Outside the range
        make_order([(product.pk, 1)], when=at_noon(day + timedelta(days=5)))

        report = reports.profit_report(day, day + timedelta(days=1))

        summary = report["summary"]
        assert summary["total_orders"] == 3
        assert summary["completed_orders"] == 2
        assert summary["pending_orders"] == 1
        assert summary["cancelled_orders"] == 0
        assert summary["total_revenue"] == "760.00"
        assert summary["completed_revenue"] == "540.00"
        # 3 x (220 - 120) + (100 - 60)
        assert summary["total_profit"] == "340.00"
        assert summary["total_costs"] == "420.00"
        assert summary["avg_profit_margin"] == "44.74"
        assert summary["avg_order_value"] == "253.33"
        assert len(report["orders"]) == 4

    def test_top_products_and_daily_breakdown(self, product, other_product):
        day = date(2026, 3, 10)
        make_order([(product.pk, 3)], when=at_noon(day))
        make_order([(other_product.pk, 1)], when=at_noon(day + timedelta(days=1)))

        report = reports.profit_report(day, day + timedelta(days=1))

        top = report["top_products"]
        assert [p["product_id"] for p in top] == [product.pk, other_product.pk]
        assert top[0]["total_sold"] == 3
        assert top[0]["orders_count"] == 1
        daily = report["daily_breakdown"]
        assert [d["date"] for d in daily] == ["2026-03-11", "2026-03-10"]
        assert daily[1]["daily_revenue"] == "660.00"
        assert daily[1]["daily_profit"] == "300.00"

    def test_customer_analysis(self, product):
        day = date(2026, 3, 10)
        make_order([(product.pk, 1)], email="ana@example.com", when=at_noon(day))
        make_order([(product.pk, 1)], email="ana@example.com", when=at_noon(day))
        make_order([(product.pk, 1)], email="bea@example.com", when=at_noon(day))

        analysis = reports.profit_report(day, day)["customer_analysis"]

        assert analysis["unique_customers"] == 2
        assert analysis["new_customers"] == 1
        assert analysis["returning_customers"] == 1
        assert analysis["avg_customer_value"] == "330.00"

    def test_empty_range(self, db):
        report = reports.profit_report(date(2020, 1, 1), date(2020, 1, 31))

        assert report["summary"]["total_orders"] == 0
        assert report["summary"]["avg_order_value"] == "0.00"
        assert report["top_products"] == []
        assert report["metadata"]["default_cost_ratio"] == "0.6"


@pytest.mark.django_db
class TestProfitReportView:
    def test_requires_dates(self, staff_client):
        response = staff_client.get(reverse("inventory:profit-report"), {"startDate": "2026-01-01"})

        assert response.status_code == 400

    @pytest.mark.parametrize("start,end", [("2026-13-01", "2026-12-31"), ("yesterday", "today"), ("2026-02-01", "2026-01-01")])
    def test_rejects_bad_dates(self, staff_client, start, end):
        response = staff_client.get(reverse("inventory:profit-report"), {"startDate": start, "endDate": end})

        assert response.status_code == 400

    def test_returns_report(self, staff_client, product):
        make_order([(product.pk, 1)], when=at_noon(date(2026, 1, 15)))

        response = staff_client.get(
            reverse("inventory:profit-report"), {"startDate": "2026-01-01", "endDate": "2026-01-31"}
        )

        assert response.status_code == 200
        assert response.json()["summary"]["total_orders"] == 1

    def test_requires_staff(self, shopper_client):
        response = shopper_client.get(
            reverse("inventory:profit-report"), {"startDate": "2026-01-01", "endDate": "2026-01-31"}
        )

        assert response.status_code == 403


@pytest.mark.django_db
class TestDashboard:
    def test_counts_completed_orders_only(self, product, other_product):
        make_order([(product.pk, 1)])
        make_order([(other_product.pk, 1)], status=Order.Status.PENDING)

        data = reports.dashboard()

        assert data["today"]["orders"] == 1
        assert data["today"]["revenue"] == "220.00"
        assert data["today"]["profit"] == "100.00"
        assert data["month"]["avg_margin"] == "45.45"
        assert len(data["recent_orders"]) == 2
        assert data["recent_orders"][0]["items_count"] == 1
        assert data["top_products"][0]["product_id"] == product.pk
        assert data["profit_trend"][0]["daily_orders"] == 1

    def test_low_stock(self, product, other_product, inactive_product):
        product.stock_quantity = 1
        product.save()

        data = reports.dashboard()

        low = data["low_stock_products"]
        assert [p["id"] for p in low] == [product.pk]
        assert low[0]["shortage"] == 2

    def test_view(self, staff_client, db):
        response = staff_client.get(reverse("inventory:dashboard"))

        assert response.status_code == 200
        assert set(response.json()) >= {"today", "week", "month", "low_stock_products", "profit_trend"}


@pytest.mark.django_db
class TestStats:
    def test_admin_stats(self, staff_client, product, inactive_product):
        make_order([(product.pk, 1)], email="ana@example.com")
        make_order([(product.pk, 1)], email="ana@example.com")
        make_order([(product.pk, 1)], email="")

        response = staff_client.get(reverse("inventory:admin-stats"))

        assert response.json() == {
            "total_products": 1,
            "total_orders": 3,
            "total_revenue": "660.00",
            "active_customers": 1,
        }

    def test_product_sales_by_revenue(self, staff_client, product, other_product):
        make_order([(other_product.pk, 1)])
        make_order([(product.pk, 2)])
        make_order([(product.pk, 1)])

        data = staff_client.get(reverse("inventory:product-sales")).json()

        assert [p["id"] for p in data] == [product.pk, other_product.pk]
        assert data[0]["total_sold"] == 3
        assert data[0]["total_revenue"] == "660.00"
        assert data[0]["total_orders"] == 2

    def test_unsold_product_has_zero_sales(self, staff_client, product):
        data = staff_client.get(reverse("inventory:product-sales")).json()

        assert data[0]["total_sold"] == 0
        assert data[0]["total_revenue"] == "0.00"

    def test_product_stats(self, staff_client, product):
        make_order([(product.pk, 2)])
        InventoryRecord.objects.create(product=product, purchase_price=Decimal("120"), purchase_quantity=10)

        response = staff_client.get(reverse("inventory:product-stats", args=[product.pk]))

        data = response.json()
        assert data["total_sold"] == 2
        assert data["avg_selling_price"] == "220.00"
        assert data["profit_per_unit"] == "100.00"
        assert data["profit_margin"] == "45.45"
        assert len(data["recent_orders"]) == 1
        assert len(data["inventory_history"]) == 1

    def test_product_stats_missing(self, staff_client, db):
        response = staff_client.get(reverse("inventory:product-stats", args=[999]))

        assert response.status_code == 404

"""Sales and profit reporting.

Line costs use the product's cost price; products without one are
costed at ``SHOP_DEFAULT_COST_RATIO`` of their selling price.
"""

import logging
from collections import OrderedDict
from datetime import timedelta
from decimal import Decimal
from typing import NamedTuple

from django.conf import settings
from django.db.models import Avg, Count, F, Sum
from django.utils import timezone

from beautycatalog.catalog.models import Product
from beautycatalog.core.money import money, percent, round_money
from beautycatalog.store.models import Order, OrderItem

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
COST_METHOD = "cost_price_or_default_ratio"


class LineFigures(NamedTuple):
    """Cost and profit of one order line."""

    unit_cost: Decimal
    cost: Decimal
    revenue: Decimal
    profit: Decimal
    margin: Decimal


def default_cost_ratio() -> Decimal:
    return Decimal(str(settings.SHOP_DEFAULT_COST_RATIO))


def unit_cost(item: OrderItem, ratio: Decimal = None) -> Decimal:
    """Unit cost of a sold line.

    Falls back to the ratio of the current product price, or of the price
    paid when the product no longer exists.
    """
    ratio = default_cost_ratio() if ratio is None else ratio
    product = item.product
    if product is not None and product.cost_price is not None:
        return product.cost_price
    base = product.price if product is not None else item.unit_price
    return round_money(base * ratio)


def line_figures(item: OrderItem, ratio: Decimal = None) -> LineFigures:
    cost_each = unit_cost(item, ratio)
    cost = cost_each * item.quantity
    revenue = item.total_price
    profit = (item.unit_price - cost_each) * item.quantity
    return LineFigures(
        unit_cost=cost_each,
        cost=cost,
        revenue=revenue,
        profit=profit,
        margin=percent(item.unit_price - cost_each, item.unit_price),
    )


def _local_date(value):
    return timezone.localtime(value).date()


def _items_for(orders):
    return (
        OrderItem.objects.filter(order__in=orders)
        .select_related("order", "product")
        .order_by("-order__created_at", "-order_id", "id")
    )


def _product_key(item):
    return item.product_id if item.product_id is not None else f"deleted:{item.product_name}"


def profit_report(start_date, end_date) -> dict:
    """Profit report for orders placed between two dates, both inclusive.

    Args:
        start_date: first day (date)
        end_date: last day (date)
    """
    ratio = default_cost_ratio()
    orders = list(
        Order.objects.filter(created_at__date__gte=start_date, created_at__date__lte=end_date)
    )
    items = list(_items_for(orders))
    figures = {item.pk: line_figures(item, ratio) for item in items}
    logger.debug(f"Profit report {start_date}..{end_date}: {len(orders)} orders, {len(items)} lines")

    lines = []
    for item in items:
        order = item.order
        fig = figures[item.pk]
        lines.append({
            "id": order.pk,
            "customer_name": order.customer_name,
            "customer_email": order.customer_email,
            "total_amount": money(order.total_amount),
            "status": order.status,
            "created_at": order.created_at.isoformat(),
            "product_id": item.product_id,
            "product_name": item.product_name,
            "product_brand": item.product.brand if item.product else "",
            "quantity": item.quantity,
            "unit_price": money(item.unit_price),
            "total_price": money(item.total_price),
            "cost_price": money(fig.unit_cost),
            "item_cost": money(fig.cost),
            "real_profit_amount": money(fig.profit),
            "real_profit_margin": money(fig.margin),
        })

    # Summary
    status_counts = {status: 0 for status in Order.Status.values}
    for order in orders:
        status_counts[order.status] = status_counts.get(order.status, 0) + 1
    total_revenue = sum((o.total_amount for o in orders), ZERO)
    completed_revenue = sum((o.total_amount for o in orders if o.status == Order.Status.COMPLETED), ZERO)
    total_profit = sum((f.profit for f in figures.values()), ZERO)
    total_costs = sum((f.cost for f in figures.values()), ZERO)
    line_revenue = sum((f.revenue for f in figures.values()), ZERO)

    summary = {
        "total_orders": len(orders),
        "completed_orders": status_counts[Order.Status.COMPLETED],
        "pending_orders": status_counts[Order.Status.PENDING],
        "cancelled_orders": status_counts[Order.Status.CANCELLED],
        "total_revenue": money(total_revenue),
        "completed_revenue": money(completed_revenue),
        "total_profit": money(total_profit),
        "total_costs": money(total_costs),
        "avg_profit_margin": money(percent(total_profit, line_revenue)),
        "avg_order_value": money(total_revenue / len(orders) if orders else ZERO),
    }

    # Top products by units sold
    products = OrderedDict()
    for item in items:
        fig = figures[item.pk]
        entry = products.setdefault(_product_key(item), {
            "product_id": item.product_id,
            "product_name": item.product_name,
            "product_brand": item.product.brand if item.product else "",
            "total_sold": 0,
            "total_revenue": ZERO,
            "total_costs": ZERO,
            "total_profit": ZERO,
            "order_ids": set(),
        })
        entry["total_sold"] += item.quantity
        entry["total_revenue"] += fig.revenue
        entry["total_costs"] += fig.cost
        entry["total_profit"] += fig.profit
        entry["order_ids"].add(item.order_id)

    ranked = sorted(products.values(), key=lambda e: e["total_sold"], reverse=True)[:10]
    top_products = [
        {
            "product_id": e["product_id"],
            "product_name": e["product_name"],
            "product_brand": e["product_brand"],
            "total_sold": e["total_sold"],
            "total_revenue": money(e["total_revenue"]),
            "total_costs": money(e["total_costs"]),
            "total_profit": money(e["total_profit"]),
            "avg_profit_margin": money(percent(e["total_profit"], e["total_revenue"])),
            "orders_count": len(e["order_ids"]),
        }
        for e in ranked
    ]

    return {
        "orders": lines,
        "summary": summary,
        "top_products": top_products,
        "daily_breakdown": daily_breakdown(orders, items, figures),
        "customer_analysis": customer_analysis(orders),
        "date_range": {"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        "metadata": {
            "calculated_at": timezone.now().isoformat(),
            "total_order_items": len(items),
            "cost_calculation_method": COST_METHOD,
            "default_cost_ratio": str(ratio),
        },
    }


def daily_breakdown(orders, items, figures) -> list:
    """Per-day order counts, revenue, profit and costs, newest day first."""
    days = {}
    for order in orders:
        day = days.setdefault(_local_date(order.created_at), {
            "orders_count": 0,
            "completed_orders": 0,
            "pending_orders": 0,
            "daily_revenue": ZERO,
            "completed_revenue": ZERO,
            "daily_profit": ZERO,
            "daily_costs": ZERO,
        })
        day["orders_count"] += 1
        day["daily_revenue"] += order.total_amount
        if order.status == Order.Status.COMPLETED:
            day["completed_orders"] += 1
            day["completed_revenue"] += order.total_amount
        elif order.status == Order.Status.PENDING:
            day["pending_orders"] += 1

    for item in items:
        day = days[_local_date(item.order.created_at)]
        day["daily_profit"] += figures[item.pk].profit
        day["daily_costs"] += figures[item.pk].cost

    return [
        {
            "date": date.isoformat(),
            "orders_count": day["orders_count"],
            "completed_orders": day["completed_orders"],
            "pending_orders": day["pending_orders"],
            "daily_revenue": money(day["daily_revenue"]),
            "completed_revenue": money(day["completed_revenue"]),
            "daily_profit": money(day["daily_profit"]),
            "daily_costs": money(day["daily_costs"]),
        }
        for date, day in sorted(days.items(), reverse=True)
    ]


def customer_analysis(orders) -> dict:
    """Unique, new (one order) and returning customers by email."""
    spent = {}
    counts = {}
    for order in orders:
        if not order.customer_email:
            continue
        key = order.customer_email.lower()
        counts[key] = counts.get(key, 0) + 1
        spent[key] = spent.get(key, ZERO) + order.total_amount

    unique = len(counts)
    return {
        "unique_customers": unique,
        "new_customers": sum(1 for c in counts.values() if c == 1),
        "returning_customers": sum(1 for c in counts.values() if c > 1),
        "avg_customer_value": money(sum(spent.values(), ZERO) / unique if unique else ZERO),
    }


def _completed_since(since):
    return Order.objects.filter(status=Order.Status.COMPLETED, created_at__gte=since)


def _period_stats(orders, ratio, with_margin=False) -> dict:
    orders = list(orders)
    figures = [line_figures(item, ratio) for item in _items_for(orders)]
    stats = {
        "orders": len(orders),
        "revenue": money(sum((o.total_amount for o in orders), ZERO)),
        "profit": money(sum((f.profit for f in figures), ZERO)),
        "customers": len({o.customer_email.lower() for o in orders if o.customer_email}),
    }
    if with_margin:
        margins = [f.margin for f in figures]
        stats["avg_margin"] = money(sum(margins, ZERO) / len(margins) if margins else ZERO)
    return stats


def dashboard(now=None) -> dict:
    """Back office dashboard figures; only completed orders count as sales."""
    ratio = default_cost_ratio()
    now = timezone.localtime(now or timezone.now())
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    start_of_week = start_of_day - timedelta(days=start_of_day.weekday())
    start_of_month = start_of_day.replace(day=1)
    trend_start = start_of_day - timedelta(days=6)

    low_stock = (
        Product.objects.low_stock()
        .annotate(shortage=F("min_stock_level") - F("stock_quantity"))
        .order_by("-shortage", "name")[: settings.SHOP_LOW_STOCK_LIMIT]
    )

    recent_orders = Order.objects.annotate(items_count=Count("items")).order_by("-created_at", "-id")[:5]

    month_items = _items_for(_completed_since(start_of_month))
    top = OrderedDict()
    for item in month_items:
        entry = top.setdefault(_product_key(item), {
            "product_id": item.product_id,
            "name": item.product_name,
            "brand": item.product.brand if item.product else "",
            "total_sold": 0,
            "revenue": ZERO,
            "profit": ZERO,
        })
        fig = line_figures(item, ratio)
        entry["total_sold"] += item.quantity
        entry["revenue"] += fig.revenue
        entry["profit"] += fig.profit
    top_products = [
        {**e, "revenue": money(e["revenue"]), "profit": money(e["profit"])}
        for e in sorted(top.values(), key=lambda e: e["total_sold"], reverse=True)[:5]
    ]

    trend_orders = list(_completed_since(trend_start))
    trend = {}
    for order in trend_orders:
        day = trend.setdefault(_local_date(order.created_at), {"revenue": ZERO, "profit": ZERO, "orders": 0})
        day["revenue"] += order.total_amount
        day["orders"] += 1
    for item in _items_for(trend_orders):
        trend[_local_date(item.order.created_at)]["profit"] += line_figures(item, ratio).profit

    return {
        "today": _period_stats(_completed_since(start_of_day), ratio),
        "week": _period_stats(_completed_since(start_of_week), ratio),
        "month": _period_stats(_completed_since(start_of_month), ratio, with_margin=True),
        "low_stock_products": [
            {
                "id": p.pk,
                "name": p.name,
                "brand": p.brand,
                "stock_quantity": p.stock_quantity,
                "min_stock_level": p.min_stock_level,
                "shortage": p.shortage,
            }
            for p in low_stock
        ],
        "recent_orders": [
            {
                "id": o.pk,
                "customer_name": o.customer_name,
                "total_amount": money(o.total_amount),
                "status": o.status,
                "created_at": o.created_at.isoformat(),
                "items_count": o.items_count,
            }
            for o in recent_orders
        ],
        "top_products": top_products,
        "profit_trend": [
            {
                "date": date.isoformat(),
                "daily_profit": money(day["profit"]),
                "daily_revenue": money(day["revenue"]),
                "daily_orders": day["orders"],
            }
            for date, day in sorted(trend.items(), reverse=True)
        ],
        "generated_at": timezone.now().isoformat(),
    }


def admin_stats() -> dict:
    """Headline counters for the back office header."""
    revenue = Order.objects.aggregate(total=Sum("total_amount", default=ZERO))["total"]
    customers = (
        Order.objects.exclude(customer_email="")
        .values("customer_email")
        .distinct()
        .count()
    )
    return {
        "total_products": Product.objects.active().count(),
        "total_orders": Order.objects.count(),
        "total_revenue": money(revenue),
        "active_customers": customers,
    }


def _with_sales(products):
    return products.annotate(
        total_sold=Sum("order_items__quantity", default=0),
        total_revenue=Sum("order_items__total_price", default=ZERO),
        total_orders=Count("order_items__order", distinct=True),
    )


def product_sales() -> list:
    """Every product with its units sold, revenue and order count."""
    products = _with_sales(Product.objects.all()).order_by("-total_revenue", "name")
    return [
        {
            "id": p.pk,
            "name": p.name,
            "brand": p.brand,
            "category": p.category,
            "price": money(p.price),
            "cost_price": money(p.cost_price),
            "stock_quantity": p.stock_quantity,
            "is_active": p.is_active,
            "total_sold": p.total_sold,
            "total_revenue": money(p.total_revenue),
            "total_orders": p.total_orders,
        }
        for p in products
    ]


def product_stats(product_id):
    """Sales detail for one product, or None when it does not exist."""
    product = (
        _with_sales(Product.objects.filter(pk=product_id))
        .annotate(avg_selling_price=Avg("order_items__unit_price"))
        .first()
    )
    if product is None:
        return None

    recent_lines = (
        OrderItem.objects.filter(product=product)
        .select_related("order")
        .order_by("-order__created_at", "-id")[:10]
    )
    inventory_history = product.inventory_records.order_by("-purchase_date", "-id")[:10]

    return {
        "id": product.pk,
        "name": product.name,
        "brand": product.brand,
        "category": product.category,
        "price": money(product.price),
        "cost_price": money(product.cost_price),
        "stock_quantity": product.stock_quantity,
        "min_stock_level": product.min_stock_level,
        "is_active": product.is_active,
        "total_sold": product.total_sold,
        "total_revenue": money(product.total_revenue),
        "total_orders": product.total_orders,
        "avg_selling_price": money(product.avg_selling_price if product.avg_selling_price is not None else product.price),
        "profit_per_unit": money(product.profit_per_unit),
        "profit_margin": money(product.profit_margin),
        "recent_orders": [
            {
                "id": line.order_id,
                "customer_name": line.order.customer_name,
                "customer_email": line.order.customer_email,
                "created_at": line.order.created_at.isoformat(),
                "quantity": line.quantity,
                "unit_price": money(line.unit_price),
                "total_price": money(line.total_price),
            }
            for line in recent_lines
        ],
        "inventory_history": [
            {
                "id": record.pk,
                "purchase_date": record.purchase_date.isoformat(),
                "purchase_price": money(record.purchase_price),
                "purchase_quantity": record.purchase_quantity,
                "supplier_name": record.supplier_name,
                "notes": record.notes,
            }
            for record in inventory_history
        ],
    }

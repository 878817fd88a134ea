"""Store API views: checkout, order management, customers."""

import logging

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import render
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from beautycatalog.catalog.models import Currency
from beautycatalog.core.auth import check_staff
from beautycatalog.core.forms import merge_payload, payload_data
from beautycatalog.core.http import (
    InvalidPayload,
    form_errors,
    json_error,
    no_cache,
    parse_json_body,
    parse_positive_int,
)
from beautycatalog.core.mixins import StaffRequiredMixin

from . import services
from .exceptions import OrderError
from .forms import CheckoutForm, CustomerForm, OrderUpdateForm
from .models import Customer, Order
from .serializers import serialize_customer, serialize_order

logger = logging.getLogger(__name__)

CHECKOUT_FIELDS = ["customer_name", "customer_email", "customer_phone", "status"]
ORDER_UPDATE_FIELDS = ["status", "customer_name", "customer_email", "customer_phone"]
CUSTOMER_FIELDS = ["name", "email", "phone", "address"]


def _orders_with_items():
    return Order.objects.prefetch_related("items__product")


def _parse_items(raw_items):
    """Normalize ``[{id|product_id, quantity}]`` into (product_id, quantity) pairs.

    Returns None when any line is malformed.
    """
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            return None
        product_id = parse_positive_int(raw.get("product_id", raw.get("id")))
        quantity = parse_positive_int(raw.get("quantity", 1))
        if product_id is None or quantity is None:
            return None
        items.append((product_id, quantity))
    return items


@method_decorator(csrf_exempt, name="dispatch")
class OrderListView(View):
    """Order intake and listing.

    POST /api/orders
    {
        "customer_name": "Ana",
        "customer_email": "ana@example.com",
        "customer_phone": "8888-0000",
        "items": [{"product_id": 1, "quantity": 2}]
    }

    GET /api/orders?customer_email=<email> (public lookup)
    GET /api/orders (staff)
    """

    def get(self, request):
        orders = _orders_with_items()

        customer_email = request.GET.get("customer_email", "").strip().lower()
        if customer_email:
            orders = orders.filter(customer_email__iexact=customer_email)
        else:
            denied = check_staff(request)
            if denied is not None:
                return denied

        status = request.GET.get("status", "").strip()
        if status:
            orders = orders.filter(status=status)

        return no_cache(JsonResponse([serialize_order(o) for o in orders], safe=False))

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        raw_items = data.get("items")
        if not isinstance(raw_items, list) or not raw_items:
            return json_error("Order must contain at least one item", code="EMPTY_ORDER")

        items = _parse_items(raw_items)
        if items is None:
            return json_error("Each item needs a product id and a positive quantity", code="INVALID_ITEM")

        form = CheckoutForm(payload_data(data, CHECKOUT_FIELDS))
        if not form.is_valid():
            return form_errors(form)

        try:
            order = services.place_order(
                customer_name=form.cleaned_data["customer_name"],
                customer_email=form.cleaned_data["customer_email"],
                customer_phone=form.cleaned_data["customer_phone"],
                items=items,
                status=form.cleaned_data["status"],
            )
        except OrderError as e:
            logger.warning(f"Order rejected: {e.code} {e.message}")
            return JsonResponse(e.as_dict(), status=400)

        order = _orders_with_items().get(pk=order.pk)
        return JsonResponse({**serialize_order(order), "message": "Order placed successfully"}, status=201)


@method_decorator(csrf_exempt, name="dispatch")
class OrderDetailView(View):
    """GET (public), PUT/PATCH/DELETE (staff) /api/orders/<id>"""

    def get_order(self, order_id):
        return _orders_with_items().filter(pk=order_id).first()

    def get(self, request, order_id):
        order = self.get_order(order_id)
        if order is None:
            return json_error("Order not found", status=404)
        return no_cache(JsonResponse(serialize_order(order)))

    def put(self, request, order_id):
        denied = check_staff(request)
        if denied is not None:
            return denied

        order = self.get_order(order_id)
        if order is None:
            return json_error("Order not found", status=404)

        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = OrderUpdateForm(merge_payload(payload, order, ORDER_UPDATE_FIELDS), instance=order)
        if not form.is_valid():
            return form_errors(form)

        order = services.update_order(form)
        return JsonResponse(serialize_order(self.get_order(order.pk)))

    patch = put

    def delete(self, request, order_id):
        denied = check_staff(request)
        if denied is not None:
            return denied

        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return json_error("Order not found", status=404)

        services.delete_order(order)
        return JsonResponse({"success": True, "message": "Order deleted successfully"})


class OrderInvoiceView(View):
    """GET /api/orders/<id>/invoice renders a printable HTML invoice."""

    def get(self, request, order_id):
        order = _orders_with_items().select_related("customer").filter(pk=order_id).first()
        if order is None:
            return json_error("Order not found", status=404)

        context = {
            "order": order,
            "items": order.items.all(),
            "currency_symbol": _currency_symbol(),
        }
        response = render(request, "store/invoice.html", context)
        response["Content-Disposition"] = f'inline; filename="factura-{order.pk}.html"'
        return response


def _currency_symbol():
    currency = Currency.objects.filter(code=settings.SHOP_DEFAULT_CURRENCY).first()
    return currency.symbol if currency else settings.SHOP_DEFAULT_CURRENCY


@method_decorator(csrf_exempt, name="dispatch")
class CustomerListView(StaffRequiredMixin, View):
    """GET/POST /api/customers"""

    def get(self, request):
        customers = Customer.objects.all()
        return no_cache(JsonResponse([serialize_customer(c) for c in customers], safe=False))

    def post(self, request):
        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = CustomerForm(payload_data(payload, CUSTOMER_FIELDS))
        if not form.is_valid():
            return form_errors(form)

        customer = form.save()
        logger.info(f"Customer created: {customer.pk}")
        return JsonResponse(serialize_customer(customer), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class CustomerDetailView(StaffRequiredMixin, View):
    """GET/PUT/DELETE /api/customers/<id>"""

    def get(self, request, customer_id):
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return json_error("Customer not found", status=404)
        return JsonResponse(serialize_customer(customer))

    def put(self, request, customer_id):
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return json_error("Customer not found", status=404)

        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = CustomerForm(merge_payload(payload, customer, CUSTOMER_FIELDS), instance=customer)
        if not form.is_valid():
            return form_errors(form)

        customer = form.save()
        return JsonResponse(serialize_customer(customer))

    patch = put

    def delete(self, request, customer_id):
        customer = Customer.objects.filter(pk=customer_id).first()
        if customer is None:
            return json_error("Customer not found", status=404)

        services.delete_customer(customer)
        return JsonResponse({"success": True, "message": "Customer deleted successfully"})

"""Catalog API views: public storefront listing and admin product management."""

import logging

from django.db.models import Q
from django.http import JsonResponse
from django.shortcuts import get_object_or_404
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from beautycatalog.core.auth import check_staff
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
from .forms import ProductForm, StockForm, product_form_data
from .models import DEFAULT_CURRENCIES, Currency, Product
from .serializers import serialize_currency, serialize_product

logger = logging.getLogger(__name__)


@method_decorator(csrf_exempt, name="dispatch")
class ProductListView(View):
    """Storefront product listing.

    GET /api/products?category=<name>&q=<text>
    POST /api/products (staff)
    """

    def get(self, request):
        products = Product.objects.active()

        category = request.GET.get("category", "").strip()
        if category:
            products = products.filter(category__iexact=category)

        query = request.GET.get("q", "").strip()
        if query:
            products = products.filter(
                Q(name__icontains=query) | Q(description__icontains=query) | Q(brand__icontains=query)
            )

        data = [serialize_product(p) for p in products]
        return no_cache(JsonResponse(data, safe=False))

    def post(self, request):
        denied = check_staff(request)
        if denied is not None:
            return denied
        return _create_product(request, public=True)


@method_decorator(csrf_exempt, name="dispatch")
class ProductDetailView(View):
    """GET /api/products/<id>, PUT /api/products/<id> (staff, stock only)."""

    def get(self, request, product_id):
        product = get_object_or_404(Product.objects.active(), pk=product_id)
        return no_cache(JsonResponse(serialize_product(product)))

    def put(self, request, product_id):
        denied = check_staff(request)
        if denied is not None:
            return denied

        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = StockForm({"stock_quantity": data.get("stock_quantity")})
        if not form.is_valid():
            return form_errors(form)

        product = Product.objects.filter(pk=product_id).first()
        if product is None:
            return json_error("Product not found", status=404)

        product = services.set_stock(product, form.cleaned_data["stock_quantity"])
        return JsonResponse(serialize_product(product))


@method_decorator(csrf_exempt, name="dispatch")
class CheckStockView(View):
    """Check availability of a prospective cart.

    POST /api/products/check-stock
    {"items": [{"id": 1, "quantity": 2}, ...]}
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        raw_items = data.get("items")
        if not isinstance(raw_items, list) or not raw_items:
            return json_error("Items array is required")

        items = []
        for raw in raw_items:
            if not isinstance(raw, dict):
                return json_error("Each item needs a product id and a positive quantity")
            product_id = parse_positive_int(raw.get("id", raw.get("product_id")))
            quantity = parse_positive_int(raw.get("quantity"))
            if product_id is None or quantity is None:
                return json_error("Each item needs a product id and a positive quantity")
            items.append((product_id, quantity))

        return no_cache(JsonResponse(services.check_stock(items)))


@method_decorator(csrf_exempt, name="dispatch")
class CategoryListView(View):
    """Categories are derived from the products themselves."""

    def get(self, request):
        return JsonResponse(services.list_categories(), safe=False)

    def post(self, request):
        return JsonResponse({
            "success": True,
            "message": "Categories are derived from product data; set a product's category to add one",
        })


class CurrencyListView(View):
    """GET /api/currencies"""

    def get(self, request):
        currencies = [serialize_currency(c) for c in Currency.objects.all()]
        if not currencies:
            currencies = [dict(c) for c in DEFAULT_CURRENCIES]
        return JsonResponse(currencies, safe=False)


def _create_product(request, public=False):
    try:
        payload = parse_json_body(request)
    except InvalidPayload as e:
        return json_error(str(e))

    data = product_form_data(payload)
    if public:
        data["is_active"] = True
    form = ProductForm(data)
    if not form.is_valid():
        return form_errors(form)

    product = services.create_product(form)
    return JsonResponse(serialize_product(product, admin=True), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class AdminProductListView(StaffRequiredMixin, View):
    """GET/POST /api/admin/products"""

    def get(self, request):
        products = Product.objects.select_related("currency")
        data = [serialize_product(p, admin=True) for p in products]
        return no_cache(JsonResponse(data, safe=False))

    def post(self, request):
        return _create_product(request)


@method_decorator(csrf_exempt, name="dispatch")
class AdminProductDetailView(StaffRequiredMixin, View):
    """GET/PUT/DELETE /api/admin/products/<id>"""

    def get_product(self, product_id):
        return Product.objects.select_related("currency").filter(pk=product_id).first()

    def get(self, request, product_id):
        product = self.get_product(product_id)
        if product is None:
            return json_error("Product not found", status=404)
        return JsonResponse(serialize_product(product, admin=True))

    def put(self, request, product_id):
        product = self.get_product(product_id)
        if product is None:
            return json_error("Product not found", status=404)

        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = ProductForm(product_form_data(payload, instance=product), instance=product)
        if not form.is_valid():
            return form_errors(form)

        product = services.update_product(form)
        return JsonResponse(serialize_product(product, admin=True))

    patch = put

    def delete(self, request, product_id):
        product = self.get_product(product_id)
        if product is None:
            return json_error("Product not found", status=404)

        deleted = services.delete_product(product)
        return JsonResponse({"success": True, "message": "Product deleted", "product": deleted})


@method_decorator(csrf_exempt, name="dispatch")
class UploadView(StaffRequiredMixin, View):
    """POST /api/upload (multipart, ``file`` field)"""

    def post(self, request):
        upload = request.FILES.get("file")
        if upload is None:
            return json_error("No file uploaded")
        try:
            result = services.store_product_image(upload)
        except services.UploadError as e:
            return json_error(str(e))
        return JsonResponse(result)

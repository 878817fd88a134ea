"""Inventory and reporting API views (staff only)."""

import logging

from django.http import JsonResponse
from django.utils.dateparse import parse_date
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from beautycatalog.core.forms import merge_payload, payload_data
from beautycatalog.core.http import InvalidPayload, form_errors, json_error, no_cache, parse_json_body
from beautycatalog.core.mixins import StaffRequiredMixin

from . import reports, services
from .forms import RECORD_FIELDS, InventoryRecordForm, InventoryRecordUpdateForm
from .models import InventoryRecord
from .serializers import serialize_record

logger = logging.getLogger(__name__)


def _records():
    return InventoryRecord.objects.select_related("product")


@method_decorator(csrf_exempt, name="dispatch")
class InventoryListView(StaffRequiredMixin, View):
    """Purchase batches.

    GET /api/inventory
    POST /api/inventory
    {
        "product_id": 1,
        "purchase_price": "120.00",
        "purchase_quantity": 10,
        "current_stock": 25,
        "supplier_name": "Distribuidora"
    }
    """

    def get(self, request):
        data = [serialize_record(r) for r in _records()]
        return no_cache(JsonResponse(data, safe=False))

    def post(self, request):
        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        if "product" not in payload:
            payload["product"] = payload.get("product_id")
        form = InventoryRecordForm(payload_data(payload, ["product", "current_stock", *RECORD_FIELDS]))
        if not form.is_valid():
            return form_errors(form)

        record = services.create_record(form)
        return JsonResponse(serialize_record(record), status=201)


@method_decorator(csrf_exempt, name="dispatch")
class InventoryDetailView(StaffRequiredMixin, View):
    """GET/PUT/DELETE /api/inventory/<id>"""

    def get(self, request, record_id):
        record = _records().filter(pk=record_id).first()
        if record is None:
            return json_error("Inventory record not found", status=404)
        return JsonResponse(serialize_record(record))

    def put(self, request, record_id):
        record = _records().filter(pk=record_id).first()
        if record is None:
            return json_error("Inventory record not found", status=404)

        try:
            payload = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        form = InventoryRecordUpdateForm(merge_payload(payload, record, RECORD_FIELDS), instance=record)
        if not form.is_valid():
            return form_errors(form)

        sync_product = payload.get("update_product_stock", True) is not False
        record = services.update_record(form, sync_product=sync_product)
        return JsonResponse(serialize_record(record))

    patch = put

    def delete(self, request, record_id):
        record = _records().filter(pk=record_id).first()
        if record is None:
            return json_error("Inventory record not found", status=404)

        deleted = services.delete_record(record)
        return JsonResponse({"success": True, "message": "Inventory record deleted", "record": deleted})


class ProfitReportView(StaffRequiredMixin, View):
    """GET /api/reports/profits?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD"""

    def get(self, request):
        raw_start = request.GET.get("startDate") or request.GET.get("start_date")
        raw_end = request.GET.get("endDate") or request.GET.get("end_date")
        if not raw_start or not raw_end:
            return json_error("Start date and end date are required")

        try:
            start_date = parse_date(raw_start)
            end_date = parse_date(raw_end)
        except ValueError:
            start_date = end_date = None
        if start_date is None or end_date is None:
            return json_error("Dates must use the YYYY-MM-DD format")
        if start_date > end_date:
            return json_error("Start date must not be after end date")

        return no_cache(JsonResponse(reports.profit_report(start_date, end_date)))


class DashboardView(StaffRequiredMixin, View):
    """GET /api/analytics/dashboard"""

    def get(self, request):
        return no_cache(JsonResponse(reports.dashboard()))


class AdminStatsView(StaffRequiredMixin, View):
    """GET /api/admin/stats"""

    def get(self, request):
        return no_cache(JsonResponse(reports.admin_stats()))


class ProductSalesView(StaffRequiredMixin, View):
    """GET /api/stats/products"""

    def get(self, request):
        return no_cache(JsonResponse(reports.product_sales(), safe=False))


class ProductStatsView(StaffRequiredMixin, View):
    """GET /api/admin/stats/products/<id>"""

    def get(self, request, product_id):
        stats = reports.product_stats(product_id)
        if stats is None:
            return json_error("Product not found", status=404)
        return no_cache(JsonResponse(stats))

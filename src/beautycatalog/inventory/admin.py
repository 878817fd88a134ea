from django.contrib import admin

from .models import InventoryRecord


@admin.register(InventoryRecord)
class InventoryRecordAdmin(admin.ModelAdmin):
    list_display = ["product", "purchase_price", "purchase_quantity", "purchase_date", "supplier_name"]
    list_filter = ["purchase_date"]
    search_fields = ["product__name", "supplier_name", "notes"]
    autocomplete_fields = ["product"]
    date_hierarchy = "purchase_date"

from django.contrib import admin

from .models import Currency, Product


@admin.register(Currency)
class CurrencyAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "symbol", "flag_emoji"]
    search_fields = ["code", "name"]


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "category", "brand", "price", "cost_price", "currency", "stock_quantity", "is_active"]
    list_filter = ["is_active", "category", "currency"]
    search_fields = ["name", "brand", "sku", "description"]
    list_editable = ["stock_quantity", "is_active"]
    ordering = ["-created_at"]

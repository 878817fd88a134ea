from django.contrib import admin

from .models import Customer, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ["product", "product_name", "quantity", "unit_price", "total_price"]
    readonly_fields = ["product", "product_name", "quantity", "unit_price", "total_price"]
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "customer_name", "customer_email", "customer_phone", "total_amount", "status", "created_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["customer_name", "customer_email", "customer_phone"]
    readonly_fields = ["customer", "total_amount", "created_at", "updated_at"]
    inlines = [OrderItemInline]
    date_hierarchy = "created_at"


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "phone", "total_orders", "total_spent", "last_purchase_date"]
    search_fields = ["name", "email", "phone"]
    readonly_fields = ["total_orders", "total_spent", "first_purchase_date", "last_purchase_date"]

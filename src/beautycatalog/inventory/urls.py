"""Inventory and reporting API URL configuration."""

from django.urls import path

from . import views

app_name = "inventory"

urlpatterns = [
    path("inventory", views.InventoryListView.as_view(), name="record-list"),
    path("inventory/<int:record_id>", views.InventoryDetailView.as_view(), name="record-detail"),
    path("reports/profits", views.ProfitReportView.as_view(), name="profit-report"),
    path("analytics/dashboard", views.DashboardView.as_view(), name="dashboard"),
    path("admin/stats", views.AdminStatsView.as_view(), name="admin-stats"),
    path("admin/stats/products/<int:product_id>", views.ProductStatsView.as_view(), name="product-stats"),
    path("stats/products", views.ProductSalesView.as_view(), name="product-sales"),
]

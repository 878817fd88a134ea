"""Store API URL configuration."""

from django.urls import path

from . import views

app_name = "store"

urlpatterns = [
    path("orders", views.OrderListView.as_view(), name="order-list"),
    path("orders/<int:order_id>", views.OrderDetailView.as_view(), name="order-detail"),
    path("orders/<int:order_id>/invoice", views.OrderInvoiceView.as_view(), name="order-invoice"),
    path("customers", views.CustomerListView.as_view(), name="customer-list"),
    path("customers/<int:customer_id>", views.CustomerDetailView.as_view(), name="customer-detail"),
]

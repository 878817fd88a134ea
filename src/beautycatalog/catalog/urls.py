"""Catalog API URL configuration."""

from django.urls import path

from . import views

app_name = "catalog"

urlpatterns = [
    path("products", views.ProductListView.as_view(), name="product-list"),
    path("products/check-stock", views.CheckStockView.as_view(), name="check-stock"),
    path("products/<int:product_id>", views.ProductDetailView.as_view(), name="product-detail"),
    path("categories", views.CategoryListView.as_view(), name="category-list"),
    path("currencies", views.CurrencyListView.as_view(), name="currency-list"),
    path("admin/products", views.AdminProductListView.as_view(), name="admin-product-list"),
    path("admin/products/<int:product_id>", views.AdminProductDetailView.as_view(), name="admin-product-detail"),
    path("upload", views.UploadView.as_view(), name="upload"),
]

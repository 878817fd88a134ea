"""Admin authentication URL patterns."""

from django.urls import path

from . import views

app_name = "accounts"

urlpatterns = [
    path("admin-login", views.AdminLoginView.as_view(), name="admin-login"),
    path("check", views.AuthCheckView.as_view(), name="check"),
    path("logout", views.LogoutView.as_view(), name="logout"),
]

"""URL configuration for the Beauty Catalog project."""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from beautycatalog.core.views import health_check

urlpatterns = [
    # Health check
    path("health/", health_check, name="health_check"),

    # Django admin (HTML back office)
    path("admin/", admin.site.urls),

    # Admin authentication
    path("api/auth/", include("beautycatalog.core.urls", namespace="accounts")),

    # Catalog, admin product management, uploads
    path("api/", include("beautycatalog.catalog.urls", namespace="catalog")),

    # Orders and customers
    path("api/", include("beautycatalog.store.urls", namespace="store")),

    # Inventory, reports and stats
    path("api/", include("beautycatalog.inventory.urls", namespace="inventory")),

    # SSE stream and push subscriptions
    path("api/", include("beautycatalog.notifications.urls", namespace="notifications")),
]

# Serve uploaded images in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)

"""Context processors for Beauty Catalog templates."""

from django.conf import settings


def shop_context(request):
    """Add shop branding to templates."""
    return {
        "shop_name": settings.SHOP_NAME,
        "shop_tagline": settings.SHOP_TAGLINE,
    }

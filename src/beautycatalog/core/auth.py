"""Authentication helpers for the JSON API.

Admins authenticate either with a Django session (browser back office)
or with a REST framework token sent as ``Authorization: Bearer <token>``.
"""

import logging
from functools import wraps

from django.http import JsonResponse

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def get_bearer_token(request):
    """Return the raw bearer token from the request, if any."""
    auth_header = request.headers.get("Authorization", "")
    if not auth_header.startswith(BEARER_PREFIX):
        return None
    return auth_header[len(BEARER_PREFIX):].strip() or None


def get_token_user(key):
    """Resolve a token key to an active user, or None."""
    from rest_framework.authtoken.models import Token

    try:
        token = Token.objects.select_related("user").get(key=key)
    except Token.DoesNotExist:
        return None
    if not token.user.is_active:
        return None
    return token.user


def check_staff(request):
    """Return an error response when the request is not from an admin."""
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return JsonResponse({"error": "Unauthorized"}, status=401)
    if not user.is_staff:
        return JsonResponse({"error": "Staff access required"}, status=403)
    return None


def staff_required(view_func):
    """Decorator to require an authenticated staff user."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        denied = check_staff(request)
        if denied is not None:
            logger.warning(f"Rejected admin request to {request.path}")
            return denied
        return view_func(request, *args, **kwargs)

    return wrapper

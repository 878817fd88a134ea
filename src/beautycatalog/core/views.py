"""Core views: health check and admin authentication endpoints."""

import logging

from django.contrib.auth import authenticate, login, logout
from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .auth import get_bearer_token
from .http import InvalidPayload, json_error, parse_json_body

logger = logging.getLogger(__name__)


def health_check(request):
    """Health check endpoint for container orchestration."""
    from django.db import connection

    try:
        # Check database connection
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({"status": "healthy", "database": "connected"})
    except Exception as e:
        logger.exception("Health check failed")
        return JsonResponse(
            {"status": "unhealthy", "error": str(e)},
            status=503,
        )


def _serialize_user(user):
    return {
        "id": str(user.pk),
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "display_name": user.get_display_name(),
    }


@method_decorator(csrf_exempt, name="dispatch")
class AdminLoginView(View):
    """Login endpoint for the back office.

    POST /api/auth/admin-login
    {
        "username": "admin@example.com",
        "password": "secret"
    }

    Starts a session and returns an auth token for bearer clients.
    """

    def post(self, request):
        try:
            data = parse_json_body(request)
        except InvalidPayload as e:
            return json_error(str(e))

        username = str(data.get("username") or data.get("email") or "").strip().lower()
        password = data.get("password") or ""

        if not username or not password:
            return json_error("Username and password required")

        user = authenticate(request, username=username, password=password)

        if not user:
            logger.warning("Failed admin login attempt")
            return json_error("Invalid credentials", status=401)

        if not user.is_staff:
            return json_error("Staff access required", status=403)

        login(request, user)

        from rest_framework.authtoken.models import Token
        token, _ = Token.objects.get_or_create(user=user)

        logger.info(f"Admin logged in: {user.email}")
        return JsonResponse({
            "success": True,
            "token": token.key,
            "user": _serialize_user(user),
        })


class AuthCheckView(View):
    """Report whether the caller is an authenticated admin.

    GET /api/auth/check
    """

    def get(self, request):
        user = request.user
        if user.is_authenticated and user.is_staff:
            return JsonResponse({"authenticated": True, "user": _serialize_user(user)})
        return JsonResponse({"authenticated": False}, status=401)


@method_decorator(csrf_exempt, name="dispatch")
class LogoutView(View):
    """End the admin session and revoke the bearer token.

    POST /api/auth/logout
    """

    def post(self, request):
        key = get_bearer_token(request)
        if key:
            from rest_framework.authtoken.models import Token
            Token.objects.filter(key=key).delete()
        elif request.user.is_authenticated:
            from rest_framework.authtoken.models import Token
            Token.objects.filter(user=request.user).delete()

        logout(request)
        return JsonResponse({"success": True})

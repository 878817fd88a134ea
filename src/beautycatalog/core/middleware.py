"""Core middleware for Beauty Catalog."""

from .auth import check_staff, get_bearer_token, get_token_user

ADMIN_API_PREFIX = "/api/admin/"


class AdminAPIMiddleware:
    """Middleware for token authentication and the admin API boundary.

    A valid bearer token replaces ``request.user``. Requests under
    ``/api/admin/`` must come from a staff user.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        key = get_bearer_token(request)
        if key:
            user = get_token_user(key)
            if user is not None:
                request.user = user

        if request.path.startswith(ADMIN_API_PREFIX):
            denied = check_staff(request)
            if denied is not None:
                return denied

        return self.get_response(request)

"""Core mixins for view access control."""

from .auth import staff_required


class StaffRequiredMixin:
    """Mixin for back office views: every method requires a staff user.

    Unlike ``LoginRequiredMixin`` this answers with a JSON 401/403
    instead of redirecting to a login page.
    """

    def dispatch(self, request, *args, **kwargs):
        return staff_required(super().dispatch)(request, *args, **kwargs)

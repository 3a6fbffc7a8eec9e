from rest_framework.permissions import BasePermission


class IsAdminTier(BasePermission):
    """Route / batch configuration and other admin-only tools."""

    message = "Admin only."

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, "is_admin_tier", False))

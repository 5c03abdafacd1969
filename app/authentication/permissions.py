"""
Role-based permission classes for DRF views.

Usage:
    from authentication.permissions import IsAdminRole

    class DashboardView(APIView):
        permission_classes = [IsAuthenticated, IsAdminRole]
"""

from rest_framework.permissions import BasePermission

from authentication.models import UserRole


class IsAdminRole(BasePermission):
    """Allow access only to authenticated users tagged with the admin role."""

    message = "Admin role required."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user and user.is_authenticated and getattr(user, "role", None) == UserRole.ADMIN
        )

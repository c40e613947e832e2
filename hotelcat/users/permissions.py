from rest_framework.permissions import BasePermission

from .models import User


def _has_role(request, *roles):
    user = request.user
    return bool(user and user.is_authenticated and user.role in roles)


class IsAdmin(BasePermission):
    """User has the ADMIN role."""

    def has_permission(self, request, view):
        return _has_role(request, User.Role.ADMIN)


class IsAdminOrManager(BasePermission):
    """User has the ADMIN or MANAGER role."""

    def has_permission(self, request, view):
        return _has_role(request, User.Role.ADMIN, User.Role.MANAGER)

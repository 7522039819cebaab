# users/permissions.py

from rest_framework.permissions import BasePermission

from users.models import User


class HasRole(BasePermission):
    """
    Grants access when the authenticated user's role is in `allowed_roles`.
    """

    allowed_roles: set = set()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return getattr(user, "role", None) in self.allowed_roles


class IsAdmin(HasRole):
    """Back-office staff: ship orders, resolve refunds, manage commissions."""

    allowed_roles = {User.ROLE_ADMIN}

from rest_framework import permissions

from .models import OPERATOR_ROLES


class IsAdmin(permissions.BasePermission):
    """
    Permission class to check if user has an operator (admin) role.
    """

    def has_permission(self, request, view):
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.role in OPERATOR_ROLES
        )


class IsOrderOwnerOrAdmin(permissions.BasePermission):
    """
    Object-level permission: the order's owner or an operator.
    """

    def has_object_permission(self, request, view, obj):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return user.role in OPERATOR_ROLES or obj.user_id == user.id

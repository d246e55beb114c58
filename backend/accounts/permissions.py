from rest_framework import permissions
from .utils import get_user_role


class RolePermission(permissions.BasePermission):
    """
    Allow access based on the caller's role.
    allowed_roles: list of roles allowed.
    """
    allowed_roles = []

    def has_permission(self, request, view):
        role = get_user_role(request)
        return role in self.allowed_roles


class StaffPermission(RolePermission):
    allowed_roles = ['super_admin', 'admin', 'manager', 'staff']


class ManagerPermission(RolePermission):
    allowed_roles = ['super_admin', 'admin', 'manager']


class SuperAdminPermission(RolePermission):
    allowed_roles = ['super_admin']


class ManagerWritePermission(permissions.BasePermission):
    """Any role may read; writes need manager or above."""

    def has_permission(self, request, view):
        role = get_user_role(request)
        if request.method in permissions.SAFE_METHODS:
            return role in StaffPermission.allowed_roles
        return role in ManagerPermission.allowed_roles

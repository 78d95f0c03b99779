"""
Permission classes for tenant-based access control.
"""

from django.shortcuts import get_object_or_404

from rest_framework import permissions

from apps.core.models import Branch


class HasTenantAccess(permissions.BasePermission):
    """
    Permission class to ensure users can only access resources from their own tenant.
    """

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.tenant is not None

    def has_object_permission(self, request, view, obj):
        if hasattr(obj, "tenant"):
            return obj.tenant == request.user.tenant
        return True


class CanManageTreasury(permissions.BasePermission):
    """
    Only tenant owners and managers may move treasury money by hand.
    """

    message = "Only tenant owners and managers can perform this action."

    def has_permission(self, request, view):
        return request.user.is_authenticated and request.user.can_manage_treasury()


def get_tenant_branch(request, branch_id):
    """
    Resolve a branch id from the URL within the requesting user's tenant.

    Branches of other tenants are reported as not found rather than forbidden.
    """
    return get_object_or_404(Branch, id=branch_id, tenant=request.user.tenant)

"""
Django admin configuration for core models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from apps.core.audit_models import AuditLog

from .models import Branch, Tenant, User


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """Admin interface for Tenant model."""

    list_display = ["company_name", "slug", "status", "created_at", "updated_at"]
    list_filter = ["status", "created_at"]
    search_fields = ["company_name", "slug"]
    readonly_fields = ["id", "created_at", "updated_at"]
    prepopulated_fields = {"slug": ("company_name",)}


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ["name", "tenant", "phone", "is_active", "created_at"]
    list_filter = ["is_active", "tenant"]
    search_fields = ["name", "tenant__company_name"]
    readonly_fields = ["id", "created_at", "updated_at"]


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for the tenant-aware User model."""

    list_display = ["username", "email", "tenant", "role", "branch", "is_active"]
    list_filter = ["role", "is_active", "tenant"]
    search_fields = ["username", "email", "tenant__company_name"]

    fieldsets = BaseUserAdmin.fieldsets + (
        ("Tenant Information", {"fields": ("tenant", "role", "branch", "phone")}),
    )

    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Tenant Information", {"fields": ("tenant", "role", "branch")}),
    )


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    """Read-only audit trail."""

    list_display = ["timestamp", "action", "category", "user", "tenant", "object_type"]
    list_filter = ["category", "action", "severity"]
    search_fields = ["description", "object_id", "user__username"]
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

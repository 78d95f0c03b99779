"""
Admin configuration for procurement models.
"""

from django.contrib import admin

from .models import Supplier, SupplierTransaction


class SupplierTransactionInline(admin.TabularInline):
    model = SupplierTransaction
    extra = 0
    fields = [
        "transaction_number",
        "transaction_type",
        "amount",
        "balance_after_transaction",
        "branch",
        "transaction_date",
    ]
    readonly_fields = fields
    can_delete = False


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    """Admin interface for Supplier model."""

    list_display = [
        "name",
        "contact_person",
        "phone",
        "current_balance",
        "is_active",
        "created_at",
    ]
    list_filter = ["is_active", "tenant"]
    search_fields = ["name", "contact_person", "email", "phone"]
    readonly_fields = ["id", "created_at", "updated_at"]
    inlines = [SupplierTransactionInline]


@admin.register(SupplierTransaction)
class SupplierTransactionAdmin(admin.ModelAdmin):
    list_display = [
        "transaction_number",
        "supplier",
        "transaction_type",
        "amount",
        "balance_after_transaction",
        "transaction_date",
    ]
    list_filter = ["transaction_type"]
    search_fields = ["transaction_number", "supplier__name", "reference_number"]
    readonly_fields = ["id", "transaction_date"]

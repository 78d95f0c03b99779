"""
Admin configuration for cash drawers.
"""

from django.contrib import admin

from .models import CashDrawerBalance


@admin.register(CashDrawerBalance)
class CashDrawerBalanceAdmin(admin.ModelAdmin):
    """Drawers are changed through the API only; admin is for inspection."""

    list_display = [
        "balance_date",
        "branch",
        "status",
        "opening_balance",
        "expected_closing_balance",
        "actual_closing_balance",
        "settled_amount",
        "carried_forward_amount",
    ]
    list_filter = ["status", "branch", "balance_date"]
    search_fields = ["branch__name", "notes", "settlement_notes"]
    date_hierarchy = "balance_date"
    readonly_fields = [field.name for field in CashDrawerBalance._meta.fields]

    def has_add_permission(self, request):
        return False

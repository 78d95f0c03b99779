from django.contrib import admin

from .models import TreasuryAccount, TreasuryTransaction


@admin.register(TreasuryAccount)
class TreasuryAccountAdmin(admin.ModelAdmin):
    list_display = ["branch", "tenant", "current_balance", "currency_code", "is_active"]
    list_filter = ["is_active", "currency_code"]
    search_fields = ["branch__name", "tenant__company_name"]
    readonly_fields = ["id", "current_balance", "created_at", "updated_at"]


@admin.register(TreasuryTransaction)
class TreasuryTransactionAdmin(admin.ModelAdmin):
    """The ledger is append-only."""

    list_display = [
        "performed_at",
        "account",
        "transaction_type",
        "direction",
        "amount",
        "balance_after",
        "performed_by",
    ]
    list_filter = ["transaction_type", "direction"]
    search_fields = ["notes", "reference_id", "account__branch__name"]
    readonly_fields = [field.name for field in TreasuryTransaction._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

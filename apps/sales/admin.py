"""
Django admin configuration for sales models.
"""

from django.contrib import admin

from .models import FinancialTransaction


@admin.register(FinancialTransaction)
class FinancialTransactionAdmin(admin.ModelAdmin):
    """Admin interface for FinancialTransaction model."""

    list_display = [
        "transaction_number",
        "branch",
        "transaction_type",
        "payment_method",
        "status",
        "amount_paid",
        "change_given",
        "transaction_date",
    ]
    list_filter = ["transaction_type", "payment_method", "status", "branch"]
    search_fields = ["transaction_number", "notes"]
    readonly_fields = ["id", "created_at", "updated_at"]
    date_hierarchy = "transaction_date"
    fieldsets = [
        (
            "Basic Information",
            {
                "fields": ["id", "tenant", "branch", "transaction_number", "transaction_type"],
            },
        ),
        (
            "Payment",
            {
                "fields": [
                    "payment_method",
                    "status",
                    "total_amount",
                    "amount_paid",
                    "change_given",
                ],
            },
        ),
        (
            "Processing",
            {
                "fields": ["transaction_date", "processed_by", "notes"],
            },
        ),
        (
            "Timestamps",
            {
                "fields": ["created_at", "updated_at"],
                "classes": ["collapse"],
            },
        ),
    ]

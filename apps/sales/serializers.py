"""
Serializers for POS money movements.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import FinancialTransaction


class FinancialTransactionSerializer(serializers.ModelSerializer):
    """Read serializer for financial transactions."""

    branch_name = serializers.CharField(source="branch.name", read_only=True)
    processed_by_username = serializers.CharField(
        source="processed_by.username", read_only=True, default=None
    )

    class Meta:
        model = FinancialTransaction
        fields = [
            "id",
            "transaction_number",
            "branch",
            "branch_name",
            "transaction_type",
            "payment_method",
            "status",
            "total_amount",
            "amount_paid",
            "change_given",
            "transaction_date",
            "processed_by",
            "processed_by_username",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class FinancialTransactionCreateSerializer(serializers.Serializer):
    """Input for recording a transaction from the POS."""

    transaction_type = serializers.ChoiceField(
        choices=FinancialTransaction.TRANSACTION_TYPE_CHOICES
    )
    payment_method = serializers.ChoiceField(
        choices=FinancialTransaction.PAYMENT_METHOD_CHOICES,
        default=FinancialTransaction.CASH,
    )
    status = serializers.ChoiceField(
        choices=FinancialTransaction.STATUS_CHOICES,
        default=FinancialTransaction.COMPLETED,
    )
    amount_paid = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    change_given = serializers.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal("0.00")
    )
    total_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00"), required=False
    )
    transaction_date = serializers.DateTimeField(required=False)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class FinancialTransactionFilterSerializer(serializers.Serializer):
    """Query parameters of the transaction list."""

    transaction_type = serializers.ChoiceField(
        choices=FinancialTransaction.TRANSACTION_TYPE_CHOICES, required=False
    )
    payment_method = serializers.ChoiceField(
        choices=FinancialTransaction.PAYMENT_METHOD_CHOICES, required=False
    )
    status = serializers.ChoiceField(choices=FinancialTransaction.STATUS_CHOICES, required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)

"""
Serializers for treasury API.
"""

from decimal import Decimal

from rest_framework import serializers

from apps.procurement.serializers import SupplierTransactionSerializer

from .models import TreasuryAccount, TreasuryTransaction


class TreasuryAccountSerializer(serializers.ModelSerializer):
    branch_name = serializers.CharField(source="branch.name", read_only=True)
    balance = serializers.DecimalField(
        source="current_balance", max_digits=14, decimal_places=2, read_only=True
    )

    class Meta:
        model = TreasuryAccount
        fields = ["id", "branch", "branch_name", "balance", "currency_code", "is_active", "updated_at"]
        read_only_fields = fields


class TreasuryTransactionSerializer(serializers.ModelSerializer):
    direction_display = serializers.CharField(source="get_direction_display", read_only=True)
    transaction_type_display = serializers.CharField(
        source="get_transaction_type_display", read_only=True
    )
    performed_by_username = serializers.CharField(
        source="performed_by.username", read_only=True, default=None
    )

    class Meta:
        model = TreasuryTransaction
        fields = [
            "id",
            "amount",
            "direction",
            "direction_display",
            "transaction_type",
            "transaction_type_display",
            "balance_after",
            "reference_type",
            "reference_id",
            "notes",
            "performed_at",
            "performed_by",
            "performed_by_username",
        ]
        read_only_fields = fields


class TransactionFilterSerializer(serializers.Serializer):
    date_from = serializers.DateField(required=False, allow_null=True)
    date_to = serializers.DateField(required=False, allow_null=True)
    transaction_type = serializers.ChoiceField(
        choices=TreasuryTransaction.TYPE_CHOICES, required=False, allow_null=True
    )


class AdjustSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    direction = serializers.ChoiceField(choices=TreasuryTransaction.DIRECTION_CHOICES)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=1000)


class FeedFromCashDrawerSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class PaySupplierSerializer(serializers.Serializer):
    supplier_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class TransferSerializer(serializers.Serializer):
    to_branch_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal("0.01"))
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class SupplierPaymentResultSerializer(serializers.Serializer):
    treasury_transaction = TreasuryTransactionSerializer()
    supplier_transaction = SupplierTransactionSerializer()


class TransferResultSerializer(serializers.Serializer):
    transfer_out = TreasuryTransactionSerializer()
    transfer_in = TreasuryTransactionSerializer()

"""
Serializers for suppliers and supplier ledger rows.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Supplier, SupplierTransaction


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            "id",
            "name",
            "contact_person",
            "email",
            "phone",
            "address",
            "tax_id",
            "payment_terms",
            "current_balance",
            "is_active",
            "notes",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "current_balance", "created_at", "updated_at"]

    def create(self, validated_data):
        request = self.context["request"]
        validated_data["tenant"] = request.user.tenant
        validated_data["created_by"] = request.user
        return super().create(validated_data)


class SupplierTransactionSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source="supplier.name", read_only=True)

    class Meta:
        model = SupplierTransaction
        fields = [
            "id",
            "transaction_number",
            "supplier",
            "supplier_name",
            "branch",
            "transaction_type",
            "amount",
            "balance_after_transaction",
            "reference_number",
            "notes",
            "transaction_date",
            "created_by",
        ]
        read_only_fields = fields


class SupplierPurchaseSerializer(serializers.Serializer):
    """Input for recording a purchase on credit."""

    branch_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal("0.01"))
    reference_number = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=100
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)

"""
Serializers for cash drawer API.
"""

from decimal import Decimal

from rest_framework import serializers

from .models import CashDrawerBalance


class CashDrawerBalanceSerializer(serializers.ModelSerializer):
    """Full drawer representation returned by every cash drawer endpoint."""

    branch_name = serializers.CharField(source="branch.name", read_only=True)
    status_display = serializers.CharField(source="get_status_display", read_only=True)
    status_code = serializers.IntegerField(read_only=True)
    cash_over_short = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    opened_by_username = serializers.CharField(
        source="opened_by.username", read_only=True, default=None
    )
    closed_by_username = serializers.CharField(
        source="closed_by.username", read_only=True, default=None
    )

    class Meta:
        model = CashDrawerBalance
        fields = [
            "id",
            "branch",
            "branch_name",
            "balance_date",
            "opening_balance",
            "expected_closing_balance",
            "actual_closing_balance",
            "cash_over_short",
            "settled_amount",
            "carried_forward_amount",
            "settlement_notes",
            "status",
            "status_code",
            "status_display",
            "notes",
            "opened_by",
            "opened_by_username",
            "opened_at",
            "closed_by",
            "closed_by_username",
            "closed_at",
        ]
        read_only_fields = fields


class DrawerDateSerializer(serializers.Serializer):
    date = serializers.DateField(required=False, allow_null=True)


class DateRangeSerializer(serializers.Serializer):
    from_date = serializers.DateField()
    to_date = serializers.DateField()

    def validate(self, attrs):
        if attrs["from_date"] > attrs["to_date"]:
            raise serializers.ValidationError("from_date must not be after to_date")
        return attrs


class OpenDrawerSerializer(DrawerDateSerializer):
    opening_balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class CloseDrawerSerializer(DrawerDateSerializer):
    actual_closing_balance = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=1000)


class SettleShiftSerializer(CloseDrawerSerializer):
    settled_amount = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0.00")
    )
    settlement_notes = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, max_length=1000
    )

"""
Tests for recording POS transactions and the cash totals derived from them.
"""

from decimal import Decimal

from django.utils import timezone

import pytest

from apps.sales.models import FinancialTransaction
from apps.sales.services import FinancialTransactionService


@pytest.mark.django_db
class TestFinancialTransactionService:
    def test_transaction_numbers_are_sequential_per_day(self, branch):
        first = FinancialTransactionService.record_transaction(
            branch, FinancialTransaction.SALE, Decimal("10.00")
        )
        second = FinancialTransactionService.record_transaction(
            branch, FinancialTransaction.SALE, Decimal("20.00")
        )

        prefix = f"TRX-{timezone.now():%Y%m%d}-"
        assert first.transaction_number == f"{prefix}00001"
        assert second.transaction_number == f"{prefix}00002"

    def test_total_defaults_to_amount_paid(self, branch):
        txn = FinancialTransactionService.record_transaction(
            branch, FinancialTransaction.REPAIR, Decimal("80.00")
        )

        assert txn.total_amount == Decimal("80.00")
        assert txn.is_cash()
        assert txn.tenant == branch.tenant

    def test_negative_amount_rejected(self, branch):
        with pytest.raises(ValueError, match="Amount paid cannot be negative"):
            FinancialTransactionService.record_transaction(
                branch, FinancialTransaction.SALE, Decimal("-1.00")
            )

    def test_cash_totals(self, branch, record_cash):
        record_cash(branch, "100.00")
        record_cash(branch, "50.00")
        record_cash(branch, "30.00", FinancialTransaction.REPAIR)
        record_cash(branch, "20.00", FinancialTransaction.RETURN)
        # Refund recorded as a positive figure still reduces cash
        record_cash(branch, "0.00", FinancialTransaction.RETURN, change_given=Decimal("5.00"))
        record_cash(branch, "999.00", payment_method=FinancialTransaction.CARD)

        totals = FinancialTransactionService.get_cash_totals(branch, timezone.localdate())

        assert totals.sales == Decimal("150.00")
        assert totals.repairs == Decimal("30.00")
        assert totals.returns == Decimal("25.00")
        assert totals.net == Decimal("155.00")


@pytest.mark.django_db
class TestTransactionEndpoint:
    def test_record_and_list(self, employee_client, branch):
        url = f"/api/sales/{branch.id}/transactions"

        created = employee_client.post(
            url,
            {"transaction_type": "SALE", "amount_paid": "120.00", "payment_method": "CASH"},
            format="json",
        )
        assert created.status_code == 201
        assert created.data["status"] == "COMPLETED"

        employee_client.post(
            url,
            {"transaction_type": "SALE", "amount_paid": "60.00", "payment_method": "CARD"},
            format="json",
        )

        listed = employee_client.get(url, {"payment_method": "CASH"})
        assert listed.status_code == 200
        assert listed.data["count"] == 1
        assert listed.data["results"][0]["amount_paid"] == "120.00"

    def test_invalid_type(self, employee_client, branch):
        response = employee_client.post(
            f"/api/sales/{branch.id}/transactions",
            {"transaction_type": "GIFT", "amount_paid": "1.00"},
            format="json",
        )

        assert response.status_code == 400
        assert "transaction_type" in response.data

    def test_other_tenant_branch(self, employee_client, other_branch):
        response = employee_client.get(f"/api/sales/{other_branch.id}/transactions")

        assert response.status_code == 404

    def test_malformed_date_filter_is_rejected(self, employee_client, branch):
        response = employee_client.get(
            f"/api/sales/{branch.id}/transactions", {"date_from": "bogus"}
        )

        assert response.status_code == 400
        assert "date_from" in response.data

    def test_unknown_payment_method_filter_is_rejected(self, employee_client, branch):
        response = employee_client.get(
            f"/api/sales/{branch.id}/transactions", {"payment_method": "BARTER"}
        )

        assert response.status_code == 400
        assert "payment_method" in response.data

    def test_date_range_filter(self, employee_client, branch, record_cash):
        record_cash(branch, "10.00")
        today = timezone.localdate().isoformat()

        response = employee_client.get(
            f"/api/sales/{branch.id}/transactions", {"date_from": today, "date_to": today}
        )

        assert response.status_code == 200
        assert response.data["count"] == 1

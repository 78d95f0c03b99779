"""
Tests for the treasury REST endpoints.
"""

import uuid
from decimal import Decimal

import pytest

from apps.cashdrawer.services import CashDrawerService
from apps.core.audit_models import AuditLog
from apps.treasury.models import TreasuryTransaction
from apps.treasury.services import TreasuryService


def treasury_url(branch, action):
    return f"/api/treasury/{branch.id}/{action}"


@pytest.fixture
def funded(branch):
    TreasuryService.adjust(branch, Decimal("1000.00"), TreasuryTransaction.CREDIT, "Float")
    return branch


@pytest.mark.django_db
class TestTreasuryBalance:
    def test_new_treasury_is_empty(self, authenticated_client, branch):
        response = authenticated_client.get(treasury_url(branch, "balance"))

        assert response.status_code == 200
        assert response.data["balance"] == "0.00"
        assert response.data["currency_code"] == "EGP"

    def test_other_tenant_branch_is_not_found(self, authenticated_client, other_branch):
        response = authenticated_client.get(treasury_url(other_branch, "balance"))

        assert response.status_code == 404


@pytest.mark.django_db
class TestTreasuryAdjust:
    def test_owner_credits(self, authenticated_client, branch):
        response = authenticated_client.post(
            treasury_url(branch, "adjust"),
            {"amount": "250.00", "direction": "CREDIT", "reason": "Owner deposit"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["balance_after"] == "250.00"
        assert response.data["transaction_type"] == TreasuryTransaction.ADJUSTMENT
        assert AuditLog.objects.filter(action=AuditLog.ACTION_TREASURY_ADJUST).count() == 1

    def test_employee_forbidden(self, employee_client, branch):
        response = employee_client.post(
            treasury_url(branch, "adjust"),
            {"amount": "250.00", "direction": "CREDIT"},
            format="json",
        )

        assert response.status_code == 403
        assert response.data["detail"] == "Only tenant owners and managers can perform this action."

    def test_overdraw_rejected(self, authenticated_client, funded):
        response = authenticated_client.post(
            treasury_url(funded, "adjust"),
            {"amount": "1500.00", "direction": "DEBIT", "reason": "Too much"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Insufficient treasury balance"}

    def test_zero_amount_is_field_error(self, authenticated_client, branch):
        response = authenticated_client.post(
            treasury_url(branch, "adjust"), {"amount": "0", "direction": "CREDIT"}, format="json"
        )

        assert response.status_code == 400
        assert "amount" in response.data


@pytest.mark.django_db
class TestTreasuryFeed:
    def test_open_refresh_settle_feed(self, employee_client, branch, record_cash):
        """Treasury receives exactly the settled amount of the shift."""
        employee_client.post(
            f"/api/cash-drawer/{branch.id}/open", {"opening_balance": "1000.00"}, format="json"
        )
        record_cash(branch, "4000.00")
        refreshed = employee_client.post(f"/api/cash-drawer/{branch.id}/refresh", {}, format="json")
        assert refreshed.data["expected_closing_balance"] == "5000.00"

        settled = employee_client.post(
            f"/api/cash-drawer/{branch.id}/settle",
            {"actual_closing_balance": "5300.00", "settled_amount": "5000.00"},
            format="json",
        )
        assert settled.status_code == 200

        fed = employee_client.post(treasury_url(branch, "feed-from-cash-drawer"), {}, format="json")

        assert fed.status_code == 201
        assert fed.data["amount"] == "5000.00"
        assert fed.data["reference_type"] == "CashDrawerBalance"
        balance = employee_client.get(treasury_url(branch, "balance"))
        assert balance.data["balance"] == "5000.00"

    def test_feed_twice_rejected(self, employee_client, branch):
        CashDrawerService.open_drawer(branch, Decimal("100.00"))
        CashDrawerService.settle_shift(branch, Decimal("100.00"), Decimal("100.00"))
        employee_client.post(treasury_url(branch, "feed-from-cash-drawer"), {}, format="json")

        response = employee_client.post(
            treasury_url(branch, "feed-from-cash-drawer"), {}, format="json"
        )

        assert response.status_code == 400
        assert "already been fed" in response.data["detail"]

    def test_feed_open_drawer_rejected(self, employee_client, branch):
        CashDrawerService.open_drawer(branch, Decimal("100.00"))

        response = employee_client.post(
            treasury_url(branch, "feed-from-cash-drawer"), {}, format="json"
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Cash drawer must be closed before feeding treasury"}


@pytest.mark.django_db
class TestTreasuryTransactions:
    def test_list_is_paginated_and_filterable(self, authenticated_client, funded, second_branch):
        TreasuryService.transfer(funded, second_branch, Decimal("100.00"))

        response = authenticated_client.get(treasury_url(funded, "transactions"))

        assert response.status_code == 200
        assert response.data["count"] == 2
        assert len(response.data["results"]) == 2

        filtered = authenticated_client.get(
            treasury_url(funded, "transactions"), {"type": TreasuryTransaction.TRANSFER_OUT}
        )
        assert filtered.data["count"] == 1
        assert filtered.data["results"][0]["amount"] == "100.00"

    def test_bad_type_filter(self, authenticated_client, branch):
        response = authenticated_client.get(treasury_url(branch, "transactions"), {"type": "BOGUS"})

        assert response.status_code == 400


@pytest.mark.django_db
class TestTreasuryPaySupplier:
    def test_pay_supplier(self, authenticated_client, funded, supplier):
        response = authenticated_client.post(
            treasury_url(funded, "pay-supplier"),
            {"supplier_id": str(supplier.id), "amount": "400.00", "notes": "Invoice 7"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["treasury_transaction"]["balance_after"] == "600.00"
        assert response.data["supplier_transaction"]["transaction_type"] == "PAYMENT"
        supplier.refresh_from_db()
        assert supplier.current_balance == Decimal("1600.00")

    def test_unknown_supplier(self, authenticated_client, funded):
        response = authenticated_client.post(
            treasury_url(funded, "pay-supplier"),
            {"supplier_id": str(uuid.uuid4()), "amount": "10.00"},
            format="json",
        )

        assert response.status_code == 404

    def test_over_outstanding(self, authenticated_client, branch, supplier):
        TreasuryService.adjust(branch, Decimal("9000.00"), TreasuryTransaction.CREDIT)

        response = authenticated_client.post(
            treasury_url(branch, "pay-supplier"),
            {"supplier_id": str(supplier.id), "amount": "2500.00"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Payment exceeds supplier outstanding balance"}


@pytest.mark.django_db
class TestTreasuryTransfer:
    def test_transfer(self, authenticated_client, funded, second_branch):
        response = authenticated_client.post(
            treasury_url(funded, "transfer"),
            {"to_branch_id": str(second_branch.id), "amount": "300.00"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["transfer_out"]["balance_after"] == "700.00"
        assert response.data["transfer_in"]["balance_after"] == "300.00"

    def test_transfer_to_other_tenant_branch_not_found(self, authenticated_client, funded, other_branch):
        response = authenticated_client.post(
            treasury_url(funded, "transfer"),
            {"to_branch_id": str(other_branch.id), "amount": "300.00"},
            format="json",
        )

        assert response.status_code == 404

    def test_transfer_to_self_rejected(self, authenticated_client, funded):
        response = authenticated_client.post(
            treasury_url(funded, "transfer"),
            {"to_branch_id": str(funded.id), "amount": "1.00"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Cannot transfer to the same branch"}

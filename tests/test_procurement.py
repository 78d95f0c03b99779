"""
Tests for suppliers and purchases on credit.
"""

import uuid
from decimal import Decimal

import pytest

from apps.core.audit_models import AuditLog
from apps.procurement.models import Supplier, SupplierTransaction
from apps.procurement.services import SupplierError, SupplierService
from apps.treasury.models import TreasuryTransaction
from apps.treasury.services import TreasuryService


def purchase_url(supplier):
    return f"/api/suppliers/{supplier.id}/purchases/"


@pytest.fixture
def new_supplier(tenant):
    return Supplier.objects.create(tenant=tenant, name="Silver Traders")


@pytest.mark.django_db
class TestRecordPurchase:
    def test_purchase_raises_outstanding_balance(self, new_supplier, branch, tenant_user):
        purchase = SupplierService.record_purchase(
            new_supplier, branch, Decimal("750.00"), user=tenant_user, reference_number="INV-1"
        )

        new_supplier.refresh_from_db()
        assert new_supplier.current_balance == Decimal("750.00")
        assert purchase.transaction_type == SupplierTransaction.PURCHASE
        assert purchase.balance_after_transaction == Decimal("750.00")
        assert purchase.reference_number == "INV-1"
        assert purchase.notes == "Purchase on credit for Main Branch"
        assert purchase.transaction_number.startswith("SP-")

    def test_purchases_accumulate(self, supplier, branch):
        SupplierService.record_purchase(supplier, branch, Decimal("100.00"))
        second = SupplierService.record_purchase(supplier, branch, Decimal("50.00"))

        assert second.balance_after_transaction == Decimal("2150.00")
        assert supplier.transactions.count() == 2

    def test_zero_amount_rejected(self, new_supplier, branch):
        with pytest.raises(SupplierError, match="Amount must be greater than zero"):
            SupplierService.record_purchase(new_supplier, branch, Decimal("0"))

    def test_inactive_supplier_rejected(self, new_supplier, branch):
        new_supplier.is_active = False
        new_supplier.save()

        with pytest.raises(SupplierError, match="Supplier is not active"):
            SupplierService.record_purchase(new_supplier, branch, Decimal("10.00"))

    def test_other_tenant_branch_rejected(self, new_supplier, other_branch):
        with pytest.raises(SupplierError, match="Supplier not found"):
            SupplierService.record_purchase(new_supplier, other_branch, Decimal("10.00"))

        new_supplier.refresh_from_db()
        assert new_supplier.current_balance == Decimal("0.00")


@pytest.mark.django_db
class TestPurchaseEndpoint:
    def test_purchase_then_pay_from_treasury(self, authenticated_client, new_supplier, branch):
        """A supplier created through the API can be paid once a purchase is recorded."""
        response = authenticated_client.post(
            purchase_url(new_supplier),
            {"branch_id": str(branch.id), "amount": "500.00", "reference_number": "INV-9"},
            format="json",
        )

        assert response.status_code == 201
        assert response.data["transaction_type"] == "PURCHASE"
        assert response.data["balance_after_transaction"] == "500.00"
        assert AuditLog.objects.filter(action=AuditLog.ACTION_SUPPLIER_PURCHASE).count() == 1

        TreasuryService.adjust(branch, Decimal("1000.00"), TreasuryTransaction.CREDIT)
        paid = authenticated_client.post(
            f"/api/treasury/{branch.id}/pay-supplier",
            {"supplier_id": str(new_supplier.id), "amount": "500.00"},
            format="json",
        )

        assert paid.status_code == 201
        new_supplier.refresh_from_db()
        assert new_supplier.current_balance == Decimal("0.00")

    def test_employee_forbidden(self, employee_client, new_supplier, branch):
        response = employee_client.post(
            purchase_url(new_supplier),
            {"branch_id": str(branch.id), "amount": "500.00"},
            format="json",
        )

        assert response.status_code == 403

    def test_invalid_amount_is_field_error(self, authenticated_client, new_supplier, branch):
        response = authenticated_client.post(
            purchase_url(new_supplier),
            {"branch_id": str(branch.id), "amount": "-5"},
            format="json",
        )

        assert response.status_code == 400
        assert "amount" in response.data

    def test_inactive_supplier(self, authenticated_client, new_supplier, branch):
        new_supplier.is_active = False
        new_supplier.save()

        response = authenticated_client.post(
            purchase_url(new_supplier),
            {"branch_id": str(branch.id), "amount": "5.00"},
            format="json",
        )

        assert response.status_code == 400
        assert response.data == {"detail": "Supplier is not active"}

    def test_unknown_supplier(self, authenticated_client, branch):
        response = authenticated_client.post(
            f"/api/suppliers/{uuid.uuid4()}/purchases/",
            {"branch_id": str(branch.id), "amount": "5.00"},
            format="json",
        )

        assert response.status_code == 404

    def test_other_tenant_branch(self, authenticated_client, new_supplier, other_branch):
        response = authenticated_client.post(
            purchase_url(new_supplier),
            {"branch_id": str(other_branch.id), "amount": "5.00"},
            format="json",
        )

        assert response.status_code == 404

    def test_balance_is_read_only_on_create(self, authenticated_client):
        response = authenticated_client.post(
            "/api/suppliers/", {"name": "New Vendor", "current_balance": "500.00"}, format="json"
        )

        assert response.status_code == 201
        assert response.data["current_balance"] == "0.00"

    def test_ledger_lists_purchase(self, authenticated_client, new_supplier, branch):
        SupplierService.record_purchase(new_supplier, branch, Decimal("20.00"))

        response = authenticated_client.get(f"/api/suppliers/{new_supplier.id}/transactions/")

        assert response.status_code == 200
        assert response.data["count"] == 1
        assert response.data["results"][0]["transaction_type"] == "PURCHASE"

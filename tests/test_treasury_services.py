"""
Tests for treasury ledger operations.
"""

from datetime import timedelta
from decimal import Decimal

from django.utils import timezone

import pytest

from apps.cashdrawer.services import CashDrawerService
from apps.procurement.models import Supplier, SupplierTransaction
from apps.treasury.models import TreasuryAccount, TreasuryTransaction
from apps.treasury.services import TreasuryError, TreasuryService


@pytest.fixture
def funded_treasury(branch, tenant_user):
    TreasuryService.adjust(branch, Decimal("1000.00"), TreasuryTransaction.CREDIT, "Float", tenant_user)
    return TreasuryService.get_balance(branch)


@pytest.mark.django_db
class TestTreasuryAccount:
    def test_account_created_on_first_access(self, branch):
        account = TreasuryService.get_balance(branch)

        assert account.current_balance == Decimal("0.00")
        assert account.currency_code == "EGP"
        assert account.tenant == branch.tenant
        assert TreasuryAccount.objects.filter(branch=branch).count() == 1

    def test_one_account_per_branch(self, branch):
        TreasuryService.get_balance(branch)
        TreasuryService.get_balance(branch)

        assert TreasuryAccount.objects.filter(branch=branch).count() == 1


@pytest.mark.django_db
class TestAdjust:
    def test_credit_and_debit(self, branch, tenant_user):
        credit = TreasuryService.adjust(
            branch, Decimal("500.00"), TreasuryTransaction.CREDIT, "Owner deposit", tenant_user
        )
        debit = TreasuryService.adjust(
            branch, Decimal("120.00"), TreasuryTransaction.DEBIT, "Petty cash", tenant_user
        )

        assert credit.balance_after == Decimal("500.00")
        assert debit.balance_after == Decimal("380.00")
        assert debit.signed_amount == Decimal("-120.00")
        assert debit.notes == "Petty cash"
        assert debit.performed_by == tenant_user
        assert TreasuryService.get_balance(branch).current_balance == Decimal("380.00")

    def test_debit_beyond_balance_rejected(self, funded_treasury, branch):
        with pytest.raises(TreasuryError, match="Insufficient treasury balance"):
            TreasuryService.adjust(branch, Decimal("1000.01"), TreasuryTransaction.DEBIT)

        assert TreasuryService.get_balance(branch).current_balance == Decimal("1000.00")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-5.00")])
    def test_amount_must_be_positive(self, branch, amount):
        with pytest.raises(TreasuryError, match="Amount must be greater than zero"):
            TreasuryService.adjust(branch, amount, TreasuryTransaction.CREDIT)

    def test_notes_length_limit(self, branch):
        with pytest.raises(TreasuryError, match="1000 characters"):
            TreasuryService.adjust(branch, Decimal("1.00"), TreasuryTransaction.CREDIT, "x" * 1001)

    def test_unknown_direction_rejected(self, branch):
        with pytest.raises(TreasuryError, match="Unknown direction"):
            TreasuryService.adjust(branch, Decimal("1.00"), "SIDEWAYS")


@pytest.mark.django_db
class TestFeedFromCashDrawer:
    def test_feed_credits_settled_amount(self, branch, tenant_user, record_cash):
        CashDrawerService.open_drawer(branch, Decimal("1000.00"))
        record_cash(branch, "4000.00")
        drawer = CashDrawerService.settle_shift(branch, Decimal("5300.00"), Decimal("5000.00"))

        txn = TreasuryService.feed_from_cash_drawer(branch, user=tenant_user)

        assert txn.amount == Decimal("5000.00")
        assert txn.direction == TreasuryTransaction.CREDIT
        assert txn.transaction_type == TreasuryTransaction.FEED_FROM_CASH_DRAWER
        assert txn.reference_type == "CashDrawerBalance"
        assert txn.reference_id == str(drawer.id)
        assert txn.notes == f"Feed from cash drawer {drawer.balance_date:%Y-%m-%d}"
        assert TreasuryService.get_balance(branch).current_balance == Decimal("5000.00")

    def test_feed_twice_rejected(self, branch):
        CashDrawerService.open_drawer(branch, Decimal("100.00"))
        CashDrawerService.settle_shift(branch, Decimal("100.00"), Decimal("100.00"))
        TreasuryService.feed_from_cash_drawer(branch)

        with pytest.raises(TreasuryError, match="already been fed"):
            TreasuryService.feed_from_cash_drawer(branch)

        assert TreasuryService.get_balance(branch).current_balance == Decimal("100.00")

    def test_feed_requires_drawer(self, branch):
        with pytest.raises(TreasuryError, match="No cash drawer for date"):
            TreasuryService.feed_from_cash_drawer(branch)

    def test_feed_requires_closed_drawer(self, branch):
        CashDrawerService.open_drawer(branch, Decimal("100.00"))

        with pytest.raises(TreasuryError, match="must be closed"):
            TreasuryService.feed_from_cash_drawer(branch)

    def test_feed_requires_settlement(self, branch):
        CashDrawerService.open_drawer(branch, Decimal("100.00"))
        CashDrawerService.close_drawer(branch, Decimal("100.00"))

        with pytest.raises(TreasuryError, match="No settled cash drawer amount"):
            TreasuryService.feed_from_cash_drawer(branch)


@pytest.mark.django_db
class TestPaySupplier:
    def test_payment_debits_treasury_and_reduces_supplier_balance(
        self, funded_treasury, branch, supplier, tenant_user
    ):
        treasury_txn, supplier_txn = TreasuryService.pay_supplier(
            branch, supplier, Decimal("600.00"), user=tenant_user, notes="Invoice 42"
        )

        supplier.refresh_from_db()
        assert supplier.current_balance == Decimal("1400.00")
        assert treasury_txn.transaction_type == TreasuryTransaction.SUPPLIER_PAYMENT
        assert treasury_txn.direction == TreasuryTransaction.DEBIT
        assert treasury_txn.balance_after == Decimal("400.00")
        assert treasury_txn.reference_id == str(supplier.id)
        assert supplier_txn.transaction_type == SupplierTransaction.PAYMENT
        assert supplier_txn.amount == Decimal("600.00")
        assert supplier_txn.balance_after_transaction == Decimal("1400.00")
        assert supplier_txn.transaction_number.startswith("SP-")
        assert supplier_txn.branch == branch

    def test_payment_beyond_treasury_rejected(self, funded_treasury, branch, supplier):
        with pytest.raises(TreasuryError, match="Insufficient treasury balance"):
            TreasuryService.pay_supplier(branch, supplier, Decimal("1500.00"))

        supplier.refresh_from_db()
        assert supplier.current_balance == Decimal("2000.00")

    def test_payment_beyond_outstanding_rejected(self, branch, supplier, tenant_user):
        TreasuryService.adjust(branch, Decimal("5000.00"), TreasuryTransaction.CREDIT)

        with pytest.raises(TreasuryError, match="exceeds supplier outstanding balance"):
            TreasuryService.pay_supplier(branch, supplier, Decimal("2000.01"))

        assert TreasuryService.get_balance(branch).current_balance == Decimal("5000.00")

    def test_inactive_supplier_rejected(self, funded_treasury, branch, supplier):
        supplier.is_active = False
        supplier.save()

        with pytest.raises(TreasuryError, match="Supplier is not active"):
            TreasuryService.pay_supplier(branch, supplier, Decimal("10.00"))

    def test_supplier_of_other_tenant_rejected(self, funded_treasury, branch, other_tenant):
        foreign = Supplier.objects.create(
            tenant=other_tenant, name="Foreign", current_balance=Decimal("100.00")
        )

        with pytest.raises(TreasuryError, match="Supplier not found"):
            TreasuryService.pay_supplier(branch, foreign, Decimal("10.00"))


@pytest.mark.django_db
class TestTransfer:
    def test_transfer_moves_money(self, funded_treasury, branch, second_branch, tenant_user):
        transfer_out, transfer_in = TreasuryService.transfer(
            branch, second_branch, Decimal("250.00"), user=tenant_user
        )

        assert transfer_out.transaction_type == TreasuryTransaction.TRANSFER_OUT
        assert transfer_in.transaction_type == TreasuryTransaction.TRANSFER_IN
        assert transfer_out.notes == "Transfer to Downtown Branch"
        assert transfer_in.notes == "Transfer from Main Branch"
        assert TreasuryService.get_balance(branch).current_balance == Decimal("750.00")
        assert TreasuryService.get_balance(second_branch).current_balance == Decimal("250.00")

    def test_transfer_to_same_branch_rejected(self, funded_treasury, branch):
        with pytest.raises(TreasuryError, match="same branch"):
            TreasuryService.transfer(branch, branch, Decimal("10.00"))

    def test_transfer_across_tenants_rejected(self, funded_treasury, branch, other_branch):
        with pytest.raises(TreasuryError, match="same tenant"):
            TreasuryService.transfer(branch, other_branch, Decimal("10.00"))

    def test_transfer_beyond_balance_rejected(self, funded_treasury, branch, second_branch):
        with pytest.raises(TreasuryError, match="Insufficient treasury balance"):
            TreasuryService.transfer(branch, second_branch, Decimal("1000.01"))

        assert TreasuryService.get_balance(second_branch).current_balance == Decimal("0.00")


@pytest.mark.django_db
class TestTransactions:
    def test_filters_by_type_and_date(self, funded_treasury, branch, second_branch):
        TreasuryService.transfer(branch, second_branch, Decimal("100.00"))
        today = timezone.localdate()

        adjustments = TreasuryService.get_transactions(
            branch, transaction_type=TreasuryTransaction.ADJUSTMENT
        )
        assert [t.amount for t in adjustments] == [Decimal("1000.00")]

        assert TreasuryService.get_transactions(branch, date_from=today, date_to=today).count() == 2
        assert not TreasuryService.get_transactions(
            branch, date_from=today + timedelta(days=1)
        ).exists()

    def test_newest_first(self, funded_treasury, branch):
        TreasuryService.adjust(branch, Decimal("1.00"), TreasuryTransaction.DEBIT)

        ledger = list(TreasuryService.get_transactions(branch))

        assert ledger[0].direction == TreasuryTransaction.DEBIT
        assert ledger[-1].balance_after == Decimal("1000.00")

    def test_balance_equals_ledger_sum(self, funded_treasury, branch, second_branch, supplier):
        TreasuryService.adjust(branch, Decimal("50.00"), TreasuryTransaction.DEBIT)
        TreasuryService.transfer(branch, second_branch, Decimal("100.00"))
        TreasuryService.pay_supplier(branch, supplier, Decimal("200.00"))

        ledger_sum = sum(t.signed_amount for t in TreasuryService.get_transactions(branch))

        assert ledger_sum == TreasuryService.get_balance(branch).current_balance == Decimal("650.00")

"""
Treasury service.

All balance changes lock the account row, append a TreasuryTransaction and
update the running balance in the same database transaction.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple

from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.cashdrawer.models import CashDrawerBalance
from apps.core.models import Branch, User
from apps.procurement.models import Supplier, SupplierTransaction
from apps.procurement.services import SupplierService

from .models import TreasuryAccount, TreasuryTransaction

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
MAX_NOTES_LENGTH = 1000


class TreasuryError(ValueError):
    """A treasury business rule was violated."""


class TreasuryService:
    """Balance, ledger and money movements of branch treasuries."""

    @staticmethod
    def get_or_create_account(branch: Branch, user: Optional[User] = None) -> TreasuryAccount:
        account, created = TreasuryAccount.objects.get_or_create(
            branch=branch,
            defaults={"tenant": branch.tenant, "created_by": user},
        )
        if created:
            logger.info(f"Created treasury account for branch {branch.id}")
        return account

    @staticmethod
    def get_balance(branch: Branch) -> TreasuryAccount:
        """Account of the branch; the balance is always read from the stored row."""
        return TreasuryService.get_or_create_account(branch)

    @staticmethod
    def _lock_account(branch: Branch, user: Optional[User] = None) -> TreasuryAccount:
        TreasuryService.get_or_create_account(branch, user)
        return TreasuryAccount.objects.select_for_update().get(branch=branch)

    @staticmethod
    def _validate_amount(amount: Decimal) -> Decimal:
        amount = Decimal(amount).quantize(CENT)
        if amount <= 0:
            raise TreasuryError("Amount must be greater than zero")
        return amount

    @staticmethod
    def _validate_notes(notes: Optional[str]) -> str:
        notes = notes or ""
        if len(notes) > MAX_NOTES_LENGTH:
            raise TreasuryError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")
        return notes

    @staticmethod
    def _post(
        account: TreasuryAccount,
        amount: Decimal,
        direction: str,
        transaction_type: str,
        user: Optional[User] = None,
        reference_type: str = "",
        reference_id: str = "",
        notes: str = "",
    ) -> TreasuryTransaction:
        """Apply a movement to a locked account. Caller owns the transaction."""
        if direction == TreasuryTransaction.CREDIT:
            new_balance = account.current_balance + amount
        elif direction == TreasuryTransaction.DEBIT:
            new_balance = account.current_balance - amount
        else:
            raise TreasuryError(f"Unknown direction: {direction}")

        if new_balance < 0:
            raise TreasuryError("Insufficient treasury balance")

        account.current_balance = new_balance
        account.save(update_fields=["current_balance", "updated_at"])

        return TreasuryTransaction.objects.create(
            account=account,
            amount=amount,
            direction=direction,
            transaction_type=transaction_type,
            balance_after=new_balance,
            reference_type=reference_type,
            reference_id=str(reference_id) if reference_id else "",
            notes=notes,
            performed_at=timezone.now(),
            performed_by=user,
        )

    @staticmethod
    def adjust(
        branch: Branch,
        amount: Decimal,
        direction: str,
        reason: Optional[str] = None,
        user: Optional[User] = None,
    ) -> TreasuryTransaction:
        """
        Manually credit or debit the treasury.

        Raises:
            TreasuryError: If the amount is not positive or a debit exceeds the balance
        """
        amount = TreasuryService._validate_amount(amount)
        reason = TreasuryService._validate_notes(reason)

        with transaction.atomic():
            account = TreasuryService._lock_account(branch, user)
            txn = TreasuryService._post(
                account,
                amount,
                direction,
                TreasuryTransaction.ADJUSTMENT,
                user=user,
                notes=reason,
            )

        logger.info(
            f"Treasury adjustment for branch {branch.id}: {direction} {amount}, "
            f"balance {txn.balance_after}"
        )
        return txn

    @staticmethod
    def feed_from_cash_drawer(
        branch: Branch,
        balance_date: Optional[date] = None,
        user: Optional[User] = None,
        notes: Optional[str] = None,
    ) -> TreasuryTransaction:
        """
        Credit the settled amount of a closed drawer into the treasury.

        Raises:
            TreasuryError: If there is no closed, settled drawer for the day or it was already fed
        """
        balance_date = balance_date or timezone.localdate()
        notes = TreasuryService._validate_notes(notes)

        drawer = CashDrawerBalance.objects.filter(branch=branch, balance_date=balance_date).first()
        if drawer is None:
            raise TreasuryError(f"No cash drawer for date {balance_date:%Y-%m-%d}")
        if drawer.status != CashDrawerBalance.STATUS_CLOSED:
            raise TreasuryError("Cash drawer must be closed before feeding treasury")
        if not drawer.settled_amount or drawer.settled_amount <= 0:
            raise TreasuryError("No settled cash drawer amount to feed")

        already_fed_message = (
            f"Cash drawer for {balance_date:%Y-%m-%d} has already been fed to treasury"
        )
        if TreasuryTransaction.objects.filter(
            transaction_type=TreasuryTransaction.FEED_FROM_CASH_DRAWER,
            reference_type=TreasuryTransaction.REFERENCE_CASH_DRAWER,
            reference_id=str(drawer.id),
        ).exists():
            raise TreasuryError(already_fed_message)

        try:
            with transaction.atomic():
                account = TreasuryService._lock_account(branch, user)
                txn = TreasuryService._post(
                    account,
                    drawer.settled_amount,
                    TreasuryTransaction.CREDIT,
                    TreasuryTransaction.FEED_FROM_CASH_DRAWER,
                    user=user,
                    reference_type=TreasuryTransaction.REFERENCE_CASH_DRAWER,
                    reference_id=drawer.id,
                    notes=notes or f"Feed from cash drawer {balance_date:%Y-%m-%d}",
                )
        except IntegrityError:
            raise TreasuryError(already_fed_message)

        logger.info(
            f"Fed treasury of branch {branch.id} with {drawer.settled_amount} "
            f"from cash drawer {balance_date}"
        )
        return txn

    @staticmethod
    def get_transactions(
        branch: Branch,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        transaction_type: Optional[str] = None,
    ) -> QuerySet:
        """Ledger of the branch treasury, newest first."""
        queryset = TreasuryTransaction.objects.filter(account__branch=branch).select_related(
            "performed_by"
        )
        if date_from:
            queryset = queryset.filter(performed_at__date__gte=date_from)
        if date_to:
            queryset = queryset.filter(performed_at__date__lte=date_to)
        if transaction_type:
            queryset = queryset.filter(transaction_type=transaction_type)
        return queryset.order_by("-performed_at")

    @staticmethod
    def pay_supplier(
        branch: Branch,
        supplier: Supplier,
        amount: Decimal,
        user: Optional[User] = None,
        notes: Optional[str] = None,
    ) -> Tuple[TreasuryTransaction, SupplierTransaction]:
        """
        Pay a supplier out of the branch treasury.

        Raises:
            TreasuryError: If the supplier is inactive or from another tenant, the
                treasury cannot cover the amount, or the amount exceeds what is owed
        """
        amount = TreasuryService._validate_amount(amount)
        notes = TreasuryService._validate_notes(notes)

        if supplier.tenant_id != branch.tenant_id:
            raise TreasuryError("Supplier not found")
        if not supplier.is_active:
            raise TreasuryError("Supplier is not active")

        with transaction.atomic():
            account = TreasuryService._lock_account(branch, user)
            supplier = Supplier.objects.select_for_update().get(pk=supplier.pk)

            if account.current_balance < amount:
                raise TreasuryError("Insufficient treasury balance")
            if supplier.current_balance < amount:
                raise TreasuryError("Payment exceeds supplier outstanding balance")

            treasury_txn = TreasuryService._post(
                account,
                amount,
                TreasuryTransaction.DEBIT,
                TreasuryTransaction.SUPPLIER_PAYMENT,
                user=user,
                reference_type=TreasuryTransaction.REFERENCE_SUPPLIER,
                reference_id=supplier.id,
                notes=notes,
            )

            supplier.current_balance -= amount
            supplier.save(update_fields=["current_balance", "updated_at"])

            supplier_txn = SupplierTransaction.objects.create(
                supplier=supplier,
                branch=branch,
                transaction_number=SupplierService.next_transaction_number(),
                transaction_type=SupplierTransaction.PAYMENT,
                amount=amount,
                balance_after_transaction=supplier.current_balance,
                reference_number=str(treasury_txn.id),
                notes=notes or f"Payment from {branch.name} treasury",
                created_by=user,
            )

        logger.info(
            f"Paid supplier {supplier.id} {amount} from treasury of branch {branch.id}; "
            f"supplier balance now {supplier.current_balance}"
        )
        return treasury_txn, supplier_txn

    @staticmethod
    def transfer(
        from_branch: Branch,
        to_branch: Branch,
        amount: Decimal,
        user: Optional[User] = None,
        notes: Optional[str] = None,
    ) -> Tuple[TreasuryTransaction, TreasuryTransaction]:
        """
        Move money between two treasuries of the same tenant.

        Raises:
            TreasuryError: If the branches are the same or belong to different
                tenants, or the source treasury cannot cover the amount
        """
        amount = TreasuryService._validate_amount(amount)
        notes = TreasuryService._validate_notes(notes)

        if from_branch.pk == to_branch.pk:
            raise TreasuryError("Cannot transfer to the same branch")
        if from_branch.tenant_id != to_branch.tenant_id:
            raise TreasuryError("Branches must belong to the same tenant")

        with transaction.atomic():
            # Lock in a stable order so opposite transfers cannot deadlock
            first, second = sorted([from_branch, to_branch], key=lambda b: str(b.pk))
            locked = {
                first.pk: TreasuryService._lock_account(first, user),
                second.pk: TreasuryService._lock_account(second, user),
            }

            transfer_out = TreasuryService._post(
                locked[from_branch.pk],
                amount,
                TreasuryTransaction.DEBIT,
                TreasuryTransaction.TRANSFER_OUT,
                user=user,
                reference_type=TreasuryTransaction.REFERENCE_BRANCH,
                reference_id=to_branch.id,
                notes=notes or f"Transfer to {to_branch.name}",
            )
            transfer_in = TreasuryService._post(
                locked[to_branch.pk],
                amount,
                TreasuryTransaction.CREDIT,
                TreasuryTransaction.TRANSFER_IN,
                user=user,
                reference_type=TreasuryTransaction.REFERENCE_BRANCH,
                reference_id=from_branch.id,
                notes=notes or f"Transfer from {from_branch.name}",
            )

        logger.info(
            f"Transferred {amount} from treasury of branch {from_branch.id} "
            f"to branch {to_branch.id}"
        )
        return transfer_out, transfer_in

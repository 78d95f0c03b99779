"""
Cash drawer service.

Business rules for the daily drawer of a branch:
- one drawer per branch and day, opened with a non-negative counted balance
- expected closing = opening + cash sales + cash repairs - cash refunds
- a shift is settled only for exactly the expected closing balance; any
  counted excess is carried forward as the next day's opening balance
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from django.db import IntegrityError, transaction
from django.utils import timezone
from django_fsm import can_proceed

from apps.core.models import Branch, User
from apps.sales.services import FinancialTransactionService

from .models import CashDrawerBalance

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")
CENT = Decimal("0.01")


class CashDrawerError(ValueError):
    """A cash drawer business rule was violated."""


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENT)


def _format_amount(value: Decimal) -> str:
    return f"{_money(value):,.2f}"


class CashDrawerService:
    """Opening, closing, settlement and balance queries for branch cash drawers."""

    @staticmethod
    def resolve_date(balance_date: Optional[date]) -> date:
        return balance_date or timezone.localdate()

    @staticmethod
    def get_balance(branch: Branch, balance_date: Optional[date] = None) -> Optional[CashDrawerBalance]:
        """Return the drawer of a branch for a day, or None."""
        balance_date = CashDrawerService.resolve_date(balance_date)
        return (
            CashDrawerBalance.objects.filter(branch=branch, balance_date=balance_date)
            .select_related("branch", "opened_by", "closed_by")
            .first()
        )

    @staticmethod
    def is_drawer_open(branch: Branch, balance_date: Optional[date] = None) -> bool:
        drawer = CashDrawerService.get_balance(branch, balance_date)
        return drawer is not None and drawer.is_open()

    @staticmethod
    def get_balances(branch: Branch, from_date: date, to_date: date) -> List[CashDrawerBalance]:
        """Drawers of a branch between two days (inclusive), oldest first."""
        if from_date > to_date:
            raise CashDrawerError("from_date must not be after to_date")
        return list(
            CashDrawerBalance.objects.filter(
                branch=branch, balance_date__gte=from_date, balance_date__lte=to_date
            )
            .select_related("branch", "opened_by", "closed_by")
            .order_by("balance_date")
        )

    @staticmethod
    def get_opening_balance(branch: Branch, balance_date: Optional[date] = None) -> Decimal:
        """
        Expected opening balance for a day.

        Taken from the most recent closed drawer before the day: what was
        carried forward if that shift was settled, otherwise what was counted
        at closing. A branch with no closed history starts at zero.
        """
        balance_date = CashDrawerService.resolve_date(balance_date)
        previous = (
            CashDrawerBalance.objects.filter(
                branch=branch,
                balance_date__lt=balance_date,
                status=CashDrawerBalance.STATUS_CLOSED,
                actual_closing_balance__isnull=False,
            )
            .order_by("-balance_date")
            .first()
        )
        if previous is None:
            return ZERO
        if previous.carried_forward_amount is not None:
            return _money(previous.carried_forward_amount)
        return _money(previous.actual_closing_balance)

    @staticmethod
    def calculate_expected_closing_balance(
        branch: Branch,
        balance_date: Optional[date] = None,
        opening_balance: Optional[Decimal] = None,
    ) -> Decimal:
        """
        Opening balance plus the day's completed cash inflows minus cash refunds.

        When no opening balance is given, the recorded drawer's opening
        balance is used, or the expected opening balance if the drawer has
        not been opened yet.
        """
        balance_date = CashDrawerService.resolve_date(balance_date)
        if opening_balance is None:
            drawer = CashDrawerService.get_balance(branch, balance_date)
            if drawer is not None:
                opening_balance = drawer.opening_balance
            else:
                opening_balance = CashDrawerService.get_opening_balance(branch, balance_date)

        totals = FinancialTransactionService.get_cash_totals(branch, balance_date)
        return _money(opening_balance + totals.net)

    @staticmethod
    def _get_locked_drawer(branch: Branch, balance_date: date) -> CashDrawerBalance:
        drawer = (
            CashDrawerBalance.objects.select_for_update()
            .filter(branch=branch, balance_date=balance_date)
            .first()
        )
        if drawer is None:
            raise CashDrawerError(
                f"No cash drawer balance found for branch {branch.name} on {balance_date:%Y-%m-%d}"
            )
        return drawer

    @staticmethod
    def _require_open(drawer: CashDrawerBalance, transition_method) -> None:
        if not can_proceed(transition_method):
            if drawer.status == CashDrawerBalance.STATUS_CLOSED:
                raise CashDrawerError(
                    f"Cash drawer is already closed for branch {drawer.branch.name} "
                    f"on {drawer.balance_date:%Y-%m-%d}"
                )
            raise CashDrawerError(
                f"Cash drawer for branch {drawer.branch.name} on {drawer.balance_date:%Y-%m-%d} "
                f"is {drawer.get_status_display().lower()}"
            )

    @staticmethod
    def open_drawer(
        branch: Branch,
        opening_balance: Decimal,
        user: Optional[User] = None,
        balance_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerBalance:
        """
        Open the drawer of a branch for a day.

        Raises:
            CashDrawerError: If the opening balance is negative or the drawer already exists
        """
        balance_date = CashDrawerService.resolve_date(balance_date)
        opening_balance = _money(opening_balance)

        if opening_balance < 0:
            raise CashDrawerError("Opening balance cannot be negative")

        already_open_message = (
            f"Cash drawer is already open for branch {branch.name} on {balance_date:%Y-%m-%d}"
        )
        if CashDrawerBalance.objects.filter(branch=branch, balance_date=balance_date).exists():
            raise CashDrawerError(already_open_message)

        expected_closing = CashDrawerService.calculate_expected_closing_balance(
            branch, balance_date, opening_balance
        )

        try:
            with transaction.atomic():
                drawer = CashDrawerBalance.objects.create(
                    tenant=branch.tenant,
                    branch=branch,
                    balance_date=balance_date,
                    opening_balance=opening_balance,
                    expected_closing_balance=expected_closing,
                    opened_by=user,
                    opened_at=timezone.now(),
                    status=CashDrawerBalance.STATUS_OPEN,
                    notes=notes or "",
                )
        except IntegrityError:
            raise CashDrawerError(already_open_message)

        logger.info(
            f"Opened cash drawer for branch {branch.id} on {balance_date} "
            f"with opening balance {opening_balance}"
        )
        return drawer

    @staticmethod
    def close_drawer(
        branch: Branch,
        actual_closing_balance: Decimal,
        user: Optional[User] = None,
        balance_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerBalance:
        """
        Close the drawer with a counted balance, without settlement.

        Raises:
            CashDrawerError: If the count is negative or the drawer is missing or not open
        """
        balance_date = CashDrawerService.resolve_date(balance_date)
        actual_closing_balance = _money(actual_closing_balance)

        if actual_closing_balance < 0:
            raise CashDrawerError("Actual closing balance cannot be negative")

        with transaction.atomic():
            drawer = CashDrawerService._get_locked_drawer(branch, balance_date)
            CashDrawerService._require_open(drawer, drawer.close)

            drawer.expected_closing_balance = CashDrawerService.calculate_expected_closing_balance(
                branch, balance_date, drawer.opening_balance
            )
            drawer.close(actual_closing_balance, user=user, notes=notes)
            drawer.save()

        logger.info(
            f"Closed cash drawer for branch {branch.id} on {balance_date}: "
            f"expected {drawer.expected_closing_balance}, actual {actual_closing_balance}, "
            f"over/short {drawer.cash_over_short}"
        )
        return drawer

    @staticmethod
    def settle_shift(
        branch: Branch,
        actual_closing_balance: Decimal,
        settled_amount: Decimal,
        user: Optional[User] = None,
        balance_date: Optional[date] = None,
        settlement_notes: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerBalance:
        """
        Settle the shift and close the drawer.

        The settled amount must equal the freshly computed expected closing
        balance exactly, and the counted cash must cover it. The remainder is
        carried forward; when positive, the next day's drawer is opened with it.

        Raises:
            CashDrawerError: If any settlement rule is violated
        """
        balance_date = CashDrawerService.resolve_date(balance_date)
        next_day = balance_date + timedelta(days=1)
        actual_closing_balance = _money(actual_closing_balance)
        settled_amount = _money(settled_amount)

        if settled_amount < 0:
            raise CashDrawerError("Settled amount cannot be negative")
        if actual_closing_balance < 0:
            raise CashDrawerError("Actual closing balance cannot be negative")

        with transaction.atomic():
            drawer = CashDrawerService._get_locked_drawer(branch, balance_date)
            CashDrawerService._require_open(drawer, drawer.settle)

            expected_closing = CashDrawerService.calculate_expected_closing_balance(
                branch, balance_date, drawer.opening_balance
            )

            if settled_amount != expected_closing:
                raise CashDrawerError(
                    f"Settlement amount must be exactly {_format_amount(expected_closing)} "
                    f"(Expected Closing Balance)"
                )

            if actual_closing_balance < settled_amount:
                raise CashDrawerError(
                    "Actual closing balance must be at least equal to the settlement amount"
                )

            if CashDrawerBalance.objects.filter(branch=branch, balance_date=next_day).exists():
                raise CashDrawerError(
                    f"Cash drawer for next day ({next_day:%Y-%m-%d}) already exists. "
                    f"Cannot carry forward balance."
                )

            drawer.expected_closing_balance = expected_closing
            drawer.settle(
                actual_closing_balance,
                settled_amount,
                user=user,
                settlement_notes=settlement_notes,
                notes=notes,
            )
            drawer.save()

            carried_forward = drawer.carried_forward_amount
            if carried_forward > 0:
                CashDrawerBalance.objects.create(
                    tenant=branch.tenant,
                    branch=branch,
                    balance_date=next_day,
                    opening_balance=carried_forward,
                    expected_closing_balance=CashDrawerService.calculate_expected_closing_balance(
                        branch, next_day, carried_forward
                    ),
                    opened_by=user,
                    opened_at=timezone.now(),
                    status=CashDrawerBalance.STATUS_OPEN,
                    notes=(
                        f"Opening balance carried forward from {balance_date:%Y-%m-%d} settlement"
                    ),
                )

        logger.info(
            f"Settled shift for branch {branch.id} on {balance_date}: settled {settled_amount}, "
            f"carried forward {carried_forward}"
        )
        return drawer

    @staticmethod
    def refresh_expected_closing_balance(
        branch: Branch, balance_date: Optional[date] = None
    ) -> CashDrawerBalance:
        """
        Recompute and store the expected closing balance of an open drawer.

        Safe to call repeatedly; the drawer state is not changed.

        Raises:
            CashDrawerError: If the drawer does not exist or is not open
        """
        balance_date = CashDrawerService.resolve_date(balance_date)

        with transaction.atomic():
            drawer = (
                CashDrawerBalance.objects.select_for_update()
                .filter(branch=branch, balance_date=balance_date)
                .first()
            )
            if drawer is None or not drawer.is_open():
                raise CashDrawerError(
                    f"Cannot refresh expected closing balance - cash drawer is not open "
                    f"for branch {branch.name} on {balance_date:%Y-%m-%d}"
                )

            drawer.expected_closing_balance = CashDrawerService.calculate_expected_closing_balance(
                branch, balance_date, drawer.opening_balance
            )
            drawer.save(update_fields=["expected_closing_balance", "updated_at"])

        logger.debug(
            f"Refreshed expected closing balance for branch {branch.id} on {balance_date}: "
            f"{drawer.expected_closing_balance}"
        )
        return drawer

    @staticmethod
    def mark_pending_reconciliation(
        branch: Branch,
        actual_closing_balance: Decimal,
        user: Optional[User] = None,
        balance_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerBalance:
        """Record a disputed count and hold the drawer for reconciliation."""
        balance_date = CashDrawerService.resolve_date(balance_date)
        actual_closing_balance = _money(actual_closing_balance)

        if actual_closing_balance < 0:
            raise CashDrawerError("Actual closing balance cannot be negative")

        with transaction.atomic():
            drawer = CashDrawerService._get_locked_drawer(branch, balance_date)
            CashDrawerService._require_open(drawer, drawer.mark_pending_reconciliation)

            drawer.expected_closing_balance = CashDrawerService.calculate_expected_closing_balance(
                branch, balance_date, drawer.opening_balance
            )
            drawer.mark_pending_reconciliation(actual_closing_balance, user=user, notes=notes)
            drawer.save()

        logger.warning(
            f"Cash drawer for branch {branch.id} on {balance_date} pending reconciliation: "
            f"over/short {drawer.cash_over_short}"
        )
        return drawer

    @staticmethod
    def reconcile(
        branch: Branch,
        actual_closing_balance: Decimal,
        user: Optional[User] = None,
        balance_date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> CashDrawerBalance:
        """Close a drawer held for reconciliation with the agreed count."""
        balance_date = CashDrawerService.resolve_date(balance_date)
        actual_closing_balance = _money(actual_closing_balance)

        if actual_closing_balance < 0:
            raise CashDrawerError("Actual closing balance cannot be negative")

        with transaction.atomic():
            drawer = CashDrawerService._get_locked_drawer(branch, balance_date)
            if not can_proceed(drawer.reconcile):
                raise CashDrawerError(
                    f"Cash drawer for branch {branch.name} on {balance_date:%Y-%m-%d} "
                    f"is not pending reconciliation"
                )
            drawer.reconcile(actual_closing_balance, user=user, notes=notes)
            drawer.save()

        logger.info(f"Reconciled cash drawer for branch {branch.id} on {balance_date}")
        return drawer

    @staticmethod
    def refresh_open_drawers(balance_date: Optional[date] = None) -> int:
        """Refresh every open drawer of a day. Returns the number refreshed."""
        balance_date = CashDrawerService.resolve_date(balance_date)
        refreshed = 0
        open_drawers = CashDrawerBalance.objects.filter(
            balance_date=balance_date, status=CashDrawerBalance.STATUS_OPEN
        ).select_related("branch")

        for drawer in open_drawers:
            try:
                CashDrawerService.refresh_expected_closing_balance(drawer.branch, balance_date)
                refreshed += 1
            except CashDrawerError as e:
                # Closed between the query and the refresh
                logger.info(f"Skipped refresh of drawer {drawer.id}: {e}")

        return refreshed

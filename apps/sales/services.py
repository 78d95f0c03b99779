"""
Cash movement totals for the cash drawer.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Sum
from django.db.models.functions import Abs
from django.utils import timezone

from apps.core.models import Branch, User

from .models import FinancialTransaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")


@dataclass
class CashTotals:
    """Completed cash movements of one branch on one day."""

    sales: Decimal = ZERO
    repairs: Decimal = ZERO
    returns: Decimal = ZERO

    @property
    def net(self) -> Decimal:
        return self.sales + self.repairs - self.returns


class FinancialTransactionService:
    """Records POS money movements and aggregates them per day."""

    @staticmethod
    def generate_transaction_number(tenant, when=None) -> str:
        when = when or timezone.now()
        prefix = f"TRX-{when:%Y%m%d}-"
        count = FinancialTransaction.objects.filter(
            tenant=tenant, transaction_number__startswith=prefix
        ).count()
        number = f"{prefix}{count + 1:05d}"
        while FinancialTransaction.objects.filter(
            tenant=tenant, transaction_number=number
        ).exists():
            count += 1
            number = f"{prefix}{count + 1:05d}"
        return number

    @staticmethod
    def record_transaction(
        branch: Branch,
        transaction_type: str,
        amount_paid: Decimal,
        user: Optional[User] = None,
        payment_method: str = FinancialTransaction.CASH,
        change_given: Decimal = ZERO,
        total_amount: Optional[Decimal] = None,
        status: str = FinancialTransaction.COMPLETED,
        transaction_date=None,
        notes: str = "",
    ) -> FinancialTransaction:
        """
        Record a money movement for a branch.

        Raises:
            ValueError: If amounts are negative for money received
        """
        if amount_paid < 0:
            raise ValueError("Amount paid cannot be negative")

        with transaction.atomic():
            when = transaction_date or timezone.now()
            txn = FinancialTransaction.objects.create(
                tenant=branch.tenant,
                branch=branch,
                transaction_number=FinancialTransactionService.generate_transaction_number(
                    branch.tenant, when
                ),
                transaction_type=transaction_type,
                payment_method=payment_method,
                status=status,
                total_amount=total_amount if total_amount is not None else amount_paid,
                amount_paid=amount_paid,
                change_given=change_given,
                transaction_date=when,
                processed_by=user,
                notes=notes,
            )

        logger.info(
            f"Recorded {transaction_type} {txn.transaction_number} of {amount_paid} "
            f"({payment_method}) for branch {branch.id}"
        )
        return txn

    @staticmethod
    def get_cash_totals(branch: Branch, on_date: date) -> CashTotals:
        """
        Sum completed cash sales, repairs and refunds of a branch for one day.

        Returns are counted by the absolute value of change_given so that
        refunds recorded either as positive or negative figures reduce cash.
        """
        completed_cash = FinancialTransaction.objects.filter(
            branch=branch,
            payment_method=FinancialTransaction.CASH,
            status=FinancialTransaction.COMPLETED,
            transaction_date__date=on_date,
        )

        def _sum(queryset, expression):
            return queryset.aggregate(total=Sum(expression))["total"] or ZERO

        return CashTotals(
            sales=_sum(
                completed_cash.filter(transaction_type=FinancialTransaction.SALE), "amount_paid"
            ),
            repairs=_sum(
                completed_cash.filter(transaction_type=FinancialTransaction.REPAIR), "amount_paid"
            ),
            returns=_sum(
                completed_cash.filter(transaction_type=FinancialTransaction.RETURN),
                Abs("change_given"),
            ),
        )

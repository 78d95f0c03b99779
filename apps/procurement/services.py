"""
Supplier ledger service.

Purchases on credit raise what is owed to a supplier; treasury payments
lower it. Both leave a SupplierTransaction with the balance after the move.
"""

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.utils import timezone

from apps.core.models import Branch, User

from .models import Supplier, SupplierTransaction

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class SupplierError(ValueError):
    """A supplier ledger rule was violated."""


class SupplierService:
    @staticmethod
    def next_transaction_number() -> str:
        """Timestamp based number, e.g. SP-20240115103000123, bumped on collision."""
        now = timezone.now()
        number = f"SP-{now:%Y%m%d%H%M%S}{now.microsecond // 1000:03d}"
        while SupplierTransaction.objects.filter(transaction_number=number).exists():
            number = f"{number[:-3]}{(int(number[-3:]) + 1) % 1000:03d}"
        return number

    @staticmethod
    def record_purchase(
        supplier: Supplier,
        branch: Branch,
        amount: Decimal,
        user: Optional[User] = None,
        reference_number: str = "",
        notes: Optional[str] = None,
    ) -> SupplierTransaction:
        """
        Record goods bought on credit and add the amount to what is owed.

        Raises:
            SupplierError: If the amount is not positive, or the supplier is
                inactive or belongs to another tenant
        """
        amount = Decimal(amount).quantize(CENT)
        if amount <= 0:
            raise SupplierError("Amount must be greater than zero")
        if supplier.tenant_id != branch.tenant_id:
            raise SupplierError("Supplier not found")
        if not supplier.is_active:
            raise SupplierError("Supplier is not active")

        with transaction.atomic():
            supplier = Supplier.objects.select_for_update().get(pk=supplier.pk)
            supplier.current_balance += amount
            supplier.save(update_fields=["current_balance", "updated_at"])

            purchase = SupplierTransaction.objects.create(
                supplier=supplier,
                branch=branch,
                transaction_number=SupplierService.next_transaction_number(),
                transaction_type=SupplierTransaction.PURCHASE,
                amount=amount,
                balance_after_transaction=supplier.current_balance,
                reference_number=reference_number or "",
                notes=notes or f"Purchase on credit for {branch.name}",
                created_by=user,
            )

        logger.info(
            f"Recorded purchase {purchase.transaction_number} of {amount} from supplier "
            f"{supplier.id}; supplier balance now {supplier.current_balance}"
        )
        return purchase

"""
Sales models for the jewelry POS.

Only the money movement side of a sale, repair or return is kept here:
what was paid, by which method, on which branch and day. The cash drawer
derives its expected closing balance from completed cash rows.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import Branch, Tenant, User


class FinancialTransaction(models.Model):
    """
    A completed (or pending/cancelled) POS money movement.

    Sales and repairs bring cash in through amount_paid. Returns refund
    cash to the customer; the refunded amount is stored in change_given and
    may be recorded as a negative figure.
    """

    # Transaction type choices
    SALE = "SALE"
    RETURN = "RETURN"
    REPAIR = "REPAIR"

    TRANSACTION_TYPE_CHOICES = [
        (SALE, "Sale"),
        (RETURN, "Return"),
        (REPAIR, "Repair"),
    ]

    # Payment method choices
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHEQUE = "CHEQUE"

    PAYMENT_METHOD_CHOICES = [
        (CASH, "Cash"),
        (CARD, "Card"),
        (BANK_TRANSFER, "Bank Transfer"),
        (CHEQUE, "Cheque"),
    ]

    # Status choices
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    STATUS_CHOICES = [
        (PENDING, "Pending"),
        (COMPLETED, "Completed"),
        (CANCELLED, "Cancelled"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the transaction",
    )

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="financial_transactions",
        help_text="Tenant that owns this transaction",
    )

    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="financial_transactions",
        help_text="Branch where the transaction occurred",
    )

    transaction_number = models.CharField(
        max_length=50,
        help_text="Unique transaction number within tenant (e.g., 'TRX-20240115-00001')",
    )

    transaction_type = models.CharField(
        max_length=20,
        choices=TRANSACTION_TYPE_CHOICES,
        help_text="Kind of business event that moved money",
    )

    payment_method = models.CharField(
        max_length=20,
        choices=PAYMENT_METHOD_CHOICES,
        default=CASH,
        help_text="Payment method used",
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=COMPLETED,
        help_text="Current status of the transaction",
    )

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Final amount of the transaction",
    )

    amount_paid = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount paid by the customer",
    )

    change_given = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Change or refund handed back to the customer",
    )

    transaction_date = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the transaction took place",
    )

    processed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="financial_transactions_processed",
        help_text="Employee who processed the transaction",
    )

    notes = models.TextField(blank=True, help_text="Additional notes")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "financial_transactions"
        ordering = ["-transaction_date"]
        verbose_name = "Financial Transaction"
        verbose_name_plural = "Financial Transactions"
        unique_together = [["tenant", "transaction_number"]]
        indexes = [
            models.Index(
                fields=["branch", "transaction_date"], name="fintx_branch_date_idx"
            ),
            models.Index(
                fields=["branch", "payment_method", "status"], name="fintx_branch_cash_idx"
            ),
        ]

    def __str__(self):
        return f"{self.transaction_number} - {self.transaction_type} {self.amount_paid}"

    def is_cash(self):
        return self.payment_method == self.CASH

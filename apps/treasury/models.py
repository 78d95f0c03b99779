"""
Treasury models.

Each branch has one treasury account separate from its physical cash
drawer. The account balance only changes together with an appended
TreasuryTransaction; transactions are never edited or deleted.
"""

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxLengthValidator, MinValueValidator
from django.db import models
from django.utils import timezone

from apps.core.models import Branch, Tenant, User


def default_currency_code():
    return getattr(settings, "TREASURY_CURRENCY_CODE", "EGP")


class TreasuryAccount(models.Model):
    """Running balance of a branch treasury."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="treasury_accounts",
        help_text="Tenant that owns this account",
    )
    branch = models.OneToOneField(
        Branch,
        on_delete=models.PROTECT,
        related_name="treasury_account",
        help_text="Branch whose treasury this is",
    )
    current_balance = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Current treasury balance",
    )
    currency_code = models.CharField(
        max_length=3, default=default_currency_code, help_text="ISO 4217 currency code"
    )
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="treasury_accounts_created",
    )

    class Meta:
        db_table = "treasury_accounts"
        ordering = ["branch__name"]
        verbose_name = "Treasury Account"
        verbose_name_plural = "Treasury Accounts"

    def __str__(self):
        return f"{self.branch.name} treasury: {self.current_balance} {self.currency_code}"


class TreasuryTransaction(models.Model):
    """Append-only movement of a treasury account."""

    CREDIT = "CREDIT"
    DEBIT = "DEBIT"

    DIRECTION_CHOICES = [
        (CREDIT, "Credit"),
        (DEBIT, "Debit"),
    ]

    ADJUSTMENT = "ADJUSTMENT"
    FEED_FROM_CASH_DRAWER = "FEED_FROM_CASH_DRAWER"
    SUPPLIER_PAYMENT = "SUPPLIER_PAYMENT"
    TRANSFER_IN = "TRANSFER_IN"
    TRANSFER_OUT = "TRANSFER_OUT"

    TYPE_CHOICES = [
        (ADJUSTMENT, "Adjustment"),
        (FEED_FROM_CASH_DRAWER, "Feed From Cash Drawer"),
        (SUPPLIER_PAYMENT, "Supplier Payment"),
        (TRANSFER_IN, "Transfer In"),
        (TRANSFER_OUT, "Transfer Out"),
    ]

    REFERENCE_CASH_DRAWER = "CashDrawerBalance"
    REFERENCE_SUPPLIER = "Supplier"
    REFERENCE_BRANCH = "Branch"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    account = models.ForeignKey(
        TreasuryAccount,
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Treasury account moved",
    )
    amount = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Amount moved (always positive; see direction)",
    )
    direction = models.CharField(max_length=10, choices=DIRECTION_CHOICES)
    transaction_type = models.CharField(max_length=30, choices=TYPE_CHOICES, db_index=True)
    balance_after = models.DecimalField(
        max_digits=14,
        decimal_places=2,
        help_text="Account balance after this movement",
    )
    reference_type = models.CharField(
        max_length=50, blank=True, help_text="Kind of object that caused the movement"
    )
    reference_id = models.CharField(
        max_length=64, blank=True, help_text="Identifier of the object that caused the movement"
    )
    notes = models.TextField(
        blank=True, validators=[MaxLengthValidator(1000)], help_text="Reason or remarks"
    )
    performed_at = models.DateTimeField(default=timezone.now, db_index=True)
    performed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="treasury_transactions",
    )

    class Meta:
        db_table = "treasury_transactions"
        ordering = ["-performed_at"]
        verbose_name = "Treasury Transaction"
        verbose_name_plural = "Treasury Transactions"
        indexes = [
            models.Index(fields=["account", "-performed_at"], name="trtx_account_date_idx"),
            models.Index(fields=["reference_type", "reference_id"], name="trtx_reference_idx"),
        ]
        constraints = [
            # A drawer settlement can be fed into the treasury only once
            models.UniqueConstraint(
                fields=["reference_type", "reference_id"],
                condition=models.Q(transaction_type="FEED_FROM_CASH_DRAWER"),
                name="trtx_unique_drawer_feed",
            ),
        ]

    def __str__(self):
        sign = "+" if self.direction == self.CREDIT else "-"
        return f"{self.get_transaction_type_display()} {sign}{self.amount}"

    @property
    def signed_amount(self):
        return self.amount if self.direction == self.CREDIT else -self.amount

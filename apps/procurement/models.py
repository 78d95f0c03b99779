"""
Procurement models: suppliers and their payable ledger.

A supplier's current_balance is what the business still owes it. Paying a
supplier out of the branch treasury lowers that balance and leaves a
SupplierTransaction behind.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.core.models import Branch, Tenant, User


class Supplier(models.Model):
    """
    Supplier model for managing vendor relationships and payables.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="suppliers",
        help_text="Tenant that owns this supplier",
    )

    # Basic Information
    name = models.CharField(max_length=255, help_text="Supplier company name")
    contact_person = models.CharField(
        max_length=255, blank=True, help_text="Primary contact person name"
    )

    # Contact Information
    email = models.EmailField(blank=True, help_text="Primary email address")
    phone = models.CharField(max_length=20, blank=True, help_text="Primary phone number")
    address = models.TextField(blank=True, help_text="Complete address")

    # Business Information
    tax_id = models.CharField(max_length=50, blank=True, help_text="Tax identification number")
    payment_terms = models.CharField(
        max_length=100, blank=True, help_text="Payment terms (e.g., Net 30, COD)"
    )

    # Payables
    current_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Outstanding amount owed to the supplier",
    )

    # Status and Metadata
    is_active = models.BooleanField(default=True, help_text="Whether supplier is active")
    notes = models.TextField(blank=True, help_text="Internal notes about supplier")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_suppliers",
    )

    class Meta:
        db_table = "procurement_suppliers"
        unique_together = [["tenant", "name"]]
        indexes = [
            models.Index(fields=["tenant", "is_active"], name="supplier_tenant_active_idx"),
        ]
        ordering = ["name"]

    def __str__(self):
        return f"{self.name}"


class SupplierTransaction(models.Model):
    """
    Ledger row of a supplier account (purchases on credit, payments, adjustments).
    """

    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    ADJUSTMENT = "ADJUSTMENT"

    TRANSACTION_TYPE_CHOICES = [
        (PURCHASE, "Purchase"),
        (PAYMENT, "Payment"),
        (ADJUSTMENT, "Adjustment"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.CASCADE,
        related_name="transactions",
        help_text="Supplier account this row belongs to",
    )
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="supplier_transactions",
        help_text="Branch that made the payment or purchase",
    )

    transaction_number = models.CharField(
        max_length=50,
        unique=True,
        help_text="Supplier transaction number (e.g., 'SP-20240115103000123')",
    )
    transaction_type = models.CharField(
        max_length=20,
        choices=TRANSACTION_TYPE_CHOICES,
        help_text="Type of supplier ledger movement",
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
        help_text="Amount of the movement",
    )
    balance_after_transaction = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Supplier outstanding balance after this movement",
    )
    reference_number = models.CharField(
        max_length=100, blank=True, help_text="External reference (e.g., treasury transaction id)"
    )
    notes = models.TextField(blank=True, help_text="Notes about the movement")

    transaction_date = models.DateTimeField(auto_now_add=True, db_index=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="supplier_transactions_created",
    )

    class Meta:
        db_table = "procurement_supplier_transactions"
        ordering = ["-transaction_date"]
        indexes = [
            models.Index(fields=["supplier", "-transaction_date"], name="suptx_supplier_date_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_number} - {self.supplier.name} {self.amount}"

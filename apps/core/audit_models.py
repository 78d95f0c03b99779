"""
Audit trail for cash drawer and treasury operations.

Every mutation of money held by a branch (drawer open/close/settle,
treasury adjustments, feeds, supplier payments) leaves an AuditLog row.
"""

import uuid

from django.conf import settings
from django.db import models


class AuditLog(models.Model):
    """
    Append-only record of a business action performed by a user.
    """

    # Action categories
    CATEGORY_CASH_DRAWER = "CASH_DRAWER"
    CATEGORY_TREASURY = "TREASURY"
    CATEGORY_SALES = "SALES"
    CATEGORY_PROCUREMENT = "PROCUREMENT"

    CATEGORY_CHOICES = [
        (CATEGORY_CASH_DRAWER, "Cash Drawer"),
        (CATEGORY_TREASURY, "Treasury"),
        (CATEGORY_SALES, "Sales"),
        (CATEGORY_PROCUREMENT, "Procurement"),
    ]

    ACTION_OPEN_CASH_DRAWER = "OPEN_CASH_DRAWER"
    ACTION_CLOSE_CASH_DRAWER = "CLOSE_CASH_DRAWER"
    ACTION_SETTLE_CASH_DRAWER = "SETTLE_CASH_DRAWER"
    ACTION_RECONCILE_CASH_DRAWER = "RECONCILE_CASH_DRAWER"
    ACTION_TREASURY_ADJUST = "TREASURY_ADJUST"
    ACTION_TREASURY_FEED = "TREASURY_FEED"
    ACTION_TREASURY_PAY_SUPPLIER = "TREASURY_PAY_SUPPLIER"
    ACTION_TREASURY_TRANSFER = "TREASURY_TRANSFER"
    ACTION_RECORD_TRANSACTION = "RECORD_TRANSACTION"
    ACTION_SUPPLIER_PURCHASE = "SUPPLIER_PURCHASE"

    ACTION_CHOICES = [
        (ACTION_OPEN_CASH_DRAWER, "Cash Drawer Opened"),
        (ACTION_CLOSE_CASH_DRAWER, "Cash Drawer Closed"),
        (ACTION_SETTLE_CASH_DRAWER, "Shift Settled"),
        (ACTION_RECONCILE_CASH_DRAWER, "Cash Drawer Reconciled"),
        (ACTION_TREASURY_ADJUST, "Treasury Adjusted"),
        (ACTION_TREASURY_FEED, "Treasury Fed From Cash Drawer"),
        (ACTION_TREASURY_PAY_SUPPLIER, "Supplier Paid From Treasury"),
        (ACTION_TREASURY_TRANSFER, "Treasury Transfer"),
        (ACTION_RECORD_TRANSACTION, "Financial Transaction Recorded"),
        (ACTION_SUPPLIER_PURCHASE, "Supplier Purchase Recorded"),
    ]

    SEVERITY_INFO = "INFO"
    SEVERITY_WARNING = "WARNING"

    SEVERITY_CHOICES = [
        (SEVERITY_INFO, "Info"),
        (SEVERITY_WARNING, "Warning"),
    ]

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for the audit log entry",
    )

    tenant = models.ForeignKey(
        "core.Tenant",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
        help_text="Tenant associated with this action",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs_performed",
        help_text="User who performed the action",
    )

    category = models.CharField(
        max_length=20,
        choices=CATEGORY_CHOICES,
        db_index=True,
        help_text="Category of the action",
    )

    action = models.CharField(
        max_length=50,
        choices=ACTION_CHOICES,
        db_index=True,
        help_text="Specific action performed",
    )

    severity = models.CharField(
        max_length=20,
        choices=SEVERITY_CHOICES,
        default=SEVERITY_INFO,
        help_text="Severity level of the action",
    )

    description = models.TextField(
        help_text="Human-readable description of the action",
    )

    object_type = models.CharField(
        max_length=100,
        blank=True,
        help_text="Model name of the affected object",
    )

    object_id = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="ID of the affected object",
    )

    ip_address = models.GenericIPAddressField(
        null=True,
        blank=True,
        help_text="IP address of the user",
    )

    metadata = models.JSONField(
        null=True,
        blank=True,
        help_text="Additional metadata (JSON format)",
    )

    timestamp = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the action occurred",
    )

    class Meta:
        db_table = "audit_logs"
        ordering = ["-timestamp"]
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        indexes = [
            models.Index(fields=["tenant", "-timestamp"], name="auditlog_tenant_time_idx"),
            models.Index(fields=["action", "-timestamp"], name="auditlog_action_time_idx"),
        ]

    def __str__(self):
        user_str = self.user.username if self.user else "System"
        return f"{self.action} by {user_str} at {self.timestamp}"

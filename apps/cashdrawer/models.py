"""
Cash drawer models.

One CashDrawerBalance row exists per branch and calendar day. The drawer
is opened with a counted opening balance, accumulates an expected closing
balance from completed cash transactions, and is finally closed either
plainly (count only) or by settling the shift, which splits the counted
cash into a settled amount and a remainder carried into the next day.
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone
from django_fsm import FSMField, transition

from apps.core.models import Branch, Tenant, User


def append_note(existing, note):
    """Join notes the way the drawer history is kept: 'old; new'."""
    if not note:
        return existing
    if not existing:
        return note
    return f"{existing}; {note}"


class CashDrawerBalance(models.Model):
    """
    Daily cash drawer of a branch with FSM state management.

    States:
        open -> closed                    (close or settle)
        open -> pending_reconciliation    (count disputed)
        pending_reconciliation -> closed  (reconcile)
    """

    STATUS_OPEN = "open"
    STATUS_CLOSED = "closed"
    STATUS_PENDING_RECONCILIATION = "pending_reconciliation"

    STATUS_CHOICES = [
        (STATUS_OPEN, "Open"),
        (STATUS_CLOSED, "Closed"),
        (STATUS_PENDING_RECONCILIATION, "Pending Reconciliation"),
    ]

    # Numeric codes used by POS clients
    STATUS_CODES = {
        STATUS_OPEN: 1,
        STATUS_CLOSED: 2,
        STATUS_PENDING_RECONCILIATION: 3,
    }

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name="cash_drawer_balances",
        help_text="Tenant that owns this drawer",
    )
    branch = models.ForeignKey(
        Branch,
        on_delete=models.PROTECT,
        related_name="cash_drawer_balances",
        help_text="Branch the drawer belongs to",
    )
    balance_date = models.DateField(db_index=True, help_text="Business day of the drawer")

    # Balances
    opening_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cash counted into the drawer at opening",
    )
    expected_closing_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Opening balance plus cash sales and repairs minus cash refunds",
    )
    actual_closing_balance = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cash physically counted at closing",
    )

    # Settlement
    settled_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Amount removed from the drawer at settlement",
    )
    carried_forward_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text="Cash left in the drawer for the next day",
    )
    settlement_notes = models.TextField(blank=True, help_text="Notes entered at settlement")

    status = FSMField(
        default=STATUS_OPEN, choices=STATUS_CHOICES, help_text="Current drawer status"
    )
    notes = models.TextField(blank=True, help_text="Running notes of the drawer")

    # Audit
    opened_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_drawers_opened",
    )
    opened_at = models.DateTimeField(default=timezone.now)
    closed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cash_drawers_closed",
    )
    closed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cash_drawer_balances"
        ordering = ["-balance_date"]
        verbose_name = "Cash Drawer Balance"
        verbose_name_plural = "Cash Drawer Balances"
        unique_together = [["branch", "balance_date"]]
        indexes = [
            models.Index(fields=["branch", "status"], name="drawer_branch_status_idx"),
            models.Index(fields=["tenant", "-balance_date"], name="drawer_tenant_date_idx"),
        ]

    def __str__(self):
        return f"{self.branch.name} {self.balance_date} ({self.get_status_display()})"

    @property
    def cash_over_short(self):
        """Counted cash minus expected cash; negative means the drawer is short."""
        return (self.actual_closing_balance or Decimal("0.00")) - self.expected_closing_balance

    @property
    def status_code(self):
        return self.STATUS_CODES[self.status]

    @property
    def is_settled(self):
        return self.settled_amount is not None

    def is_open(self):
        return self.status == self.STATUS_OPEN

    def _record_close(self, actual_closing_balance, user, notes):
        self.actual_closing_balance = actual_closing_balance
        self.closed_by = user
        self.closed_at = timezone.now()
        self.notes = append_note(self.notes, notes)

    @transition(field=status, source=STATUS_OPEN, target=STATUS_CLOSED)
    def close(self, actual_closing_balance, user=None, notes=None):
        """Close the drawer with a counted balance and no settlement."""
        self._record_close(actual_closing_balance, user, notes)

    @transition(field=status, source=STATUS_OPEN, target=STATUS_CLOSED)
    def settle(
        self, actual_closing_balance, settled_amount, user=None, settlement_notes=None, notes=None
    ):
        """Close the drawer, splitting the count into settled and carried-forward cash."""
        self._record_close(actual_closing_balance, user, notes)
        self.settled_amount = settled_amount
        self.carried_forward_amount = actual_closing_balance - settled_amount
        self.settlement_notes = settlement_notes or ""

    @transition(field=status, source=STATUS_OPEN, target=STATUS_PENDING_RECONCILIATION)
    def mark_pending_reconciliation(self, actual_closing_balance, user=None, notes=None):
        """Park a disputed count until a manager reconciles it."""
        self.actual_closing_balance = actual_closing_balance
        self.notes = append_note(self.notes, notes)

    @transition(field=status, source=STATUS_PENDING_RECONCILIATION, target=STATUS_CLOSED)
    def reconcile(self, actual_closing_balance, user=None, notes=None):
        """Record the agreed count and close the drawer."""
        self._record_close(actual_closing_balance, user, notes)

import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import django_fsm
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="CashDrawerBalance",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "balance_date",
                    models.DateField(db_index=True, help_text="Business day of the drawer"),
                ),
                (
                    "opening_balance",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Cash counted into the drawer at opening",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "expected_closing_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Opening balance plus cash sales and repairs minus cash refunds",
                        max_digits=12,
                    ),
                ),
                (
                    "actual_closing_balance",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Cash physically counted at closing",
                        max_digits=12,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "settled_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Amount removed from the drawer at settlement",
                        max_digits=12,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "carried_forward_amount",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Cash left in the drawer for the next day",
                        max_digits=12,
                        null=True,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "settlement_notes",
                    models.TextField(blank=True, help_text="Notes entered at settlement"),
                ),
                (
                    "status",
                    django_fsm.FSMField(
                        choices=[
                            ("open", "Open"),
                            ("closed", "Closed"),
                            ("pending_reconciliation", "Pending Reconciliation"),
                        ],
                        default="open",
                        help_text="Current drawer status",
                        max_length=50,
                    ),
                ),
                ("notes", models.TextField(blank=True, help_text="Running notes of the drawer")),
                ("opened_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "branch",
                    models.ForeignKey(
                        help_text="Branch the drawer belongs to",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cash_drawer_balances",
                        to="core.branch",
                    ),
                ),
                (
                    "closed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cash_drawers_closed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "opened_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cash_drawers_opened",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this drawer",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cash_drawer_balances",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Cash Drawer Balance",
                "verbose_name_plural": "Cash Drawer Balances",
                "db_table": "cash_drawer_balances",
                "ordering": ["-balance_date"],
                "indexes": [
                    models.Index(
                        fields=["branch", "status"], name="drawer_branch_status_idx"
                    ),
                    models.Index(
                        fields=["tenant", "-balance_date"], name="drawer_tenant_date_idx"
                    ),
                ],
                "unique_together": {("branch", "balance_date")},
            },
        ),
    ]

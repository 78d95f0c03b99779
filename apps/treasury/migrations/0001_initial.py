import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import apps.treasury.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("core", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="TreasuryAccount",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "current_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Current treasury balance",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "currency_code",
                    models.CharField(
                        default=apps.treasury.models.default_currency_code,
                        help_text="ISO 4217 currency code",
                        max_length=3,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "branch",
                    models.OneToOneField(
                        help_text="Branch whose treasury this is",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="treasury_account",
                        to="core.branch",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="treasury_accounts_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this account",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="treasury_accounts",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "verbose_name": "Treasury Account",
                "verbose_name_plural": "Treasury Accounts",
                "db_table": "treasury_accounts",
                "ordering": ["branch__name"],
            },
        ),
        migrations.CreateModel(
            name="TreasuryTransaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount moved (always positive; see direction)",
                        max_digits=14,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "direction",
                    models.CharField(
                        choices=[("CREDIT", "Credit"), ("DEBIT", "Debit")], max_length=10
                    ),
                ),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("ADJUSTMENT", "Adjustment"),
                            ("FEED_FROM_CASH_DRAWER", "Feed From Cash Drawer"),
                            ("SUPPLIER_PAYMENT", "Supplier Payment"),
                            ("TRANSFER_IN", "Transfer In"),
                            ("TRANSFER_OUT", "Transfer Out"),
                        ],
                        db_index=True,
                        max_length=30,
                    ),
                ),
                (
                    "balance_after",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Account balance after this movement",
                        max_digits=14,
                    ),
                ),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        help_text="Kind of object that caused the movement",
                        max_length=50,
                    ),
                ),
                (
                    "reference_id",
                    models.CharField(
                        blank=True,
                        help_text="Identifier of the object that caused the movement",
                        max_length=64,
                    ),
                ),
                (
                    "notes",
                    models.TextField(
                        blank=True,
                        help_text="Reason or remarks",
                        validators=[django.core.validators.MaxLengthValidator(1000)],
                    ),
                ),
                (
                    "performed_at",
                    models.DateTimeField(db_index=True, default=django.utils.timezone.now),
                ),
                (
                    "account",
                    models.ForeignKey(
                        help_text="Treasury account moved",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="treasury.treasuryaccount",
                    ),
                ),
                (
                    "performed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="treasury_transactions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Treasury Transaction",
                "verbose_name_plural": "Treasury Transactions",
                "db_table": "treasury_transactions",
                "ordering": ["-performed_at"],
                "indexes": [
                    models.Index(
                        fields=["account", "-performed_at"], name="trtx_account_date_idx"
                    ),
                    models.Index(
                        fields=["reference_type", "reference_id"], name="trtx_reference_idx"
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=models.Q(("transaction_type", "FEED_FROM_CASH_DRAWER")),
                        fields=("reference_type", "reference_id"),
                        name="trtx_unique_drawer_feed",
                    )
                ],
            },
        ),
    ]

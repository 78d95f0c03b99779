import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
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
            name="Supplier",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("name", models.CharField(help_text="Supplier company name", max_length=255)),
                (
                    "contact_person",
                    models.CharField(
                        blank=True, help_text="Primary contact person name", max_length=255
                    ),
                ),
                (
                    "email",
                    models.EmailField(
                        blank=True, help_text="Primary email address", max_length=254
                    ),
                ),
                (
                    "phone",
                    models.CharField(blank=True, help_text="Primary phone number", max_length=20),
                ),
                ("address", models.TextField(blank=True, help_text="Complete address")),
                (
                    "tax_id",
                    models.CharField(
                        blank=True, help_text="Tax identification number", max_length=50
                    ),
                ),
                (
                    "payment_terms",
                    models.CharField(
                        blank=True,
                        help_text="Payment terms (e.g., Net 30, COD)",
                        max_length=100,
                    ),
                ),
                (
                    "current_balance",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("0.00"),
                        help_text="Outstanding amount owed to the supplier",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.00"))],
                    ),
                ),
                (
                    "is_active",
                    models.BooleanField(default=True, help_text="Whether supplier is active"),
                ),
                ("notes", models.TextField(blank=True, help_text="Internal notes about supplier")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_suppliers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "tenant",
                    models.ForeignKey(
                        help_text="Tenant that owns this supplier",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="suppliers",
                        to="core.tenant",
                    ),
                ),
            ],
            options={
                "db_table": "procurement_suppliers",
                "ordering": ["name"],
                "indexes": [
                    models.Index(
                        fields=["tenant", "is_active"], name="supplier_tenant_active_idx"
                    )
                ],
                "unique_together": {("tenant", "name")},
            },
        ),
        migrations.CreateModel(
            name="SupplierTransaction",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "transaction_number",
                    models.CharField(
                        help_text="Supplier transaction number (e.g., 'SP-20240115103000123')",
                        max_length=50,
                        unique=True,
                    ),
                ),
                (
                    "transaction_type",
                    models.CharField(
                        choices=[
                            ("PURCHASE", "Purchase"),
                            ("PAYMENT", "Payment"),
                            ("ADJUSTMENT", "Adjustment"),
                        ],
                        help_text="Type of supplier ledger movement",
                        max_length=20,
                    ),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Amount of the movement",
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(Decimal("0.01"))],
                    ),
                ),
                (
                    "balance_after_transaction",
                    models.DecimalField(
                        decimal_places=2,
                        help_text="Supplier outstanding balance after this movement",
                        max_digits=12,
                    ),
                ),
                (
                    "reference_number",
                    models.CharField(
                        blank=True,
                        help_text="External reference (e.g., treasury transaction id)",
                        max_length=100,
                    ),
                ),
                ("notes", models.TextField(blank=True, help_text="Notes about the movement")),
                ("transaction_date", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "branch",
                    models.ForeignKey(
                        help_text="Branch that made the payment or purchase",
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="supplier_transactions",
                        to="core.branch",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="supplier_transactions_created",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        help_text="Supplier account this row belongs to",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="transactions",
                        to="procurement.supplier",
                    ),
                ),
            ],
            options={
                "db_table": "procurement_supplier_transactions",
                "ordering": ["-transaction_date"],
                "indexes": [
                    models.Index(
                        fields=["supplier", "-transaction_date"], name="suptx_supplier_date_idx"
                    )
                ],
            },
        ),
    ]

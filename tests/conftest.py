"""
Pytest configuration and fixtures for the cash management service.
"""

from decimal import Decimal

import pytest


@pytest.fixture
def api_client():
    """
    Fixture for Django REST framework API client.
    """
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def tenant():
    """
    Fixture for creating a test tenant.
    """
    from apps.core.models import Tenant

    return Tenant.objects.create(company_name="Test Jewelry Shop", slug="test-shop", status="ACTIVE")


@pytest.fixture
def other_tenant():
    from apps.core.models import Tenant

    return Tenant.objects.create(company_name="Other Jewelry Shop", slug="other-shop", status="ACTIVE")


@pytest.fixture
def branch(tenant):
    """
    Fixture for creating a test branch.
    """
    from apps.core.models import Branch

    return Branch.objects.create(
        tenant=tenant,
        name="Main Branch",
        address="123 Main St",
        phone="555-0100",
    )


@pytest.fixture
def second_branch(tenant):
    from apps.core.models import Branch

    return Branch.objects.create(tenant=tenant, name="Downtown Branch")


@pytest.fixture
def other_branch(other_tenant):
    from apps.core.models import Branch

    return Branch.objects.create(tenant=other_tenant, name="Rival Branch")


@pytest.fixture
def tenant_user(tenant, branch, django_user_model):
    """
    Fixture for creating a tenant owner.
    """
    return django_user_model.objects.create_user(
        username="owner",
        email="owner@example.com",
        password="testpass123",
        tenant=tenant,
        branch=branch,
        role="TENANT_OWNER",
    )


@pytest.fixture
def employee(tenant, branch, django_user_model):
    """
    Fixture for creating a tenant employee (cashier).
    """
    return django_user_model.objects.create_user(
        username="cashier",
        email="cashier@example.com",
        password="testpass123",
        tenant=tenant,
        branch=branch,
        role="TENANT_EMPLOYEE",
    )


@pytest.fixture
def authenticated_client(api_client, tenant_user):
    """
    Fixture for an API client authenticated as the tenant owner.
    """
    api_client.force_authenticate(user=tenant_user)
    return api_client


@pytest.fixture
def employee_client(employee):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=employee)
    return client


@pytest.fixture
def supplier(tenant, tenant_user):
    """
    Fixture for a supplier the shop owes money to.
    """
    from apps.procurement.models import Supplier

    return Supplier.objects.create(
        tenant=tenant,
        name="Gold Supplier Inc",
        contact_person="John Doe",
        email="john@goldsupplier.com",
        current_balance=Decimal("2000.00"),
        created_by=tenant_user,
    )


@pytest.fixture
def record_cash():
    """
    Fixture returning a helper that records a completed cash transaction today.
    """
    from apps.sales.models import FinancialTransaction
    from apps.sales.services import FinancialTransactionService

    def _record(branch, amount, transaction_type=FinancialTransaction.SALE, **kwargs):
        if transaction_type == FinancialTransaction.RETURN:
            kwargs.setdefault("change_given", -Decimal(amount))
            amount = Decimal("0.00")
        return FinancialTransactionService.record_transaction(
            branch, transaction_type, Decimal(amount), **kwargs
        )

    return _record

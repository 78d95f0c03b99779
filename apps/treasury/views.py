"""
Treasury API views.

Endpoints (scoped to a branch of the requesting user's tenant):
- GET  balance
- GET  transactions?from=&to=&type=
- POST adjust                  owners and managers
- POST feed-from-cash-drawer
- POST pay-supplier            owners and managers
- POST transfer                owners and managers
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

from apps.core.audit import log_cash_action
from apps.core.audit_models import AuditLog
from apps.core.models import Branch
from apps.core.permissions import CanManageTreasury, HasTenantAccess, get_tenant_branch
from apps.procurement.models import Supplier

from .serializers import (
    AdjustSerializer,
    FeedFromCashDrawerSerializer,
    PaySupplierSerializer,
    SupplierPaymentResultSerializer,
    TransactionFilterSerializer,
    TransferResultSerializer,
    TransferSerializer,
    TreasuryAccountSerializer,
    TreasuryTransactionSerializer,
)
from .services import TreasuryError, TreasuryService

logger = logging.getLogger(__name__)


def _run(action_description, operation):
    try:
        return operation()
    except TreasuryError as e:
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.error(f"Treasury operation failed while {action_description}", exc_info=True)
        return Response(
            {"detail": f"An error occurred while {action_description}"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def treasury_balance(request, branch_id):
    branch = get_tenant_branch(request, branch_id)
    account = TreasuryService.get_balance(branch)
    return Response(TreasuryAccountSerializer(account).data)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def treasury_transactions(request, branch_id):
    """Paginated ledger filtered by ?from=YYYY-MM-DD&to=YYYY-MM-DD&type=TYPE."""
    branch = get_tenant_branch(request, branch_id)

    params = request.query_params
    filters = TransactionFilterSerializer(
        data={
            "date_from": params.get("from") or None,
            "date_to": params.get("to") or None,
            "transaction_type": params.get("type") or None,
        }
    )
    if not filters.is_valid():
        return Response(filters.errors, status=status.HTTP_400_BAD_REQUEST)

    queryset = TreasuryService.get_transactions(branch, **filters.validated_data)

    paginator = PageNumberPagination()
    page = paginator.paginate_queryset(queryset, request)
    return paginator.get_paginated_response(TreasuryTransactionSerializer(page, many=True).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess, CanManageTreasury])
def treasury_adjust(request, branch_id):
    """
    Manual adjustment.

    {
        "amount": "250.00",
        "direction": "CREDIT|DEBIT",
        "reason": "Opening float"
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = AdjustSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        txn = TreasuryService.adjust(
            branch, data["amount"], data["direction"], data.get("reason"), user=request.user
        )
        log_cash_action(
            AuditLog.ACTION_TREASURY_ADJUST,
            f"Treasury {txn.get_direction_display().lower()} of {txn.amount} at {branch.name}",
            category=AuditLog.CATEGORY_TREASURY,
            instance=txn,
            user=request.user,
            metadata={"amount": txn.amount, "direction": txn.direction, "reason": txn.notes},
            request=request,
        )
        return Response(TreasuryTransactionSerializer(txn).data, status=status.HTTP_201_CREATED)

    return _run("adjusting the treasury", operation)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def treasury_feed_from_cash_drawer(request, branch_id):
    """
    Credit a settled drawer into the treasury.

    {
        "date": "2024-01-15" (optional, default today),
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = FeedFromCashDrawerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        txn = TreasuryService.feed_from_cash_drawer(
            branch, data.get("date"), user=request.user, notes=data.get("notes")
        )
        log_cash_action(
            AuditLog.ACTION_TREASURY_FEED,
            f"Fed {txn.amount} from cash drawer into {branch.name} treasury",
            category=AuditLog.CATEGORY_TREASURY,
            instance=txn,
            user=request.user,
            metadata={"amount": txn.amount, "cash_drawer_id": txn.reference_id},
            request=request,
        )
        return Response(TreasuryTransactionSerializer(txn).data, status=status.HTTP_201_CREATED)

    return _run("feeding the treasury from the cash drawer", operation)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess, CanManageTreasury])
def treasury_pay_supplier(request, branch_id):
    """
    Pay a supplier out of the treasury.

    {
        "supplier_id": "uuid",
        "amount": "1200.00",
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = PaySupplierSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    supplier = get_object_or_404(Supplier, id=data["supplier_id"], tenant=request.user.tenant)

    def operation():
        treasury_txn, supplier_txn = TreasuryService.pay_supplier(
            branch, supplier, data["amount"], user=request.user, notes=data.get("notes")
        )
        log_cash_action(
            AuditLog.ACTION_TREASURY_PAY_SUPPLIER,
            f"Paid {treasury_txn.amount} to supplier {supplier.name} from {branch.name} treasury",
            category=AuditLog.CATEGORY_TREASURY,
            instance=treasury_txn,
            user=request.user,
            metadata={
                "supplier_id": supplier.id,
                "supplier_transaction_number": supplier_txn.transaction_number,
                "amount": treasury_txn.amount,
            },
            request=request,
        )
        result = SupplierPaymentResultSerializer(
            {"treasury_transaction": treasury_txn, "supplier_transaction": supplier_txn}
        )
        return Response(result.data, status=status.HTTP_201_CREATED)

    return _run("paying the supplier", operation)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess, CanManageTreasury])
def treasury_transfer(request, branch_id):
    """
    Transfer to another branch treasury of the same tenant.

    {
        "to_branch_id": "uuid",
        "amount": "500.00",
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = TransferSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    to_branch = get_object_or_404(Branch, id=data["to_branch_id"], tenant=request.user.tenant)

    def operation():
        transfer_out, transfer_in = TreasuryService.transfer(
            branch, to_branch, data["amount"], user=request.user, notes=data.get("notes")
        )
        log_cash_action(
            AuditLog.ACTION_TREASURY_TRANSFER,
            f"Transferred {transfer_out.amount} from {branch.name} to {to_branch.name}",
            category=AuditLog.CATEGORY_TREASURY,
            instance=transfer_out,
            user=request.user,
            metadata={"to_branch_id": to_branch.id, "amount": transfer_out.amount},
            request=request,
        )
        result = TransferResultSerializer(
            {"transfer_out": transfer_out, "transfer_in": transfer_in}
        )
        return Response(result.data, status=status.HTTP_201_CREATED)

    return _run("transferring between treasuries", operation)

"""
API views for POS money movements.

Cash rows recorded here are what the cash drawer's expected closing
balance is computed from.
"""

import logging

from rest_framework import generics, permissions, status
from rest_framework.response import Response

from apps.core.audit import log_cash_action
from apps.core.audit_models import AuditLog
from apps.core.permissions import HasTenantAccess, get_tenant_branch

from .models import FinancialTransaction
from .serializers import (
    FinancialTransactionCreateSerializer,
    FinancialTransactionFilterSerializer,
    FinancialTransactionSerializer,
)
from .services import FinancialTransactionService

logger = logging.getLogger(__name__)


class FinancialTransactionListView(generics.ListCreateAPIView):
    """
    List or record transactions of a branch.

    Query parameters (GET):
    - transaction_type: SALE, RETURN or REPAIR
    - payment_method: CASH, CARD, BANK_TRANSFER or CHEQUE
    - status: PENDING, COMPLETED or CANCELLED
    - date_from / date_to: YYYY-MM-DD, inclusive

    Request body (POST):
    {
        "transaction_type": "SALE|RETURN|REPAIR",
        "payment_method": "CASH|CARD|BANK_TRANSFER|CHEQUE",
        "amount_paid": "100.00",
        "change_given": "0.00",
        "notes": ""
    }
    """

    serializer_class = FinancialTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]

    def get_queryset(self):
        branch = get_tenant_branch(self.request, self.kwargs["branch_id"])
        queryset = FinancialTransaction.objects.filter(branch=branch).select_related(
            "branch", "processed_by"
        )

        params = self.request.query_params
        filters = FinancialTransactionFilterSerializer(
            data={key: value for key, value in params.items() if value}
        )
        filters.is_valid(raise_exception=True)
        data = filters.validated_data

        for field in ["transaction_type", "payment_method", "status"]:
            if field in data:
                queryset = queryset.filter(**{field: data[field]})

        if "date_from" in data:
            queryset = queryset.filter(transaction_date__date__gte=data["date_from"])

        if "date_to" in data:
            queryset = queryset.filter(transaction_date__date__lte=data["date_to"])

        return queryset

    def create(self, request, *args, **kwargs):
        branch = get_tenant_branch(request, kwargs["branch_id"])

        serializer = FinancialTransactionCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            txn = FinancialTransactionService.record_transaction(
                branch=branch, user=request.user, **serializer.validated_data
            )
        except ValueError as e:
            return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)

        log_cash_action(
            AuditLog.ACTION_RECORD_TRANSACTION,
            f"Recorded {txn.transaction_type} {txn.transaction_number} at {branch.name}",
            category=AuditLog.CATEGORY_SALES,
            instance=txn,
            user=request.user,
            metadata={"amount_paid": txn.amount_paid, "payment_method": txn.payment_method},
            request=request,
        )

        return Response(
            FinancialTransactionSerializer(txn).data, status=status.HTTP_201_CREATED
        )

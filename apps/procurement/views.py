"""
Supplier API views.
"""

import logging

from django.shortcuts import get_object_or_404
from rest_framework import filters, generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.audit import log_cash_action
from apps.core.audit_models import AuditLog
from apps.core.permissions import CanManageTreasury, HasTenantAccess, get_tenant_branch

from .models import Supplier, SupplierTransaction
from .serializers import (
    SupplierPurchaseSerializer,
    SupplierSerializer,
    SupplierTransactionSerializer,
)
from .services import SupplierError, SupplierService

logger = logging.getLogger(__name__)


class SupplierListView(generics.ListCreateAPIView):
    """
    List or create suppliers of the current tenant.

    Query parameters:
    - search: Search by name or contact person
    - is_active: true/false
    """

    serializer_class = SupplierSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["name", "contact_person"]
    ordering_fields = ["name", "current_balance"]
    ordering = ["name"]

    def get_queryset(self):
        queryset = Supplier.objects.filter(tenant=self.request.user.tenant)

        is_active = self.request.query_params.get("is_active")
        if is_active is not None:
            queryset = queryset.filter(is_active=is_active.lower() == "true")

        return queryset


class SupplierDetailView(generics.RetrieveUpdateAPIView):
    serializer_class = SupplierSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]

    def get_queryset(self):
        return Supplier.objects.filter(tenant=self.request.user.tenant)


class SupplierTransactionListView(generics.ListAPIView):
    """Ledger of a single supplier, newest first."""

    serializer_class = SupplierTransactionSerializer
    permission_classes = [permissions.IsAuthenticated, HasTenantAccess]

    def get_queryset(self):
        return SupplierTransaction.objects.filter(
            supplier_id=self.kwargs["pk"], supplier__tenant=self.request.user.tenant
        ).select_related("supplier")


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess, CanManageTreasury])
def supplier_purchase(request, pk):
    """
    Record a purchase on credit; raises the supplier's outstanding balance.

    {
        "branch_id": "uuid",
        "amount": "1500.00",
        "reference_number": "" (optional),
        "notes": "" (optional)
    }
    """
    supplier = get_object_or_404(Supplier, id=pk, tenant=request.user.tenant)
    serializer = SupplierPurchaseSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    branch = get_tenant_branch(request, data["branch_id"])

    try:
        purchase = SupplierService.record_purchase(
            supplier,
            branch,
            data["amount"],
            user=request.user,
            reference_number=data.get("reference_number", ""),
            notes=data.get("notes"),
        )
    except SupplierError as e:
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.error(f"Failed to record purchase for supplier {supplier.id}", exc_info=True)
        return Response(
            {"detail": "An error occurred while recording the purchase"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    log_cash_action(
        AuditLog.ACTION_SUPPLIER_PURCHASE,
        f"Recorded purchase of {purchase.amount} from supplier {supplier.name} for {branch.name}",
        category=AuditLog.CATEGORY_PROCUREMENT,
        instance=purchase,
        user=request.user,
        metadata={"supplier_id": supplier.id, "amount": purchase.amount},
        request=request,
    )

    return Response(SupplierTransactionSerializer(purchase).data, status=status.HTTP_201_CREATED)

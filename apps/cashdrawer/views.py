"""
Cash drawer API views.

Endpoints (all scoped to a branch of the requesting user's tenant):
- GET  open             is the drawer open for a day
- POST open             open the drawer
- GET  balance          drawer of a day
- GET  opening-balance  expected opening balance of a day
- GET  balances         drawers in a date range
- POST close            close without settlement
- POST settle           settle the shift
- POST refresh          recompute expected closing balance
- POST pending-reconciliation / reconcile
"""

import logging

from rest_framework import permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response

from apps.core.audit import log_cash_action
from apps.core.audit_models import AuditLog
from apps.core.permissions import CanManageTreasury, HasTenantAccess, get_tenant_branch

from .serializers import (
    CashDrawerBalanceSerializer,
    CloseDrawerSerializer,
    DateRangeSerializer,
    DrawerDateSerializer,
    OpenDrawerSerializer,
    SettleShiftSerializer,
)
from .services import CashDrawerError, CashDrawerService

logger = logging.getLogger(__name__)


def _query_date(request):
    serializer = DrawerDateSerializer(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data.get("date")


def _drawer_response(drawer, http_status=status.HTTP_200_OK):
    return Response(CashDrawerBalanceSerializer(drawer).data, status=http_status)


def _run(action_description, operation):
    """
    Execute a drawer operation, mapping rule violations to 400.

    Unexpected failures are logged and reported without internal details.
    """
    try:
        return operation()
    except CashDrawerError as e:
        return Response({"detail": str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except Exception:
        logger.error(f"Cash drawer operation failed while {action_description}", exc_info=True)
        return Response(
            {"detail": f"An error occurred while {action_description}"},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


@api_view(["GET", "POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_open(request, branch_id):
    """
    GET: {"is_open": bool} for ?date=YYYY-MM-DD (default today).

    POST: open the drawer.
    {
        "opening_balance": "1000.00",
        "date": "2024-01-15" (optional),
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)

    if request.method == "GET":
        balance_date = _query_date(request)
        return Response({"is_open": CashDrawerService.is_drawer_open(branch, balance_date)})

    serializer = OpenDrawerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        drawer = CashDrawerService.open_drawer(
            branch,
            data["opening_balance"],
            user=request.user,
            balance_date=data.get("date"),
            notes=data.get("notes"),
        )
        log_cash_action(
            AuditLog.ACTION_OPEN_CASH_DRAWER,
            f"Opened cash drawer for {branch.name} on {drawer.balance_date} "
            f"with opening balance {drawer.opening_balance}",
            instance=drawer,
            user=request.user,
            metadata={"opening_balance": drawer.opening_balance},
            request=request,
        )
        return _drawer_response(drawer, status.HTTP_201_CREATED)

    return _run("opening the cash drawer", operation)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_balance(request, branch_id):
    """Drawer of a day, or 404."""
    branch = get_tenant_branch(request, branch_id)
    drawer = CashDrawerService.get_balance(branch, _query_date(request))
    if drawer is None:
        return Response(
            {"detail": "No cash drawer balance found for the specified date"},
            status=status.HTTP_404_NOT_FOUND,
        )
    return _drawer_response(drawer)


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_opening_balance(request, branch_id):
    branch = get_tenant_branch(request, branch_id)
    opening_balance = CashDrawerService.get_opening_balance(branch, _query_date(request))
    return Response({"opening_balance": f"{opening_balance:.2f}"})


@api_view(["GET"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_balances(request, branch_id):
    """Drawers between ?from_date= and ?to_date= (inclusive), oldest first."""
    branch = get_tenant_branch(request, branch_id)
    serializer = DateRangeSerializer(data=request.query_params)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    drawers = CashDrawerService.get_balances(
        branch, serializer.validated_data["from_date"], serializer.validated_data["to_date"]
    )
    return Response(CashDrawerBalanceSerializer(drawers, many=True).data)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_close(request, branch_id):
    """
    Close the drawer without settlement.

    {
        "actual_closing_balance": "5300.00",
        "date": "2024-01-15" (optional),
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = CloseDrawerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        drawer = CashDrawerService.close_drawer(
            branch,
            data["actual_closing_balance"],
            user=request.user,
            balance_date=data.get("date"),
            notes=data.get("notes"),
        )
        log_cash_action(
            AuditLog.ACTION_CLOSE_CASH_DRAWER,
            f"Closed cash drawer for {branch.name} on {drawer.balance_date} "
            f"with actual closing balance {drawer.actual_closing_balance}",
            instance=drawer,
            user=request.user,
            metadata={
                "expected_closing_balance": drawer.expected_closing_balance,
                "actual_closing_balance": drawer.actual_closing_balance,
                "cash_over_short": drawer.cash_over_short,
            },
            request=request,
            severity=(
                AuditLog.SEVERITY_WARNING if drawer.cash_over_short else AuditLog.SEVERITY_INFO
            ),
        )
        return _drawer_response(drawer)

    return _run("closing the cash drawer", operation)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_settle(request, branch_id):
    """
    Settle the shift.

    {
        "actual_closing_balance": "5300.00",
        "settled_amount": "5000.00",
        "date": "2024-01-15" (optional),
        "settlement_notes": "" (optional),
        "notes": "" (optional)
    }
    """
    branch = get_tenant_branch(request, branch_id)
    serializer = SettleShiftSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        drawer = CashDrawerService.settle_shift(
            branch,
            data["actual_closing_balance"],
            data["settled_amount"],
            user=request.user,
            balance_date=data.get("date"),
            settlement_notes=data.get("settlement_notes"),
            notes=data.get("notes"),
        )
        log_cash_action(
            AuditLog.ACTION_SETTLE_CASH_DRAWER,
            f"Settled shift for {branch.name} on {drawer.balance_date}: "
            f"settled {drawer.settled_amount}, carried forward {drawer.carried_forward_amount}",
            instance=drawer,
            user=request.user,
            metadata={
                "settled_amount": drawer.settled_amount,
                "carried_forward_amount": drawer.carried_forward_amount,
                "actual_closing_balance": drawer.actual_closing_balance,
            },
            request=request,
        )
        return _drawer_response(drawer)

    return _run("settling the shift", operation)


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_refresh(request, branch_id):
    """Recompute the expected closing balance of an open drawer."""
    branch = get_tenant_branch(request, branch_id)
    serializer = DrawerDateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    return _run(
        "refreshing the cash drawer balance",
        lambda: _drawer_response(
            CashDrawerService.refresh_expected_closing_balance(
                branch, serializer.validated_data.get("date")
            )
        ),
    )


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess])
def drawer_pending_reconciliation(request, branch_id):
    """Hold the drawer with a disputed count."""
    branch = get_tenant_branch(request, branch_id)
    serializer = CloseDrawerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    return _run(
        "marking the cash drawer for reconciliation",
        lambda: _drawer_response(
            CashDrawerService.mark_pending_reconciliation(
                branch,
                data["actual_closing_balance"],
                user=request.user,
                balance_date=data.get("date"),
                notes=data.get("notes"),
            )
        ),
    )


@api_view(["POST"])
@permission_classes([permissions.IsAuthenticated, HasTenantAccess, CanManageTreasury])
def drawer_reconcile(request, branch_id):
    """Close a drawer pending reconciliation. Owners and managers only."""
    branch = get_tenant_branch(request, branch_id)
    serializer = CloseDrawerSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = serializer.validated_data

    def operation():
        drawer = CashDrawerService.reconcile(
            branch,
            data["actual_closing_balance"],
            user=request.user,
            balance_date=data.get("date"),
            notes=data.get("notes"),
        )
        log_cash_action(
            AuditLog.ACTION_RECONCILE_CASH_DRAWER,
            f"Reconciled cash drawer for {branch.name} on {drawer.balance_date}",
            instance=drawer,
            user=request.user,
            metadata={"cash_over_short": drawer.cash_over_short},
            request=request,
        )
        return _drawer_response(drawer)

    return _run("reconciling the cash drawer", operation)

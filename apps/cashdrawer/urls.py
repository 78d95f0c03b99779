"""
URL configuration for cash drawer app.
"""

from django.urls import path

from . import views

app_name = "cashdrawer"

urlpatterns = [
    path("<uuid:branch_id>/open", views.drawer_open, name="open"),
    path("<uuid:branch_id>/balance", views.drawer_balance, name="balance"),
    path("<uuid:branch_id>/opening-balance", views.drawer_opening_balance, name="opening_balance"),
    path("<uuid:branch_id>/balances", views.drawer_balances, name="balances"),
    path("<uuid:branch_id>/close", views.drawer_close, name="close"),
    path("<uuid:branch_id>/settle", views.drawer_settle, name="settle"),
    path("<uuid:branch_id>/refresh", views.drawer_refresh, name="refresh"),
    path(
        "<uuid:branch_id>/pending-reconciliation",
        views.drawer_pending_reconciliation,
        name="pending_reconciliation",
    ),
    path("<uuid:branch_id>/reconcile", views.drawer_reconcile, name="reconcile"),
]

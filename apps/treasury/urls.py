"""
URL configuration for treasury app.
"""

from django.urls import path

from . import views

app_name = "treasury"

urlpatterns = [
    path("<uuid:branch_id>/balance", views.treasury_balance, name="balance"),
    path("<uuid:branch_id>/transactions", views.treasury_transactions, name="transactions"),
    path("<uuid:branch_id>/adjust", views.treasury_adjust, name="adjust"),
    path(
        "<uuid:branch_id>/feed-from-cash-drawer",
        views.treasury_feed_from_cash_drawer,
        name="feed_from_cash_drawer",
    ),
    path("<uuid:branch_id>/pay-supplier", views.treasury_pay_supplier, name="pay_supplier"),
    path("<uuid:branch_id>/transfer", views.treasury_transfer, name="transfer"),
]

"""
URL configuration for sales app.
"""

from django.urls import path

from . import views

app_name = "sales"

urlpatterns = [
    path(
        "<uuid:branch_id>/transactions",
        views.FinancialTransactionListView.as_view(),
        name="transactions",
    ),
]

"""
URL configuration for procurement app.
"""

from django.urls import path

from . import views

app_name = "procurement"

urlpatterns = [
    path("", views.SupplierListView.as_view(), name="supplier_list"),
    path("<uuid:pk>/", views.SupplierDetailView.as_view(), name="supplier_detail"),
    path(
        "<uuid:pk>/transactions/",
        views.SupplierTransactionListView.as_view(),
        name="supplier_transactions",
    ),
    path("<uuid:pk>/purchases/", views.supplier_purchase, name="supplier_purchase"),
]

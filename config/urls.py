"""
URL configuration for the jewelry POS cash management service.
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/token/", TokenObtainPairView.as_view(), name="token_obtain_pair"),
    path("api/token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("api/cash-drawer/", include("apps.cashdrawer.urls")),
    path("api/treasury/", include("apps.treasury.urls")),
    path("api/sales/", include("apps.sales.urls")),
    path("api/suppliers/", include("apps.procurement.urls")),
    path("", include("django_prometheus.urls")),  # Prometheus metrics endpoint at /metrics
]

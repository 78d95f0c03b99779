"""
Cash drawer app configuration.
"""

from django.apps import AppConfig


class CashDrawerConfig(AppConfig):
    """Configuration for the cash drawer app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.cashdrawer"
    verbose_name = "Cash Drawer"

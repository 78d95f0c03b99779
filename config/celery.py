"""
Celery configuration for the jewelry POS cash management service.
"""

import os

from celery import Celery
from celery.schedules import crontab

# Set the default Django settings module for the 'celery' program.
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.development")

app = Celery("jewelry_pos")

# namespace='CELERY' means all celery-related configuration keys
# should have a `CELERY_` prefix.
app.config_from_object("django.conf:settings", namespace="CELERY")

# Load task modules from all registered Django apps.
app.autodiscover_tasks()

AUTO_REFRESH_MINUTES = int(os.getenv("CASH_DRAWER_AUTO_REFRESH_MINUTES", "5"))

app.conf.beat_schedule = {
    # Keep expected closing balances of open drawers current
    "refresh-open-cash-drawers": {
        "task": "apps.cashdrawer.tasks.refresh_open_drawers",
        "schedule": crontab(minute=f"*/{AUTO_REFRESH_MINUTES}"),
        "options": {"queue": "cash", "priority": 8},
    },
}

app.conf.task_routes = {
    "apps.cashdrawer.tasks.*": {"queue": "cash", "priority": 8},
}

"""
Celery tasks for cash drawers.
"""

import logging

from celery import shared_task

from .services import CashDrawerService

logger = logging.getLogger(__name__)


@shared_task(
    name="apps.cashdrawer.tasks.refresh_open_drawers",
    bind=True,
    max_retries=3,
    default_retry_delay=60,
)
def refresh_open_drawers(self) -> str:
    """
    Recompute the expected closing balance of every drawer open today.

    Returns:
        str: Summary of refreshed drawers
    """
    try:
        refreshed = CashDrawerService.refresh_open_drawers()
        summary = f"Refreshed {refreshed} open cash drawers"
        logger.info(summary)
        return summary
    except Exception as e:
        logger.exception(f"Error refreshing open cash drawers: {e}")
        raise self.retry(exc=e)

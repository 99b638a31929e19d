"""
Celery tasks for chat app.

Scheduled through django-celery-beat (see migrations/0002).

Usage:
    from chat.tasks import purge_abandoned_threads

    purge_abandoned_threads.delay()
"""

import logging

from celery import shared_task
from django.db import OperationalError

from chat.services import ChatService
from core.exceptions import StorageError

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(OperationalError, StorageError),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": 3},
)
def purge_abandoned_threads(self, batch_size: int | None = None) -> int:
    """
    Permanently delete threads both participants have deleted.

    Args:
        batch_size: Maximum threads to purge in one run
            (default settings.CHAT_ABANDONED_PURGE_BATCH_SIZE)

    Returns:
        Number of threads purged
    """
    purged = ChatService.purge_abandoned_threads(batch_size)
    if purged:
        logger.info(f"Purged {purged} abandoned chat threads")
    return purged

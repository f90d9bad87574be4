from typing import Any

from celery import Celery
from celery.signals import setup_logging

from app.core.config import settings
from app.core.constants import WORKER_LOG_FILE
from app.core.logging import configure_logging

celery_app = Celery(
    'restaurant_reservations',
    broker=settings.rabbit_url,
    backend='rpc://',
)

celery_app.conf.update(
    task_acks_late=True,
    worker_prefetch_multiplier=1,
    enable_utc=True,
    timezone=settings.TIMEZONE,
    worker_hijack_root_logger=False,
    include=['celery_app.tasks'],
    task_routes={
        'celery_app.tasks.*': 'default',
    },
)


@setup_logging.connect
def configure_worker_logging(**kwargs: Any) -> None:
    """Логи воркера идут через Loguru в отдельный файл."""
    configure_logging(WORKER_LOG_FILE)

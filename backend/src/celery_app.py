"""Celery application and beat schedule for closure maintenance jobs.

Run a worker with beat:
    celery -A celery_app worker --beat --loglevel=INFO
"""

from celery import Celery
from celery.schedules import crontab

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "workspace",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["closure.tasks"],
)

celery_app.conf.update(
    timezone="UTC",
    enable_utc=True,
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
)

celery_app.conf.beat_schedule = {
    'closure-purge-expired-daily': {
        'task': 'closure.purge_expired',
        'schedule': crontab(hour=2, minute=0),  # 02:00 UTC
        'options': {
            'expires': 3600,  # Task expires after 1 hour if not picked up
        },
    },
    'closure-archive-expiry-notices-daily': {
        'task': 'closure.archive_expiry_notices',
        'schedule': crontab(hour=9, minute=0),
        'options': {
            'expires': 3600,
        },
    },
}

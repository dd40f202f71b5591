"""Celery application and beat schedule.

Start a worker with beat:
    celery -A celery_app worker --beat --loglevel=info
"""

from celery import Celery
from celery.schedules import crontab

from config import get_settings

settings = get_settings()

celery_app = Celery(
    "school",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["retention.tasks"],
)

celery_app.conf.update(
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    timezone="UTC",
    enable_utc=True,
    worker_hijack_root_logger=False,
)

celery_app.conf.beat_schedule = {
    "retention-cleanup-daily": {
        "task": "retention.cleanup",
        "schedule": crontab(
            hour=settings.RETENTION_SCHEDULE_HOUR,
            minute=settings.RETENTION_SCHEDULE_MINUTE,
        ),
        "options": {
            "expires": 3600,  # Skip the run if not picked up within an hour
        },
    },
}

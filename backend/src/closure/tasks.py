"""Celery tasks for organization closure maintenance.

Tasks:
- purge_expired_archives_task: Daily purge of archives past their retention window
- archive_expiry_notices_task: Daily notices to owners of archives about to expire

Both tasks are idempotent and never raise; they return a status dict.
"""

import logging
from typing import Any, Dict

from celery import shared_task

from config import get_settings
from database import SessionLocal
from infrastructure.storage.s3_storage_adapter import S3StorageAdapter
from .checkers import build_default_registry
from .notifications import send_expiry_notifications
from .service import OrganizationClosureService

logger = logging.getLogger(__name__)


@shared_task(name="closure.purge_expired", bind=True)
def purge_expired_archives_task(self) -> Dict[str, Any]:
    """Purge every active archive whose expires_at has passed.

    Overlapping runs are safe: an archive is flipped to 'purged' with a
    conditional update, so a second run skips it. Archives whose modules fail
    to delete their data stay active and are retried on the next run.

    Returns:
        Dict with purge statistics:
        - archives_found: Expired archives selected for this run
        - archives_purged: Archives moved to 'purged'
        - archives_skipped: Archives already purged by another run
        - archives_failed: Archives left active after a module failure
        - duration_seconds: Total execution time
    """
    logger.info("Archive purge task started")

    settings = get_settings()
    db = SessionLocal()
    try:
        storage_client = S3StorageAdapter.from_settings(settings)
        registry = build_default_registry(db, storage_client=storage_client)
        service = OrganizationClosureService(db=db, registry=registry)
        statistics = service.purge_expired(limit=settings.PURGE_BATCH_SIZE)

        result = {
            'status': 'completed',
            'job_started_at': statistics.job_started_at.isoformat(),
            'job_completed_at': statistics.job_completed_at.isoformat(),
            'duration_seconds': statistics.duration_seconds,
            'archives_found': statistics.archives_found,
            'archives_purged': statistics.archives_purged,
            'archives_skipped': statistics.archives_skipped,
            'archives_failed': statistics.archives_failed,
            'failed_modules': statistics.failed_modules,
            'has_errors': statistics.has_errors,
        }

        logger.info("Archive purge task completed", extra=result)

        return result

    except Exception as e:
        logger.error(
            "Archive purge task failed",
            exc_info=True,
            extra={"error": str(e)}
        )

        # Return error status but don't raise (allow task to complete)
        return {
            'status': 'failed',
            'error': str(e),
            'archives_purged': 0,
        }

    finally:
        db.close()


@shared_task(name="closure.archive_expiry_notices", bind=True)
def archive_expiry_notices_task(self) -> Dict[str, Any]:
    """Notify owners of archives expiring within the configured lead times."""
    settings = get_settings()
    db = SessionLocal()
    try:
        stats = send_expiry_notifications(db, lead_days=settings.expiry_notice_days)

        result = {
            'status': 'completed',
            'notified': {str(days): count for days, count in stats.notified.items()},
            'total_notified': stats.total_notified,
            'errors': stats.errors,
        }
        logger.info("Archive expiry notices sent", extra=result)
        return result

    except Exception as e:
        logger.error(
            "Archive expiry notice task failed",
            exc_info=True,
            extra={"error": str(e)}
        )
        return {
            'status': 'failed',
            'error': str(e),
        }

    finally:
        db.close()

"""Archive expiry notices.

Owners are told ahead of time that an archive is about to be purged, once per
lead time (by default 7 days and 1 day before expires_at). Delivery is left to
an ArchiveNotifier; the default one only logs.
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from models.organization_archive import OrganizationArchive
from .repository import OrganizationArchiveRepository
from .schemas import ExpiryNoticeStatistics

logger = logging.getLogger(__name__)

DEFAULT_LEAD_DAYS = (7, 1)


class ArchiveNotifier(ABC):
    """Delivers one expiry notice to an archive owner."""

    @abstractmethod
    def notify(self, archive: OrganizationArchive, days_left: int) -> None:
        pass


class LoggingArchiveNotifier(ArchiveNotifier):
    def notify(self, archive: OrganizationArchive, days_left: int) -> None:
        logger.info(
            f"Archive expiry notice for owner {archive.owner_id}: {expiry_notice_title(days_left)}",
            extra={
                "archive_id": str(archive.id),
                "owner_id": str(archive.owner_id),
                "days_left": days_left,
                "expires_at": archive.expires_at.isoformat(),
            }
        )


def expiry_notice_title(days_left: int) -> str:
    if days_left == 1:
        return "Архив будет удалён завтра"
    return f"Архив будет удалён через {days_left} дней"


def send_expiry_notifications(
    db: Session,
    notifier: Optional[ArchiveNotifier] = None,
    lead_days: Iterable[int] = DEFAULT_LEAD_DAYS,
    now: Optional[datetime] = None,
) -> ExpiryNoticeStatistics:
    """Notify owners of active archives expiring within each lead time.

    A failing notice is logged and counted; the remaining notices are still sent.

    Args:
        db: Database session
        notifier: Delivery channel (default: LoggingArchiveNotifier)
        lead_days: Lead times in days, each a window [now, now + days]
        now: Reference time (default: current UTC time)

    Returns:
        ExpiryNoticeStatistics: Notices sent per lead time and error count
    """
    notifier = notifier or LoggingArchiveNotifier()
    archives = OrganizationArchiveRepository(db)
    stats = ExpiryNoticeStatistics()

    for days in lead_days:
        expiring = archives.find_expiring_in(days, now=now)
        stats.notified[days] = 0

        logger.info(
            f"Found {len(expiring)} archives expiring in {days} days",
            extra={"days": days, "archives": len(expiring)}
        )

        for archive in expiring:
            try:
                notifier.notify(archive, days)
                stats.notified[days] += 1
            except Exception as e:
                stats.errors += 1
                logger.error(
                    f"Failed to send {days}-day expiry notice for archive {archive.id}",
                    exc_info=True,
                    extra={"archive_id": str(archive.id), "error": str(e)}
                )

    return stats

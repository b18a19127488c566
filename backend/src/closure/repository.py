"""Archive store: persistence for organization archives and archived documents.

Repositories only flush; committing is left to the caller (the closure service
owns the transaction boundaries).
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from models.base import utc_now
from models.organization_archive import ArchivedDocument, ArchiveStatus, OrganizationArchive
from .schemas import ArchiveSnapshot


class OrganizationArchiveRepository:
    """Create, find and transition OrganizationArchive rows."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        organization_id: UUID,
        organization_name: str,
        owner_id: UUID,
        retention_days: int,
        snapshot: ArchiveSnapshot,
        closed_at: Optional[datetime] = None,
    ) -> OrganizationArchive:
        """Create an active archive expiring retention_days after closed_at."""
        closed_at = closed_at or utc_now()
        archive = OrganizationArchive(
            organization_id=organization_id,
            organization_name=organization_name,
            owner_id=owner_id,
            retention_days=retention_days,
            closed_at=closed_at,
            expires_at=closed_at + timedelta(days=retention_days),
            snapshot=snapshot.model_dump(),
            status=ArchiveStatus.ACTIVE.value,
        )
        self.db.add(archive)
        self.db.flush()
        return archive

    def find_by_id(self, archive_id: UUID) -> Optional[OrganizationArchive]:
        return self.db.query(OrganizationArchive).filter(
            OrganizationArchive.id == archive_id
        ).first()

    def find_by_owner(self, owner_id: UUID) -> List[OrganizationArchive]:
        """All archives of an owner, newest first."""
        return self.db.query(OrganizationArchive).filter(
            OrganizationArchive.owner_id == owner_id
        ).order_by(OrganizationArchive.closed_at.desc()).all()

    def is_available(self, archive_id: UUID, now: Optional[datetime] = None) -> bool:
        """True while the archive is active and its retention window is still open."""
        now = now or utc_now()
        return self.db.query(OrganizationArchive.id).filter(
            OrganizationArchive.id == archive_id,
            OrganizationArchive.status == ArchiveStatus.ACTIVE.value,
            OrganizationArchive.expires_at > now,
        ).first() is not None

    def find_expired(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> List[OrganizationArchive]:
        """Active archives whose retention window has elapsed (expires_at <= now)."""
        now = now or utc_now()
        query = self.db.query(OrganizationArchive).filter(
            OrganizationArchive.status == ArchiveStatus.ACTIVE.value,
            OrganizationArchive.expires_at <= now,
        ).order_by(OrganizationArchive.expires_at)
        if limit:
            query = query.limit(limit)
        return query.all()

    def find_expiring_in(self, days: int, now: Optional[datetime] = None) -> List[OrganizationArchive]:
        """Active archives expiring between now and now + days.

        Used for expiry notices sent before the purge.
        """
        now = now or utc_now()
        target = now + timedelta(days=days)
        return self.db.query(OrganizationArchive).filter(
            OrganizationArchive.status == ArchiveStatus.ACTIVE.value,
            OrganizationArchive.expires_at >= now,
            OrganizationArchive.expires_at <= target,
        ).order_by(OrganizationArchive.expires_at).all()

    def mark_purged(self, archive_id: UUID, purged_at: Optional[datetime] = None) -> bool:
        """Transition active -> purged.

        The update is conditional on the current status, so two overlapping
        purge runs cannot both flip the same archive.

        Returns:
            True if this call performed the transition, False if the archive
            was already purged (or does not exist)
        """
        updated = self.db.query(OrganizationArchive).filter(
            OrganizationArchive.id == archive_id,
            OrganizationArchive.status == ArchiveStatus.ACTIVE.value,
        ).update(
            {
                OrganizationArchive.status: ArchiveStatus.PURGED.value,
                OrganizationArchive.purged_at: purged_at or utc_now(),
            },
            synchronize_session="fetch",
        )
        return updated == 1


class ArchivedDocumentRepository:
    """Archived document copies, grouped by archive."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        archive_id: UUID,
        original_document_id: UUID,
        original_project_id: UUID,
        project_name: str,
        title: str,
        expires_at: datetime,
        type: Optional[str] = None,
        file_id: Optional[UUID] = None,
        file_url: str = "",
        file_size_bytes: int = 0,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> ArchivedDocument:
        archived = ArchivedDocument(
            archive_id=archive_id,
            original_document_id=original_document_id,
            original_project_id=original_project_id,
            project_name=project_name,
            title=title,
            type=type,
            file_id=file_id,
            file_url=file_url,
            file_size_bytes=file_size_bytes,
            metadata_json=metadata,
            expires_at=expires_at,
        )
        self.db.add(archived)
        self.db.flush()
        return archived

    def find_by_archive(self, archive_id: UUID) -> List[ArchivedDocument]:
        return self.db.query(ArchivedDocument).filter(
            ArchivedDocument.archive_id == archive_id
        ).order_by(ArchivedDocument.archived_at).all()

    def delete_by_archive(self, archive_id: UUID) -> int:
        """Delete all archived documents of an archive. Returns rows deleted."""
        return self.db.query(ArchivedDocument).filter(
            ArchivedDocument.archive_id == archive_id
        ).delete(synchronize_session="fetch")

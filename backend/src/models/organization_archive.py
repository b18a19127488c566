"""OrganizationArchive and ArchivedDocument SQLAlchemy models

An OrganizationArchive is written once per closure event and keeps a snapshot
of the organization after its live data is gone. Module-specific archived
copies (ArchivedDocument) reference it and are purged together with it once
expires_at has passed.
"""

from sqlalchemy import Column, Text, ForeignKey, BigInteger, Integer, CheckConstraint, Index, Uuid, TIMESTAMP
from sqlalchemy.orm import relationship
from uuid import uuid4
import enum

from .base import Base, PortableJSONB, utc_now


class ArchiveStatus(str, enum.Enum):
    """Archive lifecycle: ACTIVE until the retention window elapses, then PURGED."""
    ACTIVE = "active"
    PURGED = "purged"


class OrganizationArchive(Base):
    """Durable snapshot of a closed organization."""
    __tablename__ = "organization_archive"
    __table_args__ = (
        Index("ix_organization_archive_owner_id", "owner_id"),
        Index("ix_organization_archive_status_expires_at", "status", "expires_at"),
        CheckConstraint(
            "status IN ('active', 'purged')",
            name='ck_organization_archive_status'
        ),
        CheckConstraint(
            "retention_days IN (30, 60, 90)",
            name='ck_organization_archive_retention_days'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    # No FK: the archive must outlive the organization row
    organization_id = Column(Uuid, nullable=False)
    organization_name = Column(Text, nullable=False)
    owner_id = Column(Uuid, nullable=False)
    retention_days = Column(Integer, nullable=False)
    closed_at = Column(TIMESTAMP(timezone=True), nullable=False)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)
    snapshot = Column(PortableJSONB, nullable=False, default=dict)
    status = Column(Text, nullable=False, default=ArchiveStatus.ACTIVE.value)
    purged_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    documents = relationship("ArchivedDocument", back_populates="archive", passive_deletes=True)

    def __repr__(self):
        return (
            f"<OrganizationArchive(id={self.id}, organization='{self.organization_name}', "
            f"status='{self.status}')>"
        )


class ArchivedDocument(Base):
    """Archived copy of one project document (latest version only)."""
    __tablename__ = "archived_document"
    __table_args__ = (
        Index("ix_archived_document_archive_id", "archive_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    archive_id = Column(
        Uuid,
        ForeignKey("organization_archive.id", ondelete="CASCADE"),
        nullable=False
    )
    original_document_id = Column(Uuid, nullable=False)
    original_project_id = Column(Uuid, nullable=False)
    project_name = Column(Text, nullable=False)
    title = Column(Text, nullable=False)
    type = Column(Text, nullable=True)
    file_id = Column(Uuid, nullable=True)
    file_url = Column(Text, nullable=False, default="")
    file_size_bytes = Column(BigInteger, nullable=False, default=0)
    metadata_json = Column(PortableJSONB, nullable=True)
    archived_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    expires_at = Column(TIMESTAMP(timezone=True), nullable=False)

    archive = relationship("OrganizationArchive", back_populates="documents")

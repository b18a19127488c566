"""Document SQLAlchemy models

Document represents a versioned project document. Each DocumentVersion may
point at a FileObject (the stored binary) uploaded to object storage.
"""

from sqlalchemy import Column, Text, ForeignKey, BigInteger, Integer, Index, UniqueConstraint, Uuid, TIMESTAMP
from sqlalchemy.orm import relationship
from uuid import uuid4

from .base import Base, utc_now


class FileObject(Base):
    """Stored file metadata. The binary itself lives in object storage."""
    __tablename__ = "file_object"
    __table_args__ = (
        Index("ix_file_object_org_id", "org_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="RESTRICT"), nullable=False)
    uploader_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    filename = Column(Text, nullable=False)
    mime_type = Column(Text, nullable=False)
    size_bytes = Column(BigInteger, nullable=False, default=0)
    storage_url = Column(Text, nullable=False)  # Object storage key or URL
    sha256 = Column(Text, nullable=True)
    uploaded_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    def __repr__(self):
        return f"<FileObject(id={self.id}, filename='{self.filename}', size={self.size_bytes})>"


class Document(Base):
    """Project document with an ordered list of versions."""
    __tablename__ = "document"
    __table_args__ = (
        Index("ix_document_project_id", "project_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    project_id = Column(Uuid, ForeignKey("project.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    type = Column(Text, nullable=True)
    status = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    # Relationships
    project = relationship("Project", back_populates="documents")
    versions = relationship(
        "DocumentVersion",
        back_populates="document",
        order_by="DocumentVersion.version",
        cascade="all, delete-orphan",
    )

    @property
    def latest_version(self):
        """Newest version by version number, or None for an empty document."""
        return self.versions[-1] if self.versions else None

    def __repr__(self):
        return f"<Document(id={self.id}, title='{self.title}')>"


class DocumentVersion(Base):
    """One numbered revision of a document."""
    __tablename__ = "document_version"
    __table_args__ = (
        UniqueConstraint("document_id", "version", name="uq_document_version"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    document_id = Column(Uuid, ForeignKey("document.id", ondelete="CASCADE"), nullable=False)
    file_id = Column(Uuid, ForeignKey("file_object.id", ondelete="SET NULL"), nullable=True)
    version = Column(Integer, nullable=False)
    created_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    document = relationship("Document", back_populates="versions")
    file = relationship("FileObject")

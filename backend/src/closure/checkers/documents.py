"""Documents closure checker.

Documents never block closure. Every project document with at least one
version is reported as archivable and copied into archived_document at closure
time (latest version only). Documents without versions hold nothing to keep and
are deleted with the rest of the live data. Purging removes the stored files
and the archived rows.
"""

import logging
from typing import Any, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from models.document import Document, DocumentVersion, FileObject
from ..errors import ArchiveNotFoundError, ClosureError
from ..repository import ArchivedDocumentRepository, OrganizationArchiveRepository
from ..schemas import ArchivableDataItem, ClosureCheckResult
from .base import BaseClosureChecker

logger = logging.getLogger(__name__)


class StorageCleanupError(ClosureError):
    """Stored files of an archive could not be deleted; purge is retried later."""
    pass


class DocumentsClosureChecker(BaseClosureChecker):
    module_id = "documents"
    module_name = "Документы"

    def __init__(self, db: Session, storage_client: Optional[Any] = None):
        """
        Args:
            db: Database session
            storage_client: Optional object storage client exposing
                delete_object(key). Without it, purge removes database rows only.
        """
        super().__init__(db)
        self.storage_client = storage_client
        self.archives = OrganizationArchiveRepository(db)
        self.archived_documents = ArchivedDocumentRepository(db)

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        archivable_data: List[ArchivableDataItem] = []

        for project in self.list_projects(organization_id):
            for doc in self._list_documents(project.id):
                latest = doc.latest_version
                if latest is None:
                    continue
                file = latest.file

                archivable_data.append(ArchivableDataItem(
                    id=str(doc.id),
                    module_id=self.module_id,
                    type="document",
                    title=doc.title,
                    size_bytes=file.size_bytes if file else 0,
                    metadata={
                        "project_id": str(project.id),
                        "project_name": project.title,
                        "document_type": doc.type,
                        "version": latest.version,
                    },
                ))

        return self.build_result(archivable_data=archivable_data)

    def archive(self, organization_id: UUID, archive_id: UUID) -> None:
        archive = self.archives.find_by_id(archive_id)
        if not archive:
            raise ArchiveNotFoundError(archive_id)

        count = 0
        for project in self.list_projects(organization_id):
            for doc in self._list_documents(project.id):
                latest = doc.latest_version
                if latest is None:
                    continue
                file = latest.file

                metadata = {
                    "created_at": doc.created_at.isoformat(),
                    "updated_at": doc.updated_at.isoformat(),
                    "version": latest.version,
                }
                if file:
                    metadata["filename"] = file.filename
                    metadata["mime_type"] = file.mime_type

                self.archived_documents.create(
                    archive_id=archive.id,
                    original_document_id=doc.id,
                    original_project_id=project.id,
                    project_name=project.title,
                    title=doc.title,
                    type=doc.type,
                    file_id=file.id if file else latest.file_id,
                    file_url=file.storage_url if file else "",
                    file_size_bytes=file.size_bytes if file else 0,
                    expires_at=archive.expires_at,
                    metadata=metadata,
                )
                count += 1

        logger.info(
            f"Archived {count} documents",
            extra={"org_id": str(organization_id), "archive_id": str(archive_id), "module_id": self.module_id}
        )

    def delete_archived(self, archive_id: UUID) -> None:
        archived = self.archived_documents.find_by_archive(archive_id)
        if not archived:
            return

        failed_keys = [
            doc.file_url for doc in archived
            if doc.file_url and not self._delete_stored_file(doc.file_url)
        ]
        if failed_keys:
            raise StorageCleanupError(
                f"Failed to delete {len(failed_keys)} stored files for archive {archive_id}"
            )

        file_ids = {doc.file_id for doc in archived if doc.file_id}
        deleted = self.archived_documents.delete_by_archive(archive_id)
        self._delete_orphaned_files(file_ids)

        logger.info(
            f"Deleted {deleted} archived documents",
            extra={"archive_id": str(archive_id), "module_id": self.module_id}
        )

    def _list_documents(self, project_id: UUID) -> List[Document]:
        return self.db.query(Document).filter(
            Document.project_id == project_id
        ).order_by(Document.created_at, Document.id).all()

    def _delete_orphaned_files(self, file_ids: set) -> None:
        """Drop file rows no live document version points at any more."""
        if not file_ids:
            return

        referenced = {
            row.file_id for row in self.db.query(DocumentVersion.file_id).filter(
                DocumentVersion.file_id.in_(list(file_ids))
            )
        }
        orphaned = file_ids - referenced
        if orphaned:
            self.db.query(FileObject).filter(
                FileObject.id.in_(list(orphaned))
            ).delete(synchronize_session="fetch")

    def _delete_stored_file(self, storage_key: str) -> bool:
        """Delete one stored file.

        The storage client returns False for an object that is already gone;
        any exception is a failure and the archive is purged again next run.

        Returns:
            True if deleted or already gone, False if the deletion must be retried
        """
        if not self.storage_client:
            logger.debug(f"No storage client configured, skipping deletion of {storage_key}")
            return True

        try:
            deleted = self.storage_client.delete_object(storage_key)
        except Exception as e:
            logger.error(
                f"Object storage deletion failed (will retry): {storage_key}",
                exc_info=True,
                extra={"storage_key": storage_key, "error": str(e)}
            )
            return False

        if deleted is False:
            logger.debug(f"Object storage file already gone: {storage_key}")
        else:
            logger.debug(f"Deleted object storage file: {storage_key}")
        return True

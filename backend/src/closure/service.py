"""Organization closure service.

This service implements the closure lifecycle of an organization:
- Preview: run every checker and report blockers, warnings and archivable data
- Initiate: re-check, create the archive, archive module data, delete live
  data and move the organization to 'archived'
- Force close: delete an organization that holds nothing worth archiving
- Purge: delete archived data once the retention window has elapsed
- Archives: list an owner's archives and open one with its documents

The organization and archive status columns are the only concurrency guards:
every status change is a conditional UPDATE on the expected current status.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.base import utc_now
from models.document import Document
from models.expense import Expense
from models.org import Org, OrgInvite, OrgMember, OrganizationStatus
from models.organization_archive import ArchiveStatus, OrganizationArchive
from models.project import Project, Task
from audit.service import AuditAction, log_audit_event
from observability.metrics import (
    archive_purge_duration_seconds,
    archives_purged_total,
    closure_attempts_total,
)
from .errors import (
    ArchiveAccessError,
    ArchiveNotFoundError,
    ClosureAuthorizationError,
    ClosureBlockedError,
    ClosureCheckError,
    OrganizationAlreadyClosedError,
    OrganizationNotFoundError,
)
from .registry import ClosureCheckerRegistry
from .repository import ArchivedDocumentRepository, OrganizationArchiveRepository
from .schemas import (
    ArchiveSnapshot,
    ArchivedDocumentRead,
    BlockerSeverity,
    ClosureImpact,
    ClosurePolicy,
    ClosurePreview,
    ClosureResult,
    DeletedCounts,
    OrganizationArchiveDetail,
    OrganizationArchiveRead,
    PurgeStatistics,
)
from .status import validate_transition

logger = logging.getLogger(__name__)


class OrganizationClosureService:
    """Orchestrates organization closure across all registered checkers.

    The service owns the organization and archive lifecycle. Module data is
    only ever archived or purged through the registry, never directly.
    """

    def __init__(
        self,
        db: Session,
        registry: ClosureCheckerRegistry,
        policy: Optional[ClosurePolicy] = None,
    ):
        """
        Args:
            db: Database session shared with the registry's checkers
            registry: Closure checkers to consult
            policy: Retention policy for new archives (default 30 days)
        """
        self.db = db
        self.registry = registry
        self.policy = policy or ClosurePolicy()
        self.archives = OrganizationArchiveRepository(db)

    def get_closure_preview(self, organization_id: UUID, caller_id: UUID) -> ClosurePreview:
        """Describe what closing the organization right now would do.

        Raises:
            OrganizationNotFoundError: Organization does not exist
            ClosureAuthorizationError: Caller is not the owner
            OrganizationAlreadyClosedError: Organization is not active
        """
        org = self._get_active_org_for_owner(organization_id, caller_id)

        report = self.registry.check_all(org.id)

        blockers = [b for b in report.blockers if b.severity == BlockerSeverity.BLOCKING]
        warnings = [b for b in report.blockers if b.severity == BlockerSeverity.WARNING]

        return ClosurePreview(
            can_close=not blockers,
            blockers=blockers,
            warnings=warnings,
            archivable_data=report.archivable_data,
            impact=self._calculate_impact(org.id),
        )

    def initiate_closing(
        self,
        organization_id: UUID,
        caller_id: UUID,
        reason: Optional[str] = None,
    ) -> ClosureResult:
        """Close the organization, keeping its archivable data for the retention period.

        Runs in one transaction: on any failure after the re-check everything is
        rolled back, including the archive row and archived records, and the
        organization stays active.

        Raises:
            OrganizationNotFoundError: Organization does not exist
            ClosureAuthorizationError: Caller is not the owner
            OrganizationAlreadyClosedError: Organization is not active, or was
                closed by a concurrent call
            ClosureBlockedError: A blocking condition exists
            ClosureCheckError: A checker failed, so obligations cannot be verified
            PartialArchiveError: A module failed to archive its data
        """
        org = self._get_active_org_for_owner(organization_id, caller_id)

        report = self.registry.check_all(org.id)

        blocking = [b for b in report.blockers if b.is_blocking]
        if blocking:
            self._reject(org, caller_id, blocking)

        if report.failed_modules:
            closure_attempts_total.labels(outcome="check_failed").inc()
            logger.warning(
                f"Refusing to close org {org.id}: closure checks failed",
                extra={"org_id": str(org.id), "failed_modules": report.failed_modules}
            )
            raise ClosureCheckError(org.id, report.failed_modules)

        closed_at = utc_now()
        impact = self._calculate_impact(org.id)

        try:
            snapshot = ArchiveSnapshot(
                members_count=impact.members,
                projects_count=impact.projects,
                documents_count=sum(
                    1 for item in report.archivable_data if item.type == "document"
                ),
                total_storage_bytes=report.total_size_bytes,
            )

            archive = self.archives.create(
                organization_id=org.id,
                organization_name=org.name,
                owner_id=org.owner_id,
                retention_days=self.policy.retention_days,
                snapshot=snapshot,
                closed_at=closed_at,
            )

            self.registry.archive_all(org.id, archive.id)

            deleted = self._delete_organization_data(org.id)
            self._transition_org(org.id, OrganizationStatus.ARCHIVED, closed_at, reason)

            log_audit_event(
                db=self.db,
                org_id=org.id,
                action=AuditAction.ORG_CLOSED,
                actor_id=caller_id,
                entity_type="organization",
                entity_id=org.id,
                metadata={
                    "archive_id": str(archive.id),
                    "reason": reason,
                    "retention_days": self.policy.retention_days,
                    "expires_at": archive.expires_at.isoformat(),
                    "snapshot": snapshot.model_dump(),
                    "warnings": len(report.blockers),
                },
            )

            self.db.commit()

        except Exception:
            self.db.rollback()
            closure_attempts_total.labels(outcome="failed").inc()
            logger.error(
                f"Closing org {organization_id} failed, rolled back",
                exc_info=True,
                extra={"org_id": str(organization_id)}
            )
            raise

        closure_attempts_total.labels(outcome="closed").inc()
        logger.info(
            f"Organization {org.id} closed",
            extra={
                "org_id": str(org.id),
                "archive_id": str(archive.id),
                "documents": snapshot.documents_count,
                "total_storage_bytes": snapshot.total_storage_bytes,
            }
        )

        return ClosureResult(
            success=True,
            organization_id=org.id,
            archive_id=archive.id,
            closed_at=closed_at,
            deleted=deleted,
        )

    def force_close(self, organization_id: UUID, caller_id: UUID) -> ClosureResult:
        """Delete an organization that has nothing to archive and nothing to warn about.

        No archive is created; the organization moves to 'deleted'.

        Raises:
            ClosureBlockedError: Any blocker, warning or archivable data exists
            ClosureCheckError: A checker failed
            (plus the lookup errors of get_closure_preview)
        """
        org = self._get_active_org_for_owner(organization_id, caller_id)

        report = self.registry.check_all(org.id)

        if report.failed_modules:
            raise ClosureCheckError(org.id, report.failed_modules)

        if report.blockers or report.archivable_data:
            raise ClosureBlockedError(
                org.id,
                report.blockers,
                message=(
                    f"Organization {org.id} cannot be force closed: "
                    f"{len(report.blockers)} blockers, "
                    f"{len(report.archivable_data)} archivable items"
                ),
            )

        closed_at = utc_now()
        try:
            deleted = self._delete_organization_data(org.id)
            self._transition_org(org.id, OrganizationStatus.DELETED, closed_at, None)

            log_audit_event(
                db=self.db,
                org_id=org.id,
                action=AuditAction.ORG_DELETED,
                actor_id=caller_id,
                entity_type="organization",
                entity_id=org.id,
                metadata={"force": True},
            )

            self.db.commit()

        except Exception:
            self.db.rollback()
            raise

        closure_attempts_total.labels(outcome="force_closed").inc()
        logger.info(f"Organization {org.id} force closed", extra={"org_id": str(org.id)})

        return ClosureResult(
            success=True,
            organization_id=org.id,
            archive_id=None,
            closed_at=closed_at,
            deleted=deleted,
        )

    def purge_expired(
        self,
        now: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> PurgeStatistics:
        """Purge every active archive whose retention window has elapsed.

        Each archive is committed on its own. An archive whose modules fail to
        delete their data stays active and is retried by the next run; an
        archive already purged by an overlapping run is skipped.

        Args:
            now: Reference time (default: current UTC time)
            limit: Maximum number of archives to process

        Returns:
            PurgeStatistics: Counts of purged, skipped and failed archives
        """
        job_started_at = utc_now()
        now = now or job_started_at

        expired = self.archives.find_expired(now=now, limit=limit)
        stats = {"purged": 0, "skipped": 0, "failed": 0}
        failed_modules = {}

        logger.info(
            f"Purging {len(expired)} expired archives",
            extra={"archives_found": len(expired), "now": now.isoformat()}
        )

        for archive in expired:
            archive_id = archive.id
            try:
                self.db.refresh(archive)
                if archive.status != ArchiveStatus.ACTIVE.value:
                    stats["skipped"] += 1
                    continue

                failures = self.registry.delete_archived_all(archive_id)
                if failures:
                    self.db.rollback()
                    stats["failed"] += 1
                    failed_modules[str(archive_id)] = list(failures)
                    logger.warning(
                        f"Archive {archive_id} left active, modules failed: {', '.join(failures)}",
                        extra={"archive_id": str(archive_id), "failed_modules": list(failures)}
                    )
                    continue

                validate_transition(ArchiveStatus.ACTIVE, ArchiveStatus.PURGED)
                if not self.archives.mark_purged(archive_id, purged_at=now):
                    self.db.rollback()
                    stats["skipped"] += 1
                    continue

                log_audit_event(
                    db=self.db,
                    org_id=archive.organization_id,
                    action=AuditAction.ORG_ARCHIVE_PURGED,
                    entity_type="organization_archive",
                    entity_id=archive_id,
                    metadata={
                        "organization_name": archive.organization_name,
                        "expires_at": archive.expires_at.isoformat(),
                    },
                )

                self.db.commit()
                stats["purged"] += 1

            except Exception as e:
                self.db.rollback()
                stats["failed"] += 1
                failed_modules.setdefault(str(archive_id), [])
                logger.error(
                    f"Purging archive {archive_id} failed",
                    exc_info=True,
                    extra={"archive_id": str(archive_id), "error": str(e)}
                )

        job_completed_at = utc_now()
        for result, count in stats.items():
            archives_purged_total.labels(result=result).inc(count)
        archive_purge_duration_seconds.observe((job_completed_at - job_started_at).total_seconds())

        statistics = PurgeStatistics(
            job_started_at=job_started_at,
            job_completed_at=job_completed_at,
            duration_seconds=(job_completed_at - job_started_at).total_seconds(),
            archives_found=len(expired),
            archives_purged=stats["purged"],
            archives_skipped=stats["skipped"],
            archives_failed=stats["failed"],
            failed_modules=failed_modules,
        )

        logger.info(
            "Archive purge completed",
            extra={
                "archives_found": statistics.archives_found,
                "archives_purged": statistics.archives_purged,
                "archives_skipped": statistics.archives_skipped,
                "archives_failed": statistics.archives_failed,
            }
        )

        return statistics

    def list_archives_for_owner(self, owner_id: UUID) -> List[OrganizationArchive]:
        return self.archives.find_by_owner(owner_id)

    def get_archive_details(
        self,
        archive_id: UUID,
        caller_id: UUID,
        now: Optional[datetime] = None,
    ) -> OrganizationArchiveDetail:
        """One archive of the caller with its archived documents.

        Raises:
            ArchiveNotFoundError: Unknown archive, or purged or past expires_at
            ArchiveAccessError: Caller is not the owner of the archived organization
        """
        archive = self.archives.find_by_id(archive_id)
        if not archive:
            raise ArchiveNotFoundError(archive_id)

        if archive.owner_id != caller_id:
            logger.warning(
                f"User {caller_id} is not the owner of archive {archive_id}",
                extra={"archive_id": str(archive_id), "user_id": str(caller_id)}
            )
            raise ArchiveAccessError(archive_id, caller_id)

        if not self.archives.is_available(archive_id, now=now):
            raise ArchiveNotFoundError(archive_id)

        documents = ArchivedDocumentRepository(self.db).find_by_archive(archive_id)
        return OrganizationArchiveDetail(
            archive=OrganizationArchiveRead.model_validate(archive),
            documents=[ArchivedDocumentRead.model_validate(doc) for doc in documents],
        )

    def _get_active_org_for_owner(self, organization_id: UUID, caller_id: UUID) -> Org:
        org = self.db.query(Org).filter(Org.id == organization_id).first()
        if not org:
            raise OrganizationNotFoundError(organization_id)

        if org.owner_id != caller_id:
            logger.warning(
                f"User {caller_id} is not the owner of org {organization_id}",
                extra={"org_id": str(organization_id), "user_id": str(caller_id)}
            )
            raise ClosureAuthorizationError(organization_id, caller_id)

        if not org.is_active:
            raise OrganizationAlreadyClosedError(organization_id, org.status)

        return org

    def _reject(self, org: Org, caller_id: UUID, blocking: list) -> None:
        """Record a blocked closure attempt and raise ClosureBlockedError."""
        log_audit_event(
            db=self.db,
            org_id=org.id,
            action=AuditAction.ORG_CLOSURE_REJECTED,
            actor_id=caller_id,
            entity_type="organization",
            entity_id=org.id,
            metadata={
                "blockers": [
                    {"module_id": b.module_id, "id": b.id, "title": b.title}
                    for b in blocking
                ],
            },
        )
        self.db.commit()
        closure_attempts_total.labels(outcome="blocked").inc()

        logger.info(
            f"Closure of org {org.id} rejected: {len(blocking)} blocking conditions",
            extra={"org_id": str(org.id), "blockers": len(blocking)}
        )
        raise ClosureBlockedError(org.id, blocking)

    def _calculate_impact(self, organization_id: UUID) -> ClosureImpact:
        """Count live records that closing the organization would remove."""
        project_ids = select(Project.id).where(Project.org_id == organization_id)

        return ClosureImpact(
            projects=self.db.query(func.count(Project.id)).filter(
                Project.org_id == organization_id
            ).scalar(),
            tasks=self.db.query(func.count(Task.id)).filter(
                Task.project_id.in_(project_ids)
            ).scalar(),
            members=self.db.query(func.count(OrgMember.id)).filter(
                OrgMember.org_id == organization_id,
                OrgMember.status == "active",
            ).scalar(),
            invites=self.db.query(func.count(OrgInvite.id)).filter(
                OrgInvite.org_id == organization_id,
                OrgInvite.status == "pending",
            ).scalar(),
            documents=self.db.query(func.count(Document.id)).filter(
                Document.project_id.in_(project_ids)
            ).scalar(),
            expenses=self.db.query(func.count(Expense.id)).filter(
                Expense.org_id == organization_id
            ).scalar(),
        )

    def _delete_organization_data(self, organization_id: UUID) -> DeletedCounts:
        """Remove live projects (with tasks and documents) and members; revoke invites."""
        deleted = DeletedCounts()

        projects = self.db.query(Project).filter(Project.org_id == organization_id).all()
        for project in projects:
            deleted.tasks += len(project.tasks)
            deleted.documents += len(project.documents)
            self.db.delete(project)
        deleted.projects = len(projects)

        deleted.members = self.db.query(OrgMember).filter(
            OrgMember.org_id == organization_id
        ).delete(synchronize_session="fetch")

        deleted.invites = self.db.query(OrgInvite).filter(
            OrgInvite.org_id == organization_id,
            OrgInvite.status == "pending",
        ).update({OrgInvite.status: "revoked"}, synchronize_session="fetch")

        self.db.flush()

        logger.info(
            f"Deleted live data of org {organization_id}",
            extra={"org_id": str(organization_id), **deleted.model_dump()}
        )
        return deleted

    def _transition_org(
        self,
        organization_id: UUID,
        new_status: OrganizationStatus,
        closed_at: datetime,
        reason: Optional[str],
    ) -> None:
        """Move an active organization to new_status.

        Raises:
            OrganizationAlreadyClosedError: The organization was closed by a
                concurrent call after it was loaded
        """
        validate_transition(OrganizationStatus.ACTIVE, new_status)

        updated = self.db.query(Org).filter(
            Org.id == organization_id,
            Org.status == OrganizationStatus.ACTIVE.value,
        ).update(
            {
                Org.status: new_status.value,
                Org.closed_at: closed_at,
                Org.closure_reason: reason,
            },
            synchronize_session="fetch",
        )

        if updated != 1:
            current = self.db.query(Org.status).filter(Org.id == organization_id).scalar()
            raise OrganizationAlreadyClosedError(organization_id, current)

"""Pydantic schemas for organization closure.

This module defines closure-related schemas:
- Blocker / ArchivableDataItem: what a checker reports for one organization
- ClosureCheckResult / ClosureCheckReport: per-checker and aggregated results
- ClosurePreview / ClosureResult: what the service returns to callers
- ArchiveSnapshot / OrganizationArchiveRead / OrganizationArchiveDetail: archive data
- ClosurePolicy: retention policy applied at closure time
- PurgeStatistics / ExpiryNoticeStatistics: scheduled job results
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Retention periods an archive may be kept for, in days
ALLOWED_RETENTION_DAYS = (30, 60, 90)


class BlockerSeverity(str, Enum):
    """BLOCKING prevents closure outright; WARNING is advisory."""
    BLOCKING = "blocking"
    WARNING = "warning"


class Blocker(BaseModel):
    """A condition found by a checker that affects closure.

    id is module-scoped, typically the id of the underlying record.
    """

    id: str
    severity: BlockerSeverity
    type: str = Field(description="Category, e.g. 'financial', 'data', 'system'")
    module_id: str
    title: str
    description: str
    action_required: Optional[str] = None
    action_url: Optional[str] = None

    @property
    def is_blocking(self) -> bool:
        return self.severity == BlockerSeverity.BLOCKING


class ArchivableDataItem(BaseModel):
    """A live record that will be copied into the archive and then deleted."""

    id: str
    module_id: str
    type: str
    title: str
    size_bytes: int = Field(default=0, ge=0)
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ClosureCheckResult(BaseModel):
    """Result of one checker's check() call."""

    module_id: str
    module_name: str = ""
    blockers: List[Blocker] = Field(default_factory=list)
    archivable_data: List[ArchivableDataItem] = Field(default_factory=list)


class ClosureCheckReport(BaseModel):
    """Aggregated result of ClosureCheckerRegistry.check_all().

    Lists are concatenated in module registration order.
    """

    results: List[ClosureCheckResult] = Field(default_factory=list)
    failed_modules: List[str] = Field(default_factory=list)

    @property
    def blockers(self) -> List[Blocker]:
        return [b for result in self.results for b in result.blockers]

    @property
    def archivable_data(self) -> List[ArchivableDataItem]:
        return [item for result in self.results for item in result.archivable_data]

    @property
    def has_blocking(self) -> bool:
        return any(b.is_blocking for b in self.blockers)

    @property
    def total_size_bytes(self) -> int:
        return sum(item.size_bytes for item in self.archivable_data)


class ClosureImpact(BaseModel):
    """Counts of live records that closure will remove."""

    projects: int = Field(default=0, ge=0)
    tasks: int = Field(default=0, ge=0)
    members: int = Field(default=0, ge=0)
    invites: int = Field(default=0, ge=0)
    documents: int = Field(default=0, ge=0)
    expenses: int = Field(default=0, ge=0)


class ClosurePreview(BaseModel):
    """What closing the organization right now would look like."""

    can_close: bool
    blockers: List[Blocker] = Field(
        default_factory=list,
        description="Blockers with severity 'blocking'"
    )
    warnings: List[Blocker] = Field(
        default_factory=list,
        description="Blockers with severity 'warning'"
    )
    archivable_data: List[ArchivableDataItem] = Field(default_factory=list)
    impact: ClosureImpact = Field(default_factory=ClosureImpact)


class DeletedCounts(BaseModel):
    """Live records removed by a closure."""

    projects: int = 0
    tasks: int = 0
    members: int = 0
    invites: int = 0
    documents: int = 0


class ClosureResult(BaseModel):
    success: bool
    organization_id: UUID
    archive_id: Optional[UUID] = Field(
        default=None,
        description="None for a force close, which creates no archive"
    )
    closed_at: datetime
    deleted: DeletedCounts = Field(default_factory=DeletedCounts)


class InitiateClosureRequest(BaseModel):
    reason: Optional[str] = Field(default=None, max_length=2000)


class ArchiveSnapshot(BaseModel):
    """Aggregate counts stored on the archive at closure time."""

    members_count: int = Field(default=0, ge=0)
    projects_count: int = Field(default=0, ge=0)
    documents_count: int = Field(default=0, ge=0)
    total_storage_bytes: int = Field(default=0, ge=0)


class OrganizationArchiveRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    organization_id: UUID
    organization_name: str
    owner_id: UUID
    retention_days: int
    closed_at: datetime
    expires_at: datetime
    status: str
    snapshot: ArchiveSnapshot


class ArchivedDocumentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    original_document_id: UUID
    original_project_id: UUID
    project_name: str
    title: str
    type: Optional[str] = None
    file_id: Optional[UUID] = None
    file_url: str
    file_size_bytes: int
    metadata: Optional[Dict[str, Any]] = Field(default=None, validation_alias="metadata_json")
    archived_at: datetime
    expires_at: datetime


class OrganizationArchiveDetail(BaseModel):
    """One archive with the documents kept in it."""

    archive: OrganizationArchiveRead
    documents: List[ArchivedDocumentRead] = Field(default_factory=list)


class ClosurePolicy(BaseModel):
    """Retention policy applied when an organization is closed.

    Archives are kept for 30, 60 or 90 days before they are purged.
    """

    retention_days: int = Field(
        default=30,
        description="Archive retention period in days (30, 60 or 90)"
    )

    @field_validator('retention_days')
    @classmethod
    def validate_retention_days(cls, v: int) -> int:
        if v not in ALLOWED_RETENTION_DAYS:
            raise ValueError(
                f"Retention period must be one of {', '.join(map(str, ALLOWED_RETENTION_DAYS))} days"
            )
        return v


class PurgeStatistics(BaseModel):
    """Statistics from one purge_expired() run."""

    job_started_at: datetime
    job_completed_at: datetime
    duration_seconds: float = Field(ge=0.0)
    archives_found: int = Field(default=0, ge=0)
    archives_purged: int = Field(default=0, ge=0)
    archives_skipped: int = Field(
        default=0,
        ge=0,
        description="Already purged by a concurrent run"
    )
    archives_failed: int = Field(
        default=0,
        ge=0,
        description="Left active because a module failed; retried next run"
    )
    failed_modules: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="archive id -> module ids that failed"
    )

    @property
    def has_errors(self) -> bool:
        return self.archives_failed > 0


class ExpiryNoticeStatistics(BaseModel):
    """Notices sent per lead time (days before expiry)."""

    notified: Dict[int, int] = Field(default_factory=dict)
    errors: int = Field(default=0, ge=0)

    @property
    def total_notified(self) -> int:
        return sum(self.notified.values())

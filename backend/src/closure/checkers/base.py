"""
Base Closure Checker - Common functionality for all closure checkers

Provides shared helpers for organization lookups, blocker construction and
logging, plus no-op archive/delete_archived for modules that have nothing to
archive.
"""

import logging
from abc import ABC
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from models.project import Project
from ..ports import ClosureChecker
from ..schemas import ArchivableDataItem, Blocker, BlockerSeverity, ClosureCheckResult


logger = logging.getLogger(__name__)


class BaseClosureChecker(ClosureChecker, ABC):
    """
    Base class for closure checker implementations.

    Subclasses must implement:
    - check(organization_id) -> ClosureCheckResult

    Subclasses that archive records override archive() and delete_archived().
    """

    def __init__(self, db: Session):
        self.db = db

    def archive(self, organization_id: UUID, archive_id: UUID) -> None:
        """Nothing to archive for this module."""
        logger.debug(
            f"Module '{self.module_id}' has nothing to archive",
            extra={"org_id": str(organization_id), "archive_id": str(archive_id)}
        )

    def delete_archived(self, archive_id: UUID) -> None:
        """Nothing archived by this module."""
        logger.debug(
            f"Module '{self.module_id}' has no archived data",
            extra={"archive_id": str(archive_id)}
        )

    def list_projects(self, organization_id: UUID) -> List[Project]:
        """All live projects of an organization, oldest first."""
        return self.db.query(Project).filter(
            Project.org_id == organization_id
        ).order_by(Project.created_at, Project.id).all()

    def build_blocker(
        self,
        record_id: UUID,
        severity: BlockerSeverity,
        type: str,
        title: str,
        description: str,
        action_required: Optional[str] = None,
        action_url: Optional[str] = None,
    ) -> Blocker:
        """Build a Blocker tagged with this checker's module_id."""
        return Blocker(
            id=str(record_id),
            severity=severity,
            type=type,
            module_id=self.module_id,
            title=title,
            description=description,
            action_required=action_required,
            action_url=action_url,
        )

    def build_result(
        self,
        blockers: Optional[List[Blocker]] = None,
        archivable_data: Optional[List[ArchivableDataItem]] = None,
    ) -> ClosureCheckResult:
        return ClosureCheckResult(
            module_id=self.module_id,
            module_name=self.module_name,
            blockers=blockers or [],
            archivable_data=archivable_data or [],
        )

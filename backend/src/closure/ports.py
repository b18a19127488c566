"""
ClosureChecker - Port interface for per-module closure checks

Every business module that holds organization data (contracts, expenses,
documents, ...) provides one ClosureChecker. The closure service depends only on
this Port and reaches the checkers through ClosureCheckerRegistry.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from .schemas import ClosureCheckResult


class ClosureChecker(ABC):
    """
    Abstract interface for closure checkers.

    Implementations:
    - ContractsClosureChecker: blocks on unsettled contracts
    - ExpensesClosureChecker: blocks on unsettled expenses
    - DocumentsClosureChecker: archives project documents
    - ProjectsClosureChecker, MembersClosureChecker, InvitesClosureChecker: warnings

    Attributes:
        module_id: Stable identifier used as the registry key and as
            Blocker.module_id / ArchivableDataItem.module_id
        module_name: Human-readable module name shown in previews
    """

    module_id: str = ""
    module_name: str = ""

    @abstractmethod
    def check(self, organization_id: UUID) -> ClosureCheckResult:
        """
        Inspect one organization for blockers and archivable data.

        Implementation Requirements:
        - MUST NOT mutate anything
        - MUST return empty lists when the organization has nothing relevant
        """
        pass

    @abstractmethod
    def archive(self, organization_id: UUID, archive_id: UUID) -> None:
        """
        Copy the module's live records into archived storage tagged with archive_id.

        Modules that never archive (financial records) implement this as a no-op.
        Modules that do archive MUST raise ArchiveNotFoundError when archive_id
        does not reference an existing archive.
        """
        pass

    @abstractmethod
    def delete_archived(self, archive_id: UUID) -> None:
        """
        Permanently remove the module's archived records for archive_id.

        MUST be idempotent: a second call, or a call with nothing archived,
        succeeds.
        """
        pass

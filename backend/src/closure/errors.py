"""Exceptions raised by the organization closure workflow.

All of them derive from ClosureError so that the HTTP layer can map the
whole family in one place (see closure.router).
"""

from typing import List, Optional
from uuid import UUID


class ClosureError(Exception):
    """Base exception for organization closure errors."""
    pass


class ClosureAuthorizationError(ClosureError):
    """Caller is not the owner of the organization."""

    def __init__(self, organization_id: UUID, caller_id: UUID):
        self.organization_id = organization_id
        self.caller_id = caller_id
        super().__init__("Only organization owner can close organization")


class OrganizationNotFoundError(ClosureError):
    def __init__(self, organization_id: UUID):
        self.organization_id = organization_id
        super().__init__(f"Organization with id '{organization_id}' not found")


class ArchiveNotFoundError(ClosureError):
    def __init__(self, archive_id: UUID):
        self.archive_id = archive_id
        super().__init__(f"Archive not found: {archive_id}")


class ArchiveAccessError(ClosureError):
    """Caller is not the owner of the archived organization."""

    def __init__(self, archive_id: UUID, caller_id: UUID):
        self.archive_id = archive_id
        self.caller_id = caller_id
        super().__init__("Only the organization owner can view its archive")


class OrganizationAlreadyClosedError(ClosureError):
    """Organization is no longer active (archived or deleted)."""

    def __init__(self, organization_id: UUID, status: str):
        self.organization_id = organization_id
        self.status = status
        super().__init__(f"Organization {organization_id} is already closed (status: {status})")


class ClosureBlockedError(ClosureError):
    """One or more blocking conditions exist at initiate time.

    Carries the blockers so callers can render the same list the preview shows.
    """

    def __init__(self, organization_id: UUID, blockers: list, message: Optional[str] = None):
        self.organization_id = organization_id
        self.blockers = blockers
        if message is None:
            titles = ", ".join(b.title for b in blockers)
            message = f"Organization cannot be closed due to active blockers: {titles}"
        super().__init__(message)


class ClosureCheckError(ClosureError):
    """Some checkers failed, so obligations could not be verified."""

    def __init__(self, organization_id: UUID, failed_modules: List[str]):
        self.organization_id = organization_id
        self.failed_modules = failed_modules
        super().__init__(
            f"Closure checks failed for modules: {', '.join(failed_modules)}"
        )


class PartialArchiveError(ClosureError):
    """A checker failed while copying its records into the archive."""

    def __init__(
        self,
        module_id: str,
        archive_id: UUID,
        archived_modules: Optional[List[str]] = None,
    ):
        self.module_id = module_id
        self.archive_id = archive_id
        self.archived_modules = archived_modules or []
        super().__init__(
            f"Archiving failed in module '{module_id}' for archive {archive_id}"
        )

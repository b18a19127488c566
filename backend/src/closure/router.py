"""FastAPI router for organization closure.

Provides owner-only endpoints for:
- Previewing what closing an organization would do
- Closing an organization (archive, then delete live data)
- Force closing an empty organization
- Listing the caller's organization archives and opening one of them

Closure errors are mapped to HTTP status codes here:
403 not owner, 404 unknown organization or unavailable archive, 409 blocked /
already closed / checks failed, 500 partial archive.
"""

import logging
from typing import List, NoReturn, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status

from auth.dependencies import get_current_user
from dependencies import get_closure_service
from models.user import User
from .errors import (
    ArchiveAccessError,
    ArchiveNotFoundError,
    ClosureAuthorizationError,
    ClosureBlockedError,
    ClosureCheckError,
    ClosureError,
    OrganizationAlreadyClosedError,
    OrganizationNotFoundError,
    PartialArchiveError,
)
from .schemas import (
    ClosurePreview,
    ClosureResult,
    InitiateClosureRequest,
    OrganizationArchiveDetail,
    OrganizationArchiveRead,
)
from .service import OrganizationClosureService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/organizations", tags=["organization-closure"])


def raise_http_error(error: ClosureError) -> NoReturn:
    """Translate a ClosureError into the matching HTTPException."""
    if isinstance(error, (ClosureAuthorizationError, ArchiveAccessError)):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(error))

    if isinstance(error, (OrganizationNotFoundError, ArchiveNotFoundError)):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))

    if isinstance(error, ClosureBlockedError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": str(error),
                "blockers": [b.model_dump(mode="json") for b in error.blockers],
            },
        )

    if isinstance(error, ClosureCheckError):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": str(error), "failed_modules": error.failed_modules},
        )

    if isinstance(error, OrganizationAlreadyClosedError):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))

    if isinstance(error, PartialArchiveError):
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Archiving failed in module '{error.module_id}', organization was not closed",
        )

    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))


@router.get("/archives", response_model=List[OrganizationArchiveRead])
def list_my_archives(
    current_user: User = Depends(get_current_user),
    service: OrganizationClosureService = Depends(get_closure_service),
):
    """List archives of organizations the caller owned, newest first."""
    return service.list_archives_for_owner(current_user.id)


@router.get("/archives/{archive_id}", response_model=OrganizationArchiveDetail)
def get_archive(
    archive_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OrganizationClosureService = Depends(get_closure_service),
) -> OrganizationArchiveDetail:
    """Open one archive with its archived documents.

    Only the owner of the closed organization may open it; a purged or expired
    archive answers 404.
    """
    try:
        return service.get_archive_details(archive_id, current_user.id)
    except ClosureError as e:
        raise_http_error(e)


@router.get("/{org_id}/closure-preview", response_model=ClosurePreview)
def get_closure_preview(
    org_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OrganizationClosureService = Depends(get_closure_service),
) -> ClosurePreview:
    """Show blockers, warnings, archivable data and impact of closing the organization.

    Requires the caller to be the organization owner.
    """
    try:
        return service.get_closure_preview(org_id, current_user.id)
    except ClosureError as e:
        raise_http_error(e)


@router.post("/{org_id}/closure-initiate", response_model=ClosureResult)
def initiate_closure(
    org_id: UUID,
    request: Optional[InitiateClosureRequest] = None,
    current_user: User = Depends(get_current_user),
    service: OrganizationClosureService = Depends(get_closure_service),
) -> ClosureResult:
    """Close the organization.

    Checks are re-run server-side; a stale client preview is never trusted.

    Raises:
        HTTPException 409: Blocking conditions exist (body carries the blockers)
    """
    reason = request.reason if request else None

    logger.info(
        f"Closure requested for org {org_id}",
        extra={"org_id": str(org_id), "user_id": str(current_user.id)}
    )

    try:
        return service.initiate_closing(org_id, current_user.id, reason=reason)
    except ClosureError as e:
        raise_http_error(e)


@router.post("/{org_id}/force-close", response_model=ClosureResult)
def force_close(
    org_id: UUID,
    current_user: User = Depends(get_current_user),
    service: OrganizationClosureService = Depends(get_closure_service),
) -> ClosureResult:
    """Delete an organization with no data to archive and no warnings."""
    try:
        return service.force_close(org_id, current_user.id)
    except ClosureError as e:
        raise_http_error(e)

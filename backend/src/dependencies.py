"""Global FastAPI dependencies.

This module provides:
- get_closure_service: OrganizationClosureService bound to the request session,
  with the default checker registry and the configured retention policy
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from config import get_settings
from database import get_db
from closure.checkers import build_default_registry
from closure.schemas import ClosurePolicy
from closure.service import OrganizationClosureService


def get_closure_service(db: Session = Depends(get_db)) -> OrganizationClosureService:
    """Build the closure service for one request.

    Checkers share the request's session, so the registry is built per request.
    Object storage is not touched by HTTP operations (only purge deletes files),
    so no storage client is passed here.
    """
    settings = get_settings()
    return OrganizationClosureService(
        db=db,
        registry=build_default_registry(db),
        policy=ClosurePolicy(retention_days=settings.CLOSURE_RETENTION_DAYS),
    )

"""Organization closure.

An owner closes an organization in two steps: a preview that runs every
registered closure checker, and an initiate that re-checks, archives what can
be kept, deletes live data and marks the organization archived. Archives are
purged by a scheduled job once their retention window has elapsed.
"""

from .errors import (
    ClosureError,
    ClosureAuthorizationError,
    OrganizationNotFoundError,
    ArchiveNotFoundError,
    OrganizationAlreadyClosedError,
    ClosureBlockedError,
    ClosureCheckError,
    PartialArchiveError,
)
from .ports import ClosureChecker
from .registry import ClosureCheckerRegistry

__all__ = [
    "ClosureChecker",
    "ClosureCheckerRegistry",
    "ClosureError",
    "ClosureAuthorizationError",
    "OrganizationNotFoundError",
    "ArchiveNotFoundError",
    "OrganizationAlreadyClosedError",
    "ClosureBlockedError",
    "ClosureCheckError",
    "PartialArchiveError",
]

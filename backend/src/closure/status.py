"""Organization and archive status state machines.

Organization:
    active -> archived (closure with archive)
    active -> deleted  (force close of an empty organization)

Archive:
    active -> purged   (retention window elapsed, archived records removed)

Terminal States: archived, deleted, purged
"""

from typing import List, Union

from models.org import OrganizationStatus
from models.organization_archive import ArchiveStatus


ORGANIZATION_TRANSITIONS = {
    OrganizationStatus.ACTIVE: [
        OrganizationStatus.ARCHIVED,
        OrganizationStatus.DELETED,
    ],
    OrganizationStatus.ARCHIVED: [],  # Terminal state
    OrganizationStatus.DELETED: [],  # Terminal state
}

ARCHIVE_TRANSITIONS = {
    ArchiveStatus.ACTIVE: [ArchiveStatus.PURGED],
    ArchiveStatus.PURGED: [],  # Terminal state
}


class StateTransitionError(Exception):
    """Raised when an invalid state transition is attempted."""
    pass


def _transitions_for(status):
    if isinstance(status, OrganizationStatus):
        return ORGANIZATION_TRANSITIONS
    return ARCHIVE_TRANSITIONS


def validate_transition(
    current_status: Union[OrganizationStatus, ArchiveStatus],
    new_status: Union[OrganizationStatus, ArchiveStatus]
) -> None:
    """Validate that a state transition is allowed.

    Raises:
        StateTransitionError: If transition is not allowed
    """
    allowed = _transitions_for(current_status).get(current_status, [])
    if new_status not in allowed:
        raise StateTransitionError(
            f"Invalid transition: {current_status.value} -> {new_status.value}. "
            f"Allowed transitions from {current_status.value}: "
            f"{[s.value for s in allowed]}"
        )


def can_transition(
    current_status: Union[OrganizationStatus, ArchiveStatus],
    new_status: Union[OrganizationStatus, ArchiveStatus]
) -> bool:
    """Check if a state transition is allowed without raising exception."""
    allowed = _transitions_for(current_status).get(current_status, [])
    return new_status in allowed


def get_allowed_transitions(
    status: Union[OrganizationStatus, ArchiveStatus]
) -> List[Union[OrganizationStatus, ArchiveStatus]]:
    return _transitions_for(status).get(status, [])

"""Audit logging service for organization lifecycle events.

Every closure state transition is recorded as an immutable audit entry. Entries
are keyed by organization id and have no foreign keys, so they remain readable
after the organization's live data and its archive are gone.
"""

import enum
from sqlalchemy.orm import Session
from uuid import UUID
from typing import Optional, Dict, Any

from models.audit_log import AuditLog


class AuditAction(str, enum.Enum):
    ORG_CLOSED = "ORG_CLOSED"  # Archived by its owner
    ORG_DELETED = "ORG_DELETED"  # Empty organization force closed
    ORG_CLOSURE_REJECTED = "ORG_CLOSURE_REJECTED"  # Refused because of blockers
    ORG_ARCHIVE_PURGED = "ORG_ARCHIVE_PURGED"  # Retention window elapsed


def log_audit_event(
    db: Session,
    org_id: UUID,
    action: AuditAction,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create an audit log entry.

    The entry is flushed, not committed: it becomes durable together with the
    caller's transaction, so a rolled back closure leaves no ORG_CLOSED entry.

    Args:
        db: Database session
        org_id: Organization the event is about
        action: Lifecycle event
        actor_id: User who performed the action (None for scheduled jobs)
        entity_type: "organization" or "organization_archive"
        entity_id: ID of affected entity
        metadata: Additional context as JSON (e.g., {"archive_id": "..."})

    Returns:
        AuditLog: The created audit log entry
    """
    audit_entry = AuditLog(
        org_id=org_id,
        actor_id=actor_id,
        action=AuditAction(action).value,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
    )

    db.add(audit_entry)
    db.flush()

    return audit_entry

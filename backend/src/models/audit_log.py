"""AuditLog SQLAlchemy model"""

from sqlalchemy import Column, Text, Index, Uuid, TIMESTAMP
from uuid import uuid4

from .base import Base, PortableJSONB, utc_now


class AuditLog(Base):
    """AuditLog model for immutable event logging.

    Records organization lifecycle events (closure, force close, archive purge)
    for compliance and forensics. Entries are append-only and should never be
    updated or deleted.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_org_id", "org_id"),
        Index("ix_audit_log_org_id_created_at", "org_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    # No FK: entries outlive the organization rows they describe
    org_id = Column(Uuid, nullable=False)
    actor_id = Column(Uuid, nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Uuid, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

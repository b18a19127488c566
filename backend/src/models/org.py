"""Org model - Root entity for multi-tenant isolation"""

from sqlalchemy import Column, Text, ForeignKey, CheckConstraint, Uuid, TIMESTAMP
from sqlalchemy.orm import validates, relationship
from uuid import uuid4
import enum
import re

from .base import Base, PortableJSONB, utc_now


class OrganizationStatus(str, enum.Enum):
    """Lifecycle status of an organization.

    State flow: ACTIVE -> ARCHIVED (closure with archive) or ACTIVE -> DELETED
    (force close of an empty organization). There is no way back to ACTIVE.
    """
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class Org(Base):
    """
    Organization model - Root entity for multi-tenant system.

    Each organization represents a distinct tenant with isolated data and is
    owned by exactly one user (owner_id). Closure fields (status,
    closure_reason, closed_at) are written only by the closure service.
    """
    __tablename__ = "org"
    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'archived', 'deleted')",
            name='ck_org_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    owner_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    status = Column(Text, nullable=False, default=OrganizationStatus.ACTIVE.value)
    closure_reason = Column(Text, nullable=True)
    closed_at = Column(TIMESTAMP(timezone=True), nullable=True)
    settings_json = Column(PortableJSONB, nullable=False, default=dict)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now
    )

    # Relationships
    owner = relationship("User")
    members = relationship("OrgMember", back_populates="org")
    invites = relationship("OrgInvite", back_populates="org")
    projects = relationship("Project", back_populates="org")

    @validates('slug')
    def validate_slug(self, key, value):
        """
        Ensure slug is URL-friendly and follows naming conventions.

        Pattern: ^[a-z0-9-]+$
        Valid: acme-studio, test-org-123
        Invalid: Acme_Studio, acme studio, acme.studio

        Raises:
            ValueError: If slug doesn't match pattern or length requirements
        """
        if not re.match(r'^[a-z0-9-]+$', value):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, and hyphens"
            )
        if len(value) < 2 or len(value) > 100:
            raise ValueError("Slug must be between 2 and 100 characters")
        return value

    @validates('name')
    def validate_name(self, key, value):
        """
        Ensure organization name is not empty and within length limits.

        Raises:
            ValueError: If name is empty/whitespace or exceeds 200 characters
        """
        if not value or len(value.strip()) == 0:
            raise ValueError("Organization name cannot be empty")
        if len(value) > 200:
            raise ValueError("Organization name cannot exceed 200 characters")
        return value.strip()

    @property
    def is_active(self) -> bool:
        return self.status == OrganizationStatus.ACTIVE.value

    def __repr__(self):
        return f"<Org(id={self.id}, slug='{self.slug}', status='{self.status}')>"


class OrgMember(Base):
    """Membership of a user in an organization."""
    __tablename__ = "org_member"
    __table_args__ = (
        CheckConstraint(
            "role IN ('owner', 'admin', 'member', 'viewer')",
            name='ck_org_member_role'
        ),
        CheckConstraint(
            "status IN ('active', 'inactive', 'blocked')",
            name='ck_org_member_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Uuid, ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    role = Column(Text, nullable=False, default="member")
    status = Column(Text, nullable=False, default="active")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    org = relationship("Org", back_populates="members")
    user = relationship("User")


class OrgInvite(Base):
    """Pending or resolved invitation to join an organization."""
    __tablename__ = "org_invite"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'expired', 'revoked')",
            name='ck_org_invite_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="CASCADE"), nullable=False, index=True)
    email = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="member")
    status = Column(Text, nullable=False, default="pending")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    org = relationship("Org", back_populates="invites")

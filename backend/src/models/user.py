"""User SQLAlchemy model"""

from sqlalchemy import Column, Text, CheckConstraint, Uuid, TIMESTAMP
from sqlalchemy.orm import validates
from uuid import uuid4
import re

from .base import Base, utc_now


class User(Base):
    """User model representing authenticated platform users.

    A user may own or be a member of several organizations (see OrgMember).
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid4)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="ACTIVE")
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    __table_args__ = (
        CheckConstraint(
            "status IN ('ACTIVE', 'DISABLED')",
            name='ck_user_status'
        ),
    )

    @validates('email')
    def validate_email(self, key, value):
        """Basic email format validation"""
        if not re.match(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$', value):
            raise ValueError("Invalid email format")
        return value.lower()

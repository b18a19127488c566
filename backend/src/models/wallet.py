"""Wallet SQLAlchemy model"""

from sqlalchemy import Column, Text, BigInteger, CheckConstraint, Index, Uuid, TIMESTAMP
from uuid import uuid4
import enum

from .base import Base, utc_now


class WalletOwnerType(str, enum.Enum):
    USER = "user"
    ORGANIZATION = "organization"


class WalletStatus(str, enum.Enum):
    ACTIVE = "active"
    FROZEN = "frozen"


class Wallet(Base):
    """Money balance held for a user or an organization.

    balance is stored in minor units (kopecks, cents). entity_id points at a
    user or an organization depending on entity_type, so it carries no FK.
    """
    __tablename__ = "wallet"
    __table_args__ = (
        Index("ix_wallet_entity", "entity_id", "entity_type"),
        CheckConstraint(
            "entity_type IN ('user', 'organization')",
            name='ck_wallet_entity_type'
        ),
        CheckConstraint(
            "status IN ('active', 'frozen')",
            name='ck_wallet_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    entity_id = Column(Uuid, nullable=False)
    entity_type = Column(Text, nullable=False)
    balance = Column(BigInteger, nullable=False, default=0)
    currency = Column(Text, nullable=False, default="RUB")
    status = Column(Text, nullable=False, default=WalletStatus.ACTIVE.value)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Wallet(id={self.id}, entity_type='{self.entity_type}', balance={self.balance} {self.currency})>"

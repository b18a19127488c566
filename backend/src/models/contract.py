"""Contract SQLAlchemy model

Contracts are escrow-style agreements between an organization (payer) and a
performer for a task. Funds move offer -> accepted -> funded -> completed -> paid;
disputed can be entered from funded or completed.
"""

from sqlalchemy import Column, Text, ForeignKey, BigInteger, CheckConstraint, Index, Uuid, TIMESTAMP
from uuid import uuid4
import enum

from .base import Base, utc_now


class ContractStatus(str, enum.Enum):
    OFFER = "offer"
    ACCEPTED = "accepted"
    FUNDED = "funded"
    COMPLETED = "completed"
    PAID = "paid"
    DISPUTED = "disputed"


class Contract(Base):
    """Contract between the organization and a performer."""
    __tablename__ = "contract"
    __table_args__ = (
        Index("ix_contract_org_id", "org_id"),
        Index("ix_contract_task_id", "task_id"),
        CheckConstraint(
            "status IN ('offer', 'accepted', 'funded', 'completed', 'paid', 'disputed')",
            name='ck_contract_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="RESTRICT"), nullable=False)
    task_id = Column(Uuid, nullable=True)  # Logical link, task may already be gone
    performer_id = Column(Uuid, ForeignKey("user.id", ondelete="RESTRICT"), nullable=False)
    amount = Column(BigInteger, nullable=False)  # Minor units (kopecks, cents)
    currency = Column(Text, nullable=False, default="RUB")
    status = Column(Text, nullable=False, default=ContractStatus.OFFER.value)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Contract(id={self.id}, status='{self.status}', amount={self.amount} {self.currency})>"

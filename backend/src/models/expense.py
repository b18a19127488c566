"""Expense SQLAlchemy model"""

from sqlalchemy import Column, Text, ForeignKey, Numeric, Date, CheckConstraint, Index, Uuid, TIMESTAMP
from uuid import uuid4
import enum

from .base import Base, utc_now


class ExpenseStatus(str, enum.Enum):
    """Expense approval workflow.

    State flow: DRAFT -> PENDING -> APPROVED -> PAYABLE -> CLOSED
    """
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    PAYABLE = "payable"
    CLOSED = "closed"


class Expense(Base):
    """Project expense recorded by an organization.

    Expenses are financial records: they are kept after their project is
    deleted (project_id becomes NULL) and are never copied into an archive.
    """
    __tablename__ = "expense"
    __table_args__ = (
        Index("ix_expense_org_id", "org_id"),
        CheckConstraint(
            "status IN ('draft', 'pending', 'approved', 'payable', 'closed')",
            name='ck_expense_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="RESTRICT"), nullable=False)
    project_id = Column(Uuid, ForeignKey("project.id", ondelete="SET NULL"), nullable=True)
    date = Column(Date, nullable=True)
    amount = Column(Numeric(14, 2), nullable=False)
    currency = Column(Text, nullable=False, default="RUB")
    category = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    vendor = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default=ExpenseStatus.DRAFT.value)
    created_by = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def __repr__(self):
        return f"<Expense(id={self.id}, status='{self.status}', amount={self.amount} {self.currency})>"

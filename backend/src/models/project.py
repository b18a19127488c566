"""Project and Task SQLAlchemy models"""

from sqlalchemy import Column, Text, ForeignKey, CheckConstraint, Index, Uuid, TIMESTAMP
from sqlalchemy.orm import relationship
from uuid import uuid4
import enum

from .base import Base, utc_now


class ProjectStatus(str, enum.Enum):
    ACTIVE = "active"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    ARCHIVED = "archived"


class TaskStatus(str, enum.Enum):
    """Task workflow status. DONE is the only finished state."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    DONE = "done"


class Project(Base):
    """Project owned by an organization. Tasks and documents hang off it."""
    __tablename__ = "project"
    __table_args__ = (
        Index("ix_project_org_id", "org_id"),
        CheckConstraint(
            "status IN ('active', 'on_hold', 'completed', 'archived')",
            name='ck_project_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    org_id = Column(Uuid, ForeignKey("org.id", ondelete="RESTRICT"), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(Text, nullable=False, default=ProjectStatus.ACTIVE.value)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    # Relationships
    org = relationship("Org", back_populates="projects")
    tasks = relationship("Task", back_populates="project", cascade="all, delete-orphan")
    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Project(id={self.id}, title='{self.title}')>"


class Task(Base):
    """Unit of work inside a project."""
    __tablename__ = "task"
    __table_args__ = (
        Index("ix_task_project_id", "project_id"),
        CheckConstraint(
            "status IN ('todo', 'in_progress', 'review', 'done')",
            name='ck_task_status'
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    project_id = Column(Uuid, ForeignKey("project.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default=TaskStatus.TODO.value)
    assignee_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=utc_now)

    project = relationship("Project", back_populates="tasks")

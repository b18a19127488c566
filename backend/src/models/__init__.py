"""SQLAlchemy models for the workspace backend"""

from .base import Base
from .user import User
from .org import Org, OrgMember, OrgInvite, OrganizationStatus
from .audit_log import AuditLog
from .project import Project, ProjectStatus, Task, TaskStatus
from .document import FileObject, Document, DocumentVersion
from .contract import Contract, ContractStatus
from .expense import Expense, ExpenseStatus
from .wallet import Wallet, WalletOwnerType, WalletStatus
from .organization_archive import OrganizationArchive, ArchivedDocument, ArchiveStatus

__all__ = [
    "Base",
    "User",
    "Org",
    "OrgMember",
    "OrgInvite",
    "OrganizationStatus",
    "AuditLog",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "FileObject",
    "Document",
    "DocumentVersion",
    "Contract",
    "ContractStatus",
    "Expense",
    "ExpenseStatus",
    "Wallet",
    "WalletOwnerType",
    "WalletStatus",
    "OrganizationArchive",
    "ArchivedDocument",
    "ArchiveStatus",
]

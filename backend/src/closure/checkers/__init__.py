"""
Closure checkers - one per business module

build_default_registry() is the composition root for the checker set: it
registers the financial checkers (contracts, expenses, wallet) first so their
blockers lead every preview.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from ..registry import ClosureCheckerRegistry
from .base import BaseClosureChecker
from .contracts import ContractsClosureChecker
from .expenses import ExpensesClosureChecker
from .wallet import WalletClosureChecker
from .documents import DocumentsClosureChecker, StorageCleanupError
from .projects import ProjectsClosureChecker
from .members import MembersClosureChecker, InvitesClosureChecker


def build_default_registry(
    db: Session,
    storage_client: Optional[Any] = None,
) -> ClosureCheckerRegistry:
    """Build the registry with every closure checker bound to one session."""
    return ClosureCheckerRegistry([
        ContractsClosureChecker(db),
        ExpensesClosureChecker(db),
        WalletClosureChecker(db),
        DocumentsClosureChecker(db, storage_client=storage_client),
        ProjectsClosureChecker(db),
        MembersClosureChecker(db),
        InvitesClosureChecker(db),
    ])


__all__ = [
    "build_default_registry",
    "BaseClosureChecker",
    "ContractsClosureChecker",
    "ExpensesClosureChecker",
    "WalletClosureChecker",
    "DocumentsClosureChecker",
    "StorageCleanupError",
    "ProjectsClosureChecker",
    "MembersClosureChecker",
    "InvitesClosureChecker",
]

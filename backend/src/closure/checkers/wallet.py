"""Wallet closure checker.

An organization wallet holding money blocks closure until the funds are
withdrawn. Wallets are never archived.
"""

from uuid import UUID

from models.wallet import Wallet, WalletOwnerType
from ..schemas import BlockerSeverity, ClosureCheckResult
from .base import BaseClosureChecker


BLOCKER_TITLE = "Баланс кошелька"
WITHDRAW_ACTION = "Выведите все средства перед закрытием организации"


def format_balance(balance: int, currency: str) -> str:
    """Minor units as a grouped amount, e.g. 1500000 RUB -> '15 000.00 RUB'."""
    return f"{balance / 100:,.2f}".replace(",", " ") + f" {currency}"


class WalletClosureChecker(BaseClosureChecker):
    module_id = "wallet"
    module_name = "Кошелёк"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        wallets = self.db.query(Wallet).filter(
            Wallet.entity_id == organization_id,
            Wallet.entity_type == WalletOwnerType.ORGANIZATION.value,
        ).order_by(Wallet.created_at, Wallet.id).all()

        blockers = [
            self.build_blocker(
                record_id=wallet.id,
                severity=BlockerSeverity.BLOCKING,
                type="financial",
                title=BLOCKER_TITLE,
                description=f"На балансе кошелька организации {format_balance(wallet.balance, wallet.currency)}",
                action_required=WITHDRAW_ACTION,
            )
            for wallet in wallets
            if wallet.balance != 0
        ]

        return self.build_result(blockers=blockers)

"""Contracts closure checker.

Unsettled contracts block closure: money is either held in escrow or owed to a
performer. Contracts are financial records and are never archived.
"""

from uuid import UUID

from models.contract import Contract, ContractStatus
from ..schemas import BlockerSeverity, ClosureCheckResult
from .base import BaseClosureChecker


# Status -> remediation shown to the owner
BLOCKING_ACTIONS = {
    ContractStatus.ACCEPTED: "Завершите контракт или отмените его",
    ContractStatus.FUNDED: "Завершите работу по контракту или верните средства",
    ContractStatus.COMPLETED: "Оплатите контракт",
    ContractStatus.DISPUTED: "Разрешите спор по контракту",
}

WARNING_ACTIONS = {
    ContractStatus.OFFER: "Предложение по контракту будет отозвано",
}

STATUS_LABELS = {
    ContractStatus.OFFER: "предложение",
    ContractStatus.ACCEPTED: "принят",
    ContractStatus.FUNDED: "средства зарезервированы",
    ContractStatus.COMPLETED: "работа завершена, ожидает оплаты",
    ContractStatus.PAID: "оплачен",
    ContractStatus.DISPUTED: "спор",
}

BLOCKER_TITLE = "Активный контракт"
WARNING_TITLE = "Предложение по контракту"


def format_minor_units(amount: int, currency: str) -> str:
    return f"{amount / 100:.2f} {currency}"


class ContractsClosureChecker(BaseClosureChecker):
    module_id = "contracts"
    module_name = "Контракты"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        contracts = self.db.query(Contract).filter(
            Contract.org_id == organization_id
        ).order_by(Contract.created_at, Contract.id).all()

        blockers = []
        for contract in contracts:
            status = ContractStatus(contract.status)

            if status in BLOCKING_ACTIONS:
                severity = BlockerSeverity.BLOCKING
                action = BLOCKING_ACTIONS[status]
            elif status in WARNING_ACTIONS:
                severity = BlockerSeverity.WARNING
                action = WARNING_ACTIONS[status]
            else:
                continue

            blockers.append(self.build_blocker(
                record_id=contract.id,
                severity=severity,
                type="financial",
                title=BLOCKER_TITLE if severity == BlockerSeverity.BLOCKING else WARNING_TITLE,
                description=(
                    f"Контракт на {format_minor_units(contract.amount, contract.currency)}, "
                    f"статус: {STATUS_LABELS[status]} ({status.value})"
                ),
                action_required=action,
            ))

        return self.build_result(blockers=blockers)

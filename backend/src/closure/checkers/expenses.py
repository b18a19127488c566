"""Expenses closure checker.

Expenses still moving through approval or payment block closure. Like
contracts, expenses are never archived.
"""

from uuid import UUID

from models.expense import Expense, ExpenseStatus
from ..schemas import BlockerSeverity, ClosureCheckResult
from .base import BaseClosureChecker


BLOCKING_ACTIONS = {
    ExpenseStatus.PENDING: "Одобрите или отклоните расход",
    ExpenseStatus.APPROVED: "Оплатите расход или отмените его",
    ExpenseStatus.PAYABLE: "Завершите оплату расхода",
}

WARNING_ACTIONS = {
    ExpenseStatus.DRAFT: "Черновик расхода будет удалён",
}

BLOCKER_TITLE = "Незакрытый расход"
WARNING_TITLE = "Черновик расхода"

STATUS_LABELS = {
    ExpenseStatus.DRAFT: "черновик",
    ExpenseStatus.PENDING: "на согласовании",
    ExpenseStatus.APPROVED: "согласован",
    ExpenseStatus.PAYABLE: "к оплате",
    ExpenseStatus.CLOSED: "закрыт",
}


class ExpensesClosureChecker(BaseClosureChecker):
    module_id = "expenses"
    module_name = "Расходы"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        expenses = self.db.query(Expense).filter(
            Expense.org_id == organization_id
        ).order_by(Expense.created_at, Expense.id).all()

        blockers = []
        for expense in expenses:
            status = ExpenseStatus(expense.status)

            if status in BLOCKING_ACTIONS:
                severity = BlockerSeverity.BLOCKING
                action = BLOCKING_ACTIONS[status]
            elif status in WARNING_ACTIONS:
                severity = BlockerSeverity.WARNING
                action = WARNING_ACTIONS[status]
            else:
                continue

            summary = f"Расход «{expense.category}» на {expense.amount} {expense.currency}"
            if expense.vendor:
                summary += f" ({expense.vendor})"

            blockers.append(self.build_blocker(
                record_id=expense.id,
                severity=severity,
                type="financial",
                title=BLOCKER_TITLE if severity == BlockerSeverity.BLOCKING else WARNING_TITLE,
                description=f"{summary}, статус: {STATUS_LABELS[status]} ({status.value})",
                action_required=action,
            ))

        return self.build_result(blockers=blockers)

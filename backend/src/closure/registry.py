"""
Closure Checker Registry - Ordered collection of per-module closure checkers

The registry is an explicit object built by the composition root (see
closure.checkers.build_default_registry) and injected into
OrganizationClosureService, so tests can build their own with fake checkers.

Read path (check_all) collects errors and continues; write path (archive_all)
stops at the first error; purge path (delete_archived_all) continues and
reports failures.
"""

import logging
from typing import Dict, List, Optional
from uuid import UUID

from observability.metrics import closure_check_failures_total
from .ports import ClosureChecker
from .errors import PartialArchiveError
from .schemas import Blocker, BlockerSeverity, ClosureCheckReport, ClosureCheckResult

logger = logging.getLogger(__name__)


class ClosureCheckerRegistry:
    """
    Registry of closure checkers keyed by module_id.

    Checkers run in registration order, which makes merged blocker and
    archivable-data lists deterministic.

    Usage:
        registry = ClosureCheckerRegistry()
        registry.register(ContractsClosureChecker(db))
        registry.register(DocumentsClosureChecker(db))

        report = registry.check_all(org_id)
        registry.archive_all(org_id, archive.id)
    """

    def __init__(self, checkers: Optional[List[ClosureChecker]] = None):
        self._checkers: Dict[str, ClosureChecker] = {}
        for checker in checkers or []:
            self.register(checker)

    def register(self, checker: ClosureChecker) -> None:
        """
        Register a checker under its module_id.

        Raises:
            ValueError: If module_id is empty or checker doesn't implement ClosureChecker
            RuntimeError: If module_id is already registered (prevents accidental override)
        """
        if not isinstance(checker, ClosureChecker):
            raise ValueError(
                f"Checker must implement ClosureChecker, got {type(checker).__name__}"
            )

        module_id = checker.module_id
        if not module_id or not module_id.strip():
            raise ValueError("module_id cannot be empty")

        if module_id in self._checkers:
            raise RuntimeError(
                f"Closure checker '{module_id}' is already registered. "
                f"Use unregister() first if you need to replace it."
            )

        self._checkers[module_id] = checker

    def unregister(self, module_id: str) -> None:
        """
        Remove a checker from the registry.

        Raises:
            ValueError: If module_id is not registered
        """
        if module_id not in self._checkers:
            raise ValueError(f"Closure checker '{module_id}' is not registered")

        del self._checkers[module_id]

    def get(self, module_id: str) -> ClosureChecker:
        if module_id not in self._checkers:
            available = ', '.join(self._checkers) if self._checkers else 'none'
            raise ValueError(
                f"Unknown closure module: '{module_id}'. "
                f"Available modules: {available}"
            )
        return self._checkers[module_id]

    def is_registered(self, module_id: str) -> bool:
        return module_id in self._checkers

    def get_registered_modules(self) -> List[str]:
        """Module ids in registration order."""
        return list(self._checkers)

    def check_all(self, organization_id: UUID) -> ClosureCheckReport:
        """
        Run every checker's check() and merge the results.

        A checker that raises does not abort the others: the failure is logged
        and reported as a warning blocker for that module, and its module_id is
        recorded in ClosureCheckReport.failed_modules. Previews therefore always
        return a best-effort picture.

        Args:
            organization_id: Organization to inspect

        Returns:
            ClosureCheckReport with results in registration order
        """
        report = ClosureCheckReport()

        for module_id, checker in self._checkers.items():
            try:
                result = checker.check(organization_id)
            except Exception as e:
                logger.error(
                    f"Closure check failed in module '{module_id}'",
                    exc_info=True,
                    extra={"org_id": str(organization_id), "module_id": module_id, "error": str(e)}
                )
                closure_check_failures_total.labels(module_id=module_id).inc()
                report.failed_modules.append(module_id)
                result = ClosureCheckResult(
                    module_id=module_id,
                    module_name=checker.module_name,
                    blockers=[_check_failed_blocker(module_id, checker.module_name)],
                )

            report.results.append(result)

        logger.info(
            f"Closure checks completed for org {organization_id}",
            extra={
                "org_id": str(organization_id),
                "modules": len(report.results),
                "blockers": len(report.blockers),
                "archivable_items": len(report.archivable_data),
                "failed_modules": report.failed_modules,
            }
        )

        return report

    def archive_all(self, organization_id: UUID, archive_id: UUID) -> None:
        """
        Run every checker's archive() sequentially.

        The first failure aborts the remaining calls so that a partially
        archived organization surfaces as a hard failure.

        Raises:
            PartialArchiveError: Wrapping the failing checker's exception
        """
        archived_modules: List[str] = []

        for module_id, checker in self._checkers.items():
            try:
                checker.archive(organization_id, archive_id)
            except Exception as e:
                logger.error(
                    f"Archiving failed in module '{module_id}', aborting remaining modules",
                    exc_info=True,
                    extra={
                        "org_id": str(organization_id),
                        "archive_id": str(archive_id),
                        "module_id": module_id,
                        "archived_modules": archived_modules,
                    }
                )
                raise PartialArchiveError(module_id, archive_id, archived_modules) from e

            archived_modules.append(module_id)

        logger.info(
            f"Archived organization {organization_id} into archive {archive_id}",
            extra={"org_id": str(organization_id), "archive_id": str(archive_id)}
        )

    def delete_archived_all(self, archive_id: UUID) -> Dict[str, str]:
        """
        Run every checker's delete_archived().

        Failures are logged and collected; the remaining modules still run.
        Deletion is idempotent per module, so a failed module is simply retried
        by the next purge run.

        Returns:
            Dict mapping failed module_id to error message (empty on success)
        """
        failures: Dict[str, str] = {}

        for module_id, checker in self._checkers.items():
            try:
                checker.delete_archived(archive_id)
            except Exception as e:
                logger.error(
                    f"Deleting archived data failed in module '{module_id}'",
                    exc_info=True,
                    extra={"archive_id": str(archive_id), "module_id": module_id, "error": str(e)}
                )
                failures[module_id] = str(e)

        return failures

    def __len__(self) -> int:
        return len(self._checkers)


def _check_failed_blocker(module_id: str, module_name: str) -> Blocker:
    return Blocker(
        id=f"{module_id}:check-failed",
        severity=BlockerSeverity.WARNING,
        type="system",
        module_id=module_id,
        title=f"Не удалось проверить модуль «{module_name or module_id}»",
        description="Проверка модуля завершилась с ошибкой, данные могут быть неполными",
        action_required="Повторите проверку позже",
    )

"""Projects closure checker: warns about projects with unfinished tasks."""

from uuid import UUID

from sqlalchemy import func

from models.project import Task, TaskStatus
from ..schemas import BlockerSeverity, ClosureCheckResult
from .base import BaseClosureChecker


class ProjectsClosureChecker(BaseClosureChecker):
    module_id = "projects"
    module_name = "Проекты и задачи"

    def check(self, organization_id: UUID) -> ClosureCheckResult:
        blockers = []

        for project in self.list_projects(organization_id):
            open_tasks = self.db.query(func.count(Task.id)).filter(
                Task.project_id == project.id,
                Task.status != TaskStatus.DONE.value,
            ).scalar()

            if open_tasks:
                blockers.append(self.build_blocker(
                    record_id=project.id,
                    severity=BlockerSeverity.WARNING,
                    type="data",
                    title=f"Проект «{project.title}»",
                    description=f"Незавершённых задач: {open_tasks}",
                    action_required="Незавершённые задачи будут удалены вместе с проектом",
                ))

        return self.build_result(blockers=blockers)

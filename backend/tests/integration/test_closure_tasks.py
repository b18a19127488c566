"""Integration tests for closure Celery tasks

The tasks open their own session through SessionLocal; tests point it at the
test database and call the task functions directly.
"""

import pytest
from datetime import timedelta
from uuid import uuid4

from sqlalchemy.orm import sessionmaker

import closure.tasks as closure_tasks
from closure.repository import OrganizationArchiveRepository
from closure.schemas import ArchiveSnapshot
from models.base import utc_now
from models.organization_archive import ArchiveStatus, OrganizationArchive


@pytest.fixture
def task_sessions(db_session, monkeypatch):
    """Make tasks open sessions on the test database."""
    monkeypatch.setattr(
        closure_tasks,
        "SessionLocal",
        sessionmaker(autocommit=False, autoflush=False, bind=db_session.get_bind()),
    )


def _archive(db_session, closed_days_ago):
    archive = OrganizationArchiveRepository(db_session).create(
        organization_id=uuid4(),
        organization_name="Closed Studio",
        owner_id=uuid4(),
        retention_days=30,
        snapshot=ArchiveSnapshot(),
        closed_at=utc_now() - timedelta(days=closed_days_ago),
    )
    db_session.commit()
    return archive.id


class TestPurgeExpiredArchivesTask:

    def test_purges_expired_archives(self, db_session, task_sessions):
        expired_id = _archive(db_session, closed_days_ago=40)
        fresh_id = _archive(db_session, closed_days_ago=1)

        result = closure_tasks.purge_expired_archives_task()

        assert result["status"] == "completed"
        assert result["archives_found"] == 1
        assert result["archives_purged"] == 1
        assert result["has_errors"] is False

        db_session.expire_all()
        assert db_session.get(OrganizationArchive, expired_id).status == ArchiveStatus.PURGED.value
        assert db_session.get(OrganizationArchive, fresh_id).status == ArchiveStatus.ACTIVE.value

    def test_service_error_returns_failed_status(self, db_session, task_sessions, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("registry misconfigured")

        monkeypatch.setattr(closure_tasks, "build_default_registry", explode)

        result = closure_tasks.purge_expired_archives_task()

        assert result["status"] == "failed"
        assert result["error"] == "registry misconfigured"


class TestArchiveExpiryNoticesTask:

    def test_sends_notices(self, db_session, task_sessions):
        _archive(db_session, closed_days_ago=25)

        result = closure_tasks.archive_expiry_notices_task()

        assert result["status"] == "completed"
        assert result["notified"] == {"7": 1, "1": 0}
        assert result["total_notified"] == 1
        assert result["errors"] == 0

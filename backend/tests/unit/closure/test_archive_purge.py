"""Unit tests for purging expired archives

Tests cover:
- Only active archives past expires_at are purged
- Module failures leave the archive active for the next run
- An archive flipped by an overlapping run is skipped
- Batch limit
"""

import pytest
from datetime import timedelta

from closure.checkers import build_default_registry
from closure.ports import ClosureChecker
from closure.schemas import ClosureCheckResult
from closure.service import OrganizationClosureService
from models.audit_log import AuditLog
from models.base import utc_now
from models.org import Org
from models.organization_archive import ArchivedDocument, ArchiveStatus, OrganizationArchive
from models.user import User


class FailingDeleteChecker(ClosureChecker):
    module_id = "flaky"
    module_name = "Flaky"

    def check(self, organization_id):
        return ClosureCheckResult(module_id=self.module_id)

    def archive(self, organization_id, archive_id):
        pass

    def delete_archived(self, archive_id):
        raise RuntimeError("storage unavailable")


@pytest.fixture
def closed_org_archive(service, db_session, org, owner, project, make_document):
    """Archive of an organization closed just now (30-day retention)."""
    make_document(project, size_bytes=1024)
    result = service.initiate_closing(org.id, owner.id)
    return db_session.get(OrganizationArchive, result.archive_id)


def _after_expiry():
    return utc_now() + timedelta(days=31)


class TestPurgeExpired:

    def test_nothing_expired_yet(self, service, closed_org_archive):
        stats = service.purge_expired()

        assert stats.archives_found == 0
        assert stats.archives_purged == 0

    def test_expired_archive_purged(self, service, db_session, closed_org_archive):
        archive_id = closed_org_archive.id

        stats = service.purge_expired(now=_after_expiry())

        assert stats.archives_found == 1
        assert stats.archives_purged == 1
        assert stats.has_errors is False

        archive = db_session.get(OrganizationArchive, archive_id)
        assert archive.status == ArchiveStatus.PURGED.value
        assert archive.purged_at is not None
        assert db_session.query(ArchivedDocument).filter_by(archive_id=archive_id).count() == 0

        entry = db_session.query(AuditLog).filter_by(action="ORG_ARCHIVE_PURGED").one()
        assert entry.entity_id == archive_id
        assert entry.actor_id is None

    def test_second_run_finds_nothing(self, service, closed_org_archive):
        service.purge_expired(now=_after_expiry())

        stats = service.purge_expired(now=_after_expiry())

        assert stats.archives_found == 0

    def test_module_failure_leaves_archive_active(self, db_session, org, owner, project, make_document):
        make_document(project)
        registry = build_default_registry(db_session)
        registry.register(FailingDeleteChecker())
        service = OrganizationClosureService(db_session, registry)
        archive_id = service.initiate_closing(org.id, owner.id).archive_id

        stats = service.purge_expired(now=_after_expiry())

        assert stats.archives_failed == 1
        assert stats.has_errors is True
        assert stats.failed_modules == {str(archive_id): ["flaky"]}

        archive = db_session.get(OrganizationArchive, archive_id)
        assert archive.status == ArchiveStatus.ACTIVE.value
        # Deletions of the healthy modules were rolled back with the archive
        assert db_session.query(ArchivedDocument).filter_by(archive_id=archive_id).count() == 1

    def test_archive_purged_by_overlapping_run_is_skipped(self, service, db_session, closed_org_archive):
        original = service.registry.delete_archived_all

        def delete_then_purged_elsewhere(archive_id):
            failures = original(archive_id)
            db_session.query(OrganizationArchive).filter(
                OrganizationArchive.id == archive_id
            ).update({OrganizationArchive.status: ArchiveStatus.PURGED.value}, synchronize_session=False)
            return failures

        service.registry.delete_archived_all = delete_then_purged_elsewhere

        stats = service.purge_expired(now=_after_expiry())

        assert stats.archives_skipped == 1
        assert stats.archives_purged == 0
        assert db_session.query(AuditLog).filter_by(action="ORG_ARCHIVE_PURGED").count() == 0

    def test_limit(self, service, db_session, closed_org_archive):
        second_owner = User(email="second@test.com", name="Second Owner")
        db_session.add(second_owner)
        db_session.flush()
        second = Org(name="Second", slug="second", owner_id=second_owner.id)
        db_session.add(second)
        db_session.commit()
        service.initiate_closing(second.id, second_owner.id)

        stats = service.purge_expired(now=_after_expiry(), limit=1)

        assert stats.archives_found == 1
        assert db_session.query(OrganizationArchive).filter_by(
            status=ArchiveStatus.ACTIVE.value
        ).count() == 1

"""Unit tests for archive expiry notices"""

from datetime import timedelta
from uuid import uuid4

from closure.notifications import ArchiveNotifier, expiry_notice_title, send_expiry_notifications
from closure.repository import OrganizationArchiveRepository
from closure.schemas import ArchiveSnapshot
from models.base import utc_now


class RecordingNotifier(ArchiveNotifier):
    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def notify(self, archive, days_left):
        if archive.organization_name in self.fail_for:
            raise RuntimeError("mail server down")
        self.sent.append((archive.organization_name, days_left))


def _archive(db_session, name, closed_days_ago, retention_days=30):
    archive = OrganizationArchiveRepository(db_session).create(
        organization_id=uuid4(),
        organization_name=name,
        owner_id=uuid4(),
        retention_days=retention_days,
        snapshot=ArchiveSnapshot(),
        closed_at=utc_now() - timedelta(days=closed_days_ago),
    )
    db_session.commit()
    return archive


class TestExpiryNoticeTitle:

    def test_tomorrow(self):
        assert expiry_notice_title(1) == "Архив будет удалён завтра"

    def test_days(self):
        assert expiry_notice_title(7) == "Архив будет удалён через 7 дней"


class TestSendExpiryNotifications:

    def test_notices_per_lead_time(self, db_session):
        _archive(db_session, "Expires in 5 days", closed_days_ago=25)
        _archive(db_session, "Expires in 12 hours", closed_days_ago=29.5)
        _archive(db_session, "Expires in 20 days", closed_days_ago=10)
        notifier = RecordingNotifier()

        stats = send_expiry_notifications(db_session, notifier=notifier, lead_days=(7, 1))

        assert stats.notified == {7: 2, 1: 1}
        assert stats.total_notified == 3
        assert ("Expires in 12 hours", 1) in notifier.sent
        assert ("Expires in 20 days", 7) not in notifier.sent

    def test_expired_archives_not_notified(self, db_session):
        _archive(db_session, "Already expired", closed_days_ago=31)

        stats = send_expiry_notifications(db_session, notifier=RecordingNotifier(), lead_days=(7,))

        assert stats.total_notified == 0

    def test_failing_notice_does_not_stop_others(self, db_session):
        _archive(db_session, "Broken", closed_days_ago=25)
        _archive(db_session, "Fine", closed_days_ago=26)
        notifier = RecordingNotifier(fail_for={"Broken"})

        stats = send_expiry_notifications(db_session, notifier=notifier, lead_days=(7,))

        assert stats.errors == 1
        assert stats.notified == {7: 1}
        assert notifier.sent == [("Fine", 7)]

    def test_default_notifier_logs(self, db_session):
        _archive(db_session, "Expires soon", closed_days_ago=29.5)

        stats = send_expiry_notifications(db_session, lead_days=(1,))

        assert stats.notified == {1: 1}

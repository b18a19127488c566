"""Unit tests for the Celery beat schedule"""

from celery_app import celery_app


class TestBeatSchedule:

    def test_purge_runs_daily(self):
        entry = celery_app.conf.beat_schedule["closure-purge-expired-daily"]

        assert entry["task"] == "closure.purge_expired"
        assert entry["schedule"].hour == {2}
        assert entry["schedule"].minute == {0}

    def test_expiry_notices_scheduled(self):
        entry = celery_app.conf.beat_schedule["closure-archive-expiry-notices-daily"]

        assert entry["task"] == "closure.archive_expiry_notices"

    def test_tasks_module_included(self):
        assert "closure.tasks" in celery_app.conf.include

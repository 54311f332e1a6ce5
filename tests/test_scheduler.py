"""Tests for the periodic sync scheduler."""

import logging
import threading

import pytest

from notegit.services.scheduler import SyncScheduler


class TestSyncScheduler:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            SyncScheduler(lambda: None, 0)

    def test_trigger_runs_job(self):
        calls = []
        scheduler = SyncScheduler(lambda: calls.append(1), 60)

        assert scheduler.trigger() is True
        assert calls == [1]
        assert scheduler.runs == 1

    def test_overlapping_tick_is_skipped(self):
        started = threading.Event()
        release = threading.Event()

        def slow_job():
            started.set()
            release.wait(5)

        scheduler = SyncScheduler(slow_job, 60)
        worker = threading.Thread(target=scheduler.trigger)
        worker.start()
        assert started.wait(5)

        assert scheduler.is_running is True
        assert scheduler.trigger() is False
        assert scheduler.skipped_runs == 1

        release.set()
        worker.join(5)
        assert scheduler.is_running is False
        assert scheduler.runs == 1

    def test_job_errors_are_logged_not_raised(self, caplog):
        def broken():
            raise RuntimeError("boom")

        scheduler = SyncScheduler(broken, 60)
        with caplog.at_level(logging.ERROR):
            assert scheduler.trigger() is True

        assert "Sync run failed: boom" in caplog.text
        # The lock is released so the next tick runs
        assert scheduler.trigger() is True

    def test_timer_fires_until_stopped(self):
        fired = threading.Event()
        scheduler = SyncScheduler(fired.set, 0.01)

        scheduler.start()
        try:
            assert fired.wait(5)
        finally:
            scheduler.stop()

        assert scheduler.wait(0) is True
        assert scheduler.runs >= 1

    def test_stop_before_first_tick(self):
        calls = []
        scheduler = SyncScheduler(lambda: calls.append(1), 30)
        scheduler.start()
        scheduler.stop()

        assert scheduler.wait(0.05) is True
        assert calls == []

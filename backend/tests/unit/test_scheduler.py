"""Unit tests for the sync scheduler."""

import threading
from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import pytest

from config import settings
from scheduler import DAILY_JOB_ID, WEEKLY_JOB_ID, SyncScheduler
from services.balance_service import ReconcileResult
from services.sync_service import SyncInProgressError, SyncOrchestrator, SyncRunResult
from services.transaction_import_service import ImportResult


@pytest.fixture
def fake_session_scope(db):
    @contextmanager
    def scope():
        yield db

    return scope


class TestRunJob:
    def test_runs_cadence_with_session(self, db, fake_session_scope):
        orchestrator = MagicMock()
        orchestrator.run_cadence.return_value = SyncRunResult(cadence="daily", users_processed=2)
        scheduler = SyncScheduler(
            orchestrator_factory=lambda: orchestrator,
            session_factory=fake_session_scope,
        )

        result = scheduler.run_job("daily")

        orchestrator.run_cadence.assert_called_once_with(
            db, "daily", wait=True, lock_timeout=settings.SYNC_LOCK_TIMEOUT_SECONDS
        )
        assert result.users_processed == 2

    def test_swallows_unexpected_errors(self, fake_session_scope):
        orchestrator = MagicMock()
        orchestrator.run_cadence.side_effect = RuntimeError("database is gone")
        scheduler = SyncScheduler(
            orchestrator_factory=lambda: orchestrator,
            session_factory=fake_session_scope,
        )

        assert scheduler.run_job("weekly") is None

    def test_gives_up_when_lock_never_frees(self, fake_session_scope):
        orchestrator = MagicMock()
        orchestrator.run_cadence.side_effect = SyncInProgressError("busy")
        scheduler = SyncScheduler(
            orchestrator_factory=lambda: orchestrator,
            session_factory=fake_session_scope,
        )

        assert scheduler.run_job("daily") is None


class TestOverlappingCadences:
    """The daily and weekly triggers share an hour; both batches must run."""

    @pytest.fixture
    def release_lock(self):
        yield
        if SyncOrchestrator._sync_lock.locked():
            SyncOrchestrator._sync_lock.release()

    def test_weekly_batch_waits_for_running_daily_batch(
        self, user, other_user, fake_session_scope, release_lock
    ):
        daily_started = threading.Event()
        finish_daily = threading.Event()
        synced: list[str] = []

        def reconcile(db, user_id, today=None):
            synced.append(user_id)
            if user_id == user.id:
                daily_started.set()
                finish_daily.wait(timeout=5)
            return ReconcileResult()

        reconciler = MagicMock()
        reconciler.reconcile.side_effect = reconcile
        importer = MagicMock()
        importer.import_transactions.return_value = ImportResult()
        scheduler = SyncScheduler(
            orchestrator_factory=lambda: SyncOrchestrator(reconciler=reconciler, importer=importer),
            session_factory=fake_session_scope,
        )
        results = {}

        def run(cadence):
            results[cadence] = scheduler.run_job(cadence)

        daily = threading.Thread(target=run, args=("daily",))
        daily.start()
        assert daily_started.wait(timeout=5)

        weekly = threading.Thread(target=run, args=("weekly",))
        weekly.start()
        weekly.join(timeout=0.2)
        assert weekly.is_alive()

        finish_daily.set()
        daily.join(timeout=5)
        weekly.join(timeout=5)

        assert results["daily"].users_processed == 1
        assert results["weekly"] is not None
        assert results["weekly"].users_processed == 1
        assert synced == [user.id, other_user.id]

    def test_scheduled_batch_waits_for_manual_sync(self, user, fake_session_scope, release_lock):
        reconciler = MagicMock()
        reconciler.reconcile.return_value = ReconcileResult()
        importer = MagicMock()
        importer.import_transactions.return_value = ImportResult()
        scheduler = SyncScheduler(
            orchestrator_factory=lambda: SyncOrchestrator(reconciler=reconciler, importer=importer),
            session_factory=fake_session_scope,
        )
        SyncOrchestrator._sync_lock.acquire()
        releaser = threading.Timer(0.2, SyncOrchestrator._sync_lock.release)
        releaser.start()

        result = scheduler.run_job("daily")

        releaser.join()
        assert result is not None
        assert result.users_processed == 1


class TestLifecycle:
    def test_start_registers_daily_and_weekly_jobs(self):
        scheduler = SyncScheduler()
        with patch.object(scheduler.scheduler, "start") as mock_start:
            scheduler.start()

        jobs = {job.id: job for job in scheduler.scheduler.get_jobs()}
        assert set(jobs) == {DAILY_JOB_ID, WEEKLY_JOB_ID}
        assert jobs[DAILY_JOB_ID].args == ("daily",)
        assert jobs[WEEKLY_JOB_ID].args == ("weekly",)
        assert jobs[DAILY_JOB_ID].max_instances == 1
        assert jobs[WEEKLY_JOB_ID].coalesce is True
        mock_start.assert_called_once()

    def test_start_and_stop(self):
        scheduler = SyncScheduler()
        scheduler.start()
        try:
            assert scheduler.running is True
        finally:
            scheduler.stop()
        assert scheduler.running is False

    def test_stop_when_not_started_is_noop(self):
        SyncScheduler().stop()

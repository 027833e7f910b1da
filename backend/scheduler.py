"""Process-wide scheduler for the daily and weekly sync batches."""

import logging
from collections.abc import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger

from config import settings
from database import session_scope
from services.sync_service import SyncInProgressError, SyncOrchestrator, SyncRunResult

logger = logging.getLogger(__name__)

DAILY_JOB_ID = "sync_daily"
WEEKLY_JOB_ID = "sync_weekly"


class SyncScheduler:
    """Owns the two named sync triggers and their lifecycle.

    ``stop()`` waits for an in-flight batch to finish so the caller can
    safely dispose of the database engine afterwards.
    """

    def __init__(
        self,
        orchestrator_factory: Callable[[], SyncOrchestrator] = SyncOrchestrator,
        session_factory=session_scope,
    ) -> None:
        self.scheduler = BackgroundScheduler(timezone=settings.SCHEDULER_TIMEZONE)
        self._orchestrator_factory = orchestrator_factory
        self._session_factory = session_factory

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def run_job(self, cadence: str) -> SyncRunResult | None:
        """Run one cadence batch; never raises.

        The batch queues behind any running sync (the other cadence or a
        manual sync) for up to ``SYNC_LOCK_TIMEOUT_SECONDS``.
        """
        logger.info("scheduler_run: cadence=%s", cadence)
        try:
            with self._session_factory() as db:
                result = self._orchestrator_factory().run_cadence(
                    db,
                    cadence,
                    wait=True,
                    lock_timeout=settings.SYNC_LOCK_TIMEOUT_SECONDS,
                )
        except SyncInProgressError:
            logger.error(
                "scheduler_run: cadence=%s skipped, sync lock not released within %ss",
                cadence, settings.SYNC_LOCK_TIMEOUT_SECONDS,
            )
            return None
        except Exception:
            logger.error("scheduler_run: cadence=%s failed", cadence, exc_info=True)
            return None

        logger.info(
            "scheduler_run: cadence=%s users_processed=%d failed=%d",
            cadence, result.users_processed, len(result.failed_user_ids),
        )
        return result

    def start(self) -> None:
        trigger = CronTrigger(hour=settings.SYNC_HOUR, minute=0)
        self.scheduler.add_job(
            self.run_job,
            trigger,
            args=["daily"],
            id=DAILY_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )

        trigger = CronTrigger(day_of_week=settings.SYNC_WEEKLY_DAY, hour=settings.SYNC_HOUR, minute=0)
        self.scheduler.add_job(
            self.run_job,
            trigger,
            args=["weekly"],
            id=WEEKLY_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            misfire_grace_time=3600,
        )

        self.scheduler.start()
        logger.info(
            "Scheduler started: daily %02d:00, weekly %s %02d:00 (%s)",
            settings.SYNC_HOUR, settings.SYNC_WEEKLY_DAY, settings.SYNC_HOUR,
            settings.SCHEDULER_TIMEZONE,
        )

    def stop(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=True)
            logger.info("Scheduler stopped")

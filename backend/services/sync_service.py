"""Sync service - drives balance reconciliation and transaction import per user."""

import logging
import threading
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from integrations.aggregator_protocol import AggregatorClient
from models import User
from services.balance_service import BalanceReconciler, ReconcileResult
from services.transaction_import_service import ImportResult, TransactionImporter

logger = logging.getLogger(__name__)

SCHEDULED_CADENCES = ("daily", "weekly")


class SyncInProgressError(Exception):
    """Raised when a sync is requested while another one is running."""


@dataclass
class UserSyncResult:
    """Outcome of syncing one user."""

    user_id: str
    balances: ReconcileResult
    transactions: ImportResult


@dataclass
class SyncRunResult:
    """Outcome of one cadence batch."""

    cadence: str
    users_processed: int = 0
    failed_user_ids: list[str] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: datetime | None = None


class SyncOrchestrator:
    """Runs sync for every user on a cadence, one user at a time."""

    # Class-level lock shared across all instances to prevent concurrent syncs.
    # This works for a single-process deployment with one scheduler. For
    # multi-worker deployments, a distributed lock would be required.
    _sync_lock = threading.Lock()

    def __init__(
        self,
        client: Optional[AggregatorClient] = None,
        reconciler: Optional[BalanceReconciler] = None,
        importer: Optional[TransactionImporter] = None,
    ):
        """Initialize with optional collaborators for dependency injection.

        Args:
            client: Aggregator client shared by the default reconciler and
                    importer. If None, each creates a PlaidClient on first use.
            reconciler: Balance reconciler override.
            importer: Transaction importer override.
        """
        self.reconciler = reconciler or BalanceReconciler(client=client)
        self.importer = importer or TransactionImporter(client=client)

    @classmethod
    def is_sync_in_progress(cls) -> bool:
        """Check if a sync operation is currently in progress."""
        acquired = cls._sync_lock.acquire(blocking=False)
        if acquired:
            cls._sync_lock.release()
            return False
        return True

    @staticmethod
    def users_for_cadence(db: Session, cadence: str) -> list[str]:
        """Return IDs of users whose sync frequency equals ``cadence``."""
        rows = (
            db.query(User.id)
            .filter(User.sync_frequency == cadence)
            .order_by(User.created_at)
            .all()
        )
        return [row[0] for row in rows]

    def sync_user(
        self,
        db: Session,
        user_id: str,
        today: date | None = None,
    ) -> UserSyncResult:
        """Reconcile balances (including gap fill), then import transactions."""
        logger.info("Starting sync for user %s", user_id)
        balances = self.reconciler.reconcile(db, user_id, today=today)
        transactions = self.importer.import_transactions(db, user_id, today=today)
        logger.info("Finished sync for user %s", user_id)
        return UserSyncResult(user_id=user_id, balances=balances, transactions=transactions)

    def sync_single_user(
        self,
        db: Session,
        user_id: str,
        today: date | None = None,
    ) -> UserSyncResult:
        """Sync one user on demand, refusing to overlap a running sync.

        Raises:
            SyncInProgressError: If another sync holds the lock.
        """
        if not self._sync_lock.acquire(blocking=False):
            raise SyncInProgressError("Sync already in progress")
        try:
            return self.sync_user(db, user_id, today=today)
        finally:
            self._sync_lock.release()

    def run_cadence(
        self,
        db: Session,
        cadence: str,
        today: date | None = None,
        wait: bool = False,
        lock_timeout: float | None = None,
    ) -> SyncRunResult:
        """Sync every user whose preference matches ``cadence``.

        A failure for one user is logged and the batch moves on to the next
        user.

        Args:
            wait: Queue behind a running sync instead of refusing.  Scheduled
                  batches wait so the daily and weekly cadences both run when
                  their triggers coincide.
            lock_timeout: Seconds to wait when ``wait`` is set (None waits
                          indefinitely).

        Raises:
            ValueError: If ``cadence`` is not a scheduled cadence.
            SyncInProgressError: If another sync holds the lock (and either
                ``wait`` is False or ``lock_timeout`` expired).
        """
        if cadence not in SCHEDULED_CADENCES:
            raise ValueError(f"Unknown sync cadence: {cadence!r}")

        if wait:
            acquired = self._sync_lock.acquire(
                timeout=-1 if lock_timeout is None else lock_timeout
            )
        else:
            acquired = self._sync_lock.acquire(blocking=False)
        if not acquired:
            raise SyncInProgressError("Sync already in progress")

        result = SyncRunResult(cadence=cadence)
        try:
            logger.info("Running %s sync...", cadence)
            user_ids = self.users_for_cadence(db, cadence)

            for user_id in user_ids:
                try:
                    self.sync_user(db, user_id, today=today)
                except Exception:
                    db.rollback()
                    logger.error("Error syncing user %s", user_id, exc_info=True)
                    result.failed_user_ids.append(user_id)
                result.users_processed += 1

            result.finished_at = datetime.now(timezone.utc)
            logger.info(
                "%s sync completed for %d users (%d failed)",
                cadence.capitalize(), result.users_processed, len(result.failed_user_ids),
            )
            return result
        finally:
            self._sync_lock.release()

"""Balance service - daily balance snapshots and forward-filling.

``BalanceReconciler`` writes one fresh snapshot per active account per day
from the aggregator's current balances.  ``GapFiller`` then carries the
last known balance forward into any day that has no snapshot so the net
worth chart has a dense daily series.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from integrations.aggregator_protocol import AggregatorClient
from models import Account, BalanceSnapshot, Institution
from models.balance_snapshot import SOURCE_FORWARD_FILL, SOURCE_PLAID
from models.institution import INSTITUTION_ACTIVE, INSTITUTION_ERROR
from services.clock import sync_today
from services.token_crypto import decrypt_token

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of one user's balance reconciliation."""

    snapshots_created: int = 0
    snapshots_upgraded: int = 0
    snapshots_existing: int = 0
    forward_filled: int = 0
    failed_institution_ids: list[str] = field(default_factory=list)


def get_active_institutions(db: Session, user_id: str) -> list[Institution]:
    """Return the user's institutions with status ``active``, oldest first."""
    return (
        db.query(Institution)
        .filter(
            Institution.user_id == user_id,
            Institution.status == INSTITUTION_ACTIVE,
        )
        .order_by(Institution.created_at)
        .all()
    )


def active_accounts_by_provider_id(institution: Institution) -> dict[str, Account]:
    """Map provider account ID -> active local Account for an institution."""
    return {
        account.plaid_account_id: account
        for account in institution.accounts
        if account.is_active
    }


class GapFiller:
    """Inserts carried-forward snapshots for days with no balance data."""

    def fill(self, db: Session, user_id: str, today: date | None = None) -> int:
        """Forward-fill every active account up to (not including) today.

        For each active account with at least one snapshot before ``today``,
        every later day before ``today`` gets a ``forward_fill`` snapshot
        with that balance and ``is_stale=True``.  Today's snapshot (written
        by the reconciler) does not hide gaps before it.  Existing
        snapshots are never touched, and today is left to the reconciler.

        Returns:
            Number of snapshots written.
        """
        today = today or sync_today()
        accounts = (
            db.query(Account)
            .filter(Account.user_id == user_id, Account.is_active.is_(True))
            .all()
        )

        written = 0
        for account in accounts:
            latest = (
                db.query(BalanceSnapshot)
                .filter(
                    BalanceSnapshot.user_id == user_id,
                    BalanceSnapshot.account_id == account.id,
                    BalanceSnapshot.date < today,
                )
                .order_by(BalanceSnapshot.date.desc())
                .first()
            )
            if latest is None:
                continue

            fill_date = latest.date + timedelta(days=1)
            if fill_date >= today:
                continue

            existing_dates = {
                row[0]
                for row in db.query(BalanceSnapshot.date)
                .filter(
                    BalanceSnapshot.user_id == user_id,
                    BalanceSnapshot.account_id == account.id,
                    BalanceSnapshot.date >= fill_date,
                    BalanceSnapshot.date < today,
                )
                .all()
            }

            account_written = 0
            while fill_date < today:
                if fill_date not in existing_dates:
                    db.add(BalanceSnapshot(
                        user_id=user_id,
                        account_id=account.id,
                        date=fill_date,
                        balance=latest.balance,
                        source=SOURCE_FORWARD_FILL,
                        is_stale=True,
                    ))
                    account_written += 1
                fill_date += timedelta(days=1)

            db.commit()
            if account_written:
                logger.info(
                    "Forward-filled %d day(s) for account %s from %s",
                    account_written, account.id, latest.date,
                )
            written += account_written

        return written


class BalanceReconciler:
    """Fetches current balances and records today's snapshot per account."""

    def __init__(
        self,
        client: Optional[AggregatorClient] = None,
        gap_filler: Optional[GapFiller] = None,
    ):
        """Initialize with optional collaborators for dependency injection.

        Args:
            client: Aggregator client. If None, a PlaidClient is created
                    on first use.
            gap_filler: Gap filler run after reconciliation.
        """
        self._client = client
        self.gap_filler = gap_filler or GapFiller()

    @property
    def client(self) -> AggregatorClient:
        """Get the aggregator client, creating the default if not provided."""
        if self._client is None:
            from integrations.plaid_client import PlaidClient

            self._client = PlaidClient()
        return self._client

    def reconcile(
        self,
        db: Session,
        user_id: str,
        today: date | None = None,
    ) -> ReconcileResult:
        """Record today's balance for every active account of a user.

        An institution whose fetch fails is marked ``error`` and skipped;
        the others are still processed and the gap filler always runs
        afterwards.  Failures outside a single institution are logged and
        swallowed so callers always get a result back.
        """
        today = today or sync_today()
        result = ReconcileResult()

        try:
            for institution in get_active_institutions(db, user_id):
                self._reconcile_institution(db, user_id, institution, today, result)

            result.forward_filled = self.gap_filler.fill(db, user_id, today)
        except Exception:
            db.rollback()
            logger.error(
                "Balance reconciliation failed for user %s", user_id, exc_info=True
            )

        logger.info(
            "Balances for user %s: %d created, %d upgraded, %d existing, "
            "%d forward-filled, %d institution(s) failed",
            user_id,
            result.snapshots_created,
            result.snapshots_upgraded,
            result.snapshots_existing,
            result.forward_filled,
            len(result.failed_institution_ids),
        )
        return result

    def _reconcile_institution(
        self,
        db: Session,
        user_id: str,
        institution: Institution,
        today: date,
        result: ReconcileResult,
    ) -> None:
        # Cache for error handler: still readable after a rollback
        institution_id = institution.id
        institution_name = institution.institution_name or "Unknown"

        try:
            accounts = active_accounts_by_provider_id(institution)
            access_token = decrypt_token(institution.access_token_encrypted)
            balances = self.client.get_current_balances(access_token)

            for balance in balances:
                account = accounts.get(balance.account_id)
                if account is None:
                    logger.debug(
                        "Ignoring balance for unknown account %s (%s)",
                        balance.account_id, institution_name,
                    )
                    continue

                amount = balance.current if balance.current is not None else Decimal("0")
                outcome = self._record_snapshot(db, user_id, account.id, today, amount)
                if outcome == "created":
                    result.snapshots_created += 1
                elif outcome == "upgraded":
                    result.snapshots_upgraded += 1
                else:
                    result.snapshots_existing += 1

            db.commit()

        except Exception as e:
            db.rollback()
            logger.warning(
                "Balance sync failed for institution %s (%s), marking as error: %s",
                institution_name, institution_id, e,
            )
            failed = db.get(Institution, institution_id)
            if failed is not None:
                failed.status = INSTITUTION_ERROR
                db.commit()
            result.failed_institution_ids.append(institution_id)

    @staticmethod
    def _record_snapshot(
        db: Session,
        user_id: str,
        account_id: str,
        snapshot_date: date,
        balance: Decimal,
    ) -> str:
        """Write the day's real snapshot if none exists.

        A real snapshot always wins over a forward-filled one: an existing
        ``forward_fill`` row for the day is upgraded in place.  An existing
        real snapshot is left as is.

        Returns:
            ``"created"``, ``"upgraded"`` or ``"exists"``.
        """
        existing = (
            db.query(BalanceSnapshot)
            .filter(
                BalanceSnapshot.user_id == user_id,
                BalanceSnapshot.account_id == account_id,
                BalanceSnapshot.date == snapshot_date,
            )
            .first()
        )
        if existing is not None:
            if existing.source == SOURCE_FORWARD_FILL:
                existing.balance = balance
                existing.source = SOURCE_PLAID
                existing.is_stale = False
                return "upgraded"
            return "exists"

        try:
            with db.begin_nested():
                db.add(BalanceSnapshot(
                    user_id=user_id,
                    account_id=account_id,
                    date=snapshot_date,
                    balance=balance,
                    source=SOURCE_PLAID,
                    is_stale=False,
                ))
        except IntegrityError:
            # Another writer got there first; the unique constraint keeps one row
            logger.info(
                "Snapshot for account %s on %s already written", account_id, snapshot_date
            )
            return "exists"
        return "created"

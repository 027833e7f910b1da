"""Transaction import service - appends new aggregator transactions.

Sync is an append-only merge keyed on the provider transaction ID:
already-imported transactions are never re-fetched into the database or
overwritten, so user edits to category and merchant survive every sync.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from config import settings
from integrations.aggregator_protocol import AggregatorClient, AggregatorTransaction
from models import Account, Institution, Transaction
from services.balance_service import active_accounts_by_provider_id, get_active_institutions
from services.categories import normalize_category
from services.clock import sync_today
from services.token_crypto import decrypt_token
from services.transfer_detector import (
    TransactionSummary,
    TransferRules,
    detect_transfer,
    rules_from_settings,
)

logger = logging.getLogger(__name__)


def to_local_amount(aggregator_amount: Decimal) -> Decimal:
    """Convert an aggregator amount to this app's sign convention.

    Plaid reports money leaving the account as positive and money coming
    in as negative.  Locally, inflows are positive and outflows negative.
    """
    return -Decimal(aggregator_amount)


@dataclass
class ImportResult:
    """Outcome of one user's transaction import."""

    imported: int = 0
    duplicates: int = 0
    unmatched: int = 0
    transfers: int = 0
    failed_institution_ids: list[str] = field(default_factory=list)


def load_transaction_summaries(db: Session, user_id: str) -> list[TransactionSummary]:
    """Load the user's stored transactions as transfer-detection summaries."""
    rows = (
        db.query(
            Transaction.amount,
            Transaction.date,
            Transaction.account_id,
            Transaction.name,
        )
        .filter(Transaction.user_id == user_id)
        .all()
    )
    return [
        TransactionSummary(
            amount=row.amount,
            date=row.date,
            account_id=row.account_id,
            name=row.name,
        )
        for row in rows
    ]


class TransactionImporter:
    """Pulls the trailing transaction window per institution and stores new rows."""

    def __init__(
        self,
        client: Optional[AggregatorClient] = None,
        rules: Optional[TransferRules] = None,
        window_days: int | None = None,
    ):
        self._client = client
        self.rules = rules or rules_from_settings()
        self.window_days = window_days if window_days is not None else settings.TRANSACTION_WINDOW_DAYS

    @property
    def client(self) -> AggregatorClient:
        """Get the aggregator client, creating the default if not provided."""
        if self._client is None:
            from integrations.plaid_client import PlaidClient

            self._client = PlaidClient()
        return self._client

    def import_transactions(
        self,
        db: Session,
        user_id: str,
        today: date | None = None,
    ) -> ImportResult:
        """Import new transactions for every active institution of a user.

        The window is ``[today - window_days, today]``.  A failing
        institution is logged and skipped; it never aborts the import for
        the user's other institutions.
        """
        today = today or sync_today()
        start_date = today - timedelta(days=self.window_days)
        result = ImportResult()

        try:
            for institution in get_active_institutions(db, user_id):
                self._import_institution(db, user_id, institution, start_date, today, result)
        except Exception:
            db.rollback()
            logger.error("Transaction import failed for user %s", user_id, exc_info=True)

        logger.info(
            "Transactions for user %s: %d imported (%d transfers), "
            "%d duplicates skipped, %d unmatched, %d institution(s) failed",
            user_id,
            result.imported,
            result.transfers,
            result.duplicates,
            result.unmatched,
            len(result.failed_institution_ids),
        )
        return result

    def _import_institution(
        self,
        db: Session,
        user_id: str,
        institution: Institution,
        start_date: date,
        end_date: date,
        result: ImportResult,
    ) -> None:
        institution_id = institution.id
        institution_name = institution.institution_name or "Unknown"

        try:
            accounts = active_accounts_by_provider_id(institution)
            access_token = decrypt_token(institution.access_token_encrypted)
            fetched = self.client.get_transactions(access_token, start_date, end_date)

            # Comparison set is loaded once per institution
            existing_summaries = load_transaction_summaries(db, user_id)

            fetched_ids = [t.transaction_id for t in fetched]
            seen_ids = set(
                row[0]
                for row in db.query(Transaction.plaid_transaction_id)
                .filter(Transaction.plaid_transaction_id.in_(fetched_ids))
                .all()
            ) if fetched_ids else set()

            new_count = 0
            for txn in fetched:
                account = accounts.get(txn.account_id)
                if account is None:
                    result.unmatched += 1
                    continue
                if txn.transaction_id in seen_ids:
                    result.duplicates += 1
                    continue

                transaction = self._build_transaction(user_id, account, txn, existing_summaries)
                db.add(transaction)
                seen_ids.add(txn.transaction_id)
                new_count += 1
                if transaction.is_transfer:
                    result.transfers += 1

            db.commit()
            result.imported += new_count
            if new_count:
                logger.info(
                    "Imported %d transaction(s) from %s (%s)",
                    new_count, institution_name, institution_id,
                )

        except Exception as e:
            db.rollback()
            logger.warning(
                "Transaction sync failed for institution %s (%s): %s",
                institution_name, institution_id, e,
            )
            result.failed_institution_ids.append(institution_id)

    def _build_transaction(
        self,
        user_id: str,
        account: Account,
        txn: AggregatorTransaction,
        existing: list[TransactionSummary],
    ) -> Transaction:
        """Classify an aggregator transaction and build the ORM row."""
        amount = to_local_amount(txn.amount)
        is_transfer = detect_transfer(
            TransactionSummary(
                amount=amount,
                date=txn.date,
                account_id=account.id,
                name=txn.name,
            ),
            existing,
            self.rules,
        )
        return Transaction(
            user_id=user_id,
            account_id=account.id,
            plaid_transaction_id=txn.transaction_id,
            amount=amount,
            date=txn.date,
            authorized_date=txn.authorized_date,
            name=txn.name,
            merchant_name=txn.merchant_name,
            original_description=txn.original_description,
            category=txn.categories[0] if txn.categories else None,
            personal_category=normalize_category(txn.categories),
            is_transfer=is_transfer,
            is_pending=False,
        )

"""Transaction service - filtered listing and user edits.

Listing goes through :class:`TransactionFilter`, a typed description of
the supported filters, which :func:`apply_transaction_filter` translates
into a SQLAlchemy query in one place.
"""

import logging
from dataclasses import dataclass
from datetime import date

from sqlalchemy import and_, or_
from sqlalchemy.orm import Query, Session, joinedload

from models import Transaction

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500

_CURSOR_SEPARATOR = "_"


@dataclass(frozen=True)
class TransactionCursor:
    """Keyset position: the (date, id) of the last row of the previous page."""

    date: date
    id: str

    def encode(self) -> str:
        return f"{self.date.isoformat()}{_CURSOR_SEPARATOR}{self.id}"

    @classmethod
    def decode(cls, value: str) -> "TransactionCursor":
        """Parse an encoded cursor.

        Raises:
            ValueError: If the cursor is malformed.
        """
        date_part, sep, id_part = value.partition(_CURSOR_SEPARATOR)
        if not sep or not id_part:
            raise ValueError(f"Invalid cursor: {value!r}")
        return cls(date=date.fromisoformat(date_part), id=id_part)

    @classmethod
    def after(cls, transaction: Transaction) -> "TransactionCursor":
        return cls(date=transaction.date, id=transaction.id)


@dataclass(frozen=True)
class TransactionFilter:
    """Filters for listing a user's transactions.

    Every field is optional.  ``category`` matches the user's category or
    the raw provider category; ``search`` matches name or merchant,
    case-insensitively.  Both may be combined.
    """

    from_date: date | None = None
    to_date: date | None = None
    account_id: str | None = None
    category: str | None = None
    search: str | None = None
    cursor: TransactionCursor | None = None
    limit: int = DEFAULT_PAGE_SIZE
    include_pending: bool = False


def apply_transaction_filter(query: Query, filt: TransactionFilter) -> Query:
    """Translate a TransactionFilter into SQLAlchemy criteria, ordering and limit."""
    if not filt.include_pending:
        query = query.filter(Transaction.is_pending.is_(False))
    if filt.from_date is not None:
        query = query.filter(Transaction.date >= filt.from_date)
    if filt.to_date is not None:
        query = query.filter(Transaction.date <= filt.to_date)
    if filt.account_id:
        query = query.filter(Transaction.account_id == filt.account_id)
    if filt.category:
        query = query.filter(
            or_(
                Transaction.personal_category == filt.category,
                Transaction.category == filt.category,
            )
        )
    if filt.search:
        pattern = f"%{filt.search}%"
        query = query.filter(
            or_(
                Transaction.name.ilike(pattern),
                Transaction.merchant_name.ilike(pattern),
            )
        )
    if filt.cursor is not None:
        query = query.filter(
            or_(
                Transaction.date < filt.cursor.date,
                and_(
                    Transaction.date == filt.cursor.date,
                    Transaction.id < filt.cursor.id,
                ),
            )
        )

    limit = max(1, min(filt.limit, MAX_PAGE_SIZE))
    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).limit(limit)


class TransactionService:
    """Service for reading and editing a user's transactions."""

    @staticmethod
    def list_transactions(
        db: Session,
        user_id: str,
        filt: TransactionFilter,
    ) -> tuple[list[Transaction], str | None]:
        """List transactions newest first.

        Returns:
            Tuple of (transactions, next_cursor).  ``next_cursor`` is set
            only when a full page was returned.
        """
        query = (
            db.query(Transaction)
            .options(joinedload(Transaction.account))
            .filter(Transaction.user_id == user_id)
        )
        transactions = apply_transaction_filter(query, filt).all()

        next_cursor = None
        if transactions and len(transactions) == max(1, min(filt.limit, MAX_PAGE_SIZE)):
            next_cursor = TransactionCursor.after(transactions[-1]).encode()
        return transactions, next_cursor

    @staticmethod
    def get_transaction(db: Session, user_id: str, transaction_id: str) -> Transaction | None:
        return (
            db.query(Transaction)
            .filter(Transaction.id == transaction_id, Transaction.user_id == user_id)
            .first()
        )

    @staticmethod
    def update_transaction(
        db: Session,
        user_id: str,
        transaction_id: str,
        *,
        fields: dict,
    ) -> Transaction | None:
        """Apply user edits. Only ``personal_category`` and ``merchant_name`` are editable.

        Args:
            fields: The explicitly-set fields of the request (an explicit
                    ``None`` clears the value).

        Returns:
            The updated Transaction, or None if not found.
        """
        transaction = TransactionService.get_transaction(db, user_id, transaction_id)
        if transaction is None:
            return None

        if "personal_category" in fields:
            transaction.personal_category = fields["personal_category"]
        if "merchant_name" in fields:
            transaction.merchant_name = fields["merchant_name"]

        db.commit()
        db.refresh(transaction)
        logger.info("Updated transaction %s", transaction.id)
        return transaction

"""Transactions API endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from models import Transaction, User
from schemas import (
    TransactionAccount,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)
from services.transaction_service import (
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    TransactionCursor,
    TransactionFilter,
    TransactionService,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


def _transaction_response(transaction: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=transaction.id,
        amount=transaction.amount,
        date=transaction.date,
        name=transaction.name,
        merchant_name=transaction.merchant_name,
        category=transaction.display_category,
        is_transfer=transaction.is_transfer,
        account=TransactionAccount(
            name=transaction.account.name,
            type=transaction.account.type,
        ),
    )


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    from_date: Optional[date] = Query(default=None, alias="from"),
    to_date: Optional[date] = Query(default=None, alias="to"),
    account_id: Optional[str] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
    cursor: Optional[str] = None,
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List non-pending transactions, newest first, one page at a time."""
    try:
        decoded_cursor = TransactionCursor.decode(cursor) if cursor else None
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid cursor")

    filt = TransactionFilter(
        from_date=from_date,
        to_date=to_date,
        account_id=account_id,
        category=category,
        search=search,
        cursor=decoded_cursor,
        limit=limit,
    )
    transactions, next_cursor = TransactionService.list_transactions(db, user.id, filt)
    return TransactionListResponse(
        transactions=[_transaction_response(t) for t in transactions],
        next_cursor=next_cursor,
    )


@router.patch("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: str,
    body: TransactionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Edit a transaction's personal category and/or merchant name."""
    transaction = TransactionService.update_transaction(
        db, user.id, transaction_id, fields=body.model_dump(exclude_unset=True)
    )
    if transaction is None:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return _transaction_response(transaction)

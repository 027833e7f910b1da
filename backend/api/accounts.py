"""Accounts API endpoints."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user
from api.helpers import get_owned_or_404
from database import get_db
from models import Account, User
from schemas import (
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    AccountWithBalance,
    BalanceHistoryResponse,
    BalanceSnapshotResponse,
)
from services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/accounts", tags=["accounts"])


@router.get("", response_model=AccountListResponse)
def list_accounts(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List active accounts with their latest balance, then manual assets."""
    rows = AccountService.list_accounts_with_balances(db, user.id)
    return AccountListResponse(accounts=[AccountWithBalance(**row) for row in rows])


@router.get("/{account_id}", response_model=BalanceHistoryResponse)
def get_balance_history(
    account_id: str,
    from_date: Optional[date] = Query(default=None, alias="from"),
    to_date: Optional[date] = Query(default=None, alias="to"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Return an account's daily balance snapshots, oldest first."""
    get_owned_or_404(db, Account, user.id, account_id, detail="Account not found")
    if from_date and to_date and from_date > to_date:
        raise HTTPException(status_code=400, detail="'from' must not be after 'to'")

    snapshots = AccountService.get_balance_history(db, user.id, account_id, from_date, to_date)
    return BalanceHistoryResponse(
        balances=[BalanceSnapshotResponse.model_validate(s) for s in snapshots]
    )


@router.patch("/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    body: AccountUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Activate or deactivate an account."""
    account = AccountService.set_active(db, user.id, account_id, body.is_active)
    if account is None:
        raise HTTPException(status_code=404, detail="Account not found")
    return account

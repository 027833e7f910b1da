"""Pydantic schemas for accounts and balance history."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class AccountWithBalance(BaseModel):
    """A linked account (or manual asset) with its current balance."""

    id: str
    name: str
    mask: Optional[str] = None
    type: str
    subtype: Optional[str] = None
    institution_name: Optional[str] = None
    institution_status: Optional[str] = None
    balance: Decimal
    last_updated: date
    is_stale: bool = False
    is_active: bool = True


class AccountListResponse(BaseModel):
    accounts: list[AccountWithBalance]


class AccountUpdate(BaseModel):
    """Request body for toggling an account."""

    is_active: bool


class AccountResponse(BaseModel):
    id: str
    name: str
    is_active: bool

    model_config = {"from_attributes": True}


class BalanceSnapshotResponse(BaseModel):
    id: str
    account_id: str
    date: date
    balance: Decimal
    source: str
    is_stale: bool

    model_config = {"from_attributes": True}


class BalanceHistoryResponse(BaseModel):
    balances: list[BalanceSnapshotResponse]

"""Pydantic schemas for transactions."""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class TransactionAccount(BaseModel):
    name: str
    type: str


class TransactionResponse(BaseModel):
    id: str
    amount: Decimal
    date: date
    name: str
    merchant_name: Optional[str] = None
    category: str
    is_transfer: bool
    account: TransactionAccount


class TransactionListResponse(BaseModel):
    transactions: list[TransactionResponse]
    next_cursor: Optional[str] = None


class TransactionUpdate(BaseModel):
    """User-editable transaction fields. Omitted fields are left unchanged."""

    personal_category: Optional[str] = None
    merchant_name: Optional[str] = None

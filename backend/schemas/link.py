"""Pydantic schemas for the Plaid Link flow."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class LinkTokenResponse(BaseModel):
    link_token: str


class ExchangeTokenRequest(BaseModel):
    public_token: str


class LinkedInstitution(BaseModel):
    id: str
    name: Optional[str] = None


class LinkedAccountResponse(BaseModel):
    id: str
    name: str
    mask: Optional[str] = None
    type: str
    subtype: Optional[str] = None
    balance: Decimal


class ExchangeTokenResponse(BaseModel):
    institution: LinkedInstitution
    accounts: list[LinkedAccountResponse]

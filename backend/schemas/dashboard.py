"""Pydantic schemas for dashboard endpoints."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel


class AccountBalancePointResponse(BaseModel):
    name: str
    type: str
    balance: Decimal

    model_config = {"from_attributes": True}


class NetWorthPointResponse(BaseModel):
    date: date
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal
    accounts: dict[str, AccountBalancePointResponse]

    model_config = {"from_attributes": True}


class NetWorthSeriesResponse(BaseModel):
    series: list[NetWorthPointResponse]
    current_net_worth: Decimal
    net_worth_change: Decimal
    total_assets: Decimal
    total_liabilities: Decimal

    model_config = {"from_attributes": True}


class SpendSummaryResponse(BaseModel):
    month: str
    total_income: Decimal
    total_spending: Decimal
    net_cash_flow: Decimal
    by_category: dict[str, Decimal]
    top_merchants: dict[str, Decimal]

    model_config = {"from_attributes": True}

"""Pydantic schemas for API request/response validation."""

from schemas.account import (
    AccountListResponse,
    AccountResponse,
    AccountUpdate,
    AccountWithBalance,
    BalanceHistoryResponse,
    BalanceSnapshotResponse,
)
from schemas.auth import LoginRequest, LoginResponse, UserResponse, UserUpdate
from schemas.dashboard import NetWorthSeriesResponse, SpendSummaryResponse
from schemas.link import (
    ExchangeTokenRequest,
    ExchangeTokenResponse,
    LinkedAccountResponse,
    LinkedInstitution,
    LinkTokenResponse,
)
from schemas.manual_asset import ManualAssetCreate, ManualAssetResponse, ManualAssetUpdate
from schemas.sync import SyncResponse
from schemas.transaction import (
    TransactionAccount,
    TransactionListResponse,
    TransactionResponse,
    TransactionUpdate,
)

__all__ = [
    "AccountListResponse",
    "AccountResponse",
    "AccountUpdate",
    "AccountWithBalance",
    "BalanceHistoryResponse",
    "BalanceSnapshotResponse",
    "ExchangeTokenRequest",
    "ExchangeTokenResponse",
    "LinkTokenResponse",
    "LinkedAccountResponse",
    "LinkedInstitution",
    "LoginRequest",
    "LoginResponse",
    "ManualAssetCreate",
    "ManualAssetResponse",
    "ManualAssetUpdate",
    "NetWorthSeriesResponse",
    "SpendSummaryResponse",
    "SyncResponse",
    "TransactionAccount",
    "TransactionListResponse",
    "TransactionResponse",
    "TransactionUpdate",
    "UserResponse",
    "UserUpdate",
]

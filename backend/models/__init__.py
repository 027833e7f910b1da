"""SQLAlchemy ORM models."""

from .account import Account
from .balance_snapshot import BalanceSnapshot
from .institution import Institution
from .manual_asset import ManualAsset
from .transaction import Transaction
from .user import User
from .utils import generate_uuid

__all__ = ["Account", "BalanceSnapshot", "Institution", "ManualAsset", "Transaction", "User", "generate_uuid"]

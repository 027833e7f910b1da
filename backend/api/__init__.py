"""API route handlers."""
from . import accounts, auth, dashboard, link, manual_assets, sync, transactions

__all__ = ["accounts", "auth", "dashboard", "link", "manual_assets", "sync", "transactions"]

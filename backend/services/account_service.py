"""Account management service."""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session, joinedload

from models import Account, BalanceSnapshot, ManualAsset

logger = logging.getLogger(__name__)


class AccountService:
    """Service for account listing, toggling and balance history."""

    @staticmethod
    def get_account(db: Session, user_id: str, account_id: str) -> Account | None:
        """Get one of the user's accounts by ID."""
        return (
            db.query(Account)
            .filter(Account.id == account_id, Account.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_latest_snapshot(db: Session, account_id: str) -> BalanceSnapshot | None:
        """Return the most recent BalanceSnapshot for an account."""
        return (
            db.query(BalanceSnapshot)
            .filter(BalanceSnapshot.account_id == account_id)
            .order_by(BalanceSnapshot.date.desc())
            .first()
        )

    @staticmethod
    def list_accounts_with_balances(db: Session, user_id: str) -> list[dict]:
        """List active linked accounts and manual assets with current balances.

        Linked accounts report their latest snapshot (or 0 and the account's
        creation time if none).  Manual assets are appended as
        ``type="manual"``, ``subtype="crypto"``.
        """
        accounts = (
            db.query(Account)
            .options(joinedload(Account.institution))
            .filter(Account.user_id == user_id, Account.is_active.is_(True))
            .order_by(Account.created_at)
            .all()
        )

        result = []
        for account in accounts:
            latest = AccountService.get_latest_snapshot(db, account.id)
            result.append({
                "id": account.id,
                "name": account.name,
                "mask": account.mask,
                "type": account.type,
                "subtype": account.subtype,
                "institution_name": account.institution.institution_name if account.institution else None,
                "institution_status": account.institution.status if account.institution else None,
                "balance": latest.balance if latest else Decimal("0"),
                "last_updated": latest.date if latest else account.created_at.date(),
                "is_stale": latest.is_stale if latest else False,
                "is_active": account.is_active,
            })

        manual_assets = (
            db.query(ManualAsset)
            .filter(ManualAsset.user_id == user_id)
            .order_by(ManualAsset.created_at.desc())
            .all()
        )
        for asset in manual_assets:
            result.append({
                "id": asset.id,
                "name": asset.name,
                "mask": None,
                "type": "manual",
                "subtype": "crypto",
                "institution_name": None,
                "institution_status": None,
                "balance": asset.current_value,
                "last_updated": asset.updated_at.date(),
                "is_stale": False,
                "is_active": True,
            })
        return result

    @staticmethod
    def set_active(db: Session, user_id: str, account_id: str, is_active: bool) -> Account | None:
        """Activate or deactivate an account. Returns None if not found."""
        account = AccountService.get_account(db, user_id, account_id)
        if account is None:
            return None
        account.is_active = is_active
        db.commit()
        db.refresh(account)
        logger.info(
            "Account %s (id=%s) %s", account.name, account.id,
            "activated" if is_active else "deactivated",
        )
        return account

    @staticmethod
    def get_balance_history(
        db: Session,
        user_id: str,
        account_id: str,
        start: date | None = None,
        end: date | None = None,
    ) -> list[BalanceSnapshot]:
        """Return the account's snapshots in ``[start, end]``, oldest first."""
        query = db.query(BalanceSnapshot).filter(
            BalanceSnapshot.user_id == user_id,
            BalanceSnapshot.account_id == account_id,
        )
        if start is not None:
            query = query.filter(BalanceSnapshot.date >= start)
        if end is not None:
            query = query.filter(BalanceSnapshot.date <= end)
        return query.order_by(BalanceSnapshot.date).all()

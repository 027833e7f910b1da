"""Link service - stores institutions and accounts after Plaid Link."""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from integrations.plaid_client import PlaidClient
from models import Account, BalanceSnapshot, Institution
from models.balance_snapshot import SOURCE_LINK
from models.institution import INSTITUTION_ACTIVE
from services.clock import sync_today
from services.token_crypto import encrypt_token

logger = logging.getLogger(__name__)

LINKABLE_ACCOUNT_TYPES = ("depository", "credit", "investment")


@dataclass
class LinkedAccount:
    account: Account
    balance: Decimal


class LinkService:
    """Service for completing the Plaid Link flow."""

    @staticmethod
    def complete_link(
        db: Session,
        client: PlaidClient,
        user_id: str,
        public_token: str,
        today: date | None = None,
    ) -> tuple[Institution, list[LinkedAccount]]:
        """Exchange a public token and persist the institution and its accounts.

        Re-linking an Item the user already has refreshes its token and sets
        it back to ``active``.  Only depository, credit and investment
        accounts are stored; each gets an initial snapshot for today.

        Returns:
            The Institution and the linked accounts with their balances
            (flushed, not committed).
        """
        today = today or sync_today()
        exchange = client.exchange_public_token(public_token)
        institution_id, institution_name = client.get_item_institution(exchange.access_token)
        remote_accounts = client.get_accounts(exchange.access_token)

        institution = (
            db.query(Institution)
            .filter(Institution.plaid_item_id == exchange.item_id)
            .first()
        )
        if institution is not None and institution.user_id != user_id:
            raise ValueError("Item is linked to a different user")

        if institution is None:
            institution = Institution(
                user_id=user_id,
                plaid_item_id=exchange.item_id,
                access_token_encrypted=encrypt_token(exchange.access_token),
                provider_institution_id=institution_id,
                institution_name=institution_name,
                status=INSTITUTION_ACTIVE,
            )
            db.add(institution)
            db.flush()
            logger.info("Created institution %s for user %s", institution_name, user_id)
        else:
            institution.access_token_encrypted = encrypt_token(exchange.access_token)
            institution.provider_institution_id = institution_id or institution.provider_institution_id
            institution.institution_name = institution_name or institution.institution_name
            institution.status = INSTITUTION_ACTIVE
            logger.info("Re-linked institution %s for user %s", institution.id, user_id)

        linked: list[LinkedAccount] = []
        for remote in remote_accounts:
            if remote.type not in LINKABLE_ACCOUNT_TYPES:
                continue

            account = (
                db.query(Account)
                .filter(
                    Account.institution_id == institution.id,
                    Account.plaid_account_id == remote.id,
                )
                .first()
            )
            if account is None:
                account = Account(
                    user_id=user_id,
                    institution_id=institution.id,
                    plaid_account_id=remote.id,
                    is_active=True,
                )
                db.add(account)
            account.name = remote.name
            account.official_name = remote.official_name
            account.mask = remote.mask
            account.type = remote.type
            account.subtype = remote.subtype
            db.flush()

            balance = remote.current_balance if remote.current_balance is not None else Decimal("0")
            existing = (
                db.query(BalanceSnapshot)
                .filter(
                    BalanceSnapshot.user_id == user_id,
                    BalanceSnapshot.account_id == account.id,
                    BalanceSnapshot.date == today,
                )
                .first()
            )
            if existing is None:
                db.add(BalanceSnapshot(
                    user_id=user_id,
                    account_id=account.id,
                    date=today,
                    balance=balance,
                    source=SOURCE_LINK,
                    is_stale=False,
                ))
            linked.append(LinkedAccount(account=account, balance=balance))

        db.flush()
        logger.info(
            "Linked %d account(s) for institution %s", len(linked), institution.id
        )
        return institution, linked

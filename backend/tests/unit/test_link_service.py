"""Tests for LinkService.complete_link."""

from datetime import date
from decimal import Decimal

import pytest

from integrations.aggregator_protocol import LinkExchangeResult
from models import Account, BalanceSnapshot, Institution
from services.link_service import LinkService
from services.token_crypto import decrypt_token
from tests.fixtures import create_institution
from tests.fixtures.mocks import SAMPLE_LINK_ACCOUNTS, MockPlaidClient

TODAY = date(2024, 3, 15)


@pytest.fixture
def link_client():
    return MockPlaidClient(accounts=SAMPLE_LINK_ACCOUNTS)


class TestCompleteLink:
    def test_creates_institution_with_encrypted_token(self, db, user, link_client):
        institution, _ = LinkService.complete_link(db, link_client, user.id, "public-sandbox-1", today=TODAY)
        db.commit()

        assert institution.plaid_item_id == "item-sandbox-new"
        assert institution.institution_name == "First Platypus Bank"
        assert institution.status == "active"
        assert institution.access_token_encrypted != "access-sandbox-new"
        assert decrypt_token(institution.access_token_encrypted) == "access-sandbox-new"

    def test_only_supported_account_types_are_stored(self, db, user, link_client):
        _, linked = LinkService.complete_link(db, link_client, user.id, "public-sandbox-1", today=TODAY)
        db.commit()

        assert [item.account.type for item in linked] == ["depository", "credit"]
        assert db.query(Account).count() == 2

    def test_initial_snapshot_per_account(self, db, user, link_client):
        LinkService.complete_link(db, link_client, user.id, "public-sandbox-1", today=TODAY)
        db.commit()

        snaps = db.query(BalanceSnapshot).order_by(BalanceSnapshot.balance).all()
        assert [s.balance for s in snaps] == [Decimal("110"), Decimal("410")]
        assert all(s.source == "link" and s.date == TODAY for s in snaps)

    def test_relink_updates_existing_institution(self, db, user, link_client):
        existing = create_institution(db, user, item_id="item-sandbox-new", status="error")

        institution, _ = LinkService.complete_link(db, link_client, user.id, "public-sandbox-2", today=TODAY)
        db.commit()

        assert institution.id == existing.id
        assert institution.status == "active"
        assert db.query(Institution).count() == 1
        assert decrypt_token(institution.access_token_encrypted) == "access-sandbox-new"

    def test_relink_same_day_does_not_duplicate_accounts_or_snapshots(self, db, user, link_client):
        LinkService.complete_link(db, link_client, user.id, "public-sandbox-1", today=TODAY)
        db.commit()
        LinkService.complete_link(db, link_client, user.id, "public-sandbox-1", today=TODAY)
        db.commit()

        assert db.query(Account).count() == 2
        assert db.query(BalanceSnapshot).count() == 2

    def test_item_of_another_user_is_rejected(self, db, user, other_user):
        create_institution(db, other_user, item_id="item-shared")
        client = MockPlaidClient(
            exchange_result=LinkExchangeResult(access_token="access-x", item_id="item-shared"),
        )

        with pytest.raises(ValueError):
            LinkService.complete_link(db, client, user.id, "public-sandbox-1", today=TODAY)

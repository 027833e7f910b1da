"""Integration tests for the manual sync endpoint."""

from decimal import Decimal

import pytest

from api.sync import get_sync_orchestrator
from integrations.aggregator_protocol import AggregatorBalance
from main import app
from models import BalanceSnapshot, Institution, Transaction
from models.institution import INSTITUTION_ERROR
from services.clock import sync_today
from services.sync_service import SyncOrchestrator
from tests.fixtures.mocks import MockPlaidClient, make_transaction


@pytest.fixture
def release_sync_lock():
    """Release the orchestrator lock if a test left it held."""
    yield
    if SyncOrchestrator._sync_lock.locked():
        SyncOrchestrator._sync_lock.release()


def _use_client(mock):
    app.dependency_overrides[get_sync_orchestrator] = lambda: SyncOrchestrator(client=mock)


class TestTriggerSync:
    def test_requires_auth(self, client):
        assert client.post("/api/sync").status_code == 401

    def test_records_balances_and_transactions(self, client, db, user, account, auth_headers):
        today = sync_today()
        _use_client(MockPlaidClient(
            balances={"access-sandbox-1": [
                AggregatorBalance(account_id="acc-checking", current=Decimal("110.00")),
            ]},
            transactions={"access-sandbox-1": [
                make_transaction("txn-1", "acc-checking", "4.33", today, name="Starbucks"),
            ]},
        ))

        response = client.post("/api/sync", headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["user_id"] == user.id
        assert data["snapshots_created"] == 1
        assert data["transactions_imported"] == 1
        assert data["failed_institution_ids"] == []

        snapshot = db.query(BalanceSnapshot).filter_by(account_id=account.id).one()
        assert snapshot.balance == Decimal("110.00")
        txn = db.query(Transaction).one()
        assert txn.amount == Decimal("-4.33")

    def test_failed_institution_is_reported_once(self, client, db, user, institution, account, auth_headers):
        _use_client(MockPlaidClient(failing_tokens={"access-sandbox-1"}))

        response = client.post("/api/sync", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["failed_institution_ids"] == [institution.id]
        assert db.get(Institution, institution.id).status == INSTITUTION_ERROR

    def test_conflict_while_sync_running(self, client, user, auth_headers, release_sync_lock):
        SyncOrchestrator._sync_lock.acquire()

        response = client.post("/api/sync", headers=auth_headers)

        assert response.status_code == 409

    def test_unexpected_error_is_500(self, client, user, auth_headers):
        class ExplodingOrchestrator(SyncOrchestrator):
            def sync_user(self, db, user_id, today=None):
                raise RuntimeError("boom")

        app.dependency_overrides[get_sync_orchestrator] = lambda: ExplodingOrchestrator(
            client=MockPlaidClient()
        )

        response = client.post("/api/sync", headers=auth_headers)

        assert response.status_code == 500
        assert not SyncOrchestrator.is_sync_in_progress()

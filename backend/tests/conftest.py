"""Pytest configuration and fixtures."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.link import _get_plaid_client
from api.sync import get_sync_orchestrator
from database import Base, get_db
from main import app
from services.auth_service import AuthService
from services.sync_service import SyncOrchestrator
from services.token_crypto import TokenCipher
# Pytest fixtures - imported to make them available to tests
from tests.fixtures import (  # noqa: F401
    account,
    credit_account,
    institution,
    other_user,
    savings_account,
    user,
)
from tests.fixtures.mocks import MockPlaidClient

# 32 zero bytes, urlsafe base64: a valid Fernet key for tests only
TEST_ENCRYPTION_KEY = "A" * 43 + "="


@pytest.fixture(autouse=True)
def token_cipher(monkeypatch):
    """Encrypt access tokens with a fixed test key instead of the keychain."""
    cipher = TokenCipher(TEST_ENCRYPTION_KEY)
    monkeypatch.setattr("services.token_crypto.get_token_cipher", lambda: cipher)
    return cipher


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    """Use the minimum bcrypt cost so user fixtures stay fast."""
    monkeypatch.setattr("services.auth_service.BCRYPT_ROUNDS", 4)


@pytest.fixture(name="db")
def db_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(name="mock_plaid_client")
def mock_plaid_client_fixture():
    """An empty, configured mock Plaid client."""
    return MockPlaidClient()


@pytest.fixture(name="client")
def client_fixture(db, mock_plaid_client):
    """Create a test client with the test database and a mock Plaid client."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_get_plaid_client():
        return mock_plaid_client

    def override_get_sync_orchestrator():
        return SyncOrchestrator(client=mock_plaid_client)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[_get_plaid_client] = override_get_plaid_client
    app.dependency_overrides[get_sync_orchestrator] = override_get_sync_orchestrator
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="auth_headers")
def auth_headers_fixture(user):
    """Bearer token header for the default test user."""
    token = AuthService.create_access_token(user.id)
    return {"Authorization": f"Bearer {token}"}

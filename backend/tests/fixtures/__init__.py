"""Test fixtures and sample data."""
import pytest
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from models import Account, BalanceSnapshot, Institution, Transaction, User
from models.balance_snapshot import SOURCE_PLAID
from services.auth_service import AuthService
from services.token_crypto import encrypt_token

TEST_PASSWORD = "correct-horse-battery"


def create_user(
    db: Session,
    email: str = "user@example.com",
    sync_frequency: str = "daily",
) -> User:
    """Create a user with the shared test password."""
    u = User(
        email=email,
        password_hash=AuthService.hash_password(TEST_PASSWORD),
        sync_frequency=sync_frequency,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def create_institution(
    db: Session,
    user: User,
    access_token: str = "access-sandbox-1",
    item_id: str = "item-1",
    name: str = "First Platypus Bank",
    status: str = "active",
) -> Institution:
    """Create an institution whose encrypted token decrypts to ``access_token``."""
    inst = Institution(
        user_id=user.id,
        plaid_item_id=item_id,
        access_token_encrypted=encrypt_token(access_token),
        provider_institution_id="ins_109508",
        institution_name=name,
        status=status,
    )
    db.add(inst)
    db.commit()
    db.refresh(inst)
    return inst


def create_account(
    db: Session,
    user: User,
    institution: Institution | None,
    plaid_account_id: str,
    name: str = "Plaid Checking",
    type: str = "depository",
    subtype: str | None = "checking",
    is_active: bool = True,
) -> Account:
    """Create an account under an institution."""
    acc = Account(
        user_id=user.id,
        institution_id=institution.id if institution else None,
        plaid_account_id=plaid_account_id,
        name=name,
        mask="0000",
        type=type,
        subtype=subtype,
        is_active=is_active,
    )
    db.add(acc)
    db.commit()
    db.refresh(acc)
    return acc


def create_snapshot(
    db: Session,
    account: Account,
    snapshot_date: date,
    balance: Decimal,
    source: str = SOURCE_PLAID,
    is_stale: bool = False,
) -> BalanceSnapshot:
    """Create a balance snapshot for an account."""
    snap = BalanceSnapshot(
        user_id=account.user_id,
        account_id=account.id,
        date=snapshot_date,
        balance=balance,
        source=source,
        is_stale=is_stale,
    )
    db.add(snap)
    db.commit()
    db.refresh(snap)
    return snap


def create_transaction(
    db: Session,
    account: Account,
    plaid_transaction_id: str,
    amount: Decimal,
    txn_date: date,
    name: str = "Coffee Shop",
    merchant_name: str | None = None,
    category: str | None = None,
    personal_category: str | None = None,
    is_transfer: bool = False,
    is_pending: bool = False,
) -> Transaction:
    """Create a stored transaction (local sign convention)."""
    txn = Transaction(
        user_id=account.user_id,
        account_id=account.id,
        plaid_transaction_id=plaid_transaction_id,
        amount=amount,
        date=txn_date,
        name=name,
        merchant_name=merchant_name,
        category=category,
        personal_category=personal_category,
        is_transfer=is_transfer,
        is_pending=is_pending,
    )
    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


@pytest.fixture
def user(db: Session) -> User:
    """Create the default test user (daily cadence)."""
    return create_user(db)


@pytest.fixture
def other_user(db: Session) -> User:
    """Create a second user for isolation tests."""
    return create_user(db, email="other@example.com", sync_frequency="weekly")


@pytest.fixture
def institution(db: Session, user: User) -> Institution:
    """Create an active institution for the default user."""
    return create_institution(db, user)


@pytest.fixture
def account(db: Session, user: User, institution: Institution) -> Account:
    """Create a checking account."""
    return create_account(db, user, institution, "acc-checking")


@pytest.fixture
def savings_account(db: Session, user: User, institution: Institution) -> Account:
    """Create a savings account at the same institution."""
    return create_account(
        db, user, institution, "acc-savings", name="Plaid Saving", subtype="savings"
    )


@pytest.fixture
def credit_account(db: Session, user: User, institution: Institution) -> Account:
    """Create a credit card account."""
    return create_account(
        db, user, institution, "acc-credit",
        name="Plaid Credit Card", type="credit", subtype="credit card",
    )

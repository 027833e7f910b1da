"""Account model - one financial account under a linked institution."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Account(Base):
    """A bank, credit or investment account discovered via Plaid Link.

    ``plaid_account_id`` is the provider's identifier and is what balances
    and transactions returned by the aggregator are matched against.
    Inactive accounts are hidden from dashboards and skipped by sync.
    """

    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    institution_id = Column(
        String(36), ForeignKey("institutions.id"), nullable=True, index=True
    )
    plaid_account_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    official_name = Column(String, nullable=True)
    mask = Column(String, nullable=True)
    type = Column(String, nullable=False)  # "depository" | "credit" | "investment"
    subtype = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    institution = relationship("Institution", back_populates="accounts")
    balance_snapshots = relationship("BalanceSnapshot", back_populates="account")
    transactions = relationship("Transaction", back_populates="account")

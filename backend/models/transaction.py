"""Transaction model - a posted ledger entry imported from Plaid."""

from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid


class Transaction(Base):
    """A single transaction on a linked account.

    ``amount`` uses this app's convention: positive is money in, negative
    is money out.  ``plaid_transaction_id`` is the dedup key; sync never
    overwrites an imported row.  ``personal_category`` starts as the
    normalized provider category and is what the user edits.
    """

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    plaid_transaction_id = Column(String, unique=True, index=True, nullable=False)
    amount = Column(Numeric(18, 4), nullable=False)
    date = Column(Date, nullable=False, index=True)
    authorized_date = Column(Date, nullable=True)
    name = Column(String, nullable=False)
    merchant_name = Column(String, nullable=True)
    original_description = Column(String, nullable=True)
    category = Column(String, nullable=True)  # Most general provider label
    personal_category = Column(String, nullable=True)
    is_transfer = Column(Boolean, nullable=False, default=False)
    is_pending = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    account = relationship("Account", back_populates="transactions")

    @property
    def display_category(self) -> str:
        """Category shown to the user: override, then provider label, then Other."""
        return self.personal_category or self.category or "Other"

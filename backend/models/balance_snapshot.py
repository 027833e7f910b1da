"""BalanceSnapshot model - one balance per account per calendar day."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid

SOURCE_PLAID = "plaid"
SOURCE_FORWARD_FILL = "forward_fill"
SOURCE_LINK = "link"


class BalanceSnapshot(Base):
    """A dated balance for an account.

    Real snapshots come from the aggregator (``plaid``) or from the initial
    link exchange (``link``).  ``forward_fill`` rows carry the last known
    balance into days without data and are flagged ``is_stale``.
    """

    __tablename__ = "balance_snapshots"
    __table_args__ = (
        UniqueConstraint(
            "user_id", "account_id", "date", name="uix_user_account_date"
        ),
    )

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    balance = Column(Numeric(18, 4), nullable=False, default=0)
    source = Column(String, nullable=False, default=SOURCE_PLAID)
    is_stale = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    account = relationship("Account", back_populates="balance_snapshots")

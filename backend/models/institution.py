"""Institution model - one linked Plaid Item per financial institution."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid

INSTITUTION_ACTIVE = "active"
INSTITUTION_ERROR = "error"


class Institution(Base):
    """A linked financial institution (a Plaid Item).

    The access token is stored encrypted and only decrypted right before
    an aggregator call.  ``status`` flips to ``error`` when a balance fetch
    fails and stays there until the user re-links the institution.
    """

    __tablename__ = "institutions"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    plaid_item_id = Column(String, unique=True, index=True, nullable=False)
    access_token_encrypted = Column(String, nullable=False)
    provider_institution_id = Column(String, nullable=True)
    institution_name = Column(String, nullable=True)
    status = Column(String, nullable=False, default=INSTITUTION_ACTIVE)  # "active" | "error"
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    user = relationship("User", back_populates="institutions")
    accounts = relationship("Account", back_populates="institution")

"""User model - an account holder and their sync cadence preference."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from database import Base
from models.utils import generate_uuid

SYNC_FREQUENCIES = ("daily", "weekly", "manual")


class User(Base):
    """A user of the application.

    ``sync_frequency`` decides which scheduled batch (daily or weekly)
    picks the user up; ``manual`` users only sync on demand.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    sync_frequency = Column(String, nullable=False, default="daily")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    institutions = relationship("Institution", back_populates="user")
    manual_assets = relationship("ManualAsset", back_populates="user")

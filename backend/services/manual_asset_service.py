"""Manual asset service - CRUD for user-declared assets."""

import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from models import ManualAsset

logger = logging.getLogger(__name__)


class ManualAssetService:
    """Service for managing manual assets. Sync never touches these."""

    @staticmethod
    def list_assets(db: Session, user_id: str) -> list[ManualAsset]:
        return (
            db.query(ManualAsset)
            .filter(ManualAsset.user_id == user_id)
            .order_by(ManualAsset.created_at.desc())
            .all()
        )

    @staticmethod
    def get_asset(db: Session, user_id: str, asset_id: str) -> ManualAsset | None:
        return (
            db.query(ManualAsset)
            .filter(ManualAsset.id == asset_id, ManualAsset.user_id == user_id)
            .first()
        )

    @staticmethod
    def create_asset(db: Session, user_id: str, name: str, current_value: Decimal) -> ManualAsset:
        """Create a manual asset.

        Raises:
            ValueError: If the name is blank or the value is negative.
        """
        if not name or not name.strip():
            raise ValueError("Name is required")
        if current_value < 0:
            raise ValueError("Current value must be non-negative")

        asset = ManualAsset(user_id=user_id, name=name.strip(), current_value=current_value)
        db.add(asset)
        db.commit()
        db.refresh(asset)
        logger.info("Created manual asset %s (id=%s)", asset.name, asset.id)
        return asset

    @staticmethod
    def update_asset(
        db: Session,
        user_id: str,
        asset_id: str,
        *,
        name: str | None = None,
        current_value: Decimal | None = None,
    ) -> ManualAsset | None:
        """Update a manual asset. Returns None if not found."""
        asset = ManualAssetService.get_asset(db, user_id, asset_id)
        if asset is None:
            return None

        if name is not None:
            if not name.strip():
                raise ValueError("Name is required")
            asset.name = name.strip()
        if current_value is not None:
            if current_value < 0:
                raise ValueError("Current value must be non-negative")
            asset.current_value = current_value

        db.commit()
        db.refresh(asset)
        logger.info("Updated manual asset %s (id=%s)", asset.name, asset.id)
        return asset

    @staticmethod
    def delete_asset(db: Session, user_id: str, asset_id: str) -> bool:
        """Delete a manual asset. Returns True if deleted, False if not found."""
        asset = ManualAssetService.get_asset(db, user_id, asset_id)
        if asset is None:
            return False
        db.delete(asset)
        db.commit()
        logger.info("Deleted manual asset %s", asset_id)
        return True

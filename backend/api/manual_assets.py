"""Manual asset API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from models import User
from schemas import ManualAssetCreate, ManualAssetResponse, ManualAssetUpdate
from services.manual_asset_service import ManualAssetService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/manual-assets", tags=["manual-assets"])


@router.get("", response_model=list[ManualAssetResponse])
def list_manual_assets(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return ManualAssetService.list_assets(db, user.id)


@router.post("", response_model=ManualAssetResponse, status_code=201)
def create_manual_asset(
    body: ManualAssetCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        return ManualAssetService.create_asset(db, user.id, body.name, body.current_value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.patch("/{asset_id}", response_model=ManualAssetResponse)
def update_manual_asset(
    asset_id: str,
    body: ManualAssetUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        asset = ManualAssetService.update_asset(
            db, user.id, asset_id, name=body.name, current_value=body.current_value
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if asset is None:
        raise HTTPException(status_code=404, detail="Manual asset not found")
    return asset


@router.delete("/{asset_id}", status_code=204)
def delete_manual_asset(
    asset_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if not ManualAssetService.delete_asset(db, user.id, asset_id):
        raise HTTPException(status_code=404, detail="Manual asset not found")
    return Response(status_code=204)

"""Sync API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from models import User
from schemas import SyncResponse
from services.sync_service import SyncInProgressError, SyncOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sync", tags=["sync"])


def get_sync_orchestrator() -> SyncOrchestrator:
    """Dependency for injecting the orchestrator (overridable in tests)."""
    return SyncOrchestrator()


@router.post("", response_model=SyncResponse)
def trigger_sync(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    orchestrator: SyncOrchestrator = Depends(get_sync_orchestrator),
):
    """Reconcile balances and import transactions for the current user now.

    Institution-level failures are reported in ``failed_institution_ids``
    rather than as an error status.

    Raises:
        HTTPException:
            - 409 Conflict: A sync is already in progress
            - 500 Internal Server Error: Unexpected sync error
    """
    if orchestrator.is_sync_in_progress():
        raise HTTPException(
            status_code=409,
            detail="Sync already in progress. Please wait for the current sync to complete.",
        )

    try:
        result = orchestrator.sync_single_user(db, user.id)
    except SyncInProgressError:
        raise HTTPException(
            status_code=409,
            detail="Sync already in progress. Please wait for the current sync to complete.",
        )
    except Exception:
        logger.error("Unexpected error during sync for user %s", user.id, exc_info=True)
        raise HTTPException(status_code=500, detail="An unexpected error occurred during sync.")

    failed = list(dict.fromkeys(
        result.balances.failed_institution_ids + result.transactions.failed_institution_ids
    ))
    return SyncResponse(
        user_id=user.id,
        snapshots_created=result.balances.snapshots_created + result.balances.snapshots_upgraded,
        forward_filled=result.balances.forward_filled,
        transactions_imported=result.transactions.imported,
        failed_institution_ids=failed,
    )

"""Dashboard API endpoints: net worth series and monthly spend summary."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from models import User
from schemas import NetWorthSeriesResponse, SpendSummaryResponse
from services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["dashboard"])


@router.get("/networth/series", response_model=NetWorthSeriesResponse)
def get_net_worth_series(
    from_date: Optional[date] = Query(default=None, alias="from"),
    to_date: Optional[date] = Query(default=None, alias="to"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Daily net worth for the range (default: the last 30 days)."""
    if from_date and to_date and from_date > to_date:
        raise HTTPException(status_code=400, detail="'from' must not be after 'to'")
    return DashboardService.get_net_worth_series(db, user.id, from_date, to_date)


@router.get("/spend/summary", response_model=SpendSummaryResponse)
def get_spend_summary(
    month: Optional[str] = Query(default=None, description="Month as YYYY-MM"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Income, spending and top merchants for one month (default: this month)."""
    try:
        return DashboardService.get_spend_summary(db, user.id, month)
    except ValueError:
        raise HTTPException(status_code=400, detail="month must be YYYY-MM")

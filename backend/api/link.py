"""Plaid Link API endpoints.

Provides the server-side half of the Plaid Link browser flow: creating a
link token for the current user and exchanging the resulting public token
for a stored Institution with its accounts.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from integrations.exceptions import AggregatorAuthError, AggregatorError
from integrations.plaid_client import PlaidClient
from models import User
from schemas import (
    ExchangeTokenRequest,
    ExchangeTokenResponse,
    LinkedAccountResponse,
    LinkedInstitution,
    LinkTokenResponse,
)
from services.link_service import LinkService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/link", tags=["link"])


def _get_plaid_client() -> PlaidClient:
    """Dependency for injecting the Plaid client (overridable in tests)."""
    return PlaidClient()


@router.post("/token", response_model=LinkTokenResponse)
def create_link_token(
    user: User = Depends(get_current_user),
    client: PlaidClient = Depends(_get_plaid_client),
):
    """Create a Plaid Link token for the frontend."""
    if not client.is_configured():
        raise HTTPException(status_code=400, detail="Plaid is not configured")

    try:
        link_token = client.create_link_token(user.id)
        return LinkTokenResponse(link_token=link_token)
    except AggregatorAuthError as e:
        logger.error("Plaid rejected credentials while creating link token: %s", e)
        raise HTTPException(
            status_code=400,
            detail=(
                "Plaid rejected the credentials. Check that PLAID_ENVIRONMENT "
                "matches your keys."
            ),
        )
    except AggregatorError as e:
        logger.error("Failed to create Plaid link token: %s", e)
        raise HTTPException(status_code=500, detail="Failed to create link token")


@router.post("/exchange", response_model=ExchangeTokenResponse)
def exchange_token(
    body: ExchangeTokenRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    client: PlaidClient = Depends(_get_plaid_client),
):
    """Exchange a public token and store the Institution and its accounts."""
    if not client.is_configured():
        raise HTTPException(status_code=400, detail="Plaid is not configured")

    try:
        institution, linked = LinkService.complete_link(db, client, user.id, body.public_token)
        db.commit()
    except ValueError as e:
        db.rollback()
        raise HTTPException(status_code=409, detail=str(e))
    except AggregatorError as e:
        db.rollback()
        logger.error("Failed to exchange Plaid token: %s", e)
        raise HTTPException(status_code=500, detail="Failed to link account")

    return ExchangeTokenResponse(
        institution=LinkedInstitution(id=institution.id, name=institution.institution_name),
        accounts=[
            LinkedAccountResponse(
                id=item.account.id,
                name=item.account.name,
                mask=item.account.mask,
                type=item.account.type,
                subtype=item.account.subtype,
                balance=item.balance,
            )
            for item in linked
        ],
    )

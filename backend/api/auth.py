"""Authentication and current-user endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from api.deps import get_current_user
from database import get_db
from models import User
from schemas import LoginRequest, LoginResponse, UserResponse, UserUpdate
from services.auth_service import AuthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/login", response_model=LoginResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token."""
    user = AuthService.authenticate(db, body.email, body.password)
    if user is None:
        logger.info("Failed login attempt for %s", body.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = AuthService.create_access_token(user.id)
    return LoginResponse(user=UserResponse.model_validate(user), token=token)


@router.get("/me", response_model=UserResponse)
def get_me(user: User = Depends(get_current_user)):
    return user


@router.patch("/me", response_model=UserResponse)
def update_me(
    body: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Change the current user's sync frequency."""
    return AuthService.set_sync_frequency(db, user, body.sync_frequency)

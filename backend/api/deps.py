"""Request dependencies shared by the routers."""

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import get_db
from models import User
from services.auth_service import AuthService

_bearer = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user from the ``Authorization: Bearer`` header.

    Raises:
        HTTPException: 401 if the header is missing, the token is invalid
            or expired, or the user no longer exists.
    """
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = AuthService.decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid or expired token")
    return user

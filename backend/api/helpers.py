"""Shared API helpers for route handlers."""

from typing import TypeVar

from fastapi import HTTPException
from sqlalchemy.orm import Session

from database import Base

T = TypeVar("T", bound=Base)


def get_owned_or_404(
    db: Session,
    model: type[T],
    user_id: str,
    entity_id: str,
    detail: str = "Not found",
) -> T:
    """Fetch one of the user's entities by primary key or raise 404.

    Entities owned by another user are reported as missing.

    Raises:
        HTTPException: 404 if the entity doesn't exist for this user.
    """
    entity = (
        db.query(model)
        .filter(model.id == entity_id, model.user_id == user_id)
        .first()
    )
    if not entity:
        raise HTTPException(status_code=404, detail=detail)
    return entity

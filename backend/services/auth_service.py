"""Auth service - password hashing, access tokens and user records."""

import logging
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import settings
from models import User
from models.user import SYNC_FREQUENCIES

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


class AuthService:
    """Service for authenticating users and issuing bearer tokens."""

    @staticmethod
    def hash_password(password: str) -> str:
        return bcrypt.hashpw(
            password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        ).decode("utf-8")

    @staticmethod
    def verify_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False

    @staticmethod
    def create_access_token(user_id: str, expires_delta: timedelta | None = None) -> str:
        """Issue a signed JWT whose subject is the user ID."""
        expire = datetime.now(timezone.utc) + (
            expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS)
        )
        payload = {"sub": user_id, "exp": expire}
        return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)

    @staticmethod
    def decode_access_token(token: str) -> str | None:
        """Return the user ID from a valid token, or None if invalid/expired."""
        try:
            payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
        except JWTError:
            return None
        return payload.get("sub")

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User | None:
        """Return the user if the email/password pair is valid."""
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if user is None or not AuthService.verify_password(password, user.password_hash):
            return None
        return user

    @staticmethod
    def create_user(
        db: Session,
        email: str,
        password: str,
        sync_frequency: str = "daily",
    ) -> User:
        """Create a user.

        Raises:
            ValueError: If the email is taken or the sync frequency is invalid.
        """
        if sync_frequency not in SYNC_FREQUENCIES:
            raise ValueError(
                f"sync_frequency must be one of {SYNC_FREQUENCIES}, got {sync_frequency!r}"
            )
        user = User(
            email=email.strip().lower(),
            password_hash=AuthService.hash_password(password),
            sync_frequency=sync_frequency,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ValueError(f"A user with email {email!r} already exists")
        db.refresh(user)
        logger.info("Created user %s", user.id)
        return user

    @staticmethod
    def set_sync_frequency(db: Session, user: User, sync_frequency: str) -> User:
        """Change a user's sync cadence."""
        if sync_frequency not in SYNC_FREQUENCIES:
            raise ValueError(
                f"sync_frequency must be one of {SYNC_FREQUENCIES}, got {sync_frequency!r}"
            )
        user.sync_frequency = sync_frequency
        db.commit()
        db.refresh(user)
        logger.info("User %s sync frequency set to %s", user.id, sync_frequency)
        return user

"""Keyring-backed storage for application secrets.

Plaid keys, the access-token encryption key and the JWT secret can live
in the OS keychain instead of ``.env``.  Lookups never raise: a missing
keychain backend simply means the value comes from the environment.
"""

import logging

import keyring

logger = logging.getLogger(__name__)

SERVICE_NAME = "finance-tracker"

CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "PLAID_CLIENT_ID",
        "PLAID_SECRET",
        "TOKEN_ENCRYPTION_KEY",
        "JWT_SECRET",
    }
)


def get_credential(key: str) -> str | None:
    """Retrieve a secret from the keychain.

    Args:
        key: The credential name (e.g. ``"PLAID_SECRET"``).

    Returns:
        The stored value, or ``None`` if absent or the keychain is unusable.
    """
    try:
        return keyring.get_password(SERVICE_NAME, key)
    except Exception:
        logger.debug("keyring lookup failed for %s", key, exc_info=True)
        return None


def set_credential(key: str, value: str) -> bool:
    """Store a secret in the keychain.

    Only keys listed in :data:`CREDENTIAL_KEYS` are accepted.

    Returns:
        ``True`` if stored, ``False`` otherwise.
    """
    if key not in CREDENTIAL_KEYS:
        logger.warning("Refusing to store non-credential key %s in keychain", key)
        return False
    if not value or not value.strip():
        logger.warning("Refusing to store empty value for %s", key)
        return False

    try:
        keyring.set_password(SERVICE_NAME, key, value)
    except Exception:
        logger.warning("Failed to store %s in keychain", key, exc_info=True)
        return False
    logger.info("Stored %s in keychain", key)
    return True

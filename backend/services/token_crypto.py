"""Encryption of Plaid access tokens at rest.

Access tokens are encrypted with Fernet (AES-128-CBC + HMAC-SHA256) before
they are written to the ``institutions`` table and decrypted immediately
before each aggregator call.
"""

import logging
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken

from config import settings
from services.credential_manager import set_credential

logger = logging.getLogger(__name__)


class TokenDecryptionError(Exception):
    """A stored token could not be decrypted (wrong key or corrupted value)."""


class TokenCipher:
    """Encrypt/decrypt access tokens with a single Fernet key."""

    def __init__(self, key: str | bytes):
        self._fernet = Fernet(key)

    def encrypt(self, token: str) -> str:
        return self._fernet.encrypt(token.encode("utf-8")).decode("ascii")

    def decrypt(self, encrypted: str) -> str:
        try:
            return self._fernet.decrypt(encrypted.encode("ascii")).decode("utf-8")
        except (InvalidToken, ValueError) as e:
            raise TokenDecryptionError("Stored access token could not be decrypted") from e


def _resolve_key() -> str:
    """Return the configured key, generating and storing one on first run.

    Raises ``RuntimeError`` if no key is configured and a new one cannot be
    persisted to the keychain (tokens encrypted with a throwaway key would
    be unreadable after a restart).
    """
    if settings.TOKEN_ENCRYPTION_KEY:
        return settings.TOKEN_ENCRYPTION_KEY

    key = Fernet.generate_key().decode("ascii")
    if set_credential("TOKEN_ENCRYPTION_KEY", key):
        logger.info("Generated new token encryption key and stored it in keychain")
        return key

    raise RuntimeError(
        "TOKEN_ENCRYPTION_KEY is not configured and could not be stored in "
        "the keychain. Set it to the output of "
        "'python -c \"from cryptography.fernet import Fernet; print(Fernet.generate_key().decode())\"'."
    )


@lru_cache
def get_token_cipher() -> TokenCipher:
    """Get the process-wide TokenCipher (cached)."""
    return TokenCipher(_resolve_key())


def encrypt_token(token: str) -> str:
    """Encrypt a plaintext access token for storage."""
    return get_token_cipher().encrypt(token)


def decrypt_token(encrypted: str) -> str:
    """Decrypt a stored access token."""
    return get_token_cipher().decrypt(encrypted)

"""Typed exception hierarchy for aggregator errors.

Provides structured exceptions for differentiated error handling
(auth errors vs transient network errors vs data issues).
"""


class AggregatorError(Exception):
    """Base exception for all aggregator-related errors.

    Carries the provider name so callers can identify which provider failed.
    """

    def __init__(self, message: str, provider_name: str = "Plaid"):
        self.provider_name = provider_name
        super().__init__(message)


class AggregatorAuthError(AggregatorError):
    """Credentials missing, expired, or invalid (HTTP 401/403, ITEM_LOGIN_REQUIRED)."""

    pass


class AggregatorConnectionError(AggregatorError):
    """Network failures such as timeouts or refused connections.

    Retriable by default.
    """

    def __init__(self, message: str, provider_name: str = "Plaid", retriable: bool = True):
        self.retriable = retriable
        super().__init__(message, provider_name)


class AggregatorAPIError(AggregatorError):
    """HTTP 4xx/5xx responses from the aggregator API."""

    def __init__(
        self,
        message: str,
        provider_name: str = "Plaid",
        status_code: int | None = None,
        error_code: str = "",
    ):
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(message, provider_name)

    @property
    def retriable(self) -> bool:
        """429 (rate limit) and 5xx errors are generally retriable."""
        if self.status_code is None:
            return False
        return self.status_code == 429 or self.status_code >= 500


class AggregatorDataError(AggregatorError):
    """Malformed or unparseable response from the aggregator."""

    pass

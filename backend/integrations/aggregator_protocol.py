"""Aggregator protocol definitions.

The sync components only talk to the aggregator through these normalized
records and the :class:`AggregatorClient` protocol, so tests can swap in
a fake client and the Plaid SDK types never leak into services.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Protocol


@dataclass
class AggregatorBalance:
    """Current balance of one provider account."""

    account_id: str  # Provider's account ID
    current: Decimal | None  # None when the provider has no current balance


@dataclass
class AggregatorAccount:
    """Account metadata returned during the link exchange."""

    id: str  # Provider's account ID
    name: str
    type: str  # "depository" | "credit" | "investment" | "loan" | ...
    official_name: str | None = None
    mask: str | None = None
    subtype: str | None = None
    current_balance: Decimal | None = None


@dataclass
class AggregatorTransaction:
    """One transaction as reported by the aggregator.

    ``amount`` keeps the aggregator's sign convention: spending is positive
    and income is negative.  Convert with
    :func:`services.transaction_import_service.to_local_amount` before
    storing.
    """

    transaction_id: str
    account_id: str
    amount: Decimal
    date: date
    name: str
    authorized_date: date | None = None
    merchant_name: str | None = None
    original_description: str | None = None
    categories: list[str] = field(default_factory=list)  # Most general first
    pending: bool = False


@dataclass
class LinkExchangeResult:
    """Result of exchanging a Plaid Link public token."""

    access_token: str
    item_id: str


class AggregatorClient(Protocol):
    """Contract between the sync components and the aggregator."""

    def is_configured(self) -> bool:
        """Return True if credentials are present."""
        ...

    def get_current_balances(self, access_token: str) -> list[AggregatorBalance]:
        """Fetch the current balance of every account under an Item.

        Raises:
            AggregatorError: If the aggregator call fails or times out.
        """
        ...

    def get_transactions(
        self, access_token: str, start_date: date, end_date: date
    ) -> list[AggregatorTransaction]:
        """Fetch all transactions in ``[start_date, end_date]`` for an Item.

        Raises:
            AggregatorError: If the aggregator call fails or times out.
        """
        ...

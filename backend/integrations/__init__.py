"""External API integrations.

This package contains:
- Aggregator protocol: normalized records and the client contract used by sync
- Plaid client: the plaid-python backed implementation
"""

from integrations.aggregator_protocol import (
    AggregatorAccount,
    AggregatorBalance,
    AggregatorClient,
    AggregatorTransaction,
    LinkExchangeResult,
)

__all__ = [
    "AggregatorAccount",
    "AggregatorBalance",
    "AggregatorClient",
    "AggregatorTransaction",
    "LinkExchangeResult",
]

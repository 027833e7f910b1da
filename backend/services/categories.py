"""Category normalization for aggregator transaction labels."""

from collections.abc import Sequence

FALLBACK_CATEGORY = "Other"

# Most general Plaid label -> display category
CATEGORY_MAPPING: dict[str, str] = {
    "Food and Drink": "Food & Dining",
    "Shops": "Shopping",
    "Recreation": "Entertainment",
    "Transportation": "Transportation",
    "Healthcare": "Healthcare",
    "Financial": "Financial",
    "Travel": "Travel",
    "Deposit": "Income",
    "Transfer": "Transfer",
    "Payment": "Bills & Utilities",
    "Service": "Services",
}


def normalize_category(labels: Sequence[str] | None) -> str:
    """Map a provider category hierarchy to a display category.

    Only the first (most general) label is considered.  Labels missing from
    :data:`CATEGORY_MAPPING` pass through unchanged; an empty hierarchy
    yields ``"Other"``.
    """
    if not labels:
        return FALLBACK_CATEGORY
    primary = labels[0]
    if not primary:
        return FALLBACK_CATEGORY
    return CATEGORY_MAPPING.get(primary, primary)

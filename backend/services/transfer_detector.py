"""Heuristic detection of transfers between a user's own accounts.

A transaction is flagged as a transfer when a transaction of nearly the
same size shows up in another of the user's accounts within a short day
window, or when its name looks like a transfer/payment.  False positives
and negatives are expected; the flag only keeps obvious internal moves
out of spending reports.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from config import settings

TRANSFER_KEYWORDS: tuple[str, ...] = ("transfer", "payment")


@dataclass(frozen=True)
class TransferRules:
    """Thresholds for :func:`detect_transfer`."""

    amount_tolerance: Decimal = Decimal("0.03")  # Relative to the candidate's amount
    day_window: int = 1
    keywords: tuple[str, ...] = TRANSFER_KEYWORDS


DEFAULT_TRANSFER_RULES = TransferRules()


def rules_from_settings() -> TransferRules:
    """Build TransferRules from the TRANSFER_* settings."""
    return TransferRules(
        amount_tolerance=Decimal(str(settings.TRANSFER_AMOUNT_TOLERANCE)),
        day_window=settings.TRANSFER_DAY_WINDOW,
    )


@dataclass(frozen=True)
class TransactionSummary:
    """The fields the detector needs from a transaction (local sign convention)."""

    amount: Decimal
    date: date
    account_id: str
    name: str


def _amounts_match(candidate: Decimal, other: Decimal, tolerance: Decimal) -> bool:
    # A zero candidate has no meaningful relative difference
    if candidate == 0:
        return False
    return abs(candidate - other) / candidate <= tolerance


def detect_transfer(
    candidate: TransactionSummary,
    existing: Iterable[TransactionSummary],
    rules: TransferRules = DEFAULT_TRANSFER_RULES,
) -> bool:
    """Return True if ``candidate`` looks like an inter-account transfer.

    Args:
        candidate: The transaction being classified.
        existing: The user's other transactions to compare against.  Any
            objects with ``amount``, ``date``, ``account_id`` and ``name``
            attributes work (ORM rows included).
        rules: Thresholds; defaults to 3% and one day.
    """
    name = (candidate.name or "").lower()
    if any(keyword in name for keyword in rules.keywords):
        return True

    candidate_amount = abs(Decimal(candidate.amount))
    for other in existing:
        if other.account_id == candidate.account_id:
            continue
        if abs((candidate.date - other.date).days) > rules.day_window:
            continue
        if _amounts_match(candidate_amount, abs(Decimal(other.amount)), rules.amount_tolerance):
            return True
    return False

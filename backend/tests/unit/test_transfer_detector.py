"""Tests for the transfer detection heuristic."""

from datetime import date
from decimal import Decimal
from unittest.mock import patch

from services.transfer_detector import (
    DEFAULT_TRANSFER_RULES,
    TransactionSummary,
    TransferRules,
    detect_transfer,
    rules_from_settings,
)


def _summary(amount, day, account_id="acc-a", name="Grocery Store"):
    return TransactionSummary(
        amount=Decimal(amount),
        date=date(2024, 3, day),
        account_id=account_id,
        name=name,
    )


class TestKeywordMatch:
    def test_transfer_in_name(self):
        assert detect_transfer(_summary("-50", 10, name="Online TRANSFER to savings"), []) is True

    def test_payment_in_name(self):
        assert detect_transfer(_summary("-200", 10, name="Credit card payment"), []) is True

    def test_plain_name_without_match_is_not_transfer(self):
        assert detect_transfer(_summary("-12.50", 10, name="Coffee Shop"), []) is False


class TestCounterpartMatch:
    def test_matching_opposite_sign_in_other_account(self):
        """An outflow matched by an inflow elsewhere on the same day is a transfer."""
        candidate = _summary("-500", 10, account_id="acc-checking")
        existing = [_summary("500", 10, account_id="acc-savings", name="Deposit")]
        assert detect_transfer(candidate, existing) is True

    def test_within_tolerance(self):
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("102.50", 11, account_id="acc-b", name="Incoming")]
        assert detect_transfer(candidate, existing) is True

    def test_outside_tolerance(self):
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("104", 10, account_id="acc-b", name="Incoming")]
        assert detect_transfer(candidate, existing) is False

    def test_same_account_is_ignored(self):
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("100", 10, account_id="acc-a", name="Refund")]
        assert detect_transfer(candidate, existing) is False

    def test_outside_day_window(self):
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("100", 12, account_id="acc-b", name="Incoming")]
        assert detect_transfer(candidate, existing) is False

    def test_day_window_is_inclusive(self):
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("100", 9, account_id="acc-b", name="Incoming")]
        assert detect_transfer(candidate, existing) is True

    def test_zero_amount_never_matches(self):
        candidate = _summary("0", 10, account_id="acc-a")
        existing = [_summary("0", 10, account_id="acc-b", name="Adjustment")]
        assert detect_transfer(candidate, existing) is False

    def test_custom_rules(self):
        rules = TransferRules(amount_tolerance=Decimal("0.10"), day_window=3)
        candidate = _summary("-100", 10, account_id="acc-a")
        existing = [_summary("108", 13, account_id="acc-b", name="Incoming")]
        assert detect_transfer(candidate, existing, rules) is True
        assert detect_transfer(candidate, existing, DEFAULT_TRANSFER_RULES) is False


class TestRulesFromSettings:
    def test_reads_thresholds(self):
        with patch("services.transfer_detector.settings") as ms:
            ms.TRANSFER_AMOUNT_TOLERANCE = 0.05
            ms.TRANSFER_DAY_WINDOW = 2
            rules = rules_from_settings()
        assert rules.amount_tolerance == Decimal("0.05")
        assert rules.day_window == 2
        assert rules.keywords == ("transfer", "payment")


class TestDocumentedExamples:
    def test_close_amounts_same_day_in_other_account(self):
        candidate = _summary("-100.00", 10, account_id="acc-checking", name="Withdrawal")
        existing = [_summary("101.50", 10, account_id="acc-savings", name="Deposit")]
        assert detect_transfer(candidate, existing) is True

    def test_close_amounts_three_days_apart(self):
        candidate = _summary("-100.00", 10, account_id="acc-checking", name="Withdrawal")
        existing = [_summary("101.50", 13, account_id="acc-savings", name="Deposit")]
        assert detect_transfer(candidate, existing) is False

    def test_payment_to_card_by_name(self):
        assert detect_transfer(_summary("-250", 10, name="Payment to Visa"), []) is True

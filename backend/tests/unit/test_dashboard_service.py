"""Tests for DashboardService net worth and spend summaries."""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from models import ManualAsset
from services.dashboard_service import DashboardService, parse_month
from tests.fixtures import create_account, create_institution, create_snapshot, create_transaction

TODAY = date(2024, 3, 15)


class TestParseMonth:
    def test_explicit_month(self):
        assert parse_month("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_defaults_to_current_month(self):
        assert parse_month(None, today=TODAY) == (date(2024, 3, 1), date(2024, 3, 31))

    @pytest.mark.parametrize("value", ["2024", "2024-13", "march", "2024-xx"])
    def test_rejects_malformed(self, value):
        with pytest.raises(ValueError):
            parse_month(value)


class TestNetWorthSeries:
    def test_assets_minus_liabilities_per_day(self, db, user, account, credit_account):
        yesterday = TODAY - timedelta(days=1)
        create_snapshot(db, account, yesterday, Decimal("1000"))
        create_snapshot(db, credit_account, yesterday, Decimal("-250"))
        create_snapshot(db, account, TODAY, Decimal("1200"))
        create_snapshot(db, credit_account, TODAY, Decimal("300"))

        series = DashboardService.get_net_worth_series(db, user.id, today=TODAY)

        assert [p.date for p in series.series] == [yesterday, TODAY]
        first, last = series.series
        assert first.assets == Decimal("1000")
        assert first.liabilities == Decimal("250")
        assert first.net_worth == Decimal("750")
        assert last.net_worth == Decimal("900")
        assert series.current_net_worth == Decimal("900")
        assert series.net_worth_change == Decimal("150")
        assert series.total_assets == Decimal("1200")
        assert series.total_liabilities == Decimal("300")
        assert last.accounts[credit_account.id].name == "Plaid Credit Card"
        assert last.accounts[credit_account.id].type == "credit"

    def test_manual_assets_added_to_every_day(self, db, user, account):
        create_snapshot(db, account, TODAY - timedelta(days=1), Decimal("100"))
        create_snapshot(db, account, TODAY, Decimal("100"))
        wallet = ManualAsset(user_id=user.id, name="Cold wallet", current_value=Decimal("50"))
        db.add(wallet)
        db.commit()

        series = DashboardService.get_net_worth_series(db, user.id, today=TODAY)

        assert [p.net_worth for p in series.series] == [Decimal("150"), Decimal("150")]
        assert series.series[0].accounts[wallet.id].name == "Cold wallet"
        assert series.series[0].accounts[wallet.id].type == "manual"

    def test_accounts_with_same_name_are_listed_separately(self, db, user, institution, account):
        other_bank = create_institution(db, user, access_token="access-sandbox-2", item_id="item-2")
        twin = create_account(db, user, other_bank, "acc-checking-2")
        create_snapshot(db, account, TODAY, Decimal("100"))
        create_snapshot(db, twin, TODAY, Decimal("40"))

        point = DashboardService.get_net_worth_series(db, user.id, today=TODAY).series[0]

        assert set(point.accounts) == {account.id, twin.id}
        assert point.accounts[account.id].balance == Decimal("100")
        assert point.accounts[twin.id].balance == Decimal("40")
        assert point.accounts[twin.id].name == "Plaid Checking"

    def test_inactive_accounts_excluded(self, db, user, institution, account):
        hidden = create_account(db, user, institution, "acc-hidden", name="Old", is_active=False)
        create_snapshot(db, account, TODAY, Decimal("100"))
        create_snapshot(db, hidden, TODAY, Decimal("999"))

        series = DashboardService.get_net_worth_series(db, user.id, today=TODAY)

        assert series.current_net_worth == Decimal("100")

    def test_range_defaults_to_last_30_days(self, db, user, account):
        create_snapshot(db, account, TODAY - timedelta(days=45), Decimal("1"))
        create_snapshot(db, account, TODAY - timedelta(days=10), Decimal("2"))

        series = DashboardService.get_net_worth_series(db, user.id, today=TODAY)

        assert [p.date for p in series.series] == [TODAY - timedelta(days=10)]

    def test_explicit_range(self, db, user, account):
        create_snapshot(db, account, TODAY - timedelta(days=45), Decimal("1"))
        create_snapshot(db, account, TODAY - timedelta(days=10), Decimal("2"))

        series = DashboardService.get_net_worth_series(
            db, user.id, start=TODAY - timedelta(days=60), end=TODAY - timedelta(days=20), today=TODAY
        )

        assert [p.date for p in series.series] == [TODAY - timedelta(days=45)]

    def test_empty_series(self, db, user):
        series = DashboardService.get_net_worth_series(db, user.id, today=TODAY)

        assert series.series == []
        assert series.current_net_worth == Decimal("0")
        assert series.net_worth_change == Decimal("0")


class TestSpendSummary:
    def test_income_spending_and_grouping(self, db, user, account):
        create_transaction(db, account, "t1", Decimal("3000"), date(2024, 3, 1), name="Payroll")
        create_transaction(db, account, "t2", Decimal("-40"), date(2024, 3, 2), name="Whole Foods",
                           merchant_name="Whole Foods", personal_category="Groceries")
        create_transaction(db, account, "t3", Decimal("-60"), date(2024, 3, 9), name="WHOLEFDS 123",
                           merchant_name="Whole Foods", personal_category="Groceries")
        create_transaction(db, account, "t4", Decimal("-20"), date(2024, 3, 10), name="Cinema",
                           category="Recreation")
        create_transaction(db, account, "t5", Decimal("-500"), date(2024, 3, 11), name="To savings",
                           is_transfer=True)
        create_transaction(db, account, "t6", Decimal("-75"), date(2024, 3, 12), name="Pending",
                           is_pending=True)
        create_transaction(db, account, "t7", Decimal("-15"), date(2024, 2, 28), name="Last month")

        summary = DashboardService.get_spend_summary(db, user.id, "2024-03")

        assert summary.month == "2024-03"
        assert summary.total_income == Decimal("3000")
        assert summary.total_spending == Decimal("120")
        assert summary.net_cash_flow == Decimal("2880")
        assert list(summary.by_category.items()) == [
            ("Groceries", Decimal("100")),
            ("Recreation", Decimal("20")),
        ]
        assert summary.top_merchants["Whole Foods"] == Decimal("100")
        assert summary.top_merchants["Cinema"] == Decimal("20")

    def test_top_merchants_limited_to_ten(self, db, user, account):
        for i in range(12):
            create_transaction(db, account, f"t{i}", Decimal(f"-{i + 1}"), date(2024, 3, 5),
                               name=f"Shop {i}")

        summary = DashboardService.get_spend_summary(db, user.id, "2024-03")

        assert len(summary.top_merchants) == 10
        assert next(iter(summary.top_merchants)) == "Shop 11"

    def test_empty_month(self, db, user):
        summary = DashboardService.get_spend_summary(db, user.id, "2024-01")
        assert summary.total_spending == Decimal("0")
        assert summary.by_category == {}

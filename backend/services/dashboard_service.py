"""Dashboard service - net worth series and monthly cash-flow summary."""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy.orm import Session

from models import Account, BalanceSnapshot, ManualAsset, Transaction
from services.clock import sync_today

logger = logging.getLogger(__name__)

LIABILITY_ACCOUNT_TYPES = frozenset({"credit"})
DEFAULT_SERIES_DAYS = 30
TOP_MERCHANT_LIMIT = 10


@dataclass
class AccountBalancePoint:
    name: str
    type: str
    balance: Decimal


@dataclass
class NetWorthPoint:
    date: date
    assets: Decimal = Decimal("0")
    liabilities: Decimal = Decimal("0")
    net_worth: Decimal = Decimal("0")
    accounts: dict[str, AccountBalancePoint] = field(default_factory=dict)


@dataclass
class NetWorthSeries:
    series: list[NetWorthPoint]
    current_net_worth: Decimal
    net_worth_change: Decimal
    total_assets: Decimal
    total_liabilities: Decimal


@dataclass
class SpendSummary:
    month: str  # YYYY-MM
    total_income: Decimal
    total_spending: Decimal
    net_cash_flow: Decimal
    by_category: dict[str, Decimal]
    top_merchants: dict[str, Decimal]


def parse_month(value: str | None, today: date | None = None) -> tuple[date, date]:
    """Return the first and last day of a ``YYYY-MM`` month (default: this month).

    Raises:
        ValueError: If the value is not a valid ``YYYY-MM`` string.
    """
    if value:
        year_str, sep, month_str = value.partition("-")
        if not sep:
            raise ValueError(f"Month must be YYYY-MM, got {value!r}")
        year, month = int(year_str), int(month_str)
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be YYYY-MM, got {value!r}")
    else:
        today = today or sync_today()
        year, month = today.year, today.month
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def _sorted_desc(totals: dict[str, Decimal], limit: int | None = None) -> dict[str, Decimal]:
    ordered = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return dict(ordered)


class DashboardService:
    """Aggregations behind the dashboard charts."""

    @staticmethod
    def get_net_worth_series(
        db: Session,
        user_id: str,
        start: date | None = None,
        end: date | None = None,
        today: date | None = None,
    ) -> NetWorthSeries:
        """Build a daily net worth series from balance snapshots.

        Credit accounts count as liabilities (absolute balance); every other
        account type counts as an asset.  The current total of manual assets
        is added to every day.  ``net_worth_change`` compares the latest point
        with the first point within the last 30 days.
        """
        today = today or sync_today()
        start = start or today - timedelta(days=DEFAULT_SERIES_DAYS)
        end = end or today

        rows = (
            db.query(BalanceSnapshot, Account)
            .join(Account, BalanceSnapshot.account_id == Account.id)
            .filter(
                BalanceSnapshot.user_id == user_id,
                BalanceSnapshot.date >= start,
                BalanceSnapshot.date <= end,
                Account.is_active.is_(True),
            )
            .order_by(BalanceSnapshot.date)
            .all()
        )
        manual_assets = db.query(ManualAsset).filter(ManualAsset.user_id == user_id).all()

        points: dict[date, NetWorthPoint] = {}
        for snapshot, account in rows:
            point = points.setdefault(snapshot.date, NetWorthPoint(date=snapshot.date))
            balance = Decimal(snapshot.balance)
            if account.type in LIABILITY_ACCOUNT_TYPES:
                point.liabilities += abs(balance)
            else:
                point.assets += balance
            point.accounts[account.id] = AccountBalancePoint(
                name=account.name, type=account.type, balance=balance
            )

        manual_total = sum((Decimal(a.current_value) for a in manual_assets), Decimal("0"))
        for point in points.values():
            point.assets += manual_total
            point.net_worth = point.assets - point.liabilities
            for asset in manual_assets:
                point.accounts[asset.id] = AccountBalancePoint(
                    name=asset.name, type="manual", balance=Decimal(asset.current_value)
                )

        series = [points[d] for d in sorted(points)]

        current_net_worth = Decimal("0")
        previous_net_worth = Decimal("0")
        if series:
            current_net_worth = series[-1].net_worth
            month_ago = today - timedelta(days=DEFAULT_SERIES_DAYS)
            previous = next((p for p in series if p.date >= month_ago), None)
            if previous is not None:
                previous_net_worth = previous.net_worth

        return NetWorthSeries(
            series=series,
            current_net_worth=current_net_worth,
            net_worth_change=current_net_worth - previous_net_worth,
            total_assets=series[-1].assets if series else Decimal("0"),
            total_liabilities=series[-1].liabilities if series else Decimal("0"),
        )

    @staticmethod
    def get_spend_summary(
        db: Session,
        user_id: str,
        month: str | None = None,
        today: date | None = None,
    ) -> SpendSummary:
        """Summarize income and spending for one month.

        Pending transactions and transfers are excluded.  Positive amounts
        are income; everything else is spending, grouped by display category
        and by merchant (merchant name, falling back to the raw name).

        Raises:
            ValueError: If ``month`` is malformed.
        """
        first_day, last_day = parse_month(month, today)
        transactions = (
            db.query(Transaction)
            .filter(
                Transaction.user_id == user_id,
                Transaction.date >= first_day,
                Transaction.date <= last_day,
                Transaction.is_pending.is_(False),
                Transaction.is_transfer.is_(False),
            )
            .all()
        )

        total_income = Decimal("0")
        total_spending = Decimal("0")
        by_category: dict[str, Decimal] = {}
        by_merchant: dict[str, Decimal] = {}

        for txn in transactions:
            amount = Decimal(txn.amount)
            if amount > 0:
                total_income += amount
                continue

            spend = abs(amount)
            total_spending += spend
            category = txn.display_category
            merchant = txn.merchant_name or txn.name
            by_category[category] = by_category.get(category, Decimal("0")) + spend
            by_merchant[merchant] = by_merchant.get(merchant, Decimal("0")) + spend

        return SpendSummary(
            month=first_day.strftime("%Y-%m"),
            total_income=total_income,
            total_spending=total_spending,
            net_cash_flow=total_income - total_spending,
            by_category=_sorted_desc(by_category),
            top_merchants=_sorted_desc(by_merchant, TOP_MERCHANT_LIMIT),
        )

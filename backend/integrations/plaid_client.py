"""Plaid API client.

This module implements the AggregatorClient protocol via the plaid-python
SDK: current balances and transaction history for sync, plus the Link
token / public-token exchange calls used when a user links an institution.

Plaid uses per-institution access tokens (Items).  The client itself is
stateless with respect to tokens; callers pass the decrypted token in.
Every API call carries a request timeout so a hung connection surfaces
as an ordinary :class:`AggregatorConnectionError`.
"""

import json
import logging
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from plaid import ApiException, Environment
from plaid.api.plaid_api import PlaidApi
from plaid.api_client import ApiClient
from plaid.configuration import Configuration
from plaid.model.accounts_balance_get_request import AccountsBalanceGetRequest
from plaid.model.accounts_get_request import AccountsGetRequest
from plaid.model.country_code import CountryCode
from plaid.model.credit_account_subtype import CreditAccountSubtype
from plaid.model.credit_account_subtypes import CreditAccountSubtypes
from plaid.model.credit_filter import CreditFilter
from plaid.model.depository_account_subtype import DepositoryAccountSubtype
from plaid.model.depository_account_subtypes import DepositoryAccountSubtypes
from plaid.model.depository_filter import DepositoryFilter
from plaid.model.institutions_get_by_id_request import InstitutionsGetByIdRequest
from plaid.model.investment_account_subtype import InvestmentAccountSubtype
from plaid.model.investment_account_subtypes import InvestmentAccountSubtypes
from plaid.model.investment_filter import InvestmentFilter
from plaid.model.item_get_request import ItemGetRequest
from plaid.model.item_public_token_exchange_request import ItemPublicTokenExchangeRequest
from plaid.model.link_token_account_filters import LinkTokenAccountFilters
from plaid.model.link_token_create_request import LinkTokenCreateRequest
from plaid.model.link_token_create_request_user import LinkTokenCreateRequestUser
from plaid.model.products import Products
from plaid.model.transactions_get_request import TransactionsGetRequest
from plaid.model.transactions_get_request_options import TransactionsGetRequestOptions
from urllib3.exceptions import HTTPError as Urllib3HTTPError

from config import settings
from integrations.aggregator_protocol import (
    AggregatorAccount,
    AggregatorBalance,
    AggregatorTransaction,
    LinkExchangeResult,
)
from integrations.exceptions import (
    AggregatorAPIError,
    AggregatorAuthError,
    AggregatorConnectionError,
    AggregatorDataError,
    AggregatorError,
)

logger = logging.getLogger(__name__)

# Map PLAID_ENVIRONMENT setting to SDK host URLs.
# Plaid's Development environment is deprecated; only sandbox and production
# are supported.
_ENVIRONMENT_MAP: dict[str, str] = {
    "sandbox": Environment.Sandbox,
    "production": Environment.Production,
}

# Plaid's maximum page size for /transactions/get
TRANSACTIONS_PAGE_SIZE = 500

_AUTH_ERROR_CODES = frozenset({"INVALID_ACCESS_TOKEN", "ITEM_LOGIN_REQUIRED"})


class PlaidClient:
    """Wrapper around the Plaid API implementing AggregatorClient."""

    def __init__(
        self,
        client_id: str | None = None,
        secret: str | None = None,
        environment: str | None = None,
        timeout: float | None = None,
    ):
        self._client_id = client_id or settings.PLAID_CLIENT_ID
        self._secret = secret or settings.PLAID_SECRET
        self._environment = environment or settings.PLAID_ENVIRONMENT
        self._timeout = timeout or settings.PLAID_TIMEOUT_SECONDS

        # Lazily created on first use
        self._api: PlaidApi | None = None

    def _get_api(self) -> PlaidApi:
        """Return (and cache) a PlaidApi instance."""
        if self._api is None:
            env_key = self._environment.lower()
            host = _ENVIRONMENT_MAP.get(env_key)
            if host is None:
                logger.warning(
                    "Unknown PLAID_ENVIRONMENT=%r, falling back to sandbox. "
                    "Valid values: sandbox, production",
                    self._environment,
                )
                host = Environment.Sandbox
            logger.info(
                "Plaid API client: environment=%s, host=%s, client_id=<configured>",
                env_key,
                host,
            )
            configuration = Configuration(
                host=host,
                api_key={
                    "clientId": self._client_id,
                    "secret": self._secret,
                },
            )
            api_client = ApiClient(configuration)
            self._api = PlaidApi(api_client)
        return self._api

    def is_configured(self) -> bool:
        """Check if Plaid credentials are configured."""
        return bool(self._client_id) and bool(self._secret)

    def _call(self, method_name: str, request):
        """Invoke a PlaidApi method with the configured timeout.

        Translates SDK and transport failures into the aggregator
        exception hierarchy.
        """
        api = self._get_api()
        try:
            return getattr(api, method_name)(request, _request_timeout=self._timeout)
        except ApiException as e:
            raise self._map_plaid_error(e) from e
        except Urllib3HTTPError as e:
            raise AggregatorConnectionError(
                f"Plaid request {method_name} failed: {e}"
            ) from e

    # ------------------------------------------------------------------
    # Link Token & Token Exchange (used by API routes, not sync)
    # ------------------------------------------------------------------

    def create_link_token(self, user_id: str) -> str:
        """Create a Plaid Link token for the browser-based auth flow.

        Args:
            user_id: Local user ID, passed to Plaid as ``client_user_id``.

        Returns:
            The link_token string to be passed to Plaid Link.
        """
        request = LinkTokenCreateRequest(
            user=LinkTokenCreateRequestUser(client_user_id=user_id),
            client_name="Finance Tracker",
            products=[Products("transactions"), Products("auth")],
            country_codes=[CountryCode("US")],
            language="en",
            account_filters=LinkTokenAccountFilters(
                depository=DepositoryFilter(
                    account_subtypes=DepositoryAccountSubtypes([
                        DepositoryAccountSubtype("checking"),
                        DepositoryAccountSubtype("savings"),
                        DepositoryAccountSubtype("money market"),
                        DepositoryAccountSubtype("cd"),
                    ])
                ),
                credit=CreditFilter(
                    account_subtypes=CreditAccountSubtypes([
                        CreditAccountSubtype("credit card"),
                    ])
                ),
                investment=InvestmentFilter(
                    account_subtypes=InvestmentAccountSubtypes([
                        InvestmentAccountSubtype("brokerage"),
                        InvestmentAccountSubtype("401k"),
                        InvestmentAccountSubtype("ira"),
                        InvestmentAccountSubtype("roth"),
                    ])
                ),
            ),
        )
        response = self._call("link_token_create", request)
        return response["link_token"]

    def exchange_public_token(self, public_token: str) -> LinkExchangeResult:
        """Exchange a Plaid Link public_token for a permanent access_token."""
        request = ItemPublicTokenExchangeRequest(public_token=public_token)
        response = self._call("item_public_token_exchange", request)
        return LinkExchangeResult(
            access_token=response["access_token"],
            item_id=response["item_id"],
        )

    def get_item_institution(self, access_token: str) -> tuple[str | None, str | None]:
        """Look up the institution behind an Item.

        Returns:
            Tuple of ``(institution_id, institution_name)``; either may be
            ``None`` when Plaid does not report it.
        """
        item_response = self._call("item_get", ItemGetRequest(access_token=access_token))
        institution_id = item_response["item"].get("institution_id")
        if not institution_id:
            return None, None

        inst_response = self._call(
            "institutions_get_by_id",
            InstitutionsGetByIdRequest(
                institution_id=institution_id,
                country_codes=[CountryCode("US")],
            ),
        )
        return institution_id, inst_response["institution"].get("name")

    def get_accounts(self, access_token: str) -> list[AggregatorAccount]:
        """Fetch account metadata (and cached balances) for an Item."""
        response = self._call("accounts_get", AccountsGetRequest(access_token=access_token))
        accounts: list[AggregatorAccount] = []
        for acct in response.get("accounts", []) or []:
            acct_id = acct.get("account_id", "")
            if not acct_id:
                continue
            balances = acct.get("balances") or {}
            accounts.append(AggregatorAccount(
                id=acct_id,
                name=acct.get("name") or acct.get("official_name") or "Plaid Account",
                official_name=acct.get("official_name"),
                mask=acct.get("mask"),
                type=_enum_value(acct.get("type")) or "other",
                subtype=_enum_value(acct.get("subtype")),
                current_balance=self._to_decimal(balances.get("current")),
            ))
        return accounts

    # ------------------------------------------------------------------
    # AggregatorClient protocol: balances and transactions
    # ------------------------------------------------------------------

    def get_current_balances(self, access_token: str) -> list[AggregatorBalance]:
        """Fetch real-time balances for every account under an Item."""
        response = self._call(
            "accounts_balance_get",
            AccountsBalanceGetRequest(access_token=access_token),
        )
        balances: list[AggregatorBalance] = []
        for acct in response.get("accounts", []) or []:
            acct_id = acct.get("account_id", "")
            if not acct_id:
                continue
            raw = acct.get("balances") or {}
            balances.append(AggregatorBalance(
                account_id=acct_id,
                current=self._to_decimal(raw.get("current")),
            ))
        return balances

    def get_transactions(
        self,
        access_token: str,
        start_date: date,
        end_date: date,
    ) -> list[AggregatorTransaction]:
        """Fetch transactions for a single Item with offset pagination.

        Returns:
            Transactions in the aggregator's sign convention.
        """
        transactions: list[AggregatorTransaction] = []
        total_transactions = None
        offset = 0

        while True:
            request = TransactionsGetRequest(
                access_token=access_token,
                start_date=start_date,
                end_date=end_date,
                options=TransactionsGetRequestOptions(
                    count=TRANSACTIONS_PAGE_SIZE,
                    offset=offset,
                ),
            )
            response = self._call("transactions_get", request)

            if total_transactions is None:
                total_transactions = response.get("total_transactions", 0)

            page = response.get("transactions", []) or []
            for txn in page:
                mapped = self._map_transaction(txn)
                if mapped:
                    transactions.append(mapped)

            offset += len(page)
            if not page or offset >= total_transactions:
                break

        logger.debug(
            "Plaid: %d transactions fetched for %s..%s",
            len(transactions), start_date, end_date,
        )
        return transactions

    def _map_transaction(self, txn) -> AggregatorTransaction | None:
        """Map a Plaid transaction to an AggregatorTransaction."""
        transaction_id = txn.get("transaction_id", "")
        account_id = txn.get("account_id", "")
        if not transaction_id or not account_id:
            return None

        amount = self._to_decimal(txn.get("amount"))
        txn_date = _to_date(txn.get("date"))
        if amount is None or txn_date is None:
            raise AggregatorDataError(
                f"Transaction {transaction_id} is missing amount or date"
            )

        return AggregatorTransaction(
            transaction_id=transaction_id,
            account_id=account_id,
            amount=amount,
            date=txn_date,
            name=txn.get("name") or "",
            authorized_date=_to_date(txn.get("authorized_date")),
            merchant_name=txn.get("merchant_name"),
            original_description=txn.get("original_description"),
            categories=list(txn.get("category") or []),
            pending=bool(txn.get("pending", False)),
        )

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _map_plaid_error(exc: ApiException) -> AggregatorError:
        """Map a Plaid ApiException to the aggregator exception hierarchy."""
        status = exc.status or 0
        message = str(exc)

        # Try to extract error_code from the body
        error_code = ""
        try:
            body = json.loads(exc.body) if exc.body else {}
            error_code = body.get("error_code", "")
            error_message = body.get("error_message", "")
            if error_message:
                message = f"Plaid error ({error_code}): {error_message}"
        except (ValueError, TypeError, AttributeError):
            pass

        if status in (401, 403) or error_code in _AUTH_ERROR_CODES:
            return AggregatorAuthError(message)
        return AggregatorAPIError(message, status_code=status or None, error_code=error_code)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _to_decimal(value) -> Decimal | None:
        """Convert a value to Decimal, returning None on failure."""
        if value is None:
            return None
        try:
            return Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None


def _enum_value(value) -> str | None:
    """Unwrap a plaid-python enum model (``AccountType``) to its string value."""
    if value is None:
        return None
    return str(getattr(value, "value", value))


def _to_date(value) -> date | None:
    """Coerce a Plaid date field (``date`` or ISO string) to a ``date``."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None

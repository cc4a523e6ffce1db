"""Twelve Data quote provider for current stock prices."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

import httpx

from integrations.exceptions import (
    ProviderAPIError,
    ProviderAuthError,
    ProviderConnectionError,
    ProviderDataError,
)
from integrations.quote_protocol import StockReference

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.twelvedata.com"
DEFAULT_TIMEOUT_SECONDS = 10.0

# Query for the reference list of tradable symbols
_STOCK_LIST_PARAMS = {
    "country": "United States",
    "exchange": "NASDAQ",
    "type": "Common Stock",
}


def _parse_price(value: Any) -> Optional[Decimal]:
    """Parse an upstream price value, returning None if it is unusable.

    Twelve Data sends prices as JSON strings ("190.12"), but bare numbers
    are accepted too.
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    if not price.is_finite() or price < 0:
        return None
    return price


def _error_code(body: dict) -> Optional[int]:
    """Return the upstream error code carried in a body, if any.

    Error bodies look like ``{"code": 429, "message": "...", "status": "error"}``.
    A code of 200 is not an error.
    """
    code = body.get("code")
    if code is None:
        return None
    try:
        code = int(code)
    except (TypeError, ValueError):
        return None
    return None if code == 200 else code


class TwelveDataClient:
    """Quote provider backed by the Twelve Data REST API."""

    def __init__(
        self,
        api_key: str = "",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize the HTTP client.

        Args:
            api_key: Twelve Data API key, sent as the ``apikey`` query param.
            base_url: API root URL.
            timeout: Per-request timeout in seconds. A timeout counts as an
                     ordinary connection failure.
        """
        self._api_key = api_key
        self._client = httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    @property
    def provider_name(self) -> str:
        return "twelvedata"

    def _get_json(self, path: str, params: dict[str, str]) -> dict:
        """Make one GET request and return the decoded JSON object.

        No retry: each call is exactly one upstream attempt.

        Raises:
            ProviderConnectionError: Transport failure or timeout.
            ProviderAuthError: HTTP or body code 401/403.
            ProviderAPIError: Any other non-200 status or body error code.
            ProviderDataError: Body is not a JSON object.
        """
        try:
            response = self._client.get(path, params=params)
        except httpx.TimeoutException as e:
            raise ProviderConnectionError(
                f"Request to {path} timed out: {e}", provider_name=self.provider_name
            ) from e
        except httpx.TransportError as e:
            raise ProviderConnectionError(
                f"Request to {path} failed: {e}", provider_name=self.provider_name
            ) from e

        if response.status_code in (401, 403):
            raise ProviderAuthError(
                f"HTTP {response.status_code} from {path}",
                provider_name=self.provider_name,
            )
        if response.status_code != 200:
            raise ProviderAPIError(
                f"HTTP {response.status_code} from {path}",
                provider_name=self.provider_name,
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise ProviderDataError(
                f"Non-JSON response from {path}", provider_name=self.provider_name
            ) from e
        if not isinstance(body, dict):
            raise ProviderDataError(
                f"Unexpected response shape from {path}: {type(body).__name__}",
                provider_name=self.provider_name,
            )

        code = _error_code(body)
        if code is not None:
            message = body.get("message") or "unknown error"
            if code in (401, 403):
                raise ProviderAuthError(
                    f"API error {code}: {message}", provider_name=self.provider_name
                )
            raise ProviderAPIError(
                f"API error {code}: {message}",
                provider_name=self.provider_name,
                status_code=code,
            )
        return body

    @staticmethod
    def _decode_prices(symbols: list[str], body: dict) -> dict[str, Decimal]:
        """Decode a /price body into a symbol -> price mapping.

        The body shape depends on how many symbols were requested:
        one symbol yields ``{"price": "190.1"}``, several yield
        ``{"AAPL": {"price": "190.1"}, "MSFT": {...}}``. Entries that are
        missing, carry their own error code, or hold an unusable price
        are left out.
        """
        result: dict[str, Decimal] = {}

        if len(symbols) == 1:
            price = _parse_price(body.get("price"))
            if price is not None:
                result[symbols[0]] = price
            return result

        for symbol in symbols:
            entry = body.get(symbol)
            if not isinstance(entry, dict) or _error_code(entry) is not None:
                continue
            price = _parse_price(entry.get("price"))
            if price is None:
                logger.warning(
                    "Twelve Data: unusable price for %s: %r", symbol, entry.get("price")
                )
                continue
            result[symbol] = price
        return result

    def get_current_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Fetch current prices for the given symbols in one batched request.

        Args:
            symbols: List of distinct ticker symbols (e.g., ["AAPL", "MSFT"]).

        Returns:
            Dict mapping each symbol the upstream priced to its price.
        """
        if not symbols:
            return {}

        logger.debug("Twelve Data: fetching prices for %s", ",".join(symbols))
        body = self._get_json(
            "/price",
            params={"symbol": ",".join(symbols), "apikey": self._api_key},
        )
        return self._decode_prices(symbols, body)

    def get_stock_list(self) -> list[StockReference]:
        """Fetch the list of NASDAQ common stocks.

        Returns:
            List of StockReference, in upstream order. Rows without a
            symbol are skipped.
        """
        body = self._get_json("/stocks", params=dict(_STOCK_LIST_PARAMS))
        data = body.get("data")
        if not isinstance(data, list):
            raise ProviderDataError(
                "Stock list response has no 'data' array",
                provider_name=self.provider_name,
            )

        stocks: list[StockReference] = []
        for row in data:
            if not isinstance(row, dict) or not row.get("symbol"):
                continue
            stocks.append(
                StockReference(symbol=str(row["symbol"]), name=str(row.get("name") or ""))
            )
        logger.info("Twelve Data: fetched %d stocks", len(stocks))
        return stocks

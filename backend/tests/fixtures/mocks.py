"""Mock implementations for external services."""

from decimal import Decimal

from integrations.exceptions import ProviderConnectionError, ProviderError
from integrations.quote_protocol import StockReference

SAMPLE_PRICES: dict[str, Decimal] = {
    "AAPL": Decimal("195.25"),
    "MSFT": Decimal("430.10"),
    "TSLA": Decimal("245.00"),
}

SAMPLE_STOCKS: list[StockReference] = [
    StockReference(symbol="AAPL", name="Apple Inc"),
    StockReference(symbol="MSFT", name="Microsoft Corp"),
    StockReference(symbol="TSLA", name="Tesla Inc"),
    StockReference(symbol="AMZN", name="Amazon.com Inc"),
    StockReference(symbol="AMD", name="Advanced Micro Devices Inc"),
    StockReference(symbol="APPN", name="Appian Corp"),
]


class MockQuoteProvider:
    """Mock quote provider for testing.

    Implements the QuoteProvider protocol from in-memory data and records
    every price request it receives. Only symbols present in ``prices``
    are returned, which makes partial upstream responses easy to set up.
    """

    def __init__(
        self,
        prices: dict[str, Decimal] | None = None,
        stocks: list[StockReference] | None = None,
        should_fail: bool = False,
        failure: Exception | None = None,
    ):
        self._prices = dict(prices or {})
        self._stocks = list(stocks or [])
        self._should_fail = should_fail
        self._failure = failure
        self.price_calls: list[list[str]] = []
        self.stock_list_calls = 0

    @property
    def provider_name(self) -> str:
        return "mock"

    def set_prices(self, prices: dict[str, Decimal]) -> None:
        self._prices = dict(prices)

    def set_failing(self, should_fail: bool = True, failure: Exception | None = None) -> None:
        self._should_fail = should_fail
        self._failure = failure

    def _raise_failure(self) -> None:
        if self._failure is not None:
            raise self._failure
        raise ProviderConnectionError("Mock upstream unavailable", provider_name="mock")

    def get_current_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        self.price_calls.append(list(symbols))
        if self._should_fail:
            self._raise_failure()
        return {s: self._prices[s] for s in symbols if s in self._prices}

    def get_stock_list(self) -> list[StockReference]:
        self.stock_list_calls += 1
        if self._should_fail:
            self._raise_failure()
        if not self._stocks:
            raise ProviderError("No stocks configured", provider_name="mock")
        return list(self._stocks)

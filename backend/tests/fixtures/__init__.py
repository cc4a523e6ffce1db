"""Test fixtures and sample data."""
from decimal import Decimal

import pytest

from services.lot_ledger_service import Holding, Lot
from services.price_cache import PriceCache
from services.price_resolver import PriceResolver
from tests.fixtures.mocks import SAMPLE_PRICES, SAMPLE_STOCKS, MockQuoteProvider


def make_lot(
    symbol: str,
    acquisition_price: str | Decimal,
    company_name: str | None = None,
    current_price_hint: str | Decimal | None = None,
) -> Lot:
    """Build a Lot; the hint defaults to the acquisition price.

    This is a helper function (not a fixture) for tests that need lots
    without going through a buy.
    """
    price = Decimal(str(acquisition_price))
    return Lot(
        symbol=symbol,
        company_name=company_name if company_name is not None else f"{symbol} Inc",
        acquisition_price=price,
        current_price_hint=price if current_price_hint is None else Decimal(str(current_price_hint)),
    )


def make_holding(*specs: tuple[str, str, int]) -> Holding:
    """Build a Holding from (symbol, acquisition_price, quantity) tuples, in order."""
    lots: list[Lot] = []
    for symbol, price, quantity in specs:
        lots.extend([make_lot(symbol, price)] * quantity)
    return Holding(lots)


@pytest.fixture
def quote_provider() -> MockQuoteProvider:
    """A healthy mock provider with sample prices and stocks."""
    return MockQuoteProvider(prices=SAMPLE_PRICES, stocks=SAMPLE_STOCKS)


@pytest.fixture
def price_cache() -> PriceCache:
    """An empty price cache."""
    return PriceCache(seed={})


@pytest.fixture
def price_resolver(quote_provider, price_cache) -> PriceResolver:
    """A resolver over the mock provider and an empty cache."""
    return PriceResolver(quote_provider, price_cache)

"""Pydantic schemas for stock search and price lookup."""

from decimal import Decimal

from schemas.portfolio import CamelModel


class StockQuoteResponse(CamelModel):
    """A stock from the directory with its resolved price."""

    symbol: str
    name: str
    price: Decimal


class StockSearchResponse(CamelModel):
    """Stock search results."""

    stocks: list[StockQuoteResponse]


class PricesResponse(CamelModel):
    """Resolved prices keyed by symbol."""

    prices: dict[str, Decimal]

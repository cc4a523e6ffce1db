"""Pydantic schemas for portfolio viewing and trading."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys, accepting either case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BuyStockRequest(CamelModel):
    """Schema for a stock purchase."""

    symbol: str | None = None
    name: str | None = None
    price: Decimal | None = None
    quantity: int | None = None


class SellStockRequest(CamelModel):
    """Schema for a stock sale."""

    symbol: str | None = None
    quantity: int | None = None


class TradeResponse(CamelModel):
    """Schema for the outcome of a buy or sell."""

    success: bool
    message: str


class HoldingRowResponse(CamelModel):
    """One aggregated per-symbol row of a portfolio."""

    symbol: str
    company_name: str
    quantity: int
    average_acquisition_price: Decimal
    total_acquisition_cost: Decimal
    current_price: Decimal
    current_value: Decimal
    gain: Decimal


class PortfolioResponse(CamelModel):
    """A user's portfolio at current prices."""

    username: str
    holdings: list[HoldingRowResponse]
    total_value: Decimal
    total_gain: Decimal
    total_cost: Decimal

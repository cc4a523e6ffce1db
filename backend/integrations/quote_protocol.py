"""Quote provider protocol definitions.

Defines the interface the price resolver and the stock directory use to
talk to an upstream quote source.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True)
class StockReference:
    """A listed stock: ticker plus company name, without pricing data."""

    symbol: str
    name: str


class QuoteProvider(Protocol):
    """Protocol for upstream quote providers."""

    @property
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'twelvedata')."""
        ...

    def get_current_prices(self, symbols: list[str]) -> dict[str, Decimal]:
        """Fetch the latest price for each symbol in a single request.

        Args:
            symbols: Non-empty list of distinct ticker symbols.

        Returns:
            Dict mapping each symbol the provider actually priced to its
            price. Symbols the upstream omitted or rejected are absent.

        Raises:
            ProviderError: If the request as a whole failed.
        """
        ...

    def get_stock_list(self) -> list[StockReference]:
        """Fetch the reference list of tradable stocks.

        Raises:
            ProviderError: If the list could not be fetched.
        """
        ...
